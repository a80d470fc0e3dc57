# Codepoint index loading: a YAML list, or one key per line

import logging
from pathlib import Path
from typing import List

import yaml

from emojifetch.codepoints import EmojiFetchError

logger = logging.getLogger(__name__)


class BadIndexError(EmojiFetchError):
    pass


def load_index(path: Path) -> List[str]:
    with open(path, encoding="utf-8") as file:
        if path.suffix.lower() not in (".yml", ".yaml"):
            return [line.strip() for line in file if line.strip()]
        try:
            # BaseLoader keeps scalars as written ("0023" must not become 19).
            data = yaml.load(file, Loader=yaml.BaseLoader)
        except yaml.YAMLError as exc:
            raise BadIndexError(f"Bad index {path}: {exc}") from exc

    if data is None or data == "":
        return []
    if not isinstance(data, list):
        raise BadIndexError(f"Index {path} is not a list")

    keys = [item for item in data if isinstance(item, str) and item]
    logger.debug(f"Index {path}: {len(keys)} keys")
    return keys

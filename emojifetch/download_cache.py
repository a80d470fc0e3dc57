# Persistent record of fetched codepoint keys, and the failure list

import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List

from emojifetch.codepoints import EmojiFetchError

logger = logging.getLogger(__name__)


class CacheCorruptError(EmojiFetchError):
    pass


def _decode(text: str) -> Dict[str, bool]:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise CacheCorruptError(f"Not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise CacheCorruptError(f"Expected object, got {type(data).__name__}")
    return {str(k): True for k, v in data.items() if v is True}


class DownloadCache:
    def __init__(self, path: Path):
        self.path = path
        self.present: Dict[str, bool] = {}

    def load(self) -> Dict[str, bool]:
        """Reads the cache file; a missing or corrupt file yields {}."""
        try:
            self.present = _decode(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug(f"No cache file: {self.path}")
            self.present = {}
        except (CacheCorruptError, OSError, UnicodeDecodeError) as exc:
            logger.warning(f"Ignoring cache {self.path}: {exc}")
            self.present = {}
        return self.present

    def is_present(self, key: str) -> bool:
        return self.present.get(key, False)

    def mark_present(self, key: str):
        self.present[key] = True

    def flush(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_name(self.path.name + ".tmp")
        temp_path.write_text(
            json.dumps(self.present, indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )
        os.replace(temp_path, self.path)
        logger.debug(f"Cache saved: {self.path} ({len(self.present)} keys)")


def read_failures(path: Path) -> List[str]:
    with open(path, encoding="utf-8") as file:
        return [line.strip() for line in file if line.strip()]


def write_failures(path: Path, keys: Iterable[str]):
    keys = list(keys)
    if not keys:
        path.unlink(missing_ok=True)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(keys) + "\n", encoding="utf-8")

# Slug candidates for a codepoint key: overrides, then the registry name table

import logging
from typing import Dict, Iterable, List, Mapping, Optional

import attr

from emojifetch import codepoints

logger = logging.getLogger(__name__)


@attr.frozen
class OverrideLayer:
    version: str
    slugs: Dict[str, str] = attr.field(factory=dict)


def merge_overrides(layers: Iterable[OverrideLayer]) -> Dict[str, str]:
    """Folds override layers oldest first; later layers win, conflicts warn."""
    merged: Dict[str, str] = {}
    source: Dict[str, str] = {}
    for layer in layers:
        for raw_key, slug in layer.slugs.items():
            key = codepoints.normalize(raw_key)
            old = merged.get(key)
            if old is not None and old != slug:
                logger.warning(
                    f'Override conflict for {key}: "{old}" ({source[key]}) '
                    f'replaced by "{slug}" ({layer.version})'
                )
            merged[key] = slug
            source[key] = layer.version
    return merged


class SlugResolver:
    def __init__(
        self,
        names: Mapping[str, str],
        overrides: Optional[Mapping[str, str]] = None,
    ):
        self.names = dict(names)
        self.overrides = dict(overrides or {})
        self._stripped: Dict[str, str] = {}
        for key, slug in self.names.items():
            self._stripped.setdefault(codepoints.strip_variation(key), slug)

    def candidates(self, key: str) -> List[str]:
        override = self.overrides.get(key)
        if override:
            return [override]

        slug = self.names.get(key)
        if slug:
            return [slug]

        slug = self._stripped.get(codepoints.strip_variation(key))
        if slug:
            return [slug]

        return []

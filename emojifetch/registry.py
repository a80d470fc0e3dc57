# Unicode emoji-test.txt parsing into a codepoint-key -> slug name table

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, Iterator

import attr

from emojifetch import codepoints, transport

logger = logging.getLogger(__name__)

STATUSES = ("fully-qualified", "minimally-qualified", "unqualified", "component")

LINE_RX = re.compile(
    r"(?P<codepoints>[0-9A-Fa-f][0-9A-Fa-f ]*?)\s*;"
    r"\s*(?P<status>" + "|".join(STATUSES) + r")\s*#"
    r"\s*.+?\s+E(?P<version>[\d.]+)\s+(?P<name>.+?)\s*"
)

_QUOTES_RX = re.compile(r"['‘’`´]")
_SPACES_RX = re.compile(r"[:\s]+")
_OTHER_RX = re.compile(r"[^a-z0-9-]")
_HYPHENS_RX = re.compile(r"-+")


@attr.frozen
class EmojiNameEntry:
    codepoint_key: str
    status: str
    display_name: str
    version: str = ""


def slugify(display_name: str) -> str:
    slug = display_name.lower()
    slug = _QUOTES_RX.sub("", slug)
    slug = _SPACES_RX.sub("-", slug)
    slug = _OTHER_RX.sub("-", slug)
    slug = _HYPHENS_RX.sub("-", slug)
    return slug.strip("-")


def parse_entries(lines: Iterable[str]) -> Iterator[EmojiNameEntry]:
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = LINE_RX.fullmatch(line)
        if not match:
            continue
        try:
            key = codepoints.normalize(match.group("codepoints"))
        except codepoints.MalformedCodepointError as exc:
            logger.debug(f"Skipping registry line: {exc}")
            continue
        yield EmojiNameEntry(
            codepoint_key=key,
            status=match.group("status"),
            display_name=match.group("name"),
            version=match.group("version"),
        )


def build_name_table(text: str) -> Dict[str, str]:
    """Maps codepoint keys to slugs; fully-qualified names win, else first seen."""
    table: Dict[str, str] = {}
    for entry in parse_entries(text.splitlines()):
        key = entry.codepoint_key
        if entry.status == "fully-qualified" or key not in table:
            table[key] = slugify(entry.display_name)
    return table


async def load_registry_text(
    tr: transport.Transport, url: str, cache_path: Path
) -> str:
    # The registry is immutable for a given emoji release; fetch it once ever.
    if cache_path.is_file():
        logger.debug(f"Registry cached: {cache_path}")
        return cache_path.read_text(encoding="utf-8")

    logger.info(f"Downloading registry: {url}")
    response = await tr.get(url)
    if response.status != 200:
        raise transport.TransportError(f"HTTP {response.status} for {url}")

    text = response.body.decode("utf-8")
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    cache_path.write_text(text, encoding="utf-8")
    logger.info(f"Registry saved: {cache_path} ({len(text)} chars)")
    return text

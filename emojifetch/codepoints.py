# Codepoint keys: lowercase hex groups joined by hyphens ("1f1fa-1f1f8")

import re
from typing import List

VARIATION_SELECTOR = "fe0f"

_HEX_RX = re.compile(r"[0-9a-f]+")
_SPLIT_RX = re.compile(r"[\s-]+")


class EmojiFetchError(Exception):
    pass


class MalformedCodepointError(EmojiFetchError, ValueError):
    pass


def normalize(raw: str) -> str:
    """Canonical key for a codepoint sequence token.

    Accepts hyphen- or whitespace-delimited hex groups in any case, with
    an optional "U+" on each group. Groups are lowercased and joined with
    hyphens; leading zeros and order are kept as given.
    """
    groups = _SPLIT_RX.split(str(raw).strip())
    out: List[str] = []
    for group in groups:
        g = group.lower()
        g = g[2:] if g.startswith("u+") else g
        if not _HEX_RX.fullmatch(g):
            raise MalformedCodepointError(f'Bad codepoint "{group}" in "{raw}"')
        out.append(g)
    return "-".join(out)


def groups(key: str) -> List[str]:
    return key.split("-") if key else []


def strip_variation(key: str) -> str:
    return "-".join(g for g in groups(key) if g != VARIATION_SELECTOR)


def to_glyph(key: str) -> str:
    try:
        values = [int(g, 16) for g in groups(key)]
    except ValueError as exc:
        raise MalformedCodepointError(f'Not renderable: "{key}" ({exc})')
    for value in values:
        if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
            raise MalformedCodepointError(f'Not a scalar value: "{key}"')
    return "".join(chr(v) for v in values)

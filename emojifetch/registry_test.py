import asyncio
import re

import pytest

from emojifetch import registry, transport

SAMPLE = """\
# emoji-test.txt
# Version: 16.0

# group: Smileys & Emotion

# subgroup: face-smiling
1F600                                                  ; fully-qualified     # 😀 E1.0 grinning face
263A FE0F                                              ; fully-qualified     # ☺️ E0.6 smiling face
263A                                                   ; unqualified         # ☺ E0.6 smiling face
0023 FE0F 20E3                                         ; fully-qualified     # #️⃣ E0.6 keycap: #
1F1E8 1F1EE                                            ; fully-qualified     # 🇨🇮 E2.0 flag: Côte d’Ivoire
1F3FB                                                  ; component           # 🏻 E1.0 light skin tone

#EOF
"""

SLUG_RX = re.compile(r"[a-z0-9]+(-[a-z0-9]+)*")


@pytest.mark.parametrize(
    "name, slug",
    [
        ("grinning face", "grinning-face"),
        ("keycap: #", "keycap"),
        ("flag: Côte d’Ivoire", "flag-c-te-divoire"),
        ("man’s shoe", "mans-shoe"),
        ("two o’clock", "two-oclock"),
        ("woman: red hair", "woman-red-hair"),
        ("A button (blood type)", "a-button-blood-type"),
        ("  ::  ", ""),
    ],
)
def test_slugify(name, slug):
    assert registry.slugify(name) == slug
    assert registry.slugify(name) == registry.slugify(name)


def test_slugify_shape():
    for entry in registry.parse_entries(SAMPLE.splitlines()):
        slug = registry.slugify(entry.display_name)
        assert slug == "" or SLUG_RX.fullmatch(slug)


def test_parse_entries_skips_headers():
    entries = list(registry.parse_entries(SAMPLE.splitlines()))
    assert [e.codepoint_key for e in entries] == [
        "1f600",
        "263a-fe0f",
        "263a",
        "0023-fe0f-20e3",
        "1f1e8-1f1ee",
        "1f3fb",
    ]
    assert entries[0] == registry.EmojiNameEntry(
        "1f600", "fully-qualified", "grinning face", "1.0"
    )
    assert entries[-1].status == "component"


def test_build_name_table():
    table = registry.build_name_table(SAMPLE)
    assert table["1f600"] == "grinning-face"
    assert table["263a-fe0f"] == "smiling-face"
    assert table["1f3fb"] == "light-skin-tone"
    assert len(table) == 6


@pytest.mark.parametrize("reverse", [False, True])
def test_fully_qualified_wins(reverse):
    lines = [
        "1F44D ; unqualified     # 👍 E0.6 thumbs up sign",
        "1F44D ; fully-qualified # 👍 E0.6 thumbs up",
    ]
    if reverse:
        lines.reverse()
    assert registry.build_name_table("\n".join(lines)) == {"1f44d": "thumbs-up"}


def test_first_seen_wins_without_fully_qualified():
    text = "\n".join(
        [
            "1F44D ; unqualified         # 👍 E0.6 first name",
            "1F44D ; minimally-qualified # 👍 E0.6 second name",
        ]
    )
    assert registry.build_name_table(text) == {"1f44d": "first-name"}


def test_load_registry_fetches_once(tmp_path, fake_transport):
    url = "https://unicode.org/Public/emoji/latest/emoji-test.txt"
    fake_transport.serve(url, SAMPLE.encode("utf-8"))
    cache_path = tmp_path / ".context" / "emoji-test.txt"

    first = asyncio.run(registry.load_registry_text(fake_transport, url, cache_path))
    second = asyncio.run(registry.load_registry_text(fake_transport, url, cache_path))

    assert first == second == SAMPLE
    assert fake_transport.calls == [url]
    assert cache_path.read_text(encoding="utf-8") == SAMPLE


def test_load_registry_http_error(tmp_path, fake_transport):
    url = "https://unicode.org/missing.txt"
    cache_path = tmp_path / "emoji-test.txt"
    with pytest.raises(transport.TransportError):
        asyncio.run(registry.load_registry_text(fake_transport, url, cache_path))
    assert not cache_path.exists()

import pytest

from emojifetch import codepoints


@pytest.mark.parametrize(
    "raw, key",
    [
        ("1F600", "1f600"),
        ("1F1FA 1F1F8", "1f1fa-1f1f8"),
        ("1f1fa-1F1F8", "1f1fa-1f1f8"),
        ("  0023  FE0F 20E3 ", "0023-fe0f-20e3"),
        ("U+2764 U+FE0F", "2764-fe0f"),
        ("00a9", "00a9"),
    ],
)
def test_normalize(raw, key):
    assert codepoints.normalize(raw) == key


@pytest.mark.parametrize("raw", ["", "1f60g", "0x1f600", "smile", "1f600;"])
def test_normalize_rejects(raw):
    with pytest.raises(codepoints.MalformedCodepointError):
        codepoints.normalize(raw)


def test_normalize_keeps_order_and_repeats():
    assert codepoints.normalize("1F468 200D 1F468") == "1f468-200d-1f468"


def test_strip_variation():
    assert codepoints.strip_variation("2764-fe0f") == "2764"
    assert codepoints.strip_variation("0023-fe0f-20e3") == "0023-20e3"
    assert codepoints.strip_variation("1f600") == "1f600"


def test_to_glyph():
    assert codepoints.to_glyph("1f600") == "\U0001f600"
    assert codepoints.to_glyph("1f1fa-1f1f8") == "\U0001f1fa\U0001f1f8"
    with pytest.raises(codepoints.MalformedCodepointError):
        codepoints.to_glyph("110000")


@pytest.mark.parametrize("key", ["d800", "dfff", "1f600-dc00"])
def test_to_glyph_rejects_surrogates(key):
    with pytest.raises(codepoints.MalformedCodepointError):
        codepoints.to_glyph(key)

import json
import logging

from emojifetch import download_cache


def test_missing_file_is_empty(tmp_path):
    cache = download_cache.DownloadCache(tmp_path / "nope" / "cache.json")
    assert cache.load() == {}
    assert not cache.is_present("1f600")


def test_corrupt_file_is_empty(tmp_path, caplog):
    path = tmp_path / "cache.json"
    for junk in ("{not json", "[1, 2, 3]", '"text"'):
        path.write_text(junk)
        cache = download_cache.DownloadCache(path)
        with caplog.at_level(logging.WARNING):
            assert cache.load() == {}
    assert len(caplog.records) == 3


def test_mark_and_flush(tmp_path):
    path = tmp_path / ".context" / "emoji_cache.json"
    cache = download_cache.DownloadCache(path)
    cache.load()
    cache.mark_present("1f600")
    cache.mark_present("00a9")
    cache.flush()
    cache.flush()

    assert json.loads(path.read_text()) == {"00a9": True, "1f600": True}
    assert not path.with_name("emoji_cache.json.tmp").exists()

    reloaded = download_cache.DownloadCache(path)
    assert reloaded.load() == {"00a9": True, "1f600": True}
    assert reloaded.is_present("1f600")


def test_hand_edited_false_is_absent(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text('{"1f600": true, "1f601": false}')
    assert download_cache.DownloadCache(path).load() == {"1f600": True}


def test_failure_record(tmp_path):
    path = tmp_path / ".context" / "failed_emoji.txt"
    download_cache.write_failures(path, ["1f6cc-1f3fb", "1f7f0"])
    assert path.read_text() == "1f6cc-1f3fb\n1f7f0\n"
    assert download_cache.read_failures(path) == ["1f6cc-1f3fb", "1f7f0"]

    download_cache.write_failures(path, [])
    assert not path.exists()
    download_cache.write_failures(path, [])

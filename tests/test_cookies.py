"""Unit tests for cookie file loading."""

import json

from discord_jukebox.infrastructure.audio.cookies import build_cookie_header, load_cookie_header


class TestBuildCookieHeader:
    def test_joins_name_value_pairs(self):
        header = build_cookie_header(
            [{"name": "SID", "value": "abc"}, {"name": "HSID", "value": "def", "domain": ".youtube.com"}]
        )
        assert header == "SID=abc; HSID=def"

    def test_skips_entries_without_name(self):
        assert build_cookie_header([{"value": "x"}, "junk", {"name": "a", "value": "1"}]) == "a=1"

    def test_empty_list(self):
        assert build_cookie_header([]) == ""


class TestLoadCookieHeader:
    def test_loads_json_array(self, tmp_path):
        path = tmp_path / "cookies.json"
        path.write_text(json.dumps([{"name": "SID", "value": "abc"}]), encoding="utf-8")

        assert load_cookie_header(path) == "SID=abc"

    def test_missing_file_returns_none(self, tmp_path):
        assert load_cookie_header(tmp_path / "missing.json") is None

    def test_invalid_json_returns_none(self, tmp_path):
        path = tmp_path / "cookies.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_cookie_header(path) is None

    def test_object_instead_of_array_returns_none(self, tmp_path):
        path = tmp_path / "cookies.json"
        path.write_text(json.dumps({"name": "SID", "value": "abc"}), encoding="utf-8")

        assert load_cookie_header(str(path)) is None

    def test_entry_without_value_returns_none(self, tmp_path):
        path = tmp_path / "cookies.json"
        path.write_text(json.dumps([{"name": "SID"}]), encoding="utf-8")

        assert load_cookie_header(path) is None

    def test_empty_array_returns_none(self, tmp_path):
        path = tmp_path / "cookies.json"
        path.write_text("[]", encoding="utf-8")

        assert load_cookie_header(path) is None

"""Tests for pure helpers"""

import os

import pytest

from website_stacks import _helpers

FIXTURE_SITE = os.path.join(os.path.dirname(__file__), "fixtures", "site")


class TestNaming:
    def test_origin_id(self):
        assert _helpers.origin_id("example-site") == "S3-example-site"

    def test_oac_name(self):
        assert _helpers.oac_name("example-site") == "example-site-OAC"

    def test_default_tags(self):
        assert _helpers.default_tags("prod") == {"Pulumi": "true", "Environment": "prod"}


class TestJoinKey:
    def test_empty_prefix(self):
        assert _helpers.join_key("", "index.html") == "index.html"

    def test_nested_prefix(self):
        assert _helpers.join_key("docs/guide", "index.html") == "docs/guide/index.html"

    def test_trailing_slash_in_prefix(self):
        assert _helpers.join_key("assets/", "app.js") == "assets/app.js"


class TestContentTypeFor:
    def test_html_gets_charset(self):
        assert _helpers.content_type_for("index.html") == "text/html; charset=utf-8"

    def test_css_gets_charset(self):
        assert _helpers.content_type_for("site.css") == "text/css; charset=utf-8"

    def test_javascript_gets_charset(self):
        assert _helpers.content_type_for("app.js") in (
            "text/javascript; charset=utf-8",
            "application/javascript; charset=utf-8",
        )

    def test_json_gets_charset(self):
        assert _helpers.content_type_for("manifest.json") == "application/json; charset=utf-8"

    def test_binary_has_no_charset(self):
        assert _helpers.content_type_for("logo.png") == "image/png"

    def test_unknown_extension(self):
        assert _helpers.content_type_for("CNAME") is None


class TestObjectResourceName:
    def test_prefixes_stack_name(self):
        assert _helpers.object_resource_name("docs", "index.html").startswith("docs-object-index.html-")

    def test_replaces_separators(self):
        name = _helpers.object_resource_name("docs", "guide/intro page.html")
        assert name.startswith("docs-object-guide-intro-page.html-")

    def test_stable_for_same_key(self):
        first = _helpers.object_resource_name("docs", "guide/index.html")
        assert first == _helpers.object_resource_name("docs", "guide/index.html")

    def test_distinct_keys_give_distinct_names(self):
        names = {
            _helpers.object_resource_name("docs", key)
            for key in ("index.html", "guide/index.html", "assets/app.js")
        }
        assert len(names) == 3

    @pytest.mark.parametrize(
        "first, second",
        [
            ("guide/index.html", "guide-index.html"),
            ("a b.png", "a-b.png"),
        ],
    )
    def test_keys_with_same_slug_give_distinct_names(self, first, second):
        assert _helpers.object_resource_name("docs", first) != _helpers.object_resource_name(
            "docs", second
        )

    def test_directory_with_same_slug_keys(self, tmp_path):
        (tmp_path / "guide").mkdir()
        for relative in ("guide/index.html", "guide-index.html", "a b.png", "a-b.png"):
            (tmp_path / relative).write_text("x")
        names = {
            _helpers.object_resource_name("docs", site_file.key)
            for site_file in _helpers.iter_site_files(str(tmp_path))
        }
        assert len(names) == 4


class TestIterSiteFiles:
    def test_walks_nested_directories(self):
        keys = [site_file.key for site_file in _helpers.iter_site_files(FIXTURE_SITE)]
        assert keys == [
            "CNAME",
            "assets/app.js",
            "assets/site.css",
            "guide/index.html",
            "index.html",
        ]

    def test_paths_are_absolute_and_exist(self):
        for site_file in _helpers.iter_site_files(FIXTURE_SITE):
            assert os.path.isabs(site_file.path)
            assert os.path.isfile(site_file.path)

    def test_prefix_is_prepended(self):
        keys = [site_file.key for site_file in _helpers.iter_site_files(FIXTURE_SITE, "v2")]
        assert "v2/guide/index.html" in keys
        assert all(key.startswith("v2/") for key in keys)

    def test_content_types(self):
        types = {
            site_file.key: site_file.content_type
            for site_file in _helpers.iter_site_files(FIXTURE_SITE)
        }
        assert types["index.html"] == "text/html; charset=utf-8"
        assert types["CNAME"] is None

    def test_empty_directory(self, tmp_path):
        assert list(_helpers.iter_site_files(str(tmp_path))) == []

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list(_helpers.iter_site_files(str(tmp_path / "missing")))

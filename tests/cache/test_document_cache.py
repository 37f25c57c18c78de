from __future__ import annotations

from collie.cache import DocumentCache, logical_id_from_html_id, template_id_from_uri


class TestDocumentCache:

    def test_same_version_is_reused(self):
        cache = DocumentCache()
        first = cache.get("file:///a.collie", 1, "div\n")

        assert cache.get("file:///a.collie", 1, "ignored\n") is first

    def test_new_version_is_reparsed(self):
        cache = DocumentCache()
        cache.get("file:///a.collie", 1, "div\n")
        second = cache.get("file:///a.collie", 2, "span\n")

        assert second.root.children[0].name == "span"

    def test_invalidate_and_clear(self):
        cache = DocumentCache()
        cache.get("file:///a.collie", 1, "div\n")
        cache.get("file:///b.collie", 1, "div\n")

        cache.invalidate("file:///a.collie")
        assert "file:///a.collie" not in cache
        assert cache.template_entries("a") == []
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0
        assert cache.all_template_ids() == {}


class TestTemplateIdIndex:

    def test_id_directive_wins(self):
        cache = DocumentCache()
        cache.get("file:///src/whatever.collie", 1, "#id profile-collie\ndiv\n")

        (entry,) = cache.template_entries("profile")
        assert entry.raw_id == "profile-collie"
        assert not entry.derived_from_filename
        assert entry.id_span.start.line == 1

    def test_file_name_fallback(self):
        cache = DocumentCache()
        cache.get("file:///src/user-card-collie.collie", 1, "div\n")

        (entry,) = cache.template_entries("user-card")
        assert entry.derived_from_filename
        assert entry.raw_id is None

    def test_reparse_moves_entry(self):
        cache = DocumentCache()
        cache.get("file:///x.collie", 1, "#id one\n")
        cache.get("file:///x.collie", 2, "#id two\n")

        assert cache.template_entries("one") == []
        assert [e.uri for e in cache.template_entries("two")] == ["file:///x.collie"]

    def test_duplicate_ids_are_all_listed(self):
        cache = DocumentCache()
        cache.get("file:///a.collie", 1, "#id shared\n")
        cache.get("file:///b.collie", 1, "#id shared\n")

        assert sorted(e.uri for e in cache.all_template_ids()["shared"]) == ["file:///a.collie", "file:///b.collie"]


class TestIdHelpers:

    def test_logical_id(self):
        assert logical_id_from_html_id("hero-collie") == "hero"
        assert logical_id_from_html_id("hero") == "hero"

    def test_template_id_from_uri(self):
        assert template_id_from_uri("file:///tmp/My%20Card.collie") == "My Card"
        assert template_id_from_uri("templates/nav-collie.collie") == "nav"

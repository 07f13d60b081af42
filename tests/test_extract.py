"""Tests for the namespace, extension tag, protocol and magic word extractors."""

import pytest

from wikisite import extract
from wikisite.extract import MalformedExtensionTagError, NamespaceNotFoundError
from wikisite.siteinfo import MagicWord, SiteInfoError


class TestNamespaces:
    """Test namespace name resolution by canonical name."""

    def test_file_namespace_includes_aliases(self, query):
        """Canonical, localized and alias names are all collected, lowercased."""
        assert extract.namespaces(query, "File") == {"file", "datei", "bild", "image"}

    def test_category_namespace_without_aliases(self, query):
        """A namespace with no aliases yields canonical and localized name."""
        assert extract.namespaces(query, "Category") == {"category", "kategorie"}

    def test_alias_equal_to_canonical_is_deduplicated(self, query):
        """Template has an alias identical to its canonical name."""
        assert extract.namespaces(query, "Template") == {"template", "vorlage"}

    def test_no_names_from_other_namespaces(self, query):
        """Aliases of other namespaces must not leak in."""
        names = extract.namespaces(query, "Special")
        assert names == {"special", "spezial"}
        assert "bild" not in names

    def test_not_found(self, query):
        """An unknown canonical name raises NamespaceNotFoundError carrying the name."""
        with pytest.raises(NamespaceNotFoundError) as exc_info:
            extract.namespaces(query, "Talk")
        assert exc_info.value.name == "Talk"
        assert str(exc_info.value) == "namespace not found: 'Talk'"

    def test_lookup_is_case_sensitive(self, query):
        """Canonical names are matched exactly."""
        with pytest.raises(NamespaceNotFoundError):
            extract.namespaces(query, "file")

    def test_main_namespace_has_no_canonical_name(self, query):
        """Namespace 0 has no canonical name and cannot be requested by one."""
        assert query.namespaces[0].canonical is None
        with pytest.raises(NamespaceNotFoundError):
            extract.namespaces(query, "")

    def test_error_is_site_info_error(self, query):
        with pytest.raises(SiteInfoError):
            extract.namespaces(query, "Portal")


class TestExtensionTags:
    """Test extension tag name normalization."""

    def test_well_formed_tags(self, query):
        """Angle brackets are stripped from every marker."""
        assert extract.extension_tags(query) == {
            "categorytree",
            "gallery",
            "math",
            "nowiki",
            "pre",
            "ref",
            "references",
            "syntaxhighlight",
        }

    def test_tags_are_lowercased(self, make_query):
        q = make_query(extensiontags=["<Ref>", "<SCORE>"])
        assert extract.extension_tags(q) == {"ref", "score"}

    @pytest.mark.parametrize("marker", ["foo", "<foo", "foo>", ""])
    def test_malformed_tag(self, make_query, marker):
        """A marker missing either delimiter fails the whole extraction."""
        q = make_query(extensiontags=["<ref>", marker, "<pre>"])
        with pytest.raises(MalformedExtensionTagError) as exc_info:
            extract.extension_tags(q)
        assert exc_info.value.tag == marker

    def test_first_malformed_tag_is_reported(self, make_query):
        q = make_query(extensiontags=["<ref>", "foo", "bar"])
        with pytest.raises(MalformedExtensionTagError) as exc_info:
            extract.extension_tags(q)
        assert exc_info.value.tag == "foo"
        assert str(exc_info.value) == "malformed extension tag: 'foo'"

    def test_empty_list(self, make_query):
        assert extract.extension_tags(make_query(extensiontags=[])) == set()


class TestProtocols:
    """Test protocol list normalization."""

    def test_protocols_lowercased(self, query):
        assert extract.protocols(query) == {
            "bitcoin:",
            "ftp://",
            "//",
            "http://",
            "https://",
            "mailto:",
        }

    def test_empty_protocols(self, make_query):
        assert extract.protocols(make_query(protocols=[])) == set()


class TestMagicWords:
    """Test behavior switch extraction."""

    def test_double_underscore_aliases(self, query):
        """Only names wrapped in double underscores are kept, without them."""
        assert extract.magic_words(query) == {
            "keininhaltsverzeichnis",
            "notoc",
            "inhaltsverzeichnis",
            "toc",
        }

    def test_canonical_name_is_considered(self, make_query):
        """The canonical name counts as a candidate too."""
        q = make_query(magicwords=[{"name": "__NOGALLERY__", "aliases": []}])
        assert extract.magic_words(q) == {"nogallery"}

    @pytest.mark.parametrize(
        "alias",
        ["NOTOC", "__NOTOC", "NOTOC__", "_NOTOC_", "___"],
    )
    def test_unwrapped_names_are_skipped(self, make_query, alias):
        """Names lacking either marker are silently excluded."""
        q = make_query(magicwords=[{"name": "notoc", "aliases": [alias]}])
        assert extract.magic_words(q) == set()

    def test_output_is_lowercase(self, make_query):
        q = make_query(magicwords=[{"name": "x", "aliases": ["__NoEditSection__"]}])
        assert extract.magic_words(q) == {"noeditsection"}


class TestRedirectMagicWords:
    """Test redirect keyword extraction."""

    def test_redirect_aliases(self, query):
        assert extract.magic_words_redirect(query) == {"redirect", "weiterleitung"}

    def test_aliases_deduplicated(self, make_query):
        """#REDIRECT and the literal 'redirect' collapse into one entry."""
        q = make_query(magicwords=[{"name": "redirect", "aliases": ["#REDIRECT", "#redirect2"]}])
        assert extract.magic_words_redirect(q) == {"redirect", "redirect2"}

    def test_alias_without_prefix(self, make_query):
        """A missing '#' prefix is not an error."""
        q = make_query(magicwords=[{"name": "redirect", "aliases": ["UMLEITUNG"]}])
        assert extract.magic_words_redirect(q) == {"redirect", "umleitung"}

    def test_only_one_prefix_stripped(self, make_query):
        q = make_query(magicwords=[{"name": "redirect", "aliases": ["##REDIRECT"]}])
        assert extract.magic_words_redirect(q) == {"redirect", "#redirect"}

    def test_other_magic_words_ignored(self, make_query):
        q = make_query(magicwords=[{"name": "notoc", "aliases": ["#NOTOC"]}])
        assert extract.magic_words_redirect(q) == {"redirect"}

    def test_match_on_name_is_exact(self, query):
        """A record must be named exactly 'redirect'."""
        query.magicwords.append(MagicWord(name="Redirect", aliases=["#OTHER"]))
        assert "other" not in extract.magic_words_redirect(query)


class TestIdempotence:
    """Extractors are pure over the same payload."""

    def test_repeated_runs_are_identical(self, query):
        for _ in range(3):
            assert extract.namespaces(query, "File") == extract.namespaces(query, "File")
            assert extract.extension_tags(query) == extract.extension_tags(query)
            assert extract.protocols(query) == extract.protocols(query)
            assert extract.magic_words(query) == extract.magic_words(query)
            assert extract.magic_words_redirect(query) == extract.magic_words_redirect(query)
            assert extract.link_trail(query) == extract.link_trail(query)

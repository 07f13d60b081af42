"""Pytest configuration and shared fixtures."""
import pytest
import tempfile
from pathlib import Path

from wikisite.siteinfo import Query


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def siteinfo_response():
    """Sample siteinfo response (formatversion=2, trimmed German Wikipedia)."""
    return {
        "batchcomplete": True,
        "query": {
            "general": {
                "sitename": "Wikipedia",
                "lang": "de",
                "linktrail": "/^([äöüßa-z]+)(.*)$/sDu",
            },
            "namespaces": {
                "-2": {"id": -2, "case": "first-letter", "name": "Medium", "canonical": "Media"},
                "-1": {"id": -1, "case": "first-letter", "name": "Spezial", "canonical": "Special"},
                "0": {"id": 0, "case": "first-letter", "name": "", "content": True},
                "6": {"id": 6, "case": "first-letter", "name": "Datei", "canonical": "File"},
                "10": {"id": 10, "case": "first-letter", "name": "Vorlage", "canonical": "Template"},
                "14": {"id": 14, "case": "first-letter", "name": "Kategorie", "canonical": "Category"},
            },
            "namespacealiases": [
                {"id": 6, "alias": "Bild"},
                {"id": 6, "alias": "Image"},
                {"id": 10, "alias": "Template"},
                {"id": -1, "alias": "Special"},
            ],
            "extensiontags": [
                "<categorytree>",
                "<gallery>",
                "<math>",
                "<nowiki>",
                "<pre>",
                "<ref>",
                "<references>",
                "<syntaxhighlight>",
            ],
            "protocols": [
                "bitcoin:",
                "ftp://",
                "//",
                "HTTP://",
                "https://",
                "mailto:",
            ],
            "magicwords": [
                {"name": "redirect", "aliases": ["#WEITERLEITUNG", "#REDIRECT"], "case-sensitive": False},
                {"name": "notoc", "aliases": ["__KEININHALTSVERZEICHNIS__", "__NOTOC__"], "case-sensitive": False},
                {"name": "toc", "aliases": ["__INHALTSVERZEICHNIS__", "__TOC__"], "case-sensitive": False},
                {"name": "pagename", "aliases": ["SEITENNAME", "PAGENAME"], "case-sensitive": True},
                {"name": "img_thumbnail", "aliases": ["mini", "miniatur", "thumb"], "case-sensitive": True},
            ],
        },
    }


@pytest.fixture
def query(siteinfo_response):
    """Sample siteinfo Query."""
    return Query.from_dict(siteinfo_response)


@pytest.fixture
def make_query(siteinfo_response):
    """Factory for a sample Query with some fields of the ``query`` object replaced."""
    def _make(**fields):
        data = dict(siteinfo_response["query"])
        data.update(fields)
        return Query.from_dict(data)
    return _make

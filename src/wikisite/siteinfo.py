"""
Site information data model.

Mirrors the parts of a MediaWiki ``action=query&meta=siteinfo`` response
that the extractors read:

- general.linktrail: the PCRE link trail pattern
- namespaces: namespace id -> descriptor
- namespacealiases: extra names for a namespace
- extensiontags: ``<name>`` markers for parser extension tags
- protocols: URL protocol prefixes
- magicwords: canonical name and aliases of each magic word

Both ``formatversion=2`` and legacy responses are accepted. The payload is
read-only once loaded.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import orjson


class SiteInfoError(Exception):
    """Base class for errors raised while reading or extracting site information."""


class SiteInfoFormatError(SiteInfoError):
    """The payload lacks a field the extractors require."""


@dataclass(frozen=True)
class Namespace:
    """A namespace descriptor."""
    id: int
    name: str
    canonical: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "Namespace":
        # legacy responses carry the localized name under '*'
        name = d['name'] if 'name' in d else d['*']
        return cls(id=int(d['id']), name=name, canonical=d.get('canonical'))


@dataclass(frozen=True)
class NamespaceAlias:
    id: int
    alias: str

    @classmethod
    def from_dict(cls, d: dict) -> "NamespaceAlias":
        alias = d['alias'] if 'alias' in d else d['*']
        return cls(id=int(d['id']), alias=alias)


@dataclass(frozen=True)
class MagicWord:
    """A magic word with its canonical name and aliases."""
    name: str
    aliases: List[str] = field(default_factory=list)
    case_sensitive: bool = False

    @classmethod
    def from_dict(cls, d: dict) -> "MagicWord":
        # legacy responses flag case sensitivity with an empty string
        case_sensitive = d.get('case-sensitive', False)
        if case_sensitive == '':
            case_sensitive = True
        return cls(
            name=d['name'],
            aliases=list(d.get('aliases', [])),
            case_sensitive=bool(case_sensitive),
        )


@dataclass(frozen=True)
class General:
    """The general settings record."""
    linktrail: str
    sitename: Optional[str] = None
    lang: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "General":
        linktrail = d['linktrail']
        if not isinstance(linktrail, str):
            raise TypeError(f"linktrail must be a string, not {type(linktrail).__name__}")
        return cls(linktrail=linktrail, sitename=d.get('sitename'), lang=d.get('lang'))


@dataclass(frozen=True)
class Query:
    """The ``query`` object of a siteinfo response."""
    general: General
    namespaces: Dict[int, Namespace] = field(default_factory=dict)
    namespacealiases: List[NamespaceAlias] = field(default_factory=list)
    extensiontags: List[str] = field(default_factory=list)
    protocols: List[str] = field(default_factory=list)
    magicwords: List[MagicWord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict) -> "Query":
        """
        Build a Query from a deserialized response.

        Accepts either the full response (with a top-level ``query`` key)
        or the ``query`` object itself.

        Raises:
            SiteInfoFormatError: a required field is missing or malformed
        """
        try:
            if 'query' in d:
                d = d['query']
            general = General.from_dict(d['general'])
            namespaces = {
                int(key): Namespace.from_dict(ns)
                for key, ns in d.get('namespaces', {}).items()
            }
            aliases = [NamespaceAlias.from_dict(na) for na in d.get('namespacealiases', [])]
            magicwords = [MagicWord.from_dict(mw) for mw in d.get('magicwords', [])]
            extensiontags = list(d.get('extensiontags', []))
            protocols = list(d.get('protocols', []))
        except KeyError as e:
            raise SiteInfoFormatError(f"siteinfo field missing: {e.args[0]!r}") from e
        except (AttributeError, TypeError, ValueError) as e:
            raise SiteInfoFormatError(f"malformed siteinfo: {e}") from e

        return cls(
            general=general,
            namespaces=namespaces,
            namespacealiases=aliases,
            extensiontags=extensiontags,
            protocols=protocols,
            magicwords=magicwords,
        )


def parse_siteinfo(data: Union[bytes, str]) -> Query:
    """Deserialize a siteinfo JSON response."""
    try:
        payload: Any = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise SiteInfoFormatError(f"siteinfo is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise SiteInfoFormatError("siteinfo response must be a JSON object")
    return Query.from_dict(payload)


def load_siteinfo(path: Path) -> Query:
    """Load a siteinfo JSON response from a file."""
    with open(path, 'rb') as f:
        return parse_siteinfo(f.read())

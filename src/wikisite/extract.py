"""
Extract normalized parser configuration from site information.

Each extractor reads one part of a siteinfo ``Query`` and returns a set:

- namespaces: every name of one namespace (canonical, localized, aliases)
- extension_tags: extension tag names without their angle brackets
- protocols: URL protocol prefixes
- link_trail: characters that may trail a wikilink and be absorbed into it
- magic_words: ``__NAME__`` behavior switches without their underscores
- magic_words_redirect: redirect keywords without their ``#`` prefix

All string sets are lowercased. The link trail set is case-sensitive, taken
directly from the site's pattern.
"""

import logging
from typing import Iterable, Optional, Set, assert_never

from wikisite import hir, pcre
from wikisite.siteinfo import Query, SiteInfoError

logger = logging.getLogger(__name__)

LINK_TRAIL_GROUP_INDEX = 1

REDIRECT_MAGIC_WORD = 'redirect'
REDIRECT_PREFIX = '#'
MAGIC_WORD_AFFIX = '__'


class NamespaceNotFoundError(SiteInfoError):
    def __init__(self, name: str):
        super().__init__(f"namespace not found: {name!r}")
        self.name = name


class MalformedExtensionTagError(SiteInfoError):
    def __init__(self, tag: str):
        super().__init__(f"malformed extension tag: {tag!r}")
        self.tag = tag


class LinkTrailError(SiteInfoError):
    """Base class for link trail pattern errors; ``pattern`` is the site's string."""

    def __init__(self, message: str, pattern: str):
        super().__init__(message)
        self.pattern = pattern


class LinkTrailPatternError(LinkTrailError):
    """The pattern could not be parsed. The parse error is the ``__cause__``."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(reason, pattern)


class GroupNotFoundError(LinkTrailError):
    def __init__(self, pattern: str, index: int):
        super().__init__(f"group {index} not found in link trail pattern: {pattern!r}", pattern)
        self.index = index


class GroupInvalidError(LinkTrailError):
    def __init__(self, pattern: str, index: int):
        super().__init__(
            f"group {index} of invalid structure in link trail pattern: {pattern!r}", pattern
        )
        self.index = index


class IrreducibleNodeError(Exception):
    """A node that does not reduce to a finite set of single characters."""

    def __init__(self, node: hir.Hir):
        super().__init__(f"irreducible node: {node!r}")
        self.node = node


def namespaces(query: Query, canonical: str) -> Set[str]:
    """
    Collect every name of the namespace with the given canonical name.

    Returns the canonical name, the localized name and all aliases of that
    namespace, lowercased.

    Raises:
        NamespaceNotFoundError: no namespace has this canonical name
    """
    namespace = next(
        (ns for ns in query.namespaces.values() if ns.canonical == canonical),
        None,
    )
    if namespace is None:
        raise NamespaceNotFoundError(canonical)

    names = [na.alias for na in query.namespacealiases if na.id == namespace.id]
    names.append(canonical)
    names.append(namespace.name)
    return {name.lower() for name in names}


def extension_tags(query: Query) -> Set[str]:
    """
    Collect extension tag names, e.g. ``<ref>`` -> ``ref``.

    Raises:
        MalformedExtensionTagError: on the first marker not wrapped in ``<...>``
    """
    tags = set()
    for marker in query.extensiontags:
        if not (marker.startswith('<') and marker.endswith('>')):
            raise MalformedExtensionTagError(marker)
        tags.add(marker[1:-1].lower())
    return tags


def protocols(query: Query) -> Set[str]:
    return {protocol.lower() for protocol in query.protocols}


def link_trail(query: Query) -> Set[str]:
    """
    Derive the set of characters the site's link trail pattern accepts.

    The pattern's first capture group must be empty (no link trail) or a
    repetition of a unit that reduces to single characters, as in
    ``/^([a-z]+)(.*)$/sD``.

    Raises:
        LinkTrailPatternError: the pattern is not a valid PCRE literal
        GroupNotFoundError: the pattern has no first capture group
        GroupInvalidError: the first group has any other structure
    """
    original = query.general.linktrail
    try:
        pattern = pcre.parse(original)
    except pcre.PatternParseError as e:
        raise LinkTrailPatternError(original, str(e)) from e
    logger.debug(f"pattern = {pattern.hir!r}")

    group = hir.find_group_index(pattern.hir, LINK_TRAIL_GROUP_INDEX)
    if group is None:
        raise GroupNotFoundError(original, LINK_TRAIL_GROUP_INDEX)

    repeated: Optional[hir.Hir]
    match group.hir:
        case hir.Empty():
            repeated = None
        case hir.Repetition(hir=inner):
            repeated = inner
        case (hir.Alternation() | hir.Anchor() | hir.ClassUnicode() | hir.ClassBytes()
              | hir.Concat() | hir.Group() | hir.Literal() | hir.WordBoundary()):
            raise GroupInvalidError(original, LINK_TRAIL_GROUP_INDEX)
        case _:
            assert_never(group.hir)
    logger.debug(f"repeated = {repeated!r}")

    characters: Set[str] = set()
    if repeated is not None:
        try:
            link_trail_characters(repeated, characters)
        except IrreducibleNodeError as e:
            logger.debug(f"link trail not reducible: {e}")
            raise GroupInvalidError(original, LINK_TRAIL_GROUP_INDEX) from None
    return characters


def link_trail_characters(node: hir.Hir, characters: Set[str]) -> None:
    """
    Add every single character ``node`` can match to ``characters``.

    Only alternations, character classes, groups and literals reduce to a
    set of single characters. Anything else raises IrreducibleNodeError;
    ``characters`` may then hold a partial result.
    """
    match node:
        case hir.Alternation(hirs=hirs):
            for sub in hirs:
                link_trail_characters(sub, characters)
        case hir.ClassBytes():
            for b in node.bytes():
                assert b <= pcre.ASCII_MAX, f"non-ASCII byte {b:#x} in byte class"
                characters.add(chr(b))
        case hir.ClassUnicode():
            characters.update(node.chars())
        case hir.Group(hir=inner):
            link_trail_characters(inner, characters)
        case hir.Literal(char=char):
            characters.add(char)
        case hir.Anchor() | hir.Concat() | hir.Empty() | hir.Repetition() | hir.WordBoundary():
            raise IrreducibleNodeError(node)
        case _:
            assert_never(node)


def _strip_affixes(names: Iterable[str], affix: str) -> Iterable[str]:
    for name in names:
        if len(name) >= 2 * len(affix) and name.startswith(affix) and name.endswith(affix):
            yield name[len(affix):-len(affix)]


def magic_words(query: Query) -> Set[str]:
    """
    Collect behavior switch names, e.g. ``__NOTOC__`` -> ``notoc``.

    Names and aliases not wrapped in double underscores are skipped.
    """
    names = (
        name
        for mw in query.magicwords
        for name in [*mw.aliases, mw.name]
    )
    return {name.lower() for name in _strip_affixes(names, MAGIC_WORD_AFFIX)}


def magic_words_redirect(query: Query) -> Set[str]:
    """Collect redirect keywords, e.g. ``#REDIRECT`` -> ``redirect``."""
    words = {REDIRECT_MAGIC_WORD}
    for mw in query.magicwords:
        if mw.name != REDIRECT_MAGIC_WORD:
            continue
        for alias in mw.aliases:
            words.add(alias.removeprefix(REDIRECT_PREFIX).lower())
    return words

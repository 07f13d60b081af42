"""
PCRE pattern parsing for site-advertised regular expressions.

MediaWiki publishes patterns as PHP PCRE literals, delimiter and flags
included, e.g. ``/^([a-z]+)(.*)$/sD``. This module splits such a literal,
parses its body with the interpreter's regular-expression parser, and
converts the resulting parse tree into ``wikisite.hir`` nodes.

Supported flags:
    i   case-insensitive (literals and classes gain their case variants)
    m   multi-line anchors
    s   dot matches newline
    x   extended (whitespace and comments ignored)
    u   UTF-8 mode; classes are text-oriented and never hold surrogates.
        Without it classes are byte-oriented and the body must be ASCII.
    D   dollar end-only (accepted, no structural effect)

Lookaround, backreferences and conditional groups have no ``hir``
representation and are rejected.
"""

import functools
import re
import sys
from dataclasses import dataclass
from typing import Dict, Iterable, List, Set, Tuple

from re import _constants as sre
from re import _parser as sre_parse

from wikisite import hir

PCRE_FLAGS = {
    'i': re.IGNORECASE,
    'm': re.MULTILINE,
    's': re.DOTALL,
    'x': re.VERBOSE,
    'u': 0,
    'D': 0,
}

ASCII_MAX = 0x7F
SURROGATES = (0xD800, 0xDFFF)

# opening delimiters that close with their counterpart
BRACKET_DELIMITERS = {'(': ')', '[': ']', '{': '}', '<': '>'}

_SPACE = ' \t\n\r\f\v'

_NEGATED_CATEGORIES = frozenset({
    sre.CATEGORY_NOT_DIGIT,
    sre.CATEGORY_NOT_SPACE,
    sre.CATEGORY_NOT_WORD,
})
_CATEGORIES = _NEGATED_CATEGORIES | {
    sre.CATEGORY_DIGIT,
    sre.CATEGORY_SPACE,
    sre.CATEGORY_WORD,
}


class PatternParseError(ValueError):
    """A pattern string that is not a parseable PCRE literal."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


@dataclass(frozen=True)
class Pattern:
    """A parsed PCRE literal."""

    source: str
    body: str
    flags: str
    hir: hir.Hir

    @property
    def unicode(self) -> bool:
        return 'u' in self.flags


def parse(source: str) -> Pattern:
    """
    Parse a delimited PCRE literal into a syntax tree.

    Raises:
        PatternParseError: malformed delimiters, unknown flags, invalid
            syntax or a construct with no tree representation
    """
    body, flags = split_delimiters(source)

    re_flags = 0
    for flag in flags:
        if flag not in PCRE_FLAGS:
            raise PatternParseError(source, f"unsupported flag {flag!r}")
        re_flags |= PCRE_FLAGS[flag]

    unicode = 'u' in flags
    if not unicode and not body.isascii():
        raise PatternParseError(source, "non-ASCII character without the 'u' flag")

    try:
        parsed = sre_parse.parse(body, re_flags)
    except (re.error, OverflowError) as e:
        raise PatternParseError(source, str(e)) from e

    converter = _Converter(source, unicode, parsed.state.groupdict)
    tree = converter.convert(parsed, parsed.state.flags)
    return Pattern(source=source, body=body, flags=flags, hir=tree)


def split_delimiters(source: str) -> Tuple[str, str]:
    """
    Split ``/body/flags`` into body and flags.

    Bracket delimiters close with their counterpart, as in ``{body}flags``.
    """
    if len(source) < 2:
        raise PatternParseError(source, "missing delimiters")
    delimiter = source[0]
    if delimiter.isalnum() or delimiter.isspace() or delimiter == '\\':
        raise PatternParseError(source, f"invalid delimiter {delimiter!r}")
    end = source.rfind(BRACKET_DELIMITERS.get(delimiter, delimiter))
    if end < 1:
        raise PatternParseError(source, "missing closing delimiter")
    return source[1:end], source[end + 1:]


def _merge(ranges: Iterable[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """Sort ranges and merge overlapping or adjacent ones."""
    merged: List[Tuple[int, int]] = []
    for start, end in sorted(ranges):
        if merged and start <= merged[-1][1] + 1:
            if end > merged[-1][1]:
                merged[-1] = (merged[-1][0], end)
        else:
            merged.append((start, end))
    return merged


def _complement(ranges: List[Tuple[int, int]], maximum: int) -> List[Tuple[int, int]]:
    result = []
    next_start = 0
    for start, end in _merge(ranges):
        if start > next_start:
            result.append((next_start, start - 1))
        next_start = end + 1
    if next_start <= maximum:
        result.append((next_start, maximum))
    return result


def _subtract(ranges: List[Tuple[int, int]], low: int, high: int) -> List[Tuple[int, int]]:
    result = []
    for start, end in ranges:
        if end < low or start > high:
            result.append((start, end))
            continue
        if start < low:
            result.append((start, low - 1))
        if end > high:
            result.append((high + 1, end))
    return result


def _ranges_where(predicate, maximum: int) -> Tuple[Tuple[int, int], ...]:
    ranges = []
    start = None
    for cp in range(maximum + 1):
        if predicate(chr(cp)):
            if start is None:
                start = cp
        elif start is not None:
            ranges.append((start, cp - 1))
            start = None
    if start is not None:
        ranges.append((start, maximum))
    return tuple(ranges)


@functools.lru_cache(maxsize=None)
def _category_ranges(category, maximum: int) -> Tuple[Tuple[int, int], ...]:
    # \d, \s and \w follow ASCII rules in byte mode and Unicode rules in UTF-8 mode
    ascii_only = maximum == ASCII_MAX
    if category in (sre.CATEGORY_DIGIT, sre.CATEGORY_NOT_DIGIT):
        predicate = (lambda c: '0' <= c <= '9') if ascii_only else str.isdecimal
    elif category in (sre.CATEGORY_SPACE, sre.CATEGORY_NOT_SPACE):
        predicate = (lambda c: c in _SPACE) if ascii_only else str.isspace
    else:
        if ascii_only:
            predicate = lambda c: c == '_' or (c.isascii() and c.isalnum())
        else:
            predicate = lambda c: c == '_' or c.isalnum()

    ranges = _ranges_where(predicate, maximum)
    if category in _NEGATED_CATEGORIES:
        return tuple(_complement(list(ranges), maximum))
    return ranges


def _case_variants(cp: int, maximum: int) -> Set[int]:
    variants = {cp}
    c = chr(cp)
    for variant in (c.lower(), c.upper(), c.swapcase()):
        if len(variant) == 1 and ord(variant) <= maximum:
            variants.add(ord(variant))
    return variants


class _Converter:
    """Converts a ``re._parser`` tree into ``hir`` nodes."""

    def __init__(self, source: str, unicode: bool, groupdict: Dict[str, int]):
        self.source = source
        self.unicode = unicode
        self.maximum = sys.maxunicode if unicode else ASCII_MAX
        self.group_names = {index: name for name, index in groupdict.items()}

    def error(self, reason: str) -> PatternParseError:
        return PatternParseError(self.source, reason)

    def convert(self, subpattern, flags: int) -> hir.Hir:
        if len(subpattern) > 1 and subpattern[-1][0] is sre.BRANCH:
            # the parser hoists a prefix shared by all alternatives; put it back
            prefix = list(subpattern)[:-1]
            _, branches = subpattern[-1][1]
            return hir.Alternation(tuple(self.convert(prefix + list(b), flags) for b in branches))
        items = [self.convert_item(op, av, flags) for op, av in subpattern]
        if not items:
            return hir.Empty()
        if len(items) == 1:
            return items[0]
        return hir.Concat(tuple(items))

    def convert_item(self, op, av, flags: int) -> hir.Hir:
        if op is sre.LITERAL:
            return self.literal(av, flags)
        if op is sre.NOT_LITERAL:
            self.check_char(av)
            return self.char_class(self.case_fold([(av, av)], flags), negate=True)
        if op is sre.ANY:
            excluded = [] if flags & re.DOTALL else [(ord('\n'), ord('\n'))]
            return self.char_class(excluded, negate=True)
        if op is sre.IN:
            return self.set_items(av, flags)
        if op is sre.BRANCH:
            _, branches = av
            return hir.Alternation(tuple(self.convert(b, flags) for b in branches))
        if op is sre.SUBPATTERN:
            group, add_flags, del_flags, p = av
            inner_flags = (flags | add_flags) & ~del_flags
            name = self.group_names.get(group)
            return hir.Group(self.convert(p, inner_flags), index=group, name=name)
        if op is sre.ATOMIC_GROUP:
            return hir.Group(self.convert(av, flags))
        if op in (sre.MAX_REPEAT, sre.MIN_REPEAT, sre.POSSESSIVE_REPEAT):
            low, high, item = av
            return hir.Repetition(
                self.convert(item, flags),
                min=low,
                max=None if high >= sre.MAXREPEAT else high,
                greedy=op is not sre.MIN_REPEAT,
            )
        if op is sre.AT:
            return self.anchor(av, flags)
        raise self.error(f"unsupported construct {op}")

    def anchor(self, code, flags: int) -> hir.Hir:
        multiline = bool(flags & re.MULTILINE)
        if code is sre.AT_BEGINNING:
            kind = hir.AnchorKind.START_LINE if multiline else hir.AnchorKind.START_TEXT
            return hir.Anchor(kind)
        if code is sre.AT_BEGINNING_STRING:
            return hir.Anchor(hir.AnchorKind.START_TEXT)
        if code is sre.AT_END:
            kind = hir.AnchorKind.END_LINE if multiline else hir.AnchorKind.END_TEXT
            return hir.Anchor(kind)
        if code is sre.AT_END_STRING:
            return hir.Anchor(hir.AnchorKind.END_TEXT)
        if code is sre.AT_BOUNDARY:
            return hir.WordBoundary()
        if code is sre.AT_NON_BOUNDARY:
            return hir.WordBoundary(negated=True)
        raise self.error(f"unsupported anchor {code}")

    def check_char(self, cp: int) -> None:
        if cp > self.maximum:
            raise self.error(f"character {cp:#x} out of range without the 'u' flag")
        if SURROGATES[0] <= cp <= SURROGATES[1]:
            raise self.error(f"surrogate code point {cp:#x}")

    def literal(self, cp: int, flags: int) -> hir.Hir:
        self.check_char(cp)
        ranges = self.case_fold([(cp, cp)], flags)
        if len(ranges) == 1 and ranges[0][0] == ranges[0][1]:
            return hir.Literal(chr(cp))
        return self.char_class(ranges)

    def set_items(self, items, flags: int) -> hir.Hir:
        negate = False
        ranges: List[Tuple[int, int]] = []
        for op, av in items:
            if op is sre.NEGATE:
                negate = True
            elif op is sre.LITERAL:
                self.check_char(av)
                ranges.append((av, av))
            elif op is sre.RANGE:
                self.check_char(av[0])
                self.check_char(av[1])
                ranges.append(av)
            elif op is sre.CATEGORY:
                if av not in _CATEGORIES:
                    raise self.error(f"unsupported category {av}")
                ranges.extend(_category_ranges(av, self.maximum))
            else:
                raise self.error(f"unsupported class item {op}")
        return self.char_class(self.case_fold(ranges, flags), negate=negate)

    def case_fold(self, ranges: List[Tuple[int, int]], flags: int) -> List[Tuple[int, int]]:
        if not flags & re.IGNORECASE:
            return ranges
        folded = set()
        for start, end in ranges:
            for cp in range(start, end + 1):
                folded.update(_case_variants(cp, self.maximum))
        return _merge((cp, cp) for cp in folded)

    def char_class(self, ranges: List[Tuple[int, int]], negate: bool = False) -> hir.Class:
        if negate:
            ranges = _complement(ranges, self.maximum)
        else:
            ranges = _merge(ranges)
        if self.unicode:
            # text classes hold scalar values only
            ranges = _subtract(ranges, *SURROGATES)
            return hir.ClassUnicode(tuple((chr(s), chr(e)) for s, e in ranges))
        return hir.ClassBytes(tuple(ranges))

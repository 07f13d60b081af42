"""
Syntax tree for parsed link-trail patterns.

The tree is a closed set of immutable node kinds. Code that walks it
dispatches with ``match`` and ends in ``assert_never`` so that a new node
kind cannot be added without revisiting every walker.

Node kinds:
- Empty: matches the empty string
- Literal: a single character
- ClassUnicode / ClassBytes: a set of inclusive character ranges
- Concat: a sequence of nodes
- Alternation: an ordered choice between nodes
- Group: a capturing (numbered) or non-capturing group
- Repetition: a quantified node
- Anchor: start/end of line or text
- WordBoundary: \\b or \\B
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union, assert_never


@dataclass(frozen=True)
class Empty:
    """Matches the empty string, e.g. the body of ``()``."""


@dataclass(frozen=True)
class Literal:
    """A single character."""

    char: str


@dataclass(frozen=True)
class ClassUnicode:
    """A text-oriented character class of inclusive code point ranges."""

    ranges: tuple[tuple[str, str], ...]

    def chars(self) -> Iterator[str]:
        for start, end in self.ranges:
            for cp in range(ord(start), ord(end) + 1):
                yield chr(cp)


@dataclass(frozen=True)
class ClassBytes:
    """A byte-oriented character class of inclusive byte ranges."""

    ranges: tuple[tuple[int, int], ...]

    def bytes(self) -> Iterator[int]:
        for start, end in self.ranges:
            yield from range(start, end + 1)


@dataclass(frozen=True)
class Concat:
    hirs: tuple["Hir", ...]


@dataclass(frozen=True)
class Alternation:
    hirs: tuple["Hir", ...]


@dataclass(frozen=True)
class Group:
    """A group wrapping one sub-tree; ``index`` is None when non-capturing."""

    hir: "Hir"
    index: Optional[int] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class Repetition:
    """A quantified sub-tree; ``max`` is None when unbounded."""

    hir: "Hir"
    min: int = 0
    max: Optional[int] = None
    greedy: bool = True


class AnchorKind(Enum):
    START_LINE = "start_line"
    END_LINE = "end_line"
    START_TEXT = "start_text"
    END_TEXT = "end_text"


@dataclass(frozen=True)
class Anchor:
    kind: AnchorKind


@dataclass(frozen=True)
class WordBoundary:
    negated: bool = False


Class = Union[ClassUnicode, ClassBytes]

Hir = Union[
    Empty,
    Literal,
    ClassUnicode,
    ClassBytes,
    Concat,
    Alternation,
    Group,
    Repetition,
    Anchor,
    WordBoundary,
]


def find_group_index(hir: Hir, index: int) -> Optional[Group]:
    """
    Find the capturing group with the given index.

    Searches depth first, outermost group first, so for ``((a)b)`` index 1
    is the outer group and index 2 the inner one.

    Args:
        hir: Root of the tree to search
        index: Capture group number (1-based)

    Returns:
        The Group node, or None if the tree has no such group
    """
    match hir:
        case Group(hir=inner, index=group_index):
            if group_index == index:
                return hir
            return find_group_index(inner, index)
        case Concat(hirs=hirs) | Alternation(hirs=hirs):
            for sub in hirs:
                found = find_group_index(sub, index)
                if found is not None:
                    return found
            return None
        case Repetition(hir=inner):
            return find_group_index(inner, index)
        case Empty() | Literal() | ClassUnicode() | ClassBytes() | Anchor() | WordBoundary():
            return None
        case _:
            assert_never(hir)

"""Intermediate data models for chord sheet parsing.

This module defines the tokens produced by the line and expression lexers
and the classified blocks consumed by the document builder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from songsheet.models import Chord


TokenKind = Literal["chord", "bar_line"]


@dataclass(frozen=True)
class Token:
    """A chord or bar line scanned from a chord line.

    Parameters
    ----------
    kind : TokenKind
        "chord" or "bar_line".
    column : int
        Zero-based offset of the token's first character in the source line.
    chord : Chord | None
        The scanned chord for "chord" tokens, None for bar lines.

    Examples
    --------
    >>> Token(kind="bar_line", column=4).chord is None
    True
    """

    kind: TokenKind
    column: int
    chord: Chord | None = None


ExprTokenKind = Literal["lparen", "rparen", "comma", "star", "number", "word", "chord", "eof"]


@dataclass(frozen=True)
class ExprToken:
    """A token of a directive expression such as "(VERSE, CHORUS*2)".

    Parameters
    ----------
    kind : ExprTokenKind
        The token kind.
    value : str | int | None
        Section name for "word" tokens, repeat count for "number" tokens.
    chord : Chord | None
        The scanned chord for "chord" tokens.
    """

    kind: ExprTokenKind
    value: str | int | None = None
    chord: Chord | None = None


BlockKind = Literal[
    "title",
    "section_label",
    "directive",
    "section_ref_repeat",
    "section_ref",
    "chord_lyric",
    "chord_only",
    "lyric_only",
    "unknown",
]


@dataclass(frozen=True)
class Block:
    """A blank-line separated block of the sheet with its classification.

    Parameters
    ----------
    kind : BlockKind
        The block classification.
    text : str
        The raw block text.
    name : str | None
        Lower-cased section name for labels, directives and references.
    body : str | None
        Chord-lyric body of a labelled section, or the expression text of a
        directive.
    count : int
        Number of replays for a repeated section reference.
    """

    kind: BlockKind
    text: str
    name: str | None = None
    body: str | None = None
    count: int = 1

"""Directive expressions: lexer, recursive-descent parser and resolver.

Directives describe a section in terms of other sections and inline chords,
for example ``INSTRUMENTAL: (VERSE, CHORUS*2)`` or ``SOLO: (D G D A)*4``.

Grammar::

    Expression = Sequence
    Sequence   = Item (',' Item)*
    Item       = Atom ('*' NUMBER)?
    Atom       = WORD | CHORD+ | '(' Sequence ')'
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import TYPE_CHECKING

from songsheet.models import (
    NNS_DIGITS,
    Chord,
    ChordList,
    Expression,
    Line,
    PositionedChord,
    Repeat,
    SectionRef,
    Sequence,
)
from songsheet.sheet_parser.models import ExprToken, ExprTokenKind
from songsheet.sheet_parser.tokenizer import ACCIDENTALS, ROOTS

if TYPE_CHECKING:
    from songsheet.models import Section

logger = logging.getLogger(__name__)

WORD_CHARS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789#+")
SINGLE_CHAR_TOKENS: dict[str, ExprTokenKind] = {
    "(": "lparen",
    ")": "rparen",
    ",": "comma",
    "*": "star",
}


class ExpressionSyntaxError(ValueError):
    """Raised when a directive expression does not match the grammar.

    Parameters
    ----------
    expected : str
        The token kind (or description) the parser expected.
    found : str
        The token kind actually found.
    """

    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(f"Expected {expected} but found {found}")


def _is_section_word(word: str) -> bool:
    """Runs of two or more uppercase letters and nothing else name sections ("CHORUS").

    A digit or accidental makes the run a chord even when every letter is
    uppercase ("CM7", "FM9").
    """
    return len(word) > 1 and word.isalpha() and word.isupper()


def _lex_bass(text: str, i: int) -> tuple[str | None, int]:
    """Lex an optional ``/bass`` suffix; a bare ``/`` is consumed and ignored."""
    if i >= len(text) or text[i] != "/":
        return None, i
    i += 1
    if i < len(text) and text[i] in ROOTS:
        if i + 1 < len(text) and text[i + 1] in ACCIDENTALS:
            return text[i : i + 2], i + 2
        return text[i], i + 1
    if i + 1 < len(text) and text[i] in ACCIDENTALS and text[i + 1] in NNS_DIGITS:
        return text[i : i + 2], i + 2
    if i < len(text) and text[i] in NNS_DIGITS:
        return text[i], i + 1
    return None, i


def lex_expression(text: str) -> list[ExprToken]:
    """Tokenize a directive expression.

    Unrecognized characters are skipped; the result always ends with an
    "eof" token.

    A digit 1-7 is a Nashville chord unless it directly follows ``*``, in
    which case it is a repeat count. A run is a section reference when it
    is two or more uppercase letters and nothing else, and a chord when it
    starts with a root letter.

    Parameters
    ----------
    text : str
        The expression text (e.g., "(VERSE, CHORUS*2)").

    Returns
    -------
    list[ExprToken]
        The token stream.

    Examples
    --------
    >>> [t.kind for t in lex_expression("(VERSE, CHORUS*2)")]
    ['lparen', 'word', 'comma', 'word', 'star', 'number', 'rparen', 'eof']
    >>> [t.chord.root for t in lex_expression("1 4 5") if t.kind == "chord"]
    ['1', '4', '5']
    """
    tokens: list[ExprToken] = []
    i = 0
    n = len(text)

    while i < n:
        char = text[i]

        if char in SINGLE_CHAR_TOKENS:
            tokens.append(ExprToken(kind=SINGLE_CHAR_TOKENS[char]))
            i += 1
            continue

        if char.isdigit() and char.isascii():
            after_star = bool(tokens) and tokens[-1].kind == "star"
            if after_star or char not in NNS_DIGITS:
                start = i
                while i < n and text[i].isdigit() and text[i].isascii():
                    i += 1
                tokens.append(ExprToken(kind="number", value=int(text[start:i])))
                continue

            # Nashville chord: degree, quality run, optional bass
            start = i + 1
            i = start
            while i < n and text[i] in WORD_CHARS:
                i += 1
            quality = text[start:i]
            bass, i = _lex_bass(text, i)
            chord = Chord(root=char, quality=quality, bass=bass)
            tokens.append(ExprToken(kind="chord", value=chord.name, chord=chord))
            continue

        if char.isascii() and char.isalpha():
            start = i
            while i < n and text[i] in WORD_CHARS:
                i += 1
            word = text[start:i]

            if word[0] in ROOTS and not _is_section_word(word):
                root, rest = word[0], word[1:]
                if rest and rest[0] in ACCIDENTALS:
                    root, rest = root + rest[0], rest[1:]
                bass, i = _lex_bass(text, i)
                chord = Chord(root=root, quality=rest, bass=bass)
                tokens.append(ExprToken(kind="chord", value=chord.name, chord=chord))
            else:
                tokens.append(ExprToken(kind="word", value=word))
            continue

        # Whitespace and anything unrecognized
        i += 1

    tokens.append(ExprToken(kind="eof"))
    return tokens


class _ExpressionParser:
    """Recursive-descent parser over an expression token stream."""

    def __init__(self, tokens: list[ExprToken]):
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> ExprToken:
        return self.tokens[self.pos]

    def advance(self) -> ExprToken:
        token = self.tokens[self.pos]
        if token.kind != "eof":
            self.pos += 1
        return token

    def expect(self, kind: ExprTokenKind) -> ExprToken:
        token = self.advance()
        if token.kind != kind:
            raise ExpressionSyntaxError(expected=kind, found=token.kind)
        return token

    def parse(self) -> Expression:
        expr = self.parse_sequence()
        self.expect("eof")
        return expr

    def parse_sequence(self) -> Expression:
        items = [self.parse_item()]
        while self.peek().kind == "comma":
            self.advance()
            items.append(self.parse_item())
        if len(items) == 1:
            return items[0]
        return Sequence(items=tuple(items))

    def parse_item(self) -> Expression:
        node = self.parse_atom()
        if self.peek().kind == "star":
            self.advance()
            count = self.expect("number")
            node = Repeat(body=node, count=int(count.value))
        return node

    def parse_atom(self) -> Expression:
        token = self.peek()

        if token.kind == "lparen":
            self.advance()
            node = self.parse_sequence()
            self.expect("rparen")
            return node

        if token.kind == "word":
            self.advance()
            return SectionRef(name=str(token.value).lower())

        if token.kind == "chord":
            chords: list[Chord] = []
            while self.peek().kind == "chord":
                chord = self.advance().chord
                if chord is not None:
                    chords.append(chord)
            return ChordList(chords=tuple(chords))

        raise ExpressionSyntaxError(expected="word, chord or lparen", found=token.kind)


def parse_expression(text: str) -> Expression:
    """Parse directive expression text into an expression tree.

    Parameters
    ----------
    text : str
        The expression text.

    Returns
    -------
    Expression
        A SectionRef, ChordList, Sequence or Repeat node. Sequence nodes are
        only produced for two or more items and Repeat nodes only when
        ``*`` is present.

    Raises
    ------
    ExpressionSyntaxError
        On an unexpected token, a missing ``)`` or a ``*`` without a count.

    Examples
    --------
    >>> parse_expression("(VERSE)")
    SectionRef(name='verse')
    >>> parse_expression("CHORUS*2")
    Repeat(body=SectionRef(name='chorus'), count=2)
    """
    return _ExpressionParser(lex_expression(text)).parse()


def resolve_expression(expr: Expression | None, sections: Mapping[str, Section]) -> list[Chord]:
    """Flatten an expression into the chords it plays.

    References to undefined sections resolve to no chords.

    Parameters
    ----------
    expr : Expression | None
        The expression tree.
    sections : Mapping[str, Section]
        Sections defined so far, by lower-cased name.

    Returns
    -------
    list[Chord]
        The chords in playing order.

    Examples
    --------
    >>> chords = resolve_expression(parse_expression("(D G D A)*4"), {})
    >>> len(chords), "".join(c.root for c in chords[:4])
    (16, 'DGDA')
    """
    if expr is None:
        return []
    if isinstance(expr, SectionRef):
        section = sections.get(expr.name)
        if section is None:
            logger.debug("Unresolved section reference: %s", expr.name)
            return []
        return list(section.chords)
    if isinstance(expr, ChordList):
        return list(expr.chords)
    if isinstance(expr, Sequence):
        return [chord for item in expr.items for chord in resolve_expression(item, sections)]
    if isinstance(expr, Repeat):
        return resolve_expression(expr.body, sections) * expr.count
    msg = f"Unknown expression node: {expr!r}"
    raise TypeError(msg)


# A marker is a chord, or None for a bar line
Marker = Chord | None


def _line_markers(line: Line) -> list[Marker]:
    """Chords and bar lines of one line in column order."""
    positioned: list[tuple[int, Marker]] = [(c.column, c.chord) for c in line.chords]
    positioned.extend((column, None) for column in line.bar_lines)
    positioned.sort(key=lambda item: item[0])
    return [marker for _, marker in positioned]


def _collect_markers(expr: Expression | None, sections: Mapping[str, Section]) -> list[Marker]:
    if expr is None or isinstance(expr, ChordList):
        return []
    if isinstance(expr, SectionRef):
        section = sections.get(expr.name)
        if section is None:
            logger.debug("Unresolved section reference: %s", expr.name)
            return []
        return [marker for line in section.lines for marker in _line_markers(line)]
    if isinstance(expr, Sequence):
        return [marker for item in expr.items for marker in _collect_markers(item, sections)]
    if isinstance(expr, Repeat):
        return _collect_markers(expr.body, sections) * expr.count
    msg = f"Unknown expression node: {expr!r}"
    raise TypeError(msg)


def resolve_lines(expr: Expression | None, sections: Mapping[str, Section]) -> list[Line]:
    """Lay out the chords and bar lines an expression plays on one line.

    Markers from every line of every referenced section are re-laid left to
    right with a single space between them: a bar line is one column wide,
    a chord is as wide as its symbol. Inline chord lists have no layout of
    their own and contribute nothing.

    Parameters
    ----------
    expr : Expression | None
        The expression tree.
    sections : Mapping[str, Section]
        Sections defined so far, by lower-cased name.

    Returns
    -------
    list[Line]
        A single compacted line without lyrics, or an empty list when the
        expression plays no markers.
    """
    markers = _collect_markers(expr, sections)
    if not markers:
        return []

    chords: list[PositionedChord] = []
    bar_lines: list[int] = []
    cursor = 0
    for index, marker in enumerate(markers):
        if index > 0:
            cursor += 1
        if marker is None:
            bar_lines.append(cursor)
            cursor += 1
        else:
            chords.append(PositionedChord.at(marker, cursor))
            cursor += len(marker.name)

    return [Line(chords=tuple(chords), bar_lines=tuple(bar_lines))]


def map_expression(expr: Expression | None, fn: Callable[[Chord], Chord]) -> Expression | None:
    """Rebuild an expression tree with ``fn`` applied to every inline chord.

    Section references are left as they are; they name sections, not chords.
    """
    if expr is None or isinstance(expr, SectionRef):
        return expr
    if isinstance(expr, ChordList):
        return replace(expr, chords=tuple(fn(chord) for chord in expr.chords))
    if isinstance(expr, Sequence):
        return replace(expr, items=tuple(map_expression(item, fn) for item in expr.items))
    if isinstance(expr, Repeat):
        return replace(expr, body=map_expression(expr.body, fn))
    msg = f"Unknown expression node: {expr!r}"
    raise TypeError(msg)

"""Character-level alignment of chord lines with lyric lines.

In monospace chord sheets a chord applies to the lyric character directly
below its first character, so alignment is an exact column match.
"""

from __future__ import annotations

from collections.abc import Iterable

from songsheet.models import Character, Chord, PositionedChord
from songsheet.sheet_parser.models import Token


def align(tokens: Iterable[Token], lyrics: str) -> list[Character]:
    """Attach chords and bar lines to the lyric characters below them.

    Parameters
    ----------
    tokens : Iterable[Token]
        Chord and bar line tokens of the chord line.
    lyrics : str
        The paired lyric line.

    Returns
    -------
    list[Character]
        One entry per lyric character. Tokens past the end of the lyric line
        are not represented.

    Examples
    --------
    >>> from songsheet.sheet_parser.tokenizer import scan_line
    >>> chars = align(scan_line("| G | C |"), "ab cd ef")
    >>> [(c.character, c.bar_line, c.chord and c.chord.root) for c in chars[:3]]
    [('a', True, None), ('b', False, None), (' ', False, 'G')]
    """
    chord_map: dict[int, Chord] = {}
    bar_columns: set[int] = set()
    for token in tokens:
        if token.kind == "chord" and token.chord is not None:
            chord_map[token.column] = token.chord
        elif token.kind == "bar_line":
            bar_columns.add(token.column)

    return [
        Character(character=char, chord=chord_map.get(i), bar_line=i in bar_columns)
        for i, char in enumerate(lyrics)
    ]


def line_tokens(chords: Iterable[PositionedChord], bar_lines: Iterable[int]) -> list[Token]:
    """Rebuild chord line tokens from an already parsed line's chords and bars."""
    tokens = [Token(kind="chord", column=chord.column, chord=chord.chord) for chord in chords]
    tokens.extend(Token(kind="bar_line", column=column) for column in bar_lines)
    return sorted(tokens, key=lambda token: token.column)

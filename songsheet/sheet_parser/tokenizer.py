"""Column-aware chord line lexer.

A chord line is a line whose every non-blank token is a chord, a decorated
chord or a bar line. Any other content makes the whole line a lyric line, so
the lexer either accepts a line completely or rejects it.

Grammar at each position:

- ``|`` bar line
- ``<chord>`` diamond (held) chord, optionally followed by ``!``
- ``^chord`` push (anticipated) chord, optionally followed by ``!``
- ``[chord chord ...]`` split measure of two or more chords
- ``chord`` bare chord, optionally followed by ``!`` (stop)
"""

from __future__ import annotations

import string
from dataclasses import replace

from songsheet.models import NNS_DIGITS, Chord
from songsheet.sheet_parser.models import Token

ROOTS = frozenset("ABCDEFG")
ACCIDENTALS = frozenset("#b")
QUALITY_CHARS = frozenset(string.ascii_letters + string.digits + "#+")
BLANKS = frozenset(" \t")

Scanned = tuple[Chord, int]


def _scan_root(line: str, i: int) -> tuple[str, int] | None:
    """Scan a letter root with optional accidental, or a Nashville digit."""
    if i >= len(line):
        return None
    if line[i] in ROOTS:
        if i + 1 < len(line) and line[i + 1] in ACCIDENTALS:
            return line[i : i + 2], i + 2
        return line[i], i + 1
    if line[i] in NNS_DIGITS:
        return line[i], i + 1
    return None


def _scan_bass(line: str, i: int) -> tuple[str, int] | None:
    """Scan a bass note after ``/``.

    Accepts the root grammar plus accidental-prefixed Nashville degrees
    (e.g., "b3"), which is how converted slash chords spell their bass.
    """
    if i + 1 < len(line) and line[i] in ACCIDENTALS and line[i + 1] in NNS_DIGITS:
        return line[i : i + 2], i + 2
    return _scan_root(line, i)


def _scan_chord(line: str, i: int) -> Scanned | None:
    """Scan root, quality run and optional slash bass starting at ``i``."""
    scanned = _scan_root(line, i)
    if scanned is None:
        return None
    root, i = scanned

    start = i
    while i < len(line) and line[i] in QUALITY_CHARS:
        i += 1
    quality = line[start:i]

    bass = None
    if i < len(line) and line[i] == "/":
        scanned = _scan_bass(line, i + 1)
        if scanned is None:
            return None
        bass, i = scanned

    return Chord(root=root, quality=quality, bass=bass), i


def _scan_stop(line: str, i: int) -> tuple[bool, int]:
    if i < len(line) and line[i] == "!":
        return True, i + 1
    return False, i


def _scan_split_measure(line: str, i: int) -> Scanned | None:
    """Scan the inside of ``[...]`` up to and including the closing bracket."""
    chords: list[Chord] = []
    while True:
        while i < len(line) and line[i] in BLANKS:
            i += 1
        if i >= len(line):
            return None  # unclosed bracket
        if line[i] == "]":
            i += 1
            break

        scanned = _scan_chord(line, i)
        if scanned is None:
            return None
        chord, i = scanned
        if i < len(line) and line[i] not in BLANKS and line[i] != "]":
            return None
        chords.append(chord)

    if len(chords) < 2:
        return None

    return replace(chords[0], split_measure=tuple(chords)), i


def _scan_token(line: str, i: int) -> Scanned | None:
    """Scan one chord token, decorated or bare, starting at ``i``."""
    char = line[i]

    if char == "<":
        scanned = _scan_chord(line, i + 1)
        if scanned is None:
            return None
        chord, i = scanned
        if i >= len(line) or line[i] != ">":
            return None
        stop, i = _scan_stop(line, i + 1)
        return replace(chord, diamond=True, stop=stop), i

    if char == "^":
        scanned = _scan_chord(line, i + 1)
        if scanned is None:
            return None
        chord, i = scanned
        stop, i = _scan_stop(line, i)
        return replace(chord, push=True, stop=stop), i

    if char == "[":
        return _scan_split_measure(line, i + 1)

    scanned = _scan_chord(line, i)
    if scanned is None:
        return None
    chord, i = scanned
    stop, i = _scan_stop(line, i)
    if stop:
        chord = replace(chord, stop=True)
    return chord, i


def scan_line(line: str) -> list[Token] | None:
    """Scan a line into chord and bar line tokens.

    Does not strip the line: token columns are raw offsets into ``line`` so
    they can be matched against lyric character indices.

    Parameters
    ----------
    line : str
        The line to scan. Should not include newline characters.

    Returns
    -------
    list[Token] | None
        Tokens in column order, or None if the line is not a chord line
        (blank, contains non-chord content, or holds only bar lines).

    Examples
    --------
    >>> tokens = scan_line("G                               F")
    >>> [(t.chord.root, t.column) for t in tokens]
    [('G', 0), ('F', 32)]
    >>> scan_line("Hello world") is None
    True
    >>> scan_line("| |") is None
    True
    """
    if not line or not line.strip():
        return None

    tokens: list[Token] = []
    i = 0
    n = len(line)

    while i < n:
        # Skip whitespace
        if line[i] in BLANKS:
            i += 1
            continue

        column = i

        if line[i] == "|":
            tokens.append(Token(kind="bar_line", column=column))
            i += 1
            continue

        scanned = _scan_token(line, i)
        if scanned is None:
            return None
        chord, i = scanned

        # A token must end at whitespace, end of line, or a bar line
        if i < n and line[i] not in BLANKS and line[i] != "|":
            return None

        tokens.append(Token(kind="chord", column=column, chord=chord))

    if not any(t.kind == "chord" for t in tokens):
        return None

    return tokens


def is_chord_line(line: str) -> bool:
    """Check whether a line scans as a chord line.

    Examples
    --------
    >>> is_chord_line("| A | G | D |")
    True
    >>> is_chord_line("Blue mountain road")
    False
    """
    return scan_line(line) is not None

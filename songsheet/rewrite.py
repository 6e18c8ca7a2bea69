"""Chord-wise rewriting of a parsed song.

Transposition and notation conversion change chords and nothing else. This
module walks every place a chord can appear in a Song (section and entry
chord lists, line chords, aligned characters, directive expressions) and
rebuilds a new Song with a chord function applied, leaving columns, lyrics
and structure untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

from songsheet.models import Character, Chord, Line, PositionedChord, Song
from songsheet.sheet_parser.expression import map_expression

ChordFn = Callable[[Chord], Chord]


def map_chords(chords: tuple[Chord, ...], fn: ChordFn) -> tuple[Chord, ...]:
    return tuple(fn(chord) for chord in chords)


def map_positioned(chord: PositionedChord, fn: ChordFn) -> PositionedChord:
    """Apply ``fn`` to a positioned chord, keeping its column."""
    return PositionedChord.at(fn(chord.chord), chord.column)


def map_character(character: Character, fn: ChordFn) -> Character:
    if character.chord is None:
        return character
    return replace(character, chord=fn(character.chord))


def map_line(line: Line, fn: ChordFn) -> Line:
    return replace(
        line,
        chords=tuple(map_positioned(chord, fn) for chord in line.chords),
        characters=tuple(map_character(character, fn) for character in line.characters),
    )


def map_lines(lines: tuple[Line, ...], fn: ChordFn) -> tuple[Line, ...]:
    return tuple(map_line(line, fn) for line in lines)


def map_song(song: Song, fn: ChordFn) -> Song:
    """Rebuild a song with ``fn`` applied to every chord it contains.

    Parameters
    ----------
    song : Song
        The song to rewrite. It is not modified.
    fn : ChordFn
        Function from a chord (without column) to its replacement.

    Returns
    -------
    Song
        A new song sharing no containers with the input.
    """
    sections = {
        name: replace(
            section,
            chords=map_chords(section.chords, fn),
            lines=map_lines(section.lines, fn),
        )
        for name, section in song.sections.items()
    }
    structure = tuple(
        replace(
            entry,
            chords=map_chords(entry.chords, fn),
            lines=map_lines(entry.lines, fn),
            expression=map_expression(entry.expression, fn),
        )
        for entry in song.structure
    )
    return replace(song, sections=sections, structure=structure)

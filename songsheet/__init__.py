"""Song sheet library for parsing and rewriting plain-text chord charts.

This library parses monospace chord sheets into a structured Song and
rewrites the chords of a parsed song: chromatic transposition, conversion to
and from the Nashville Number System, and pychord chord symbol interop.

Examples
--------
>>> from songsheet import parse, transpose, to_nashville

>>> song = parse("MY SONG - AUTHOR (G key)\\n\\nG          C\\nHello there world")
>>> [chord.name for chord in song.sections["verse"].chords]
['G', 'C']

>>> # Transpose up a whole step
>>> [chord.name for chord in transpose(song, 2).sections["verse"].chords]
['A', 'D']

>>> # Nashville numbers relative to the song's key
>>> [chord.name for chord in to_nashville(song, "G").sections["verse"].chords]
['1', '4']
"""

from songsheet.converter import chord_components, from_pychord, to_pychord
from songsheet.models import (
    Character,
    Chord,
    ChordList,
    Expression,
    Line,
    PositionedChord,
    Repeat,
    Section,
    SectionRef,
    Sequence,
    Song,
    StructureEntry,
    TimeSignature,
)
from songsheet.notation import convert_chord, to_nashville, to_standard
from songsheet.pitch_class import note_to_semitone, semitone_to_note
from songsheet.sheet_parser import ExpressionSyntaxError, parse
from songsheet.transpose import transpose, transpose_chord

__all__ = [
    "Character",
    "Chord",
    "ChordList",
    "Expression",
    "ExpressionSyntaxError",
    "Line",
    "PositionedChord",
    "Repeat",
    "Section",
    "SectionRef",
    "Sequence",
    "Song",
    "StructureEntry",
    "TimeSignature",
    "chord_components",
    "convert_chord",
    "from_pychord",
    "note_to_semitone",
    "parse",
    "semitone_to_note",
    "to_nashville",
    "to_pychord",
    "to_standard",
    "transpose",
    "transpose_chord",
]

"""Pitch class table shared by transposition and notation conversion.

Each of the 12 pitch classes (C=0) has a sharp and a flat spelling; lookups
accept either, and output picks one according to a flat preference.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from songsheet.models import Chord, Song

SHARP_NOTES: tuple[str, ...] = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
FLAT_NOTES: tuple[str, ...] = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")

# Note name to pitch class (0-11, where C=0)
NOTE_TO_SEMITONE: dict[str, int] = {
    **{note: pc for pc, note in enumerate(SHARP_NOTES)},
    **{note: pc for pc, note in enumerate(FLAT_NOTES)},
}


def note_to_semitone(note: str) -> int:
    """Convert a note name to its pitch class (0-11).

    Parameters
    ----------
    note : str
        Note name in sharp or flat spelling (e.g., "C", "F#", "Bb").

    Returns
    -------
    int
        Pitch class, where C=0.

    Raises
    ------
    ValueError
        If the note name is not one of the 12 pitch classes.

    Examples
    --------
    >>> note_to_semitone("F#")
    6
    >>> note_to_semitone("Bb")
    10
    """
    if note in NOTE_TO_SEMITONE:
        return NOTE_TO_SEMITONE[note]
    msg = f"Unknown note: {note}"
    raise ValueError(msg)


def semitone_to_note(semitone: int, prefer_flats: bool = False) -> str:
    """Spell a pitch class as a note name.

    Parameters
    ----------
    semitone : int
        Any integer; it is reduced modulo 12, so negatives wrap around.
    prefer_flats : bool
        Use flat spellings ("Bb") instead of sharp ones ("A#").

    Returns
    -------
    str
        The note name.

    Examples
    --------
    >>> semitone_to_note(-2)
    'A#'
    >>> semitone_to_note(-2, prefer_flats=True)
    'Bb'
    """
    notes = FLAT_NOTES if prefer_flats else SHARP_NOTES
    return notes[semitone % 12]


def is_flat_spelling(note: str | None) -> bool:
    """Check whether a note is spelled with a flat (e.g., "Bb")."""
    return bool(note) and len(note) == 2 and note[1] == "b"


def uses_flats(chords: Iterable[Chord]) -> bool:
    """Check whether any chord root is spelled with a flat."""
    return any(is_flat_spelling(chord.root) for chord in chords)


def detect_prefer_flats(song: Song) -> bool:
    """Detect a flat preference from the chords stored in a song's sections.

    Examples
    --------
    >>> from songsheet.models import Chord, Section, Song
    >>> song = Song(sections={"verse": Section(count=1, chords=(Chord("Bb"),))})
    >>> detect_prefer_flats(song)
    True
    """
    return any(uses_flats(section.chords) for section in song.sections.values())

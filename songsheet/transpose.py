"""Chromatic transposition of chords and songs."""

from __future__ import annotations

from dataclasses import replace

from songsheet.models import Chord, Song
from songsheet.pitch_class import detect_prefer_flats, note_to_semitone, semitone_to_note
from songsheet.rewrite import map_song


def transpose_note(note: str, semitones: int, prefer_flats: bool = False) -> str:
    """Shift a note name by a number of semitones.

    Examples
    --------
    >>> transpose_note("B", 1)
    'C'
    >>> transpose_note("C", 3, prefer_flats=True)
    'Eb'
    """
    return semitone_to_note(note_to_semitone(note) + semitones, prefer_flats)


def transpose_chord(chord: Chord, semitones: int, prefer_flats: bool = False) -> Chord:
    """Transpose a chord by a number of semitones.

    Nashville chords are key-relative and are returned unchanged. The bass
    note and split-measure chords are transposed the same way; decorators
    are kept.

    Parameters
    ----------
    chord : Chord
        The chord to transpose.
    semitones : int
        Number of semitones to transpose (positive = up).
    prefer_flats : bool
        Spell accidentals as flats instead of sharps.

    Returns
    -------
    Chord
        Transposed chord.

    Raises
    ------
    ValueError
        If the root or bass is not a known note name.

    Examples
    --------
    >>> transpose_chord(Chord(root="G", bass="B"), 2)
    Chord(root='A', quality='', bass='C#', diamond=False, push=False, stop=False, split_measure=None)
    >>> transpose_chord(Chord(root="C", quality="m"), 3, prefer_flats=True).name
    'Ebm'
    """
    if chord.nashville:
        return chord

    bass = chord.bass
    if bass:
        bass = transpose_note(bass, semitones, prefer_flats)

    split_measure = chord.split_measure
    if split_measure is not None:
        split_measure = tuple(transpose_chord(c, semitones, prefer_flats) for c in split_measure)

    return replace(
        chord,
        root=transpose_note(chord.root, semitones, prefer_flats),
        bass=bass,
        split_measure=split_measure,
    )


def transpose(song: Song, semitones: int, *, prefer_flats: bool | None = None) -> Song:
    """Transpose every chord in a song.

    Parameters
    ----------
    song : Song
        The song to transpose. It is not modified.
    semitones : int
        Number of semitones to transpose (positive = up).
    prefer_flats : bool | None
        Spell accidentals as flats. When None, flats are used if any chord
        stored in the song's sections has a flat root.

    Returns
    -------
    Song
        A new, independent song.
    """
    if prefer_flats is None:
        prefer_flats = detect_prefer_flats(song)

    return map_song(song, lambda chord: transpose_chord(chord, semitones, prefer_flats))

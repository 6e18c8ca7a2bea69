"""Conversion between letter-root chords and the Nashville Number System.

A Nashville chord names its root by major-scale degree relative to the key:
in G, ``G C D Em`` becomes ``1 4 5 6m``. Roots off the scale are written as
a flattened or sharpened degree, stored as a "b" or "#" prefix on the
quality (``Bb`` in G is degree 3 with quality "b").
"""

from __future__ import annotations

from dataclasses import replace

from songsheet.models import NNS_DIGITS, Chord, Song
from songsheet.pitch_class import detect_prefer_flats, is_flat_spelling, note_to_semitone, semitone_to_note
from songsheet.rewrite import map_song

# Semitone offsets of major-scale degrees 1-7
MAJOR_SCALE: tuple[int, ...] = (0, 2, 4, 5, 7, 9, 11)

DEGREE_ACCIDENTALS = ("b", "#")


def note_to_degree(note: str, key_semitone: int) -> tuple[str, str]:
    """Find the scale degree of a note.

    Parameters
    ----------
    note : str
        Letter note name.
    key_semitone : int
        Pitch class of the key's tonic.

    Returns
    -------
    tuple[str, str]
        The degree digit and its accidental prefix: "" on the scale, "b" for
        a flattened degree, "#" for a sharpened one.

    Examples
    --------
    >>> note_to_degree("D", note_to_semitone("G"))
    ('5', '')
    >>> note_to_degree("Bb", note_to_semitone("G"))
    ('3', 'b')
    """
    interval = (note_to_semitone(note) - key_semitone) % 12

    if interval in MAJOR_SCALE:
        return str(MAJOR_SCALE.index(interval) + 1), ""

    # Flat of the next scale degree
    if (interval + 1) % 12 in MAJOR_SCALE:
        return str(MAJOR_SCALE.index((interval + 1) % 12) + 1), "b"

    # Sharp of the previous scale degree
    return str(MAJOR_SCALE.index((interval + 11) % 12) + 1), "#"


def degree_to_note(degree: str, key_semitone: int, prefer_flats: bool = False) -> str:
    """Spell a scale degree, optionally prefixed with "b" or "#", as a note.

    Examples
    --------
    >>> degree_to_note("4", note_to_semitone("G"))
    'C'
    >>> degree_to_note("b3", note_to_semitone("G"), prefer_flats=True)
    'Bb'
    """
    accidental = ""
    if degree[:1] in DEGREE_ACCIDENTALS:
        accidental, degree = degree[0], degree[1:]
    if degree not in NNS_DIGITS:
        msg = f"Unknown scale degree: {accidental}{degree}"
        raise ValueError(msg)

    semitone = MAJOR_SCALE[int(degree) - 1] + key_semitone
    if accidental == "b":
        semitone -= 1
    elif accidental == "#":
        semitone += 1
    return semitone_to_note(semitone, prefer_flats)


def _is_degree(note: str) -> bool:
    return note in NNS_DIGITS or (note[:1] in DEGREE_ACCIDENTALS and note[1:] in NNS_DIGITS)


def convert_chord(chord: Chord, key_semitone: int, to_nashville: bool, prefer_flats: bool = False) -> Chord:
    """Convert one chord between letter and Nashville notation.

    Chords already in the target notation are returned unchanged, so the
    conversion is idempotent. Bass notes and split-measure chords convert
    the same way; decorators are kept.

    Parameters
    ----------
    chord : Chord
        The chord to convert.
    key_semitone : int
        Pitch class of the key's tonic.
    to_nashville : bool
        True for letter -> Nashville, False for Nashville -> letter.
    prefer_flats : bool
        Spell accidentals as flats when converting to letters.

    Returns
    -------
    Chord
        The converted chord.
    """
    split_measure = chord.split_measure
    if split_measure is not None:
        split_measure = tuple(convert_chord(c, key_semitone, to_nashville, prefer_flats) for c in split_measure)

    if to_nashville:
        if chord.nashville:
            return chord
        root, accidental = note_to_degree(chord.root, key_semitone)
        bass = chord.bass
        if bass:
            bass_degree, bass_accidental = note_to_degree(bass, key_semitone)
            bass = bass_accidental + bass_degree
        return replace(
            chord,
            root=root,
            quality=accidental + chord.quality,
            bass=bass,
            split_measure=split_measure,
        )

    if not chord.nashville:
        return chord

    # A leading accidental on the quality belongs to the degree
    quality = chord.quality
    accidental = ""
    if quality[:1] in DEGREE_ACCIDENTALS:
        accidental, quality = quality[0], quality[1:]

    bass = chord.bass
    if bass and _is_degree(bass):
        bass = degree_to_note(bass, key_semitone, prefer_flats)

    return replace(
        chord,
        root=degree_to_note(accidental + chord.root, key_semitone, prefer_flats),
        quality=quality,
        bass=bass,
        split_measure=split_measure,
    )


def _convert_song(song: Song, key: str, to_nashville: bool, prefer_flats: bool | None) -> Song:
    key_semitone = note_to_semitone(key)
    if prefer_flats is None:
        prefer_flats = detect_prefer_flats(song) or is_flat_spelling(key)

    return map_song(
        song,
        lambda chord: convert_chord(chord, key_semitone, to_nashville, prefer_flats),
    )


def to_nashville(song: Song, key: str, *, prefer_flats: bool | None = None) -> Song:
    """Convert letter-root chords to Nashville numbers relative to ``key``.

    Parameters
    ----------
    song : Song
        The song to convert. It is not modified.
    key : str
        The tonic as a letter note (e.g., "G", "Bb").
    prefer_flats : bool | None
        Accepted for symmetry with to_standard; letter spelling does not
        affect Nashville numbers.

    Returns
    -------
    Song
        A new song with every letter-root chord converted.

    Raises
    ------
    ValueError
        If the key or a chord root is not a known note name.
    """
    return _convert_song(song, key, to_nashville=True, prefer_flats=prefer_flats)


def to_standard(song: Song, key: str, *, prefer_flats: bool | None = None) -> Song:
    """Convert Nashville number chords to letter roots in ``key``.

    Parameters
    ----------
    song : Song
        The song to convert. It is not modified.
    key : str
        The tonic as a letter note (e.g., "G", "Bb").
    prefer_flats : bool | None
        Spell accidentals as flats. When None, flats are used if any
        section chord has a flat root or the key is spelled with a flat.

    Returns
    -------
    Song
        A new song with every Nashville chord converted.

    Raises
    ------
    ValueError
        If the key is not a known note name.

    Notes
    -----
    Nashville numbers do not record how a root was spelled, and a song that
    went through to_nashville has no letter roots left to detect flats from.
    A round trip through to_nashville and back therefore restores every
    pitch, but restores the spelling only for natural roots and for
    accidentals that match the flat preference in effect: with the default
    preference in a sharp key, ``Bb`` comes back as ``A#``. Pass
    ``prefer_flats`` to keep flat spellings.
    """
    return _convert_song(song, key, to_nashville=False, prefer_flats=prefer_flats)

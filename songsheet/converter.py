"""Chord symbol interop with pychord.

Parsed chord sheets keep qualities as written ("m7", "sus4"). This module
hands letter-root chords to pychord to validate the symbol and spell out its
notes, and reads pychord chords back into songsheet chords.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from songsheet.models import Chord

if TYPE_CHECKING:
    from pychord import Chord as PyChord


def to_pychord(chord: Chord) -> PyChord:
    """Build a pychord Chord from a letter-root chord.

    Parameters
    ----------
    chord : Chord
        The chord to convert. Decorators and split measures are ignored.

    Returns
    -------
    pychord.Chord
        The equivalent pychord chord.

    Raises
    ------
    ValueError
        If the chord is a Nashville chord or pychord does not know its
        quality.

    Examples
    --------
    >>> pc = to_pychord(Chord(root="G", quality="m7"))
    >>> pc.root, str(pc.quality)
    ('G', 'm7')
    """
    if chord.nashville:
        msg = f"Nashville chord has no pitch: {chord.name}"
        raise ValueError(msg)

    from pychord import Chord as PyChord

    return PyChord(chord.name)


def from_pychord(chord_str: str) -> Chord:
    """Parse a chord symbol with pychord into a songsheet Chord.

    Parameters
    ----------
    chord_str : str
        Chord in pychord notation (e.g., "Gm7", "C", "F#dim7/A").

    Returns
    -------
    Chord
        Chord with the symbol's root, quality and bass and no decorators.

    Raises
    ------
    ValueError
        If pychord cannot parse the symbol.

    Examples
    --------
    >>> chord = from_pychord("Bbm7/F")
    >>> chord.root, chord.quality, chord.bass
    ('Bb', 'm7', 'F')
    """
    from pychord import Chord as PyChord

    pc = PyChord(chord_str)
    return Chord(root=pc.root, quality=str(pc.quality), bass=pc.on or None)


def chord_components(chord: Chord) -> list[str]:
    """List the note names a letter-root chord sounds, root first.

    Examples
    --------
    >>> chord_components(Chord(root="A", quality="m"))
    ['A', 'C', 'E']
    """
    return list(to_pychord(chord).components())

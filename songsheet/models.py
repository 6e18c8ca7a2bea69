"""Document model for parsed chord sheets.

This module defines the immutable data structures produced by the sheet
parser: chords and their decorators, aligned lyric lines, sections, the
performance-order structure, and the directive expression tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

NNS_DIGITS = frozenset("1234567")


@dataclass(frozen=True)
class Chord:
    """A chord symbol with optional performance decorators.

    Parameters
    ----------
    root : str
        Letter root with optional accidental (e.g., "G", "Bb", "F#") or a
        Nashville scale degree "1" to "7".
    quality : str
        Free-form quality suffix (e.g., "", "m7", "sus4"). Nashville chords
        on a non-diatonic degree carry the accidental as a prefix ("b", "#").
    bass : str | None
        Slash-chord bass note, or None.
    diamond : bool
        Held chord, written ``<G>``.
    push : bool
        Anticipated chord, written ``^G``.
    stop : bool
        Cut-off chord, written ``G!``.
    split_measure : tuple[Chord, ...] | None
        Two or more chords sharing one measure, written ``[G C]``.

    Examples
    --------
    >>> Chord(root="G", quality="m7", bass="D").name
    'Gm7/D'
    >>> Chord(root="4", quality="m").nashville
    True
    """

    root: str
    quality: str = ""
    bass: str | None = None
    diamond: bool = False
    push: bool = False
    stop: bool = False
    split_measure: tuple[Chord, ...] | None = None

    @property
    def nashville(self) -> bool:
        """Whether the root is a Nashville scale degree."""
        return self.root in NNS_DIGITS

    @property
    def name(self) -> str:
        """The chord symbol without decorators (e.g., "Am7/G")."""
        result = f"{self.root}{self.quality}"
        if self.bass:
            result = f"{result}/{self.bass}"
        return result

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PositionedChord(Chord):
    """A chord anchored to a column of its source line.

    Parameters
    ----------
    column : int
        Zero-based character offset where the chord token began.
    """

    column: int = 0

    @property
    def chord(self) -> Chord:
        """The same chord without its column."""
        return Chord(
            root=self.root,
            quality=self.quality,
            bass=self.bass,
            diamond=self.diamond,
            push=self.push,
            stop=self.stop,
            split_measure=self.split_measure,
        )

    @classmethod
    def at(cls, chord: Chord, column: int) -> PositionedChord:
        """Anchor ``chord`` at ``column``."""
        return cls(
            root=chord.root,
            quality=chord.quality,
            bass=chord.bass,
            diamond=chord.diamond,
            push=chord.push,
            stop=chord.stop,
            split_measure=chord.split_measure,
            column=column,
        )


@dataclass(frozen=True)
class Character:
    """One lyric character with the chord or bar line written above it.

    Parameters
    ----------
    character : str
        The lyric character.
    chord : Chord | None
        The chord whose column matches this character, if any.
    bar_line : bool
        True if a bar line sits above this character.
    """

    character: str
    chord: Chord | None = None
    bar_line: bool = False


@dataclass(frozen=True)
class Line:
    """A chord line paired with its lyric line.

    Parameters
    ----------
    chords : tuple[PositionedChord, ...]
        Chords in column order.
    bar_lines : tuple[int, ...]
        Bar line columns in order.
    lyrics : str
        Raw lyric text, possibly empty.
    characters : tuple[Character, ...]
        One entry per lyric character.
    """

    chords: tuple[PositionedChord, ...] = ()
    bar_lines: tuple[int, ...] = ()
    lyrics: str = ""
    characters: tuple[Character, ...] = ()


# Expression tree for directives such as "(VERSE, CHORUS*2)"


@dataclass(frozen=True)
class SectionRef:
    """Reference to a previously defined section by lower-cased name."""

    name: str


@dataclass(frozen=True)
class ChordList:
    """Literal chords written inline in a directive."""

    chords: tuple[Chord, ...]


@dataclass(frozen=True)
class Sequence:
    """Expressions played one after another."""

    items: tuple[Expression, ...]


@dataclass(frozen=True)
class Repeat:
    """An expression played ``count`` times."""

    body: Expression
    count: int


Expression = SectionRef | ChordList | Sequence | Repeat


@dataclass(frozen=True)
class Section:
    """Canonical content of the first occurrence of a section type.

    Parameters
    ----------
    count : int
        Number of occurrences seen so far.
    chords : tuple[Chord, ...]
        Flat chord list.
    lyrics : tuple[str, ...]
        Lyric lines.
    lines : tuple[Line, ...]
        Aligned lines.
    """

    count: int
    chords: tuple[Chord, ...] = ()
    lyrics: tuple[str, ...] = ()
    lines: tuple[Line, ...] = ()

    def seen_again(self) -> Section:
        """Return this section with its occurrence count incremented."""
        return replace(self, count=self.count + 1)


@dataclass(frozen=True)
class StructureEntry:
    """One occurrence of a section in performance order.

    Parameters
    ----------
    section_type : str
        Lower-cased section name (e.g., "verse", "chorus").
    section_index : int
        Zero-based occurrence ordinal for this section type.
    chords : tuple[Chord, ...]
        This occurrence's chords.
    lyrics : tuple[str, ...]
        This occurrence's lyric lines.
    lines : tuple[Line, ...]
        This occurrence's aligned lines.
    expression : Expression | None
        The directive expression that produced this entry, if any.
    """

    section_type: str
    section_index: int
    chords: tuple[Chord, ...] = ()
    lyrics: tuple[str, ...] = ()
    lines: tuple[Line, ...] = ()
    expression: Expression | None = None


@dataclass(frozen=True)
class TimeSignature:
    """Time signature from the title metadata (e.g., 3/4)."""

    beats: int
    value: int


@dataclass(frozen=True)
class Song:
    """Complete parsed chord sheet.

    Parameters
    ----------
    title : str
        Song title.
    author : str
        Song author.
    bpm : int | None
        Tempo from the title metadata.
    time_signature : TimeSignature | None
        Time signature from the title metadata.
    key : str | None
        Letter-root key from the title metadata.
    sections : dict[str, Section]
        Canonical content per section type.
    structure : tuple[StructureEntry, ...]
        Section occurrences in performance order.
    """

    title: str = ""
    author: str = ""
    bpm: int | None = None
    time_signature: TimeSignature | None = None
    key: str | None = None
    sections: dict[str, Section] = field(default_factory=dict)
    structure: tuple[StructureEntry, ...] = ()

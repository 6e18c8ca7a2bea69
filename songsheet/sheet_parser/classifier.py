"""Block classification, title metadata and section-type inference.

This module decides what each blank-line separated block of a chord sheet
is (title, labelled section, directive, section reference, chord/lyric
content) and which section unlabelled content belongs to.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from songsheet.models import Song, TimeSignature
from songsheet.sheet_parser.models import Block
from songsheet.sheet_parser.tokenizer import is_chord_line

if TYPE_CHECKING:
    from songsheet.models import Section

# Section labels: capitalized words, digits and spaces (e.g., "CHORUS", "PRE CHORUS 2")
LABEL = r"[A-Z][A-Z0-9 ]*"

# "PRECHORUS:" followed by body lines
SECTION_LABEL_RE = re.compile(rf"({LABEL}):\s*\n(.+)", re.DOTALL)

# "INSTRUMENTAL: (VERSE, CHORUS*2)" on one line
DIRECTIVE_RE = re.compile(rf"({LABEL}):\s*(.+)")

# "CHORUS*2"
REPEAT_RE = re.compile(rf"({LABEL})\*(\d+)")

# "CHORUS", "BRIDGE"
SECTION_REF_RE = re.compile(LABEL)

# Title metadata, e.g. "(120 BPM, 3/4 time, G key)"
METADATA_GROUP_RE = re.compile(r"\(([^()]*)\)")
BPM_RE = re.compile(r"(\d+)\s*(?i:bpm)")
TIME_RE = re.compile(r"(\d+)\s*/\s*(\d+)\s+(?i:time)")
KEY_RE = re.compile(r"([A-G][#b]?)\s+(?i:key)")

TITLE_SEPARATOR = " - "


def _parse_metadata(group: str) -> dict[str, object] | None:
    """Parse the inside of a metadata parenthetical.

    Returns None unless every comma-separated clause is a BPM, time
    signature or key clause.
    """
    metadata: dict[str, object] = {}
    for clause in group.split(","):
        clause = clause.strip()
        bpm = BPM_RE.fullmatch(clause)
        time = TIME_RE.fullmatch(clause)
        key = KEY_RE.fullmatch(clause)
        if bpm:
            metadata["bpm"] = int(bpm.group(1))
        elif time:
            metadata["time_signature"] = TimeSignature(
                beats=int(time.group(1)),
                value=int(time.group(2)),
            )
        elif key:
            metadata["key"] = key.group(1)
        else:
            return None
    return metadata


def parse_title(text: str) -> Song:
    """Parse the title block into a song header.

    The first parenthetical made only of metadata clauses is removed from
    the text and fills ``bpm``, ``time_signature`` and ``key``; the rest is
    split on the first " - " into title and author.

    Parameters
    ----------
    text : str
        The title block.

    Returns
    -------
    Song
        A song with header fields set and no sections.

    Examples
    --------
    >>> song = parse_title("MY SONG - AUTHOR\\n(120 BPM, G key)")
    >>> song.title, song.author, song.bpm, song.key, song.time_signature
    ('MY SONG', 'AUTHOR', 120, 'G', None)
    >>> parse_title("SONG - AUTHOR (live)").bpm is None
    True
    """
    metadata: dict[str, object] = {}
    for match in METADATA_GROUP_RE.finditer(text):
        parsed = _parse_metadata(match.group(1))
        if parsed is not None:
            metadata = parsed
            text = text[: match.start()] + text[match.end() :]
            break

    title, _, author = text.strip().partition(TITLE_SEPARATOR)
    return Song(title=title.strip(), author=author.strip(), **metadata)


def classify_block(text: str, index: int) -> Block:
    """Classify a raw block of the sheet.

    Rules are tried in priority order: title (first block), labelled
    section, directive, repeated section reference, section reference,
    chord content, lyric content.

    Parameters
    ----------
    text : str
        The raw block, lines joined with newlines.
    index : int
        Position of the block in the sheet.

    Returns
    -------
    Block
        The classified block.

    Examples
    --------
    >>> classify_block("CHORUS*2", 3).kind
    'section_ref_repeat'
    >>> classify_block("INSTRUMENTAL: (VERSE, CHORUS*2)", 5).name
    'instrumental'
    >>> classify_block("G     C\\nHello world", 1).kind
    'chord_lyric'
    """
    trimmed = text.strip()

    if index == 0:
        return Block(kind="title", text=trimmed)

    match = SECTION_LABEL_RE.fullmatch(trimmed)
    if match:
        return Block(
            kind="section_label",
            text=text,
            name=match.group(1).lower(),
            body=match.group(2),
        )

    match = DIRECTIVE_RE.fullmatch(trimmed)
    if match:
        return Block(
            kind="directive",
            text=text,
            name=match.group(1).lower(),
            body=match.group(2),
        )

    match = REPEAT_RE.fullmatch(trimmed)
    if match:
        return Block(
            kind="section_ref_repeat",
            text=text,
            name=match.group(1).lower(),
            count=int(match.group(2)),
        )

    if SECTION_REF_RE.fullmatch(trimmed):
        return Block(kind="section_ref", text=text, name=trimmed.lower())

    # Use the raw lines so chord columns line up with lyric characters
    lines = text.split("\n")
    chord_lines = [is_chord_line(line) for line in lines]
    has_chords = any(chord_lines)
    has_lyrics = any(not chord and line.strip() for line, chord in zip(lines, chord_lines))

    if has_chords and has_lyrics:
        return Block(kind="chord_lyric", text=text)
    if has_chords:
        return Block(kind="chord_only", text=text)
    if has_lyrics:
        return Block(kind="lyric_only", text=text)
    return Block(kind="unknown", text=text)


def infer_section_type(
    sections: Mapping[str, Section],
    has_lyrics: bool,
    has_chords: bool,
) -> str:
    """Infer the section an unlabelled block belongs to.

    A fixed decision table, evaluated top to bottom:

    1. no verse yet, lyrics and chords -> verse
    2. one verse, lyrics and chords, no chorus yet -> chorus
    3. a verse and a chorus, lyrics and chords, no bridge yet -> bridge
    4. a verse and a chorus, lyrics without chords -> verse
    5. anything else -> verse

    Parameters
    ----------
    sections : Mapping[str, Section]
        Sections defined so far.
    has_lyrics : bool
        Whether the block has lyric lines.
    has_chords : bool
        Whether the block has chords.

    Returns
    -------
    str
        The inferred section type.

    Examples
    --------
    >>> infer_section_type({}, has_lyrics=True, has_chords=True)
    'verse'
    """
    verse = sections.get("verse")
    has_chorus = "chorus" in sections
    has_bridge = "bridge" in sections

    if verse is None and has_lyrics and has_chords:
        return "verse"
    if verse is not None and verse.count == 1 and has_lyrics and has_chords and not has_chorus:
        return "chorus"
    if verse is not None and verse.count >= 1 and has_lyrics and has_chords and has_chorus and not has_bridge:
        return "bridge"
    if verse is not None and verse.count >= 1 and has_lyrics and not has_chords and has_chorus:
        return "verse"
    return "verse"

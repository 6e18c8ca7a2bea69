"""Main chord sheet parser orchestration.

This module provides the parse() function that turns raw chord sheet text
into a Song: the text is split into blank-line separated blocks, each block
is classified, and the blocks are folded in source order into the sections
table and the performance-order structure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from songsheet.models import (
    Character,
    Chord,
    Expression,
    Line,
    PositionedChord,
    Section,
    Song,
    StructureEntry,
)
from songsheet.sheet_parser.alignment import align, line_tokens
from songsheet.sheet_parser.classifier import classify_block, infer_section_type, parse_title
from songsheet.sheet_parser.expression import parse_expression, resolve_expression, resolve_lines
from songsheet.sheet_parser.models import Block
from songsheet.sheet_parser.tokenizer import is_chord_line, scan_line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Occurrence:
    """Content of one section occurrence before it is added to the song."""

    chords: tuple[Chord, ...] = ()
    lyrics: tuple[str, ...] = ()
    lines: tuple[Line, ...] = ()


@dataclass(frozen=True)
class SheetState:
    """Sections and structure accumulated over the blocks processed so far."""

    sections: dict[str, Section] = field(default_factory=dict)
    structure: tuple[StructureEntry, ...] = ()


def preprocess(text: str) -> list[str]:
    """Split raw text into blocks separated by one or more blank lines.

    Normalizes line endings and treats whitespace-only lines as blank.
    Lines inside a block keep their leading whitespace.

    Examples
    --------
    >>> preprocess("TITLE - AUTHOR\\r\\n\\r\\nG\\nLyrics\\n   \\n\\nCHORUS")
    ['TITLE - AUTHOR', 'G\\nLyrics', 'CHORUS']
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    blocks: list[str] = []
    current: list[str] = []
    for line in text.split("\n"):
        if line.strip():
            current.append(line)
        elif current:
            blocks.append("\n".join(current))
            current = []
    if current:
        blocks.append("\n".join(current))

    return blocks


def _lyric_only_line(lyrics: str) -> Line:
    return Line(lyrics=lyrics, characters=tuple(Character(character=char) for char in lyrics))


def parse_chord_lyric_block(text: str) -> Occurrence:
    """Parse interleaved chord and lyric lines.

    Each chord line is paired with the line below it unless that line is
    itself a chord line, in which case the chord line gets an empty lyric.
    Non-blank lines without a chord line above them become lyric-only lines.

    Parameters
    ----------
    text : str
        The block body, raw lines joined with newlines.

    Returns
    -------
    Occurrence
        The block's lines, flat chord list and lyric lines.
    """
    raw_lines = text.split("\n")
    lines: list[Line] = []
    chords: list[Chord] = []
    lyrics: list[str] = []
    i = 0
    n = len(raw_lines)

    while i < n:
        line = raw_lines[i]
        tokens = scan_line(line)

        if tokens is None:
            if line.strip():
                lyrics.append(line)
                lines.append(_lyric_only_line(line))
            i += 1
            continue

        i += 1
        lyric = ""
        if i < n and not is_chord_line(raw_lines[i]):
            lyric = raw_lines[i]
            i += 1

        positioned = tuple(
            PositionedChord.at(token.chord, token.column)
            for token in tokens
            if token.kind == "chord" and token.chord is not None
        )
        bar_lines = tuple(token.column for token in tokens if token.kind == "bar_line")

        chords.extend(chord.chord for chord in positioned)
        if lyric:
            lyrics.append(lyric)
        lines.append(
            Line(
                chords=positioned,
                bar_lines=bar_lines,
                lyrics=lyric,
                characters=tuple(align(tokens, lyric)),
            )
        )

    return Occurrence(chords=tuple(chords), lyrics=tuple(lyrics), lines=tuple(lines))


def parse_lyric_block(text: str, verse: Section | None) -> Occurrence:
    """Parse a lyric-only block, borrowing chords from the first verse.

    Each lyric line takes the chords and bar lines of the verse line with
    the same index; lines past the end of the verse get none.

    Parameters
    ----------
    text : str
        The block text.
    verse : Section | None
        The stored verse section, or None if no verse exists yet.

    Returns
    -------
    Occurrence
        The block's lines and lyrics, with the verse's chords if any.
    """
    raw_lines = [line for line in text.split("\n") if line.strip()]
    if verse is None:
        return Occurrence(
            lyrics=tuple(raw_lines),
            lines=tuple(_lyric_only_line(line) for line in raw_lines),
        )

    lines: list[Line] = []
    for index, lyric in enumerate(raw_lines):
        if index >= len(verse.lines):
            lines.append(_lyric_only_line(lyric))
            continue
        verse_line = verse.lines[index]
        tokens = line_tokens(verse_line.chords, verse_line.bar_lines)
        lines.append(
            Line(
                chords=verse_line.chords,
                bar_lines=verse_line.bar_lines,
                lyrics=lyric,
                characters=tuple(align(tokens, lyric)),
            )
        )

    return Occurrence(chords=verse.chords, lyrics=tuple(raw_lines), lines=tuple(lines))


def add_occurrence(
    state: SheetState,
    section_type: str,
    occurrence: Occurrence,
    expression: Expression | None = None,
) -> SheetState:
    """Record one occurrence of a section and return the new state.

    The first occurrence of a section type defines its stored content;
    later occurrences only bump its count. The structure entry always
    carries this occurrence's own content.
    """
    section = state.sections.get(section_type)
    if section is None:
        section = Section(
            count=1,
            chords=occurrence.chords,
            lyrics=occurrence.lyrics,
            lines=occurrence.lines,
        )
    else:
        section = section.seen_again()

    entry = StructureEntry(
        section_type=section_type,
        section_index=section.count - 1,
        chords=occurrence.chords,
        lyrics=occurrence.lyrics,
        lines=occurrence.lines,
        expression=expression,
    )
    return SheetState(
        sections={**state.sections, section_type: section},
        structure=(*state.structure, entry),
    )


def _replay(state: SheetState, name: str) -> SheetState:
    """Append an occurrence that copies a section's current content."""
    section = state.sections.get(name)
    if section is None:
        logger.debug("Reference to undefined section %r creates an empty section", name)
        return add_occurrence(state, name, Occurrence())
    return add_occurrence(
        state,
        name,
        Occurrence(chords=section.chords, lyrics=section.lyrics, lines=section.lines),
    )


def apply_block(state: SheetState, block: Block) -> SheetState:
    """Fold one classified block into the accumulated state.

    Raises
    ------
    ExpressionSyntaxError
        If a directive's expression is malformed.
    """
    if block.kind in ("chord_lyric", "chord_only"):
        occurrence = parse_chord_lyric_block(block.text)
        section_type = infer_section_type(
            state.sections,
            has_lyrics=bool(occurrence.lyrics),
            has_chords=bool(occurrence.chords),
        )
        logger.debug("Inferred %s for %s block", section_type, block.kind)
        return add_occurrence(state, section_type, occurrence)

    if block.kind == "lyric_only":
        occurrence = parse_lyric_block(block.text, state.sections.get("verse"))
        section_type = infer_section_type(
            state.sections,
            has_lyrics=bool(occurrence.lyrics),
            has_chords=False,
        )
        logger.debug("Inferred %s for lyric block", section_type)
        return add_occurrence(state, section_type, occurrence)

    if block.kind == "section_label" and block.name is not None:
        return add_occurrence(state, block.name, parse_chord_lyric_block(block.body or ""))

    if block.kind == "directive" and block.name is not None:
        expression = parse_expression(block.body or "")
        occurrence = Occurrence(
            chords=tuple(resolve_expression(expression, state.sections)),
            lines=tuple(resolve_lines(expression, state.sections)),
        )
        return add_occurrence(state, block.name, occurrence, expression=expression)

    if block.kind == "section_ref" and block.name is not None:
        return _replay(state, block.name)

    if block.kind == "section_ref_repeat" and block.name is not None:
        for _ in range(block.count):
            state = _replay(state, block.name)
        return state

    logger.debug("Skipping %s block: %r", block.kind, block.text)
    return state


def parse(text: str) -> Song:
    """Parse a chord sheet into a Song.

    This is the main entry point for chord sheet parsing. The first block is
    the title block; every later block is classified and folded, in source
    order, into the song's sections and structure.

    Parameters
    ----------
    text : str
        The raw chord sheet text.

    Returns
    -------
    Song
        Structured representation of the chord sheet.

    Raises
    ------
    ExpressionSyntaxError
        If a directive's expression is malformed.

    Examples
    --------
    >>> text = '''MY SONG - AUTHOR
    ... (120 BPM, G key)
    ...
    ... G          C
    ... Hello there world
    ...
    ... CHORUS*2
    ... '''
    >>> song = parse(text)
    >>> song.title, song.bpm, song.key
    ('MY SONG', 120, 'G')
    >>> [(e.section_type, e.section_index) for e in song.structure]
    [('verse', 0), ('chorus', 0), ('chorus', 1)]
    """
    blocks = preprocess(text)
    if not blocks:
        return Song()

    header = parse_title(classify_block(blocks[0], 0).text)

    state = SheetState()
    for index, raw in enumerate(blocks[1:], start=1):
        block = classify_block(raw, index)
        logger.debug("Block %d classified as %s", index, block.kind)
        state = apply_block(state, block)

    return replace(header, sections=dict(state.sections), structure=state.structure)

"""Tests for the chord sheet document builder."""

from collections import Counter
from pathlib import Path

import pytest

from songsheet import parse
from songsheet.models import ChordList, Repeat, Sequence, Song, TimeSignature
from songsheet.sheet_parser.expression import ExpressionSyntaxError
from songsheet.sheet_parser.parser import parse_chord_lyric_block, preprocess

TESTDATA_DIR = Path(__file__).parent / "testdata"


@pytest.fixture
def song() -> Song:
    """Parse the Blue Mountain Road fixture sheet."""
    return parse((TESTDATA_DIR / "blue_mountain.txt").read_text())


def assert_section_indices(song: Song) -> None:
    seen: Counter[str] = Counter()
    for entry in song.structure:
        assert entry.section_index == seen[entry.section_type]
        seen[entry.section_type] += 1


class TestPreprocess:
    """Splitting text into blocks."""

    def test_blank_line_separation(self) -> None:
        """Test that one or more blank lines separate blocks."""
        assert preprocess("A\nB\n\n\n\nC") == ["A\nB", "C"]

    def test_whitespace_only_lines_are_blank(self) -> None:
        """Test that whitespace-only lines separate blocks."""
        assert preprocess("A\n   \t\nB") == ["A", "B"]

    def test_line_endings(self) -> None:
        """Test that CRLF and CR are normalized."""
        assert preprocess("A\r\nB\r\rC") == ["A\nB", "C"]

    def test_indentation_kept(self) -> None:
        """Test that leading whitespace inside a block is preserved."""
        assert preprocess("\n\n   G\n   la\n") == ["   G\n   la"]

    def test_empty(self) -> None:
        """Test that empty text has no blocks."""
        assert preprocess("") == []


class TestParseChordLyricBlock:
    """Pairing chord lines with lyric lines."""

    def test_pairs(self) -> None:
        """Test chord lines paired with the lyric line below."""
        occurrence = parse_chord_lyric_block("G     C\nHello world\nD\nso long")
        assert [c.name for c in occurrence.chords] == ["G", "C", "D"]
        assert occurrence.lyrics == ("Hello world", "so long")
        assert len(occurrence.lines) == 2
        first = occurrence.lines[0]
        assert [c.column for c in first.chords] == [0, 6]
        assert len(first.characters) == len("Hello world")
        assert first.characters[6].chord is not None
        assert first.characters[6].chord.root == "C"

    def test_chord_line_followed_by_chord_line(self) -> None:
        """Test that a chord line with no lyric below gets an empty lyric."""
        occurrence = parse_chord_lyric_block("G    C\nD    G\nHello there")
        assert len(occurrence.lines) == 2
        assert occurrence.lines[0].lyrics == ""
        assert occurrence.lines[0].characters == ()
        assert occurrence.lines[1].lyrics == "Hello there"
        assert occurrence.lyrics == ("Hello there",)
        assert [c.name for c in occurrence.chords] == ["G", "C", "D", "G"]

    def test_lyric_without_chord_line(self) -> None:
        """Test that a stray lyric line becomes a lyric-only line."""
        occurrence = parse_chord_lyric_block("Intro words\nG\nla la")
        assert occurrence.lyrics == ("Intro words", "la la")
        assert occurrence.lines[0].chords == ()
        assert occurrence.lines[0].lyrics == "Intro words"
        assert "".join(c.character for c in occurrence.lines[0].characters) == "Intro words"

    def test_bar_lines_recorded(self) -> None:
        """Test that bar line columns are kept on the line."""
        occurrence = parse_chord_lyric_block("| G | C |")
        assert occurrence.lines[0].bar_lines == (0, 4, 8)
        assert occurrence.lyrics == ()


class TestParseFixture:
    """Parsing a complete sheet."""

    def test_header(self, song: Song) -> None:
        """Test title block metadata."""
        assert song.title == "BLUE MOUNTAIN ROAD"
        assert song.author == "JANE PICKER"
        assert song.bpm == 120
        assert song.time_signature == TimeSignature(beats=3, value=4)
        assert song.key == "G"

    def test_structure_order(self, song: Song) -> None:
        """Test performance order and occurrence indices."""
        assert [(e.section_type, e.section_index) for e in song.structure] == [
            ("verse", 0),
            ("chorus", 0),
            ("verse", 1),
            ("chorus", 1),
            ("prechorus", 0),
            ("instrumental", 0),
            ("solo", 0),
            ("chorus", 2),
            ("chorus", 3),
        ]

    def test_section_indices(self, song: Song) -> None:
        """Test that each index counts earlier entries of the same type."""
        assert_section_indices(song)

    def test_section_counts(self, song: Song) -> None:
        """Test occurrence counts per section."""
        counts = {name: section.count for name, section in song.sections.items()}
        assert counts == {"verse": 2, "chorus": 4, "prechorus": 1, "instrumental": 1, "solo": 1}

    def test_verse_content(self, song: Song) -> None:
        """Test the first verse's chords, lyrics and alignment."""
        verse = song.sections["verse"]
        assert [c.name for c in verse.chords] == ["G", "C", "D", "G"]
        assert verse.lyrics == ("Walking down the blue mountain road", "Singing songs I used to know")
        line = verse.lines[0]
        assert [(c.root, c.column) for c in line.chords] == [("G", 0), ("C", 17)]
        assert line.characters[17].character == "b"
        assert line.characters[17].chord is not None
        assert line.characters[17].chord.root == "C"

    def test_alignment_exactness(self, song: Song) -> None:
        """Test that every line has one character per lyric character."""
        for section in song.sections.values():
            for line in section.lines:
                assert len(line.characters) == len(line.lyrics)
                for chord in line.chords:
                    if chord.column < len(line.lyrics):
                        assert line.characters[chord.column].chord == chord.chord

    def test_lyric_block_borrows_verse_chords(self, song: Song) -> None:
        """Test that a lyric-only verse inherits the first verse's chords."""
        entry = song.structure[2]
        assert entry.lyrics == ("Lyrics of the second verse here", "Another line for verse two")
        assert [c.name for c in entry.chords] == ["G", "C", "D", "G"]
        line = entry.lines[0]
        assert line.lyrics == "Lyrics of the second verse here"
        assert line.characters[17].character == "o"
        assert line.characters[17].chord is not None
        assert line.characters[17].chord.root == "C"

    def test_first_occurrence_wins(self, song: Song) -> None:
        """Test that later verses do not overwrite the stored verse."""
        assert song.sections["verse"].lyrics[0] == "Walking down the blue mountain road"

    def test_reference_replays_section(self, song: Song) -> None:
        """Test that a bare reference copies the chorus content."""
        chorus = song.sections["chorus"]
        for entry in song.structure:
            if entry.section_type == "chorus":
                assert entry.chords == chorus.chords
                assert entry.lyrics == chorus.lyrics
                assert entry.lines == chorus.lines

    def test_labelled_section(self, song: Song) -> None:
        """Test a section with an explicit label."""
        prechorus = song.sections["prechorus"]
        assert [c.name for c in prechorus.chords] == ["Em", "C"]
        assert prechorus.lyrics == ("Almost there",)

    def test_directive_with_references(self, song: Song) -> None:
        """Test a directive over previously defined sections."""
        entry = song.structure[5]
        assert isinstance(entry.expression, Sequence)
        assert [c.name for c in entry.chords] == ["G", "C", "D", "G"] + ["C", "G", "D", "G"] * 2
        (line,) = entry.lines
        assert [c.root for c in line.chords] == [c.root for c in entry.chords]
        assert line.lyrics == ""
        assert song.sections["instrumental"].chords == entry.chords

    def test_directive_with_inline_chords(self, song: Song) -> None:
        """Test a directive of repeated inline chords."""
        entry = song.structure[6]
        assert isinstance(entry.expression, Repeat)
        assert isinstance(entry.expression.body, ChordList)
        assert [c.root for c in entry.chords] == ["D", "G", "D", "A"] * 4
        assert entry.lines == ()

    def test_expression_only_on_directives(self, song: Song) -> None:
        """Test that non-directive entries carry no expression."""
        for entry in song.structure:
            if entry.section_type not in ("instrumental", "solo"):
                assert entry.expression is None


class TestParseInference:
    """Section inference across a whole sheet."""

    def test_references_in_sequence(self) -> None:
        """Test verse, chorus, a bridge reference, then verse and chorus references."""
        text = "SONG - AUTHOR\n\nG      C\nVerse line one\n\nD      G\nChorus line one\n\nBRIDGE\n\nVERSE\n\nCHORUS"
        song = parse(text)
        assert [(e.section_type, e.section_index) for e in song.structure] == [
            ("verse", 0),
            ("chorus", 0),
            ("bridge", 0),
            ("verse", 1),
            ("chorus", 1),
        ]
        assert song.sections["bridge"].chords == ()
        assert_section_indices(song)

    def test_third_and_fourth_blocks(self) -> None:
        """Test that the third chorded block is a bridge and the fourth falls back to verse."""
        blocks = ["G\nla one", "C\nla two", "D\nla three", "Em\nla four"]
        song = parse("\n\n".join(["TITLE", *blocks]))
        assert [e.section_type for e in song.structure] == ["verse", "chorus", "bridge", "verse"]
        assert song.sections["verse"].count == 2
        assert_section_indices(song)

    def test_repeat_of_undefined_section(self) -> None:
        """Test that repeating an undefined section creates it empty."""
        song = parse("TITLE\n\nOUTRO*2")
        assert [(e.section_type, e.section_index) for e in song.structure] == [("outro", 0), ("outro", 1)]
        assert song.sections["outro"].count == 2
        assert song.sections["outro"].chords == ()


class TestParseEdgeCases:
    """Degenerate inputs and errors."""

    def test_empty_text(self) -> None:
        """Test that empty text parses to an empty song."""
        assert parse("") == Song()

    def test_title_only(self) -> None:
        """Test a sheet with only a title."""
        song = parse("ONLY A TITLE - ME")
        assert song.title == "ONLY A TITLE"
        assert song.sections == {}
        assert song.structure == ()

    def test_syntax_error_propagates(self) -> None:
        """Test that a malformed directive aborts parsing."""
        with pytest.raises(ExpressionSyntaxError):
            parse("TITLE\n\nG\nla la\n\nSOLO: (D G")

    def test_directive_with_uppercase_qualities(self) -> None:
        """Test that major-seventh chords written in capitals parse as chords."""
        song = parse("TITLE\n\nG\nla la\n\nSOLO: (CM7 FM7)*2")
        assert [c.name for c in song.sections["solo"].chords] == ["CM7", "FM7", "CM7", "FM7"]

    def test_parse_is_repeatable(self) -> None:
        """Test that parsing the same text twice gives equal songs."""
        text = (TESTDATA_DIR / "blue_mountain.txt").read_text()
        assert parse(text) == parse(text)

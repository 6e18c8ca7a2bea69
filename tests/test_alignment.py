"""Tests for chord-to-character alignment."""

from songsheet.models import PositionedChord
from songsheet.sheet_parser.alignment import align, line_tokens
from songsheet.sheet_parser.tokenizer import scan_line


class TestAlign:
    """Column matching between chord lines and lyric lines."""

    def test_chords_land_on_characters(self) -> None:
        """Test that each chord attaches to the character below it."""
        chars = align(scan_line("G     C"), "Hello world")
        assert len(chars) == len("Hello world")
        assert chars[0].chord is not None
        assert chars[0].chord.root == "G"
        assert chars[6].character == "w"
        assert chars[6].chord is not None
        assert chars[6].chord.root == "C"
        assert [i for i, c in enumerate(chars) if c.chord is not None] == [0, 6]

    def test_characters_preserve_lyrics(self) -> None:
        """Test that characters spell out the lyric line."""
        lyrics = "  indented lyric"
        chars = align(scan_line("  D"), lyrics)
        assert "".join(c.character for c in chars) == lyrics
        assert chars[2].chord is not None

    def test_bar_lines(self) -> None:
        """Test that bar line columns are flagged."""
        chars = align(scan_line("| G | C |"), "ab cd ef")
        assert [i for i, c in enumerate(chars) if c.bar_line] == [0, 4]
        assert chars[2].chord is not None
        assert chars[2].chord.root == "G"

    def test_chords_past_lyric_end(self) -> None:
        """Test that chords beyond the lyric line are not represented."""
        chars = align(scan_line("G          C"), "Hi")
        assert len(chars) == 2
        assert chars[0].chord is not None
        assert chars[1].chord is None

    def test_empty_lyrics(self) -> None:
        """Test that an empty lyric line has no characters."""
        assert align(scan_line("G  C"), "") == []


class TestLineTokens:
    """Rebuilding tokens from a parsed line."""

    def test_sorted_by_column(self) -> None:
        """Test that chords and bar lines interleave in column order."""
        chords = (PositionedChord(root="G", column=2), PositionedChord(root="C", column=6))
        tokens = line_tokens(chords, (0, 4, 8))
        assert [(t.kind, t.column) for t in tokens] == [
            ("bar_line", 0),
            ("chord", 2),
            ("bar_line", 4),
            ("chord", 6),
            ("bar_line", 8),
        ]

    def test_tokens_carry_plain_chords(self) -> None:
        """Test that rebuilt tokens hold chords without columns."""
        (token,) = line_tokens((PositionedChord(root="G", column=3),), ())
        assert token.chord is not None
        assert not isinstance(token.chord, PositionedChord)
        assert token.chord.root == "G"

    def test_round_trip_alignment(self) -> None:
        """Test that rebuilt tokens align the same as the scanned ones."""
        scanned = scan_line("| G   | C |")
        assert scanned is not None
        chords = tuple(PositionedChord.at(t.chord, t.column) for t in scanned if t.chord is not None)
        bars = tuple(t.column for t in scanned if t.kind == "bar_line")
        lyrics = "one two three"
        assert align(line_tokens(chords, bars), lyrics) == align(scanned, lyrics)

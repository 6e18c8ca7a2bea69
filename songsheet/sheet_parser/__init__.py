"""Chord sheet parser for plain-text song sheets.

This module turns monospace chord sheets (chord lines over lyric lines,
section labels, repeat markers and directive expressions) into a structured
Song with per-character chord alignment.
"""

from songsheet.sheet_parser.alignment import align
from songsheet.sheet_parser.classifier import classify_block, infer_section_type, parse_title
from songsheet.sheet_parser.expression import (
    ExpressionSyntaxError,
    lex_expression,
    parse_expression,
    resolve_expression,
    resolve_lines,
)
from songsheet.sheet_parser.models import Block, ExprToken, Token
from songsheet.sheet_parser.parser import parse, preprocess
from songsheet.sheet_parser.tokenizer import is_chord_line, scan_line

__all__ = [
    "Block",
    "ExprToken",
    "ExpressionSyntaxError",
    "Token",
    "align",
    "classify_block",
    "infer_section_type",
    "is_chord_line",
    "lex_expression",
    "parse",
    "parse_expression",
    "parse_title",
    "preprocess",
    "resolve_expression",
    "resolve_lines",
    "scan_line",
]

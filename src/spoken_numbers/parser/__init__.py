"""Tokenizer, token cursor and the number and duration extractors."""

from .duration_extractor import DurationExtractor, extract_duration
from .number_extractor import ExtractedNumber, NumberExtractor, extract_number
from .number_parser import NumberParser
from .token_stream import TokenStream
from .tokenizer import Token, TokenKind, Tokenizer, tokenize

__all__ = [
    "DurationExtractor",
    "ExtractedNumber",
    "NumberExtractor",
    "NumberParser",
    "Token",
    "TokenKind",
    "TokenStream",
    "Tokenizer",
    "extract_duration",
    "extract_number",
    "tokenize",
]

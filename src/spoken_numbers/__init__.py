"""spoken-numbers: extract numbers, ordinals, fractions and durations from English text."""

__version__ = "1.0.0"

from .formatter import EnglishFormatter
from .parser import (
    DurationExtractor,
    ExtractedNumber,
    NumberExtractor,
    NumberParser,
    TokenStream,
    extract_duration,
    extract_number,
    tokenize,
)
from .parser_formatter import ParserFormatter
from .util import Duration, DurationUnit
from .vocabulary import get_vocabulary

__all__ = [
    "Duration",
    "DurationExtractor",
    "DurationUnit",
    "EnglishFormatter",
    "ExtractedNumber",
    "NumberExtractor",
    "NumberParser",
    "ParserFormatter",
    "TokenStream",
    "extract_duration",
    "extract_number",
    "get_vocabulary",
    "tokenize",
]

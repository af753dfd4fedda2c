#!/usr/bin/env python3
"""A parser and a formatter for one language, configured together."""
from __future__ import annotations

from typing import Optional

from spoken_numbers.core.config import ConfigLoader, get_config
from spoken_numbers.formatter.english_formatter import EnglishFormatter, Number
from spoken_numbers.parser.number_parser import NumberParser, Piece
from spoken_numbers.util.duration import Duration
from spoken_numbers.vocabulary import get_vocabulary


class ParserFormatter:
    """Bundles a :class:`NumberParser` and an :class:`EnglishFormatter`.

    Example:
        >>> pf = ParserFormatter("en")
        >>> pf.pronounce_number(21, ordinal=True)
        'twenty first'
        >>> pf.extract_duration("set a timer for three minutes")
        Duration(seconds=180, nanos=0)
    """

    def __init__(self, language: Optional[str] = None, config: Optional[ConfigLoader] = None):
        self.config = config or get_config()
        self.language = language or self.config.language
        self.parser = NumberParser(self.language, self.config)
        self.formatter = EnglishFormatter(get_vocabulary(self.language))

    def extract_numbers(
        self,
        utterance: str,
        short_scale: Optional[bool] = None,
        prefer_ordinal: Optional[bool] = None,
    ) -> list[Piece]:
        return self.parser.extract_numbers(utterance, short_scale, prefer_ordinal)

    def extract_duration(self, utterance: str, short_scale: Optional[bool] = None) -> Optional[Duration]:
        return self.parser.extract_duration(utterance, short_scale)

    def pronounce_number(
        self,
        number: Number,
        places: Optional[int] = None,
        short_scale: Optional[bool] = None,
        ordinal: bool = False,
    ) -> str:
        return self.formatter.pronounce_number(
            number,
            places=self.config.decimal_places if places is None else places,
            short_scale=self.config.short_scale if short_scale is None else short_scale,
            ordinal=ordinal,
        )

    def nice_number(self, number: Number, speech: bool = True) -> str:
        return self.formatter.nice_number(number, speech=speech)

    def nice_duration(self, duration, speech: bool = True) -> str:
        return self.formatter.nice_duration(duration, speech=speech)

#!/usr/bin/env python3
"""String-level entry point over the token-stream extractors."""
from __future__ import annotations

from typing import Optional, Union

from spoken_numbers.core.config import ConfigLoader, get_config, setup_logging
from spoken_numbers.core.logging import LogContext
from spoken_numbers.parser.duration_extractor import DurationExtractor
from spoken_numbers.parser.number_extractor import ExtractedNumber, NumberExtractor
from spoken_numbers.parser.token_stream import TokenStream
from spoken_numbers.parser.tokenizer import Token
from spoken_numbers.util.duration import Duration
from spoken_numbers.vocabulary import get_vocabulary

logger = setup_logging(__name__)

__all__ = ["NumberParser", "Piece"]

# Plain text between numbers, or a number as int/float
Piece = Union[str, int, float]


class NumberParser:
    """Extracts numbers and durations from utterances in one language.

    ``short_scale`` and ``prefer_ordinal`` arguments left as None are taken
    from the configuration.
    """

    def __init__(self, language: Optional[str] = None, config: Optional[ConfigLoader] = None):
        self.config = config or get_config()
        self.language = language or self.config.language
        self.vocabulary = get_vocabulary(self.language)

    def _short_scale(self, short_scale: Optional[bool]) -> bool:
        return self.config.short_scale if short_scale is None else short_scale

    def extract_numbers(
        self,
        utterance: str,
        short_scale: Optional[bool] = None,
        prefer_ordinal: Optional[bool] = None,
    ) -> list[Piece]:
        """Split ``utterance`` into text pieces and the numbers found between them.

        >>> NumberParser("en").extract_numbers("I am twenty three years old")
        ['I am ', 23, ' years old']
        """
        tokens, numbers = self._scan(utterance, short_scale, prefer_ordinal)

        pieces: list[Piece] = []
        text_start = 0
        for number in numbers:
            first_char = tokens[number.start].start
            if first_char > text_start:
                pieces.append(utterance[text_start:first_char])
            pieces.append(number.number)
            text_start = tokens[number.end - 1].end

        if text_start < len(utterance):
            pieces.append(utterance[text_start:])
        return pieces

    def extract_all_numbers(
        self,
        utterance: str,
        short_scale: Optional[bool] = None,
        prefer_ordinal: Optional[bool] = None,
    ) -> list[ExtractedNumber]:
        """All numbers in ``utterance`` with their token spans and flags."""
        return self._scan(utterance, short_scale, prefer_ordinal)[1]

    def _scan(
        self,
        utterance: str,
        short_scale: Optional[bool],
        prefer_ordinal: Optional[bool],
    ) -> tuple[tuple[Token, ...], list[ExtractedNumber]]:
        if prefer_ordinal is None:
            prefer_ordinal = self.config.prefer_ordinal

        stream = TokenStream(utterance)
        extractor = NumberExtractor(
            stream,
            short_scale=self._short_scale(short_scale),
            vocabulary=self.vocabulary,
            prefer_ordinal=prefer_ordinal,
        )
        numbers = []
        while not stream.finished:
            number = extractor.extract_one_number()
            if number is None:
                stream.advance()
            else:
                numbers.append(number)
        return stream.tokens, numbers

    def extract_duration(self, utterance: str, short_scale: Optional[bool] = None) -> Optional[Duration]:
        """First duration phrase in ``utterance``, or None if there is none.

        A spoken zero ("zero seconds") is found as ``Duration.ZERO``, so test
        the result with ``is None``.
        """
        stream = TokenStream(utterance)
        numbers = NumberExtractor(stream, short_scale=self._short_scale(short_scale), vocabulary=self.vocabulary)
        with LogContext(operation="extract_duration", language=self.language):
            duration = DurationExtractor(
                stream,
                numbers.extract_one_number_no_ordinal,
                vocabulary=self.vocabulary,
                max_noise_tokens=self.config.max_noise_tokens,
                days_per_year=self.config.days_per_year,
            ).extract()
            logger.debug(f"extract_duration({utterance!r}) -> {duration}")
        return duration

#!/usr/bin/env python3
"""Groups ``number + unit`` pairs into a single duration.

The extractor scans the stream in two states. While SEEKING it moves token
by token until a duration group starts; once in a GROUP RUN it keeps adding
groups separated only by noise words ("and", ",", "a", ...). The first run
is the result; the cursor is left right after its last group.
"""
from __future__ import annotations

from enum import Enum, auto
from typing import Callable, Optional

from spoken_numbers.core.config import setup_logging
from spoken_numbers.parser.number_extractor import ExtractedNumber
from spoken_numbers.parser.token_stream import TokenStream
from spoken_numbers.util.duration import DEFAULT_DAYS_PER_YEAR, Duration, DurationAccumulator, DurationUnit
from spoken_numbers.vocabulary import Vocabulary, WordEntry, get_vocabulary

logger = setup_logging(__name__)

__all__ = ["DEFAULT_MAX_NOISE_TOKENS", "DurationExtractor", "ScanState", "extract_duration"]

DEFAULT_MAX_NOISE_TOKENS = 3

# Called with the cursor at a candidate number; must leave the cursor alone on failure
NumberFunction = Callable[[], Optional[ExtractedNumber]]


class ScanState(Enum):
    """States of the duration scan"""

    SEEKING = auto()
    IN_GROUP_RUN = auto()


class DurationExtractor:
    """Extracts the first contiguous duration phrase from a token stream.

    Args:
        stream: cursor to read from
        extract_number: reads a number at the cursor, normally
            ``NumberExtractor(stream).extract_one_number_no_ordinal``
        vocabulary: word table with the unit and noise words
        max_noise_tokens: noise words allowed between a number and its unit,
            and between two groups
        days_per_year: length of a year (a month is a twelfth of it)
    """

    def __init__(
        self,
        stream: TokenStream,
        extract_number: NumberFunction,
        vocabulary: Optional[Vocabulary] = None,
        max_noise_tokens: int = DEFAULT_MAX_NOISE_TOKENS,
        days_per_year: int = DEFAULT_DAYS_PER_YEAR,
    ):
        if max_noise_tokens < 0:
            raise ValueError(f"max_noise_tokens must not be negative, got {max_noise_tokens}")
        self.stream = stream
        self.extract_number = extract_number
        self.vocabulary = vocabulary or get_vocabulary()
        self.max_noise_tokens = max_noise_tokens
        self.days_per_year = days_per_year

    def extract(self) -> Optional[Duration]:
        """Return the first duration run, or None (cursor restored) when there is none."""
        stream = self.stream
        start = stream.mark()
        accumulator = DurationAccumulator(self.days_per_year)
        state = ScanState.SEEKING
        run_end = start

        while not stream.finished:
            if state is ScanState.SEEKING:
                if self._group(accumulator):
                    state = ScanState.IN_GROUP_RUN
                    run_end = stream.mark()
                else:
                    stream.advance()
                continue

            # IN_GROUP_RUN: only noise may separate two groups
            if self._skip_noise() and self._group(accumulator):
                run_end = stream.mark()
                continue
            break

        if accumulator.empty:
            stream.reset(start)
            logger.debug("No duration group found")
            return None

        stream.reset(run_end)
        duration = accumulator.result()
        logger.debug(f"Duration run of {accumulator.groups} group(s) ending at token {run_end}: {duration}")
        return duration

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def _group(self, accumulator: DurationAccumulator) -> bool:
        """Try every kind of group at the cursor; on success add it and move past it."""
        for attempt in (self._number_unit_group, self._vague_group, self._bare_unit_group):
            start = self.stream.mark()
            matched = attempt()
            if matched is not None:
                count, unit = matched
                accumulator.add(count, unit)
                logger.debug(f"Duration group {count} x {unit.value} at tokens [{start}, {self.stream.position})")
                return True
            self.stream.reset(start)
        return False

    def _number_unit_group(self):
        """<number> [noise...] <unit>"""
        number = self.extract_number()
        if number is None:
            return None

        skipped = self._noise_before_unit()
        if skipped is None:
            return None
        if any(entry.binding for entry in skipped) and number.is_integer and not number.approximate:
            # "two hundred of hours" is not a duration, "a couple of hours" is
            return None

        unit = self._unit(allow_restricted=not skipped)
        if unit is None:
            return None
        return number.value, unit

    def _vague_group(self):
        """[a] plenty|lots|loads [of] <unit> counts as one unit"""
        entry = self._entry()
        if entry is not None and entry.article:
            self.stream.advance()
            entry = self._entry()
        if entry is None or not entry.vague_approximator:
            return None
        self.stream.advance()

        entry = self._entry()
        if entry is not None and entry.binding:
            self.stream.advance()
        unit = self._unit(allow_restricted=False)
        if unit is None:
            return None
        return 1, unit

    def _bare_unit_group(self):
        """A full unit word on its own counts as one unit ("hour minute")"""
        unit = self._unit(allow_restricted=False)
        if unit is None:
            return None
        return 1, unit

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _entry(self, offset: int = 0) -> Optional[WordEntry]:
        return self.vocabulary.lookup(self.stream.peek(offset))

    def _unit(self, allow_restricted: bool) -> Optional[DurationUnit]:
        """Consume a unit word at the cursor.

        Abbreviations ("s", "ms", "h") are restricted to right after a
        number. A detached "s" after a singular full word ("minute s") is
        taken as its plural ending.
        """
        entry = self._entry()
        if entry is None or entry.duration_unit is None:
            return None
        if entry.unit_restricted and not allow_restricted:
            return None
        self.stream.advance()

        plural_suffix = self.vocabulary.plural_suffix
        if not entry.unit_restricted and not entry.word.endswith(plural_suffix):
            token = self.stream.peek()
            if token is not None and token.normalized == plural_suffix and not self.stream.is_joined(0):
                self.stream.advance()
        return entry.duration_unit

    def _noise_before_unit(self) -> Optional[list[WordEntry]]:
        """Skip up to ``max_noise_tokens`` noise words before a unit, None if there are more."""
        skipped = []
        while True:
            entry = self._entry()
            if entry is None or not entry.noise:
                return skipped
            if len(skipped) == self.max_noise_tokens:
                return None
            skipped.append(entry)
            self.stream.advance()

    def _skip_noise(self) -> bool:
        """Skip noise between two groups, False if there are too many noise words."""
        skipped = 0
        while True:
            entry = self._entry()
            if entry is None or not entry.noise:
                return True
            if skipped == self.max_noise_tokens:
                return False
            skipped += 1
            self.stream.advance()


def extract_duration(
    stream: TokenStream,
    extract_number: NumberFunction,
    vocabulary: Optional[Vocabulary] = None,
    max_noise_tokens: int = DEFAULT_MAX_NOISE_TOKENS,
    days_per_year: int = DEFAULT_DAYS_PER_YEAR,
) -> Optional[Duration]:
    """Extract the first duration phrase from ``stream``, see :class:`DurationExtractor`."""
    return DurationExtractor(
        stream,
        extract_number,
        vocabulary=vocabulary,
        max_noise_tokens=max_noise_tokens,
        days_per_year=days_per_year,
    ).extract()

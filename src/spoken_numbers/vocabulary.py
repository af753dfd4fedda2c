#!/usr/bin/env python3
"""Data-driven word table consumed by the extractors and the formatter.

Every normalized word form maps to one :class:`WordEntry` carrying all the
roles the word can play ("second" is both an ordinal and a duration unit).
The tables come from the language resource files, so one extractor algorithm
serves every language that ships a resource file.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Mapping, Optional

from spoken_numbers.constants import DEFAULT_LANGUAGE, get_resources
from spoken_numbers.util.duration import DurationUnit


class NumberClass(Enum):
    """Grammatical class of a number word."""

    DIGIT = "digit"
    TEEN = "teen"
    TENS = "tens"
    HUNDRED = "hundred"
    MAGNITUDE = "magnitude"


@dataclass(frozen=True)
class WordEntry:
    """Every role a single normalized word form can play."""

    word: str
    number_class: Optional[NumberClass] = None
    value: Optional[int] = None
    ordinal: bool = False
    ambiguous_ordinal: bool = False
    short_exponent: Optional[int] = None
    long_exponent: Optional[int] = None
    fraction_denominator: Optional[int] = None
    plural: bool = False
    duration_unit: Optional[DurationUnit] = None
    unit_restricted: bool = False
    approximator: Optional[int] = None
    vague_approximator: bool = False
    decimal_marker: bool = False
    negative_marker: bool = False
    article: bool = False
    connector: bool = False
    noise: bool = False
    binding: bool = False
    ordinal_suffix: bool = False

    @property
    def is_cardinal(self) -> bool:
        return self.number_class is not None and not self.ordinal and not self.plural

    @property
    def is_ordinal(self) -> bool:
        return self.number_class is not None and self.ordinal and not self.plural

    def exponent(self, short_scale: bool) -> Optional[int]:
        """Power of ten of a hundred/magnitude word under the given scale."""
        return self.short_exponent if short_scale else self.long_exponent


class Vocabulary:
    """Read-only lookup from normalized word forms to :class:`WordEntry`."""

    def __init__(
        self,
        language: str,
        entries: Mapping[str, WordEntry],
        formatter: Mapping[str, Any],
        plural_suffix: str = "s",
    ):
        self.language = language
        self.plural_suffix = plural_suffix
        self._entries = MappingProxyType(dict(entries))
        self.formatter = MappingProxyType(dict(formatter))

        cardinals: dict[int, str] = {}
        ordinals: dict[int, str] = {}
        magnitudes: dict[tuple[bool, int], str] = {}
        magnitude_ordinals: dict[tuple[bool, int], str] = {}
        fractions: dict[int, str] = {}
        fraction_plurals: dict[int, str] = {}
        for entry in self._entries.values():
            if entry.plural:
                if entry.fraction_denominator is not None and entry.number_class is None:
                    fraction_plurals.setdefault(entry.fraction_denominator, entry.word)
                continue
            if entry.number_class in (NumberClass.DIGIT, NumberClass.TEEN, NumberClass.TENS):
                (ordinals if entry.ordinal else cardinals).setdefault(entry.value, entry.word)
            elif entry.number_class in (NumberClass.HUNDRED, NumberClass.MAGNITUDE):
                target = magnitude_ordinals if entry.ordinal else magnitudes
                for short_scale in (True, False):
                    exponent = entry.exponent(short_scale)
                    if exponent is not None:
                        target.setdefault((short_scale, exponent), entry.word)
            elif entry.fraction_denominator is not None:
                fractions.setdefault(entry.fraction_denominator, entry.word)

        self._cardinal_words = MappingProxyType(cardinals)
        self._ordinal_words = MappingProxyType(ordinals)
        self._magnitude_words = MappingProxyType(magnitudes)
        self._magnitude_ordinal_words = MappingProxyType(magnitude_ordinals)
        self._fraction_words = MappingProxyType(fractions)
        self._fraction_plural_words = MappingProxyType(fraction_plurals)

    def __contains__(self, word: str) -> bool:
        return word in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, word: str) -> Optional[WordEntry]:
        return self._entries.get(word)

    def lookup(self, token) -> Optional[WordEntry]:
        """Entry for a token (by its normalized form), None for unknown words or no token."""
        if token is None:
            return None
        return self._entries.get(token.normalized)

    def denominator(self, entry: WordEntry, short_scale: bool) -> Optional[int]:
        """Fraction denominator expressed by ``entry`` ("tenth" -> 10, "quarters" -> 4)."""
        if entry.fraction_denominator is not None:
            return entry.fraction_denominator
        if not entry.ordinal:
            return None
        if entry.number_class in (NumberClass.HUNDRED, NumberClass.MAGNITUDE):
            exponent = entry.exponent(short_scale)
            return None if exponent is None else 10 ** exponent
        if entry.value is not None and entry.value >= 3:
            return entry.value
        return None

    # Reverse tables used by the formatter

    def cardinal_word(self, value: int) -> Optional[str]:
        return self._cardinal_words.get(value)

    def ordinal_word(self, value: int) -> Optional[str]:
        return self._ordinal_words.get(value)

    def magnitude_word(self, exponent: int, short_scale: bool, ordinal: bool = False) -> Optional[str]:
        table = self._magnitude_ordinal_words if ordinal else self._magnitude_words
        return table.get((short_scale, exponent))

    def fraction_word(self, denominator: int, plural: bool = False) -> Optional[str]:
        """Dedicated fraction word ("half", "quarters"), if the language has one."""
        table = self._fraction_plural_words if plural else self._fraction_words
        return table.get(denominator)

    @classmethod
    def from_resources(cls, resources: Mapping[str, Any]) -> "Vocabulary":
        """Build the word table from a language resource document."""
        fields: dict[str, dict[str, Any]] = {}

        def add(word: str, **values: Any) -> None:
            fields.setdefault(word.lower(), {}).update(values)

        plural_suffix = resources.get("plural_suffix", "s")
        class_names = {
            "digits": NumberClass.DIGIT,
            "teens": NumberClass.TEEN,
            "tens": NumberClass.TENS,
        }

        for section, ordinal in (("number_words", False), ("ordinal_words", True)):
            words = resources.get(section, {})
            for key, number_class in class_names.items():
                for word, value in words.get(key, {}).items():
                    add(word, number_class=number_class, value=value, ordinal=ordinal)
            for word, exponent in words.get("hundred", {}).items():
                add(word, number_class=NumberClass.HUNDRED, value=10 ** exponent,
                    short_exponent=exponent, long_exponent=exponent, ordinal=ordinal)
            for scale_key, field in (("short_scale", "short_exponent"), ("long_scale", "long_exponent")):
                for word, exponent in words.get(scale_key, {}).items():
                    add(word, number_class=NumberClass.MAGNITUDE, ordinal=ordinal, **{field: exponent})

        ordinal_words = resources.get("ordinal_words", {})
        for word in ordinal_words.get("ambiguous", []):
            add(word, ambiguous_ordinal=True)
        for suffix in ordinal_words.get("suffixes", []):
            add(suffix, ordinal_suffix=True)

        for word, denominator in resources.get("fractions", {}).items():
            add(word, fraction_denominator=denominator)
        for plural, singular in resources.get("fraction_plurals", {}).items():
            add(plural, fraction_denominator=resources["fractions"][singular], plural=True)

        # "thirds", "tenths", "hundredths": plural ordinals only ever denote fractions
        for word, values in list(fields.items()):
            if not values.get("ordinal") or values.get("plural"):
                continue
            is_magnitude = values.get("number_class") in (NumberClass.HUNDRED, NumberClass.MAGNITUDE)
            if is_magnitude or values.get("value", 0) >= 3:
                plural_values = {k: v for k, v in values.items() if k != "ambiguous_ordinal"}
                add(word + plural_suffix, **plural_values, plural=True)

        for word, value in resources.get("approximators", {}).items():
            add(word, approximator=value)
        for word in resources.get("vague_approximators", []):
            add(word, vague_approximator=True)
        for word in resources.get("decimal_markers", []):
            add(word, decimal_marker=True)
        for word in resources.get("negative_markers", []):
            add(word, negative_marker=True)
        for word in resources.get("articles", []):
            add(word, article=True)
        for word in resources.get("connectors", []):
            add(word, connector=True)
        for word in resources.get("duration_noise", []):
            add(word, noise=True)
        for word in resources.get("binding_words", []):
            add(word, binding=True)

        for unit_name, forms in resources.get("duration_units", {}).items():
            unit = DurationUnit(unit_name)
            for word in forms.get("words", []):
                add(word, duration_unit=unit, unit_restricted=False)
            for word in forms.get("abbreviations", []):
                add(word, duration_unit=unit, unit_restricted=True)

        entries = {word: replace(WordEntry(word=word), **values) for word, values in fields.items()}
        return cls(
            resources.get("language", DEFAULT_LANGUAGE),
            entries,
            resources.get("formatter", {}),
            plural_suffix=plural_suffix,
        )


@lru_cache(maxsize=16)
def get_vocabulary(language: str = DEFAULT_LANGUAGE) -> Vocabulary:
    """Cached vocabulary for a language (falls back to English like the resource loader)."""
    return Vocabulary.from_resources(get_resources(language))

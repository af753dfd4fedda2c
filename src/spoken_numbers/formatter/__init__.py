"""Spoken-form rendering of numbers and durations."""

from .english_formatter import EnglishFormatter

__all__ = ["EnglishFormatter"]

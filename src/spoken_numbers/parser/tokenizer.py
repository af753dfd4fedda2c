#!/usr/bin/env python3
"""Regex tokenizer splitting an utterance into word, number and symbol tokens."""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum, auto
from fractions import Fraction
from typing import Optional

__all__ = ["Token", "TokenKind", "Tokenizer", "tokenize"]


class TokenKind(Enum):
    """Kinds of tokens produced by the tokenizer"""

    WORD = auto()
    NUMBER = auto()
    SYMBOL = auto()


@dataclass(frozen=True)
class Token:
    """A single token with its character span in the original text."""

    kind: TokenKind
    text: str
    normalized: str
    start: int
    end: int
    value: Optional[Fraction] = None

    @property
    def is_word(self) -> bool:
        return self.kind is TokenKind.WORD

    @property
    def is_number(self) -> bool:
        return self.kind is TokenKind.NUMBER

    @property
    def is_symbol(self) -> bool:
        return self.kind is TokenKind.SYMBOL

    @property
    def is_integer(self) -> bool:
        """True for a number literal without a decimal part ("18", "1,000")."""
        return self.is_number and "." not in self.text


def normalize(text: str) -> str:
    """NFKC + lower case, with the typographic apostrophe folded to ASCII."""
    return unicodedata.normalize("NFKC", text).lower().replace("’", "'")


class Tokenizer:
    """Splits text into :class:`Token` objects.

    Number literals may use comma thousands separators ("1,000,000") and a
    dot decimal part ("1.5"). Words are letter runs with inner apostrophes
    ("it's"), so the Greek mu in "μs" stays part of the word. Any other
    non-space character is a one-character symbol.
    """

    TOKEN_PATTERN = re.compile(
        r"""
        (?P<number>\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)   # 1,000.5 or 18 or 1.5
        |(?P<word>[^\W\d_]+(?:['’][^\W\d_]+)*)              # words, it's
        |(?P<symbol>[^\w\s]|_)                                   # , - % .
        """,
        re.VERBOSE,
    )

    def tokenize(self, text: str) -> list[Token]:
        tokens = []
        for match in self.TOKEN_PATTERN.finditer(text):
            kind_name = match.lastgroup
            raw = match.group()
            if kind_name == "number":
                tokens.append(
                    Token(TokenKind.NUMBER, raw, raw, match.start(), match.end(), Fraction(raw.replace(",", "")))
                )
            elif kind_name == "word":
                tokens.append(Token(TokenKind.WORD, raw, normalize(raw), match.start(), match.end()))
            else:
                tokens.append(Token(TokenKind.SYMBOL, raw, normalize(raw), match.start(), match.end()))
        return tokens


_DEFAULT_TOKENIZER = Tokenizer()


def tokenize(text: str) -> list[Token]:
    """Tokenize ``text`` with the default tokenizer."""
    return _DEFAULT_TOKENIZER.tokenize(text)

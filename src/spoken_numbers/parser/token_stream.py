#!/usr/bin/env python3
"""Backtrackable cursor over a token sequence."""
from __future__ import annotations

from typing import Iterable, Optional, Union

from spoken_numbers.parser.tokenizer import Token, tokenize

__all__ = ["TokenStream"]


class TokenStream:
    """Read-only token sequence plus a position in ``0..len(tokens)``.

    Extractors read through :meth:`peek` and :meth:`advance`, and backtrack
    by saving a :meth:`mark` and handing it back to :meth:`reset`.
    """

    def __init__(self, tokens: Union[str, Iterable[Token]]):
        if isinstance(tokens, str):
            tokens = tokenize(tokens)
        self._tokens = tuple(tokens)
        self._position = 0

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._tokens

    @property
    def position(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        return len(self._tokens) - self._position

    @property
    def finished(self) -> bool:
        return self._position >= len(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def peek(self, offset: int = 0) -> Optional[Token]:
        """Token ``offset`` positions ahead, or None outside the sequence."""
        index = self._position + offset
        if 0 <= index < len(self._tokens):
            return self._tokens[index]
        return None

    def advance(self) -> Token:
        """Return the current token and move past it.

        Raises:
            IndexError: if the stream is finished
        """
        if self.finished:
            raise IndexError("advance() called on a finished token stream")
        token = self._tokens[self._position]
        self._position += 1
        return token

    def skip(self, count: int = 1) -> None:
        self.reset(self._position + count)

    def mark(self) -> int:
        return self._position

    def reset(self, mark: int) -> None:
        """Move back (or forward) to a position previously returned by :meth:`mark`.

        Raises:
            ValueError: if ``mark`` is outside ``0..len(tokens)``
        """
        if not 0 <= mark <= len(self._tokens):
            raise ValueError(f"Invalid stream mark {mark}, expected 0..{len(self._tokens)}")
        self._position = mark

    def is_joined(self, offset: int = 0) -> bool:
        """True if the token at ``offset`` starts exactly where the previous one ends ("18th", "-5")."""
        token = self.peek(offset)
        previous = self.peek(offset - 1)
        if token is None or previous is None:
            return False
        return previous.end == token.start

    def __repr__(self) -> str:
        return f"TokenStream(position={self._position}, tokens={[t.text for t in self._tokens]!r})"

"""Tracking of single and double quote state."""

from __future__ import annotations

from dataclasses import dataclass

QUOTES = ("'", '"')


@dataclass
class QuoteState:
    """Whether the scan is currently inside single or double quotes."""

    single: bool = False
    double: bool = False

    def feed(self, char: str) -> bool:
        """Update the state with ``char``; return whether it is a quote character."""
        if char not in QUOTES:
            return False
        if not self.single and not self.double:
            if char == "'":
                self.single = True
            else:
                self.double = True
        elif char == "'" and self.single:
            self.single = False
        elif char == '"' and self.double:
            self.double = False
        return True

    @property
    def is_open(self) -> bool:
        return self.single or self.double


def has_open_quote(text: str) -> bool:
    """Whether ``text`` leaves a quote unclosed."""
    state = QuoteState()
    for char in text:
        state.feed(char)
    return state.is_open
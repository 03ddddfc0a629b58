"""
Lexical helpers for rule text.

Small, stateless classifiers (numeric/boolean literal detection, top-level
comma lookup) plus the scanner that splits a condition list on ``and`` without
breaking ``between X and Y`` ranges or parenthesised lists apart.
"""

import math
import re
from enum import Enum


AND_SEPARATOR = re.compile(r"\s+and\s+", re.IGNORECASE)
BETWEEN_KEYWORD = re.compile(r"between\b", re.IGNORECASE)


def is_numeric(text: str) -> bool:
    """True if ``text`` is a finite decimal number (``3000``, ``-1.5``, ``2e3``)."""
    if not text or "_" in text:
        return False
    try:
        return math.isfinite(float(text))
    except ValueError:
        return False


def is_boolean(text: str) -> bool:
    return text.strip().lower() in ("true", "false")


def find_separator_comma(text: str) -> int:
    """Index of the first comma outside parentheses, or -1."""
    depth = 0
    for idx, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            return idx
    return -1


def next_token(text: str, pos: int) -> str:
    """The whitespace-delimited token starting at or after ``pos``."""
    rest = text[pos:].split(None, 1)
    return rest[0] if rest else ""


class ScanState(Enum):
    """Where the condition scanner currently is."""
    DEFAULT = "default"
    IN_PAREN = "in_paren"
    IN_BETWEEN = "in_between"


class ConditionScanner:
    """Split a condition list on the ``and`` conjunction.

    An ``and`` only separates two conditions in the DEFAULT state. Inside
    parentheses it is kept as text. After a ``between`` keyword the next
    ``and`` belongs to the range; the between state is left once the token
    following that ``and`` is numeric.

    Example:
        >>> ConditionScanner("amount between 1 and 5 and tier is gold").split()
        ['amount between 1 and 5', 'tier is gold']
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.depth = 0
        self.in_between = False
        self.parts: list[str] = []
        self._current: list[str] = []

    @property
    def state(self) -> ScanState:
        if self.depth > 0:
            return ScanState.IN_PAREN
        if self.in_between:
            return ScanState.IN_BETWEEN
        return ScanState.DEFAULT

    def split(self) -> list[str]:
        while self.pos < len(self.text):
            self._step()
        self._flush()
        return self.parts

    def _step(self) -> None:
        text = self.text
        char = text[self.pos]

        if char == "(":
            self.depth += 1
            self._consume(1)
            return
        if char == ")":
            self.depth = max(self.depth - 1, 0)
            self._consume(1)
            return

        if self._at_word_start() and BETWEEN_KEYWORD.match(text, self.pos):
            self.in_between = True
            self._consume(len("between"))
            return

        if char.isspace():
            match = AND_SEPARATOR.match(text, self.pos)
            if match:
                state = self.state
                if state == ScanState.DEFAULT:
                    self._flush()
                    self.pos = match.end()
                    return
                if state == ScanState.IN_BETWEEN:
                    self._consume(match.end() - self.pos)
                    if is_numeric(next_token(text, self.pos)):
                        self.in_between = False
                    return

        self._consume(1)

    def _at_word_start(self) -> bool:
        if self.pos == 0:
            return True
        prev = self.text[self.pos - 1]
        return not (prev.isalnum() or prev == "_")

    def _consume(self, length: int) -> None:
        self._current.append(self.text[self.pos:self.pos + length])
        self.pos += length

    def _flush(self) -> None:
        part = "".join(self._current).strip()
        if part:
            self.parts.append(part)
        self._current = []


def split_conditions(text: str) -> list[str]:
    """Split the condition half of a rule into single condition clauses."""
    return ConditionScanner(text).split()


def split_actions(text: str) -> list[str]:
    """Split the action half of a rule on every ``and``."""
    return [part.strip() for part in AND_SEPARATOR.split(text) if part.strip()]

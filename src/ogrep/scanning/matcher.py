#!/usr/bin/env python3
"""
OGREP MATCHER - Pattern Variants
--------------------------------
A single matching capability with two variants, chosen once at startup:
LiteralMatcher searches for fixed text, RegexMatcher for a regular
expression. Both honour whole-word and case-insensitive modes and report
match spans against the original, unmodified line text.

Author: ogrep Team
Date: 2026-10-17
"""

import re
from typing import List, Tuple

from ogrep.core.errors import InvalidPattern
from ogrep.core.options import ScanOptions

Span = Tuple[int, int]


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == '_'


def _fold(text: str) -> str:
    """Lower-cases per character, keeping length so spans stay valid."""
    return ''.join(c.lower() if len(c.lower()) == 1 else c for c in text)


class Matcher:
    """Common interface: `find` returns spans, `matches` a boolean."""

    def find(self, text: str) -> List[Span]:
        raise NotImplementedError

    def matches(self, text: str) -> bool:
        return bool(self.find(text))


class LiteralMatcher(Matcher):

    def __init__(self, pattern: str, whole_word: bool = False, ignore_case: bool = False):
        self.whole_word = whole_word
        self.ignore_case = ignore_case
        self.needle = _fold(pattern) if ignore_case else pattern

    def _bounded(self, text: str, start: int, end: int) -> bool:
        """Whole-word rule: no word character touching either side of the span."""
        if start > 0 and _is_word_char(text[start - 1]):
            return False
        if end < len(text) and _is_word_char(text[end]):
            return False
        return True

    def find(self, text: str) -> List[Span]:
        if not self.needle:
            # An empty pattern matches every line, or with --word every
            # position not touching a word character.
            if not self.whole_word:
                return [(0, 0)]
            return [(pos, pos) for pos in range(len(text) + 1) if self._bounded(text, pos, pos)]

        haystack = _fold(text) if self.ignore_case else text
        spans = []
        start = 0
        while True:
            pos = haystack.find(self.needle, start)
            if pos == -1:
                break
            end = pos + len(self.needle)
            if not self.whole_word or self._bounded(text, pos, end):
                spans.append((pos, end))
                start = end
            else:
                start = pos + 1
        return spans


class RegexMatcher(Matcher):

    def __init__(self, pattern: str, whole_word: bool = False, ignore_case: bool = False):
        source = rf'(?<!\w)(?:{pattern})(?!\w)' if whole_word else pattern
        flags = re.IGNORECASE if ignore_case else 0
        try:
            self.regex = re.compile(source, flags)
        except re.error as e:
            raise InvalidPattern(f"invalid regular expression '{pattern}': {e}") from e

    def find(self, text: str) -> List[Span]:
        return [m.span() for m in self.regex.finditer(text)]


def build_matcher(options: ScanOptions) -> Matcher:
    """Selects the matcher variant for the resolved options."""
    variant = RegexMatcher if options.regex else LiteralMatcher
    return variant(options.pattern, whole_word=options.whole_word,
                   ignore_case=options.ignore_case)

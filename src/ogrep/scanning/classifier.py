#!/usr/bin/env python3
"""
OGREP CLASSIFIER - Indentation Measurement
------------------------------------------
Turns raw input text into SourceLine models: measures leading whitespace
(tabs expanded to the configured width), flags blank lines and spots
preprocessor directives that must not disturb the ancestry stack.

Author: ogrep Team
Date: 2026-10-17
"""

import re
from typing import Optional

from ogrep.core.models import PreprocessorMode, SourceLine

# C preprocessor ('#if', '# define') and template tags ('{% if %}', '{%- else -%}')
DIRECTIVE_PATTERN = re.compile(r'^(?:#|\{%-?)')


class IndentClassifier:
    """
    Stateless per-line classifier. The caller supplies the indent of the
    current stack top so directives can be pinned to the enclosing scope.
    """

    def __init__(self, tab_width: int = 4,
                 preprocessor: PreprocessorMode = PreprocessorMode.IGNORE):
        self.tab_width = tab_width
        self.preprocessor = preprocessor

    def _clean_artifacts(self, number: int, text: str) -> str:
        """
        Removes the UTF-8 BOM from the first line and any line terminator.
        """
        if number == 1:
            text = text.lstrip('\ufeff')
        return text.rstrip('\r\n')

    def measure(self, text: str) -> Optional[int]:
        """Width of leading whitespace, or None when the line has no content."""
        width = 0
        for char in text:
            if char == '\t':
                width += self.tab_width - (width % self.tab_width)
            elif char.isspace():
                width += 1
            else:
                return width
        return None

    def is_directive(self, stripped: str) -> bool:
        return bool(DIRECTIVE_PATTERN.match(stripped))

    def classify(self, number: int, raw: str, anchor_indent: int = 0) -> SourceLine:
        """
        Builds the SourceLine for one input line.

        Args:
            number: 1-based line number.
            raw: the line as read, terminator included or not.
            anchor_indent: indent of the current stack top (0 if empty).
        """
        text = self._clean_artifacts(number, raw)
        indent = self.measure(text)
        if indent is None:
            return SourceLine(number=number, text=text, indent=None, is_blank=True)

        if self.preprocessor is not PreprocessorMode.PRESERVE and self.is_directive(text.lstrip()):
            return SourceLine(number=number, text=text, indent=anchor_indent,
                              is_preprocessor=True)

        return SourceLine(number=number, text=text, indent=indent)

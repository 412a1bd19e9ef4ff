#!/usr/bin/env python3
"""
OGREP PREPROCESSOR CONTEXT
--------------------------
Directives are usually written at column 0 whatever the surrounding
nesting, so they are kept off the indentation stack. In 'context' mode
the conditional ones form a parallel stack of their own:

    #if defined(X)     <- retained, level 1
      ...
    #else              <- retained, level 1
      ...
    #endif             <- drops level 1

Author: ogrep Team
Date: 2026-10-17
"""

import re
from enum import Enum
from typing import List, Tuple

from ogrep.core.models import PreprocessorMode, SourceLine

IF_PATTERN = re.compile(r'^(?:#|\{%-?)\s*if(?:n?def)?\b')
ELSE_PATTERN = re.compile(r'^(?:#|\{%-?)\s*(?:else|elif)\b')
ENDIF_PATTERN = re.compile(r'^(?:#|\{%-?)\s*endif\b')


class DirectiveKind(Enum):
    IF = "if"
    ELSE = "else"
    ENDIF = "endif"
    OTHER = "other"


def directive_kind(text: str) -> DirectiveKind:
    stripped = text.lstrip()
    if IF_PATTERN.match(stripped):
        return DirectiveKind.IF
    if ELSE_PATTERN.match(stripped):
        return DirectiveKind.ELSE
    if ENDIF_PATTERN.match(stripped):
        return DirectiveKind.ENDIF
    return DirectiveKind.OTHER


class PreprocessorContext:
    """Tracks open conditional directives. A no-op outside 'context' mode."""

    def __init__(self, mode: PreprocessorMode = PreprocessorMode.IGNORE):
        self.mode = mode
        self.level = 0
        self.entries: List[Tuple[int, SourceLine]] = []

    def observe(self, line: SourceLine):
        if self.mode is not PreprocessorMode.CONTEXT or not line.is_preprocessor:
            return

        kind = directive_kind(line.text)
        if kind is DirectiveKind.IF:
            self.level += 1
            self.entries.append((self.level, line))
        elif kind is DirectiveKind.ELSE:
            self.entries.append((self.level, line))
        elif kind is DirectiveKind.ENDIF:
            self.entries = [(lvl, l) for lvl, l in self.entries if lvl < self.level]
            self.level = max(0, self.level - 1)

    def chain(self) -> List[SourceLine]:
        return [line for _, line in self.entries]

#!/usr/bin/env python3
"""
OGREP CORE MODELS
-----------------
Defines the fundamental data structures used across the ogrep engine.
These models represent the lowest level of the outline abstraction:
a classified line, a slot on the ancestry stack, and the events that
leave the scanner for the renderer.

Author: ogrep Team
Date: 2026-10-17
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class BranchRole(Enum):
    """How a stack entry takes part in a conditional construct."""
    NORMAL = "normal"
    IF_HEADER = "if"
    ELSE_HEADER = "else"


class BreakKind(Enum):
    BLANK = "blank"
    ELLIPSIS = "ellipsis"


class PreprocessorMode(Enum):
    """How lines such as '#define' or '{% if %}' take part in ancestry."""
    IGNORE = "ignore"
    CONTEXT = "context"
    PRESERVE = "preserve"


class FilenameMode(Enum):
    NO = "no"
    PER_FILE = "per-file"
    PER_LINE = "per-line"


@dataclass(frozen=True)
class SourceLine:
    """
    A single input line after classification.

    `indent` is None exactly when the line is blank. For preprocessor
    lines it is the indent of the enclosing scope, not the column the
    directive was written at.
    """
    number: int                     # 1-based line number in the source
    text: str                       # The raw line without its line terminator
    indent: Optional[int]           # Leading whitespace width, tabs expanded
    is_blank: bool = False
    is_preprocessor: bool = False


@dataclass
class AncestorEntry:
    """
    One level of the live nesting chain.

    `linked_header` is a key into the stack's header arena. It points at
    the IF_HEADER entry an ELSE_HEADER replaced, so the originating
    condition can still be shown.
    """
    line: SourceLine
    branch_role: BranchRole = BranchRole.NORMAL
    linked_header: Optional[int] = None

    @property
    def indent(self) -> int:
        return self.line.indent or 0


@dataclass(frozen=True)
class PrintLine:
    """Emit one source line. `spans` is empty for context lines."""
    number: int
    text: str
    spans: Tuple[Tuple[int, int], ...] = ()
    is_match: bool = False


@dataclass(frozen=True)
class Break:
    """A separator between two disjoint groups of emitted lines."""
    kind: BreakKind
    count: int = 0                  # Skipped lines, meaningful for ELLIPSIS


@dataclass
class EmissionGroup:
    """
    One visually contiguous block of output, with an optional leading break.
    Lines are kept in ascending, de-duplicated line-number order.
    """
    leading_break: Optional[Break] = None
    lines: List[PrintLine] = field(default_factory=list)

    @property
    def first_number(self) -> Optional[int]:
        return self.lines[0].number if self.lines else None

    def events(self) -> list:
        """Flattens the group into the ordered sink events."""
        out: list = [self.leading_break] if self.leading_break else []
        out.extend(self.lines)
        return out

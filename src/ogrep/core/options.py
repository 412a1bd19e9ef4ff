#!/usr/bin/env python3
"""
OGREP SCAN OPTIONS
------------------
The resolved, immutable configuration handed to every scan pipeline.
Built once by the CLI (or by a library caller) and shared read-only by
all per-file scans, so no state leaks from one input to the next.

Author: ogrep Team
Date: 2026-10-17
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ogrep.core.errors import ConfigConflict
from ogrep.core.models import FilenameMode, PreprocessorMode

DEFAULT_BRANCH_OPENERS: Tuple[str, ...] = ("if", "switch", "match", "try", "select")
DEFAULT_BRANCH_MARKERS: Tuple[str, ...] = (
    "else if", "else", "elif", "case", "default", "except", "catch", "finally",
)
DEFAULT_TAB_WIDTH = 4


@dataclass(frozen=True)
class ScanOptions:
    pattern: str
    regex: bool = False
    ignore_case: bool = False
    whole_word: bool = False
    before: int = 0                                 # Fixed-window lines before a match
    after: int = 0                                  # Fixed-window lines after a match
    children: bool = False
    breaks: bool = True
    ellipsis: bool = False
    smart_branches: bool = True
    preprocessor: PreprocessorMode = PreprocessorMode.IGNORE
    tab_width: int = DEFAULT_TAB_WIDTH
    branch_openers: Tuple[str, ...] = DEFAULT_BRANCH_OPENERS
    branch_markers: Tuple[str, ...] = DEFAULT_BRANCH_MARKERS
    print_filename: FilenameMode = FilenameMode.NO
    use_git_grep: bool = False

    def validate(self) -> "ScanOptions":
        """Fails fast on contradictory settings. Returns self for chaining."""
        if self.before < 0 or self.after < 0:
            raise ConfigConflict("context line counts must not be negative")
        if self.tab_width < 1:
            raise ConfigConflict("--tab-width must be at least 1")
        if self.ellipsis and not self.breaks:
            raise ConfigConflict("--ellipsis asks for separators that --no-breaks suppresses")
        if self.children and self.after:
            raise ConfigConflict("--children already defines the trailing lines; drop --after/--context")
        return self

    @property
    def effective_breaks(self) -> bool:
        # A children block is its own separator.
        return self.breaks and not self.children


def resolve_context(context: Optional[int], before: Optional[int],
                    after: Optional[int]) -> Tuple[int, int]:
    """
    Merges --context with --before/--after. The two forms are exclusive.
    """
    if context is not None:
        if before is not None or after is not None:
            raise ConfigConflict("--context cannot be combined with --before/--after")
        return context, context
    return before or 0, after or 0

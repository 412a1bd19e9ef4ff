#!/usr/bin/env python3
"""
OGREP BRANCH DETECTOR - Smart Branches
--------------------------------------
Recognizes the lines that open a conditional construct ('if', 'switch',
'try', ...) and the lines that continue one at the same indentation
('} else {', 'elif x:', 'case 2:', ...). The ContextStack uses these
judgments to replace a header in place instead of popping it away, so a
match inside an 'else' block still shows its 'if'.

The vocabulary is a heuristic over many languages and is configurable.

Author: ogrep Team
Date: 2026-10-17
"""

import re
from typing import Iterable, Optional, Pattern

from ogrep.core.models import AncestorEntry, BranchRole, SourceLine
from ogrep.core.options import DEFAULT_BRANCH_MARKERS, DEFAULT_BRANCH_OPENERS


def compile_keywords(words: Iterable[str]) -> Optional[Pattern]:
    """
    Builds an anchored pattern for a keyword list. Each keyword must end on
    a word boundary and may be preceded by a closing brace ('} else').
    Multi-word keywords accept any run of whitespace between words.
    """
    alternatives = sorted({w.strip() for w in words if w.strip()}, key=len, reverse=True)
    if not alternatives:
        return None
    body = '|'.join(r'\s+'.join(re.escape(part) for part in w.split()) for w in alternatives)
    return re.compile(rf'^(?:\}}\s*)?(?:{body})(?!\w)')


class BranchDetector:

    def __init__(self, openers: Iterable[str] = DEFAULT_BRANCH_OPENERS,
                 markers: Iterable[str] = DEFAULT_BRANCH_MARKERS):
        self.opener_pattern = compile_keywords(openers)
        self.marker_pattern = compile_keywords(markers)

    def _starts_with(self, pattern: Optional[Pattern], line: SourceLine) -> bool:
        return pattern is not None and bool(pattern.match(line.text.lstrip()))

    def opener_role(self, line: SourceLine) -> BranchRole:
        """Role of a freshly pushed line: IF_HEADER when it opens a construct."""
        if self._starts_with(self.opener_pattern, line):
            return BranchRole.IF_HEADER
        return BranchRole.NORMAL

    def is_continuation(self, line: SourceLine, top: Optional[AncestorEntry]) -> bool:
        """
        True when `line` continues the construct headed by the stack top:
        same indent, the top is a branch header, and the line starts with
        a continuation marker.
        """
        if top is None or top.branch_role is BranchRole.NORMAL:
            return False
        if line.indent != top.indent:
            return False
        return self._starts_with(self.marker_pattern, line)

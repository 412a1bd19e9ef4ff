#!/usr/bin/env python3
"""
OGREP CONTEXT STACK - The Genealogist
-------------------------------------
Maintains the live ancestry of the scan cursor. Bottom of the stack is
the shallowest open scope, top the most recently opened one, and
indentation strictly increases from bottom to top.

    a        <- entries[0], indent 0
      b
        c
      d      <- entries[1], indent 2
        e    <- entries[2], indent 4

Branch continuations ('else' after 'if') replace the top entry in place.
The replaced header moves into a small arena and the new entry keeps its
key, so the header can be shown without sitting on the stack.

Author: ogrep Team
Date: 2026-10-17
"""

from typing import Dict, List, Optional

from ogrep.core.models import AncestorEntry, BranchRole, SourceLine
from ogrep.scanning.branches import BranchDetector


class ContextStack:
    """
    Args:
        detector: branch judgments, or None to follow pure indentation.
    """

    def __init__(self, detector: Optional[BranchDetector] = None):
        self.detector = detector
        self.entries: List[AncestorEntry] = []
        # Headers displaced by a continuation, keyed by their line number.
        self.headers: Dict[int, AncestorEntry] = {}

    @property
    def top(self) -> Optional[AncestorEntry]:
        return self.entries[-1] if self.entries else None

    @property
    def top_indent(self) -> int:
        return self.top.indent if self.entries else 0

    def __len__(self) -> int:
        return len(self.entries)

    def _continues(self, line: SourceLine) -> bool:
        return self.detector is not None and self.detector.is_continuation(line, self.top)

    def _pop(self) -> AncestorEntry:
        entry = self.entries.pop()
        # Only one live entry ever references a given header.
        if entry.linked_header is not None:
            self.headers.pop(entry.linked_header, None)
        return entry

    def _replace_top(self, line: SourceLine) -> AncestorEntry:
        replaced = self.entries.pop()
        if replaced.branch_role is BranchRole.IF_HEADER:
            key = replaced.line.number
            self.headers[key] = replaced
        else:
            key = replaced.linked_header

        entry = AncestorEntry(line=line, branch_role=BranchRole.ELSE_HEADER, linked_header=key)
        self.entries.append(entry)
        return entry

    def advance(self, line: SourceLine) -> AncestorEntry:
        """
        Moves the cursor onto a non-blank, non-directive line and returns
        the entry that now represents it on top of the stack.
        """
        indent = line.indent or 0

        # 1. Close every scope at the same depth or deeper.
        while self.entries and self.top.indent >= indent:
            if self._continues(line):
                break
            self._pop()

        # 2. An 'else' takes over its header's slot.
        if self._continues(line):
            return self._replace_top(line)

        # 3. Open a new level.
        role = self.detector.opener_role(line) if self.detector else BranchRole.NORMAL
        entry = AncestorEntry(line=line, branch_role=role)
        self.entries.append(entry)
        return entry

    def chain(self) -> List[SourceLine]:
        """
        The ancestry, shallowest first, with each linked header placed
        just ahead of the entry that displaced it.
        """
        lines = []
        for entry in self.entries:
            if entry.linked_header is not None:
                lines.append(self.headers[entry.linked_header].line)
            lines.append(entry.line)
        return lines

    def ancestors_of(self, line: SourceLine) -> List[SourceLine]:
        """The chain leading to `line`, without `line` itself."""
        return [l for l in self.chain() if l.number != line.number]

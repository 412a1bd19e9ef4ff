#!/usr/bin/env python3
"""
OGREP OUTPUT ASSEMBLER - The Compositor
---------------------------------------
Turns match events and the lines that follow them into EmissionGroups:
ancestors, fixed-window context and children, ordered by line number,
de-duplicated against everything already queued, and separated by a
single Break wherever a gap opens between two matches.

State machine:  IDLE -> IN_GROUP on the first queued line,
                IN_GROUP -> IN_GROUP while lines stay contiguous,
                IN_GROUP -> (flush) -> IN_GROUP on a gap,
                finish() flushes, abort() discards.

Author: ogrep Team
Date: 2026-10-17
"""

from collections import deque
from enum import Enum
from typing import Callable, Deque, Iterable, List, Optional

from ogrep.core.models import Break, BreakKind, EmissionGroup, PrintLine, SourceLine
from ogrep.core.options import ScanOptions
from ogrep.scanning.matcher import Span


class GroupState(Enum):
    IDLE = "idle"
    IN_GROUP = "in_group"


def _context_line(line: SourceLine) -> PrintLine:
    return PrintLine(number=line.number, text=line.text)


class OutputAssembler:
    """
    Args:
        options: the resolved scan options.
        sink: receives each completed group, in scan order.
    """

    def __init__(self, options: ScanOptions, sink: Callable[[EmissionGroup], None]):
        self.options = options
        self.sink = sink

        self.last_emitted: Optional[int] = None
        self.group: Optional[EmissionGroup] = None
        self.match_count = 0

        # Ring buffer for --before; deque(maxlen=0) keeps nothing.
        self.window: Deque[SourceLine] = deque(maxlen=options.before)
        self.trailing_left = 0

        # --children: indent of the match whose block is being printed.
        self.children_indent: Optional[int] = None
        self.pending_children: List[SourceLine] = []

    @property
    def state(self) -> GroupState:
        return GroupState.IN_GROUP if self.group is not None else GroupState.IDLE

    # --- INPUT EVENTS ---

    def on_match(self, line: SourceLine, ancestors: Iterable[SourceLine], spans: List[Span]):
        """
        Queues the ancestor chain, the before-window and the matched line,
        then arms trailing context and children for the lines that follow.
        """
        self.match_count += 1
        indent = line.indent or 0

        if self.children_indent is not None:
            if indent > self.children_indent:
                self._queue([_context_line(l) for l in self.pending_children])
            else:
                self.children_indent = None
            self.pending_children.clear()

        candidates = {l.number: l for l in ancestors}
        for l in self.window:
            candidates.setdefault(l.number, l)
        candidates.pop(line.number, None)

        plan = [_context_line(candidates[n]) for n in sorted(candidates)]
        plan.append(PrintLine(number=line.number, text=line.text,
                              spans=tuple(spans), is_match=True))
        self._queue(plan, opens_event=True)

        self.window.clear()
        self.trailing_left = self.options.after
        if self.options.children and self.children_indent is None:
            self.children_indent = indent

    def observe(self, line: SourceLine):
        """Feeds a line that did not match: blank, directive or code."""
        if self.trailing_left > 0:
            self.trailing_left -= 1
            self._queue([_context_line(line)])
        elif self.children_indent is not None:
            self._observe_child(line)
        self.window.append(line)

    def _observe_child(self, line: SourceLine):
        if line.is_blank or line.is_preprocessor:
            # Kept only if a deeper line follows.
            self.pending_children.append(line)
        elif (line.indent or 0) > self.children_indent:
            self._queue([_context_line(l) for l in self.pending_children + [line]])
            self.pending_children.clear()
        else:
            self.children_indent = None
            self.pending_children.clear()

    # --- GROUPING ---

    def _separator(self, gap: int, between_events: bool) -> Optional[Break]:
        if self.options.ellipsis:
            return Break(BreakKind.ELLIPSIS, gap)
        if between_events and self.options.effective_breaks:
            return Break(BreakKind.BLANK)
        return None

    def _queue(self, lines: List[PrintLine], opens_event: bool = False):
        fresh = [pl for pl in lines if self.last_emitted is None or pl.number > self.last_emitted]
        for index, printed in enumerate(fresh):
            if self.state is GroupState.IDLE:
                self.group = EmissionGroup()
            else:
                gap = printed.number - self.last_emitted - 1
                if gap > 0:
                    between_events = opens_event and index == 0
                    separator = self._separator(gap, between_events)
                    if separator is not None or between_events:
                        self._flush()
                        self.group = EmissionGroup(leading_break=separator)
            self.group.lines.append(printed)
            self.last_emitted = printed.number

    def _flush(self):
        if self.group is not None and self.group.lines:
            self.sink(self.group)
        self.group = None

    # --- END OF STREAM ---

    def finish(self):
        """Emits the last group. Trailing context is queued as it arrives."""
        self._flush()
        self.pending_children.clear()

    def abort(self):
        """Drops the pending group of a scan that cannot complete."""
        self.group = None
        self.pending_children.clear()
        self.window.clear()

#!/usr/bin/env python3
"""
OGREP ENGINE - The High Orchestrator
------------------------------------
The SearchEngine drives one invocation: it compiles the pattern once,
runs an independent ScanPipeline per input, forwards finished groups to
the renderer, and keeps a report per input. A read failure costs only
the input it happened in.

Author: ogrep Team
Date: 2026-10-17
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ogrep.core.errors import LineSourceError
from ogrep.core.models import EmissionGroup, FilenameMode
from ogrep.core.options import ScanOptions
from ogrep.io.sources import LineSource
from ogrep.scanning.matcher import build_matcher
from ogrep.scanning.pipeline import ScanPipeline

logger = logging.getLogger("ogrep.engine")


@dataclass
class InputReport:
    source: str
    matched: bool = False
    match_count: int = 0
    lines_scanned: int = 0
    error: Optional[str] = None


class SearchEngine:
    """
    Principal orchestrator for a search across one or more inputs.
    """

    def __init__(self, options: ScanOptions, renderer: Any):
        """
        Validates the options and compiles the pattern, so InvalidPattern
        and ConfigConflict surface before any input is opened.

        Args:
            options: the resolved scan options.
            renderer: anything with print_filename(source) and emit(event, source).
        """
        self.options = options.validate()
        self.pipeline = ScanPipeline(self.options, build_matcher(self.options))
        self.renderer = renderer
        self.reports: List[InputReport] = []

    def _sink_for(self, source: Optional[str]):
        announce = self.options.print_filename is FilenameMode.PER_FILE and source is not None
        announced = False

        def deliver(group: EmissionGroup):
            nonlocal announced
            if announce and not announced:
                self.renderer.print_filename(source)
                announced = True
            for event in group.events():
                self.renderer.emit(event, source)

        return deliver

    def search_source(self, source: LineSource) -> InputReport:
        """Scans one input. LineSourceError is logged and recorded, not raised."""
        try:
            context = self.pipeline.run(source.open(), self._sink_for(source.name), source.name)
        except LineSourceError as e:
            logger.warning("Skipping %s: %s", source.label, e.reason)
            report = InputReport(source=source.label, error=e.reason)
        else:
            report = InputReport(
                source=source.label,
                matched=context.matched,
                match_count=context.match_count,
                lines_scanned=context.lines_scanned,
            )
        self.reports.append(report)
        return report

    def search(self, sources: Iterable[LineSource]) -> bool:
        """Scans every source in order. True if any of them matched."""
        matched = False
        for source in sources:
            matched |= self.search_source(source).matched
        return matched

    @property
    def had_errors(self) -> bool:
        return any(r.error for r in self.reports)

    def generate_summary(self) -> Dict[str, Any]:
        """Counters for the verbose log line at the end of a run."""
        return {
            "inputs": len(self.reports),
            "matched_inputs": sum(1 for r in self.reports if r.matched),
            "matches": sum(r.match_count for r in self.reports),
            "lines_scanned": sum(r.lines_scanned for r in self.reports),
            "errors": sum(1 for r in self.reports if r.error),
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }

#!/usr/bin/env python3
"""
OGREP SCAN CONTEXT
------------------
The record of a single input's scan. Created by the ScanPipeline when a
stream starts and filled in as lines go by; the engine turns it into the
per-input report once the stream ends.

Author: ogrep Team
Date: 2026-10-17
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ScanContext:
    """
    Maintains the counters of one scan. Nothing here outlives the input.
    """
    source: Optional[str] = None           # Path of the input, None for stdin
    lines_scanned: int = 0
    match_count: int = 0
    groups_emitted: int = 0
    max_depth: int = 0                     # Deepest ancestry seen, for diagnostics

    @property
    def matched(self) -> bool:
        return self.match_count > 0

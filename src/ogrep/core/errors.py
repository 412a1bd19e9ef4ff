#!/usr/bin/env python3
"""
OGREP ERRORS
------------
Exception taxonomy shared by the scanner, the engine and the CLI.
Every error maps to exit status 2 when it reaches the command line.

Author: ogrep Team
Date: 2026-10-17
"""


class OgrepError(Exception):
    """Base class for all failures ogrep reports to the user."""
    exit_code = 2


class InvalidPattern(OgrepError):
    """Raised before scanning when the search pattern does not compile."""


class ConfigConflict(OgrepError):
    """Raised when two settings contradict each other."""


class InvalidOptions(OgrepError):
    """Raised for a malformed config file or OGREP_OPTIONS value."""


class LineSourceError(OgrepError):
    """
    An input could not be read to the end. Fatal for that input only:
    the engine discards its pending output and moves on.
    """

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class GitGrepFailed(OgrepError):
    """git grep exited with a status other than 0 (found) or 1 (not found)."""

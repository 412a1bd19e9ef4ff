#!/usr/bin/env python3
"""
OGREP LINE SOURCES
------------------
Produces the `(line_number, text)` streams the scanner consumes: a file
on disk, standard input, or every file `git grep` reports as containing
the pattern. Read failures surface as LineSourceError so the engine can
skip that input and carry on.

Author: ogrep Team
Date: 2026-10-17
"""

import logging
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, TextIO, Tuple

from ogrep.core.errors import ConfigConflict, GitGrepFailed, LineSourceError
from ogrep.core.options import ScanOptions

logger = logging.getLogger("ogrep.sources")

NumberedLines = Iterator[Tuple[int, str]]
STDIN_NAME = "-"


@dataclass
class LineSource:
    """A named, restartable line stream. `name` is None for stdin."""
    name: Optional[str]
    open: Callable[[], NumberedLines]

    @property
    def label(self) -> str:
        return self.name if self.name is not None else "<stdin>"


def _numbered(handle: TextIO) -> NumberedLines:
    for number, text in enumerate(handle, 1):
        yield number, text


def read_file(path: Path) -> NumberedLines:
    """Yields the lines of `path`; invalid UTF-8 is replaced, not fatal."""
    try:
        handle = open(path, encoding='utf-8', errors='replace')
    except OSError as e:
        raise LineSourceError(str(path), e.strerror or str(e)) from e
    with handle:
        yield from _numbered(handle)


def file_source(path: str) -> LineSource:
    return LineSource(name=path, open=lambda: read_file(Path(path)))


def stdin_source(stream: Optional[TextIO] = None) -> LineSource:
    return LineSource(name=None, open=lambda: _numbered(stream or sys.stdin))


def input_sources(paths: Sequence[str]) -> List[LineSource]:
    """Sources for the command-line inputs; none or '-' means stdin."""
    if not paths:
        return [stdin_source()]
    return [stdin_source() if p == STDIN_NAME else file_source(p) for p in paths]


def git_grep_command(options: ScanOptions, pathspecs: Sequence[str]) -> List[str]:
    args = ["git", "grep", "--files-with-matches"]
    if options.ignore_case:
        args.append("--ignore-case")
    if not options.regex:
        args.append("--fixed-strings")
    if options.whole_word:
        args.append("--word-regexp")
    args += ["-e", options.pattern, "--"]
    args += list(pathspecs)
    return args


def git_grep_sources(options: ScanOptions, pathspecs: Sequence[str]) -> Iterator[LineSource]:
    """
    Lets git narrow the search down to candidate files, then yields one
    source per file. git exits 1 when nothing matched, which is not an error.
    """
    if not pathspecs or STDIN_NAME in pathspecs:
        raise ConfigConflict("--use-git-grep needs a path to search, not standard input")

    command = git_grep_command(options, pathspecs)
    logger.debug("Running %s", shlex.join(command))
    try:
        process = subprocess.Popen(command, stdout=subprocess.PIPE, text=True)
    except OSError as e:
        raise GitGrepFailed(f"git grep could not be started: {e}") from e

    with process:
        for entry in process.stdout:
            path = entry.rstrip('\n')
            if path:
                yield file_source(path)

    if process.returncode not in (0, 1):
        raise GitGrepFailed(f"git grep failed with exit status {process.returncode}")

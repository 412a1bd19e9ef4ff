#!/usr/bin/env python3
"""
OGREP SCAN PIPELINE - The Conductor
-----------------------------------
Runs one input through the scan in a strict per-line sequence:

    classify -> (directive | ancestry update) -> match -> assemble

A pipeline holds only configuration. Each call to `run` creates a fresh
stack, directive context and assembler, so inputs never share state and
running the same input twice yields the same groups.

Author: ogrep Team
Date: 2026-10-17
"""

import logging
from typing import Callable, Iterable, Optional, Tuple

from ogrep.core.errors import LineSourceError
from ogrep.core.models import EmissionGroup, SourceLine
from ogrep.core.options import ScanOptions
from ogrep.scanning.assembler import OutputAssembler
from ogrep.scanning.branches import BranchDetector
from ogrep.scanning.classifier import IndentClassifier
from ogrep.scanning.context import ScanContext
from ogrep.scanning.matcher import Matcher, build_matcher
from ogrep.scanning.preprocessor import PreprocessorContext
from ogrep.scanning.stack import ContextStack

logger = logging.getLogger("ogrep.pipeline")

GroupSink = Callable[[EmissionGroup], None]


class ScanPipeline:

    def __init__(self, options: ScanOptions, matcher: Optional[Matcher] = None):
        """
        Args:
            options: validated scan options, shared read-only.
            matcher: a prebuilt matcher; compiled from `options` if omitted.
        """
        self.options = options
        self.matcher = matcher or build_matcher(options)
        self.classifier = IndentClassifier(options.tab_width, options.preprocessor)
        self.detector = (BranchDetector(options.branch_openers, options.branch_markers)
                         if options.smart_branches else None)

    def run(self, lines: Iterable[Tuple[int, str]], sink: GroupSink,
            source: Optional[str] = None) -> ScanContext:
        """
        Scans `(line_number, text)` pairs and hands every completed group to
        `sink`. On a read failure the pending group is discarded and
        LineSourceError is raised.
        """
        context = ScanContext(source=source)
        stack = ContextStack(self.detector)
        directives = PreprocessorContext(self.options.preprocessor)

        def deliver(group: EmissionGroup):
            context.groups_emitted += 1
            sink(group)

        assembler = OutputAssembler(self.options, deliver)

        try:
            for number, raw in lines:
                self._process(number, raw, stack, directives, assembler, context)
        except LineSourceError:
            assembler.abort()
            raise
        except (OSError, UnicodeDecodeError) as e:
            assembler.abort()
            raise LineSourceError(source or "<stdin>", str(e)) from e

        assembler.finish()
        context.match_count = assembler.match_count
        logger.debug("Scanned %s: %d lines, %d matches, %d groups, depth %d",
                     source or "<stdin>", context.lines_scanned, context.match_count,
                     context.groups_emitted, context.max_depth)
        return context

    def _process(self, number: int, raw: str, stack: ContextStack,
                 directives: PreprocessorContext, assembler: OutputAssembler,
                 context: ScanContext):
        line = self.classifier.classify(number, raw, stack.top_indent)
        context.lines_scanned += 1

        if line.is_blank:
            assembler.observe(line)
            return

        if line.is_preprocessor:
            # Directives stand alone: they neither move nor join the ancestry.
            spans = self.matcher.find(line.text)
            if spans:
                assembler.on_match(line, [], spans)
            else:
                assembler.observe(line)
            directives.observe(line)
            return

        stack.advance(line)
        context.max_depth = max(context.max_depth, len(stack))

        spans = self.matcher.find(line.text)
        if spans:
            assembler.on_match(line, self._ancestors(line, stack, directives), spans)
        else:
            assembler.observe(line)

    def _ancestors(self, line: SourceLine, stack: ContextStack,
                   directives: PreprocessorContext) -> list:
        chain = stack.ancestors_of(line) + directives.chain()
        return sorted(chain, key=lambda l: l.number)

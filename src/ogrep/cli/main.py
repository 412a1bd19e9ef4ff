#!/usr/bin/env python3
"""
OGREP CLI - Outline Grep
------------------------
Command-line front end. Translates flags, the config file and
$OGREP_OPTIONS into one immutable ScanOptions value, picks the line
sources (files, stdin or git grep), and renders results through rich.

Exit status: 0 if any line matched, 1 if none did, 2 on error.

Author: ogrep Team
Date: 2026-10-17
"""

import sys
import argparse
import logging
from typing import List, Optional

from rich.console import Console

from ogrep.cli.formatter import COLOR_SCHEMES, OutputFormatter
from ogrep.config.settings import (CHOICES, OPTIONS_ENV, env_arguments, load_config,
                                   locate_config)
from ogrep.core.engine import SearchEngine
from ogrep.core.errors import OgrepError
from ogrep.core.models import FilenameMode, PreprocessorMode
from ogrep.core.options import (DEFAULT_BRANCH_MARKERS, DEFAULT_BRANCH_OPENERS,
                                DEFAULT_TAB_WIDTH, ScanOptions, resolve_context)
from ogrep.io.sources import git_grep_sources, input_sources

VERSION = "ogrep v0.4.0"

logger = logging.getLogger("ogrep.cli")

EPILOG = f"""\
environment variables:
  {OPTIONS_ENV}    default options, prepended to the command line
  OGREP_CONFIG     path of the YAML config file

exit status:
  0                some matches found
  1                no matches found
  2                an error occurred
"""


class OgrepCLI:
    """
    CLI wrapper that turns arguments into a SearchEngine run.
    """

    def __init__(self, stdout: Optional[Console] = None):
        """
        Args:
            stdout: console to render into; built from --color when omitted.
        """
        self.console = stdout
        self.parser = argparse.ArgumentParser(
            prog="ogrep",
            description="Outline grep: search a file and show the enclosing lines "
                        "of every match, found by indentation.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=EPILOG,
        )
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags."""
        p = self.parser
        p.add_argument("--version", action="version", version=VERSION)
        p.add_argument("pattern", help="Pattern to search for")
        p.add_argument("inputs", nargs="*", metavar="FILE",
                       help="Files to search in ('-' or nothing for standard input)")

        matching = p.add_argument_group("matching")
        matching.add_argument("-e", "--regex", action="store_true",
                              help="Treat pattern as a regular expression")
        matching.add_argument("-i", "--ignore-case", "--case-insensitive", dest="ignore_case",
                              action="store_true", help="Perform case-insensitive matching")
        matching.add_argument("-w", "--word", dest="whole_word", action="store_true",
                              help="Search for whole words matching pattern")

        context = p.add_argument_group("context")
        context.add_argument("-C", "--context", type=int, metavar="N",
                             help="Show N lines before and after each match")
        context.add_argument("-B", "--before", "--before-context", dest="before", type=int,
                             metavar="N", help="Show N lines before each match")
        context.add_argument("-A", "--after", "--after-context", dest="after", type=int,
                             metavar="N", help="Show N lines after each match")
        context.add_argument("--children", action="store_true",
                             help="Show all deeper-indented lines following each match")
        context.add_argument("--no-smart-branches", dest="smart_branches", action="store_false",
                             help="Don't keep 'if' headers for matches in 'else' branches")
        context.add_argument("--preprocessor", choices=CHOICES["preprocessor"],
                             default=PreprocessorMode.IGNORE.value,
                             help="How to treat preprocessor lines (default: ignore)")
        context.add_argument("--no-ignore-preprocessor", dest="preprocessor",
                             action="store_const", const=PreprocessorMode.PRESERVE.value,
                             help="Treat preprocessor lines like any other line")
        context.add_argument("--tab-width", type=int, default=DEFAULT_TAB_WIDTH, metavar="N",
                             help=f"Columns per tab stop (default: {DEFAULT_TAB_WIDTH})")

        output = p.add_argument_group("output")
        output.add_argument("--no-breaks", dest="breaks", action="store_false",
                            help="Don't separate disjoint groups with a blank line")
        output.add_argument("--ellipsis", action="store_true",
                            help="Mark skipped lines with an ellipsis and a count")
        names = output.add_mutually_exclusive_group()
        names.add_argument("--print-filename", choices=CHOICES["print_filename"],
                           help="When to print the file name")
        names.add_argument("-f", dest="print_filename", action="store_const",
                           const=FilenameMode.PER_FILE.value,
                           help="Shortcut for --print-filename=per-file")
        names.add_argument("-F", dest="print_filename", action="store_const",
                           const=FilenameMode.PER_LINE.value,
                           help="Shortcut for --print-filename=per-line")
        output.add_argument("--color", choices=CHOICES["color"], default="auto",
                            help="Whether to use colors (default: auto)")
        output.add_argument("--color-scheme", choices=sorted(COLOR_SCHEMES), default="grey",
                            help="Color scheme (default: grey)")
        output.add_argument("--no-pager", dest="pager", action="store_false",
                            help="Don't page output even on a terminal")

        p.add_argument("-g", "--use-git-grep", action="store_true",
                       help="Let git grep pick the files to search")
        p.add_argument("--config", metavar="PATH", help="YAML config file")
        p.add_argument("-v", "--verbose", action="count", default=0,
                       help="Log progress to stderr (-vv for debug)")

        p.set_defaults(branch_openers=DEFAULT_BRANCH_OPENERS,
                       branch_markers=DEFAULT_BRANCH_MARKERS)

    def _apply_config(self, argv: List[str]):
        """Loads the config file named by argv, $OGREP_CONFIG or the default path."""
        pre = argparse.ArgumentParser(add_help=False)
        pre.add_argument("--config")
        known, _ = pre.parse_known_args(argv)
        path = locate_config(known.config)
        if path is not None:
            self.parser.set_defaults(**load_config(path))

    def build_options(self, args: argparse.Namespace) -> ScanOptions:
        """Resolves parsed arguments into the immutable scan configuration."""
        before, after = resolve_context(args.context, args.before, args.after)

        if args.print_filename is not None:
            filename_mode = FilenameMode(args.print_filename)
        elif args.use_git_grep or len(args.inputs) > 1:
            filename_mode = FilenameMode.PER_FILE
        else:
            filename_mode = FilenameMode.NO

        return ScanOptions(
            pattern=args.pattern,
            regex=args.regex,
            ignore_case=args.ignore_case,
            whole_word=args.whole_word,
            before=before,
            after=after,
            children=args.children,
            breaks=args.breaks,
            ellipsis=args.ellipsis,
            smart_branches=args.smart_branches,
            preprocessor=PreprocessorMode(args.preprocessor),
            tab_width=args.tab_width,
            branch_openers=tuple(args.branch_openers),
            branch_markers=tuple(args.branch_markers),
            print_filename=filename_mode,
            use_git_grep=args.use_git_grep,
        )

    def _build_console(self, args: argparse.Namespace) -> Console:
        if self.console is not None:
            return self.console
        if args.color == "always":
            return Console(force_terminal=True, highlight=False)
        if args.color == "never":
            return Console(color_system=None, highlight=False)
        return Console(highlight=False)

    def _configure_logging(self, verbosity: int):
        level = logging.WARNING
        if verbosity == 1:
            level = logging.INFO
        elif verbosity > 1:
            level = logging.DEBUG
        logging.basicConfig(level=level, stream=sys.stderr,
                            format="ogrep: %(levelname)s: %(name)s: %(message)s")

    def _search(self, args: argparse.Namespace, options: ScanOptions) -> int:
        console = self._build_console(args)
        formatter = OutputFormatter(console, args.color_scheme, options.print_filename)
        engine = SearchEngine(options, formatter)

        if options.use_git_grep:
            sources = git_grep_sources(options, args.inputs)
        else:
            sources = input_sources(args.inputs)

        if args.pager and console.is_terminal:
            with console.pager(styles=True):
                matched = engine.search(sources)
        else:
            matched = engine.search(sources)

        logger.info("Summary: %s", engine.generate_summary())
        if matched:
            return 0
        return 2 if engine.had_errors else 1

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary entry point. Returns the process exit status."""
        argv = sys.argv[1:] if argv is None else list(argv)
        try:
            argv = env_arguments() + argv
            self._apply_config(argv)
            args = self.parser.parse_args(argv)
            self._configure_logging(args.verbose)
            options = self.build_options(args)
            return self._search(args, options)
        except OgrepError as e:
            print(f"ogrep: {e}", file=sys.stderr)
            return e.exit_code


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(OgrepCLI().run())
    except KeyboardInterrupt:
        print("\nogrep: terminated by user.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()

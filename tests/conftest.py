"""
Shared fixtures for the ogrep test suite.

Scenarios are written in an outline notation. Every line starts with a
two-character marker followed by the source text:

    "o " the line is part of the input and must be printed,
    ". " the line is part of the input and must be omitted,
    "~ " the text is an output-only line (a break or ellipsis marker).

A line holding just "~" stands for an empty separator line.
"""

import io

import pytest
from rich.console import Console

from ogrep.cli.formatter import OutputFormatter
from ogrep.core.engine import SearchEngine
from ogrep.core.options import ScanOptions
from ogrep.io.sources import stdin_source


def parse_outline(outline_text: str):
    source, expected = [], []
    for raw in outline_text.splitlines():
        line = raw.lstrip()
        if not line:
            continue
        if line == "~":
            expected.append("")
            continue
        marker, text = (line + " ")[:2], line[2:]
        assert marker in ("o ", ". ", "~ "), f"bad outline marker in {raw!r}"
        if marker == "~ ":
            expected.append(text)
            continue
        source.append(text)
        if marker == "o ":
            expected.append(f"{len(source):4}: {text}")
    return source, expected


def render(options: ScanOptions, lines, name=None) -> str:
    """Runs a full search over `lines` and returns the plain-text output."""
    buffer = io.StringIO()
    console = Console(file=buffer, color_system=None, width=200, highlight=False)
    formatter = OutputFormatter(console, "grey", options.print_filename)
    engine = SearchEngine(options, formatter)
    source = stdin_source(io.StringIO("".join(f"{l}\n" for l in lines)))
    source.name = name
    engine.search([source])
    return buffer.getvalue()


def normalize(output: str):
    return [line.rstrip() for line in output.splitlines()]


@pytest.fixture
def outline():
    """
    Returns check(outline_text, **options): searches the outline's input
    and asserts the printed lines equal the lines marked for output.
    """
    def check(outline_text: str, pattern: str = "bla", **options):
        source, expected = parse_outline(outline_text)
        output = render(ScanOptions(pattern=pattern, **options), source)
        assert normalize(output) == [e.rstrip() for e in expected]
        return output

    return check


@pytest.fixture
def search_output():
    """Returns render(options, lines, name=None) -> plain-text output."""
    return render

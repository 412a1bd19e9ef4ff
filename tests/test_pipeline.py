"""
Pipeline-level properties: which line numbers are emitted, how they are
grouped, and what happens when the line source fails half way.
"""

import pytest

from ogrep.core.errors import LineSourceError
from ogrep.core.models import Break, BreakKind, PrintLine, PreprocessorMode
from ogrep.core.options import ScanOptions
from ogrep.scanning.pipeline import ScanPipeline


def numbered(lines):
    return list(enumerate(lines, 1))


def collect(options, lines):
    groups = []
    context = ScanPipeline(options).run(numbered(lines), groups.append)
    return groups, context


def emitted_numbers(groups):
    return [pl.number for g in groups for pl in g.lines]


def test_nested_build_file_scenario():
    """A match deep inside a build file shows its whole path, in one group."""
    lines = ["x = 1"] * 409
    lines[102 - 1] = 'component("net") {'
    for n in range(103, 385):
        lines[n - 1] = "  dep = 1"
    lines[385 - 1] = "  if (!is_nacl) {"
    lines[386 - 1] = "    sources += ["
    for n in range(387, 409):
        lines[n - 1] = '      "base/other.cc",'
    lines[409 - 1] = '      "base/arena.cc",'

    groups, context = collect(ScanOptions(pattern="arena.cc"), lines)

    assert emitted_numbers(groups) == [102, 385, 386, 409]
    assert len(groups) == 1
    assert groups[0].leading_break is None
    assert context.matched


def test_smart_branch_keeps_original_condition():
    lines = ["if (cond) {", "  x", "} else {", "  target", "}"]
    groups, _ = collect(ScanOptions(pattern="target"), lines)
    numbers = emitted_numbers(groups)
    assert 1 in numbers and 4 in numbers
    assert numbers == [1, 3, 4]


def test_preprocessor_line_does_not_pop_the_stack():
    lines = [
        "void f() {",
        "  if (x) {",
        "#define X 1",
        "    target();",
        "  }",
        "}",
    ]
    groups, _ = collect(ScanOptions(pattern="target"), lines)
    assert emitted_numbers(groups) == [1, 2, 4]


def test_preprocessor_line_pops_when_not_ignored():
    lines = ["void f() {", "  if (x) {", "#define X 1", "    target();"]
    options = ScanOptions(pattern="target", preprocessor=PreprocessorMode.PRESERVE)
    groups, _ = collect(options, lines)
    assert emitted_numbers(groups) == [3, 4]


def test_preprocessor_line_matches_standalone():
    lines = ["void f() {", "  if (x) {", "#define TARGET 1", "  }"]
    groups, _ = collect(ScanOptions(pattern="TARGET"), lines)
    assert emitted_numbers(groups) == [3]
    assert groups[0].lines[0].is_match


SAMPLE = [
    "module alpha",
    "  def bravo",
    "    charlie",
    "",
    "    if delta",
    "      echo",
    "    else",
    "      foxtrot",
    "#pragma golf",
    "  def hotel",
    "\tindia",
    "      juliet",
    "kilo",
]


def reference_ancestors(lines, target, tab_width=4):
    """Nearest strictly shallower prior line, repeatedly, skipping blanks and directives."""
    def indent(text):
        return len(text.expandtabs(tab_width)) - len(text.expandtabs(tab_width).lstrip())

    current = indent(lines[target - 1])
    found = []
    for number in range(target - 1, 0, -1):
        text = lines[number - 1]
        if not text.strip() or text.lstrip().startswith("#"):
            continue
        if indent(text) < current:
            found.append(number)
            current = indent(text)
    return sorted(found)


@pytest.mark.parametrize("word", [
    "alpha", "bravo", "charlie", "delta", "echo", "foxtrot", "hotel", "india", "juliet", "kilo",
])
def test_ancestors_equal_upward_scan_without_smart_branches(word):
    target = next(n for n, text in enumerate(SAMPLE, 1) if word in text)
    options = ScanOptions(pattern=word, whole_word=True, smart_branches=False)
    groups, _ = collect(options, SAMPLE)
    assert emitted_numbers(groups) == reference_ancestors(SAMPLE, target) + [target]


def test_scan_is_deterministic():
    options = ScanOptions(pattern="e", before=1, after=1, ellipsis=True)
    first, _ = collect(options, SAMPLE)
    second, _ = collect(options, SAMPLE)
    assert [g.events() for g in first] == [g.events() for g in second]


def test_exactly_one_break_per_gap():
    lines = ["a", "  hit", "  hit", "  x", "b", "  c", "  hit", "  y", "d", "  hit"]
    groups, _ = collect(ScanOptions(pattern="hit"), lines)
    events = [e for g in groups for e in g.events()]

    for index, event in enumerate(events):
        if isinstance(event, Break):
            # A break only ever stands between two non-consecutive lines.
            before, after = events[index - 1], events[index + 1]
            assert isinstance(before, PrintLine) and isinstance(after, PrintLine)
            assert after.number > before.number + 1

    breaks = [e for e in events if isinstance(e, Break)]
    assert breaks == [Break(BreakKind.BLANK), Break(BreakKind.BLANK)]
    assert [g.first_number for g in groups] == [1, 5, 9]


def test_ellipsis_counts_skipped_lines():
    lines = ["a", "  hit", "  x", "  y", "  z", "  hit"]
    groups, _ = collect(ScanOptions(pattern="hit", ellipsis=True), lines)
    assert groups[1].leading_break == Break(BreakKind.ELLIPSIS, 3)


def test_after_context_is_flushed_at_end_of_stream():
    lines = ["a", "  hit", "  tail 1", "  tail 2"]
    groups, _ = collect(ScanOptions(pattern="hit", after=5), lines)
    assert emitted_numbers(groups) == [1, 2, 3, 4]


def test_match_spans_refer_to_original_text():
    groups, _ = collect(ScanOptions(pattern="ARENA", ignore_case=True), ["  use arena here"])
    match = groups[0].lines[-1]
    assert match.is_match
    assert match.spans == ((6, 11),)


def failing_source(lines, fail_after):
    for number, text in numbered(lines):
        if number > fail_after:
            raise OSError("device went away")
        yield number, text


def test_read_failure_discards_pending_group():
    groups = []
    pipeline = ScanPipeline(ScanOptions(pattern="hit"))
    with pytest.raises(LineSourceError) as excinfo:
        pipeline.run(failing_source(["a", "  hit", "  more"], 2), groups.append, "broken.c")
    assert groups == []
    assert excinfo.value.source == "broken.c"


def test_read_failure_keeps_completed_groups():
    groups = []
    lines = ["a", "  hit", "b", "c", "  hit", "d"]
    pipeline = ScanPipeline(ScanOptions(pattern="hit"))
    with pytest.raises(LineSourceError):
        pipeline.run(failing_source(lines, 5), groups.append)
    assert emitted_numbers(groups) == [1, 2]


def test_children_groups_carry_no_blank_break():
    lines = ["def hit():", "  a", "x = 1", "y = 2", "def hit2():", "  b"]
    groups, _ = collect(ScanOptions(pattern="hit", children=True), lines)
    assert [(g.leading_break, [pl.number for pl in g.lines]) for g in groups] == [
        (None, [1, 2]), (None, [5, 6]),
    ]


def test_no_breaks_still_splits_groups_silently():
    lines = ["a", "  hit", "  x", "b", "  hit"]
    groups, _ = collect(ScanOptions(pattern="hit", breaks=False), lines)
    assert [g.leading_break for g in groups] == [None, None]
    assert emitted_numbers(groups) == [1, 2, 4, 5]

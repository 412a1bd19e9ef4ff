# src/ogrep/cli/formatter.py
from typing import Optional, Union

from rich.console import Console
from rich.style import Style
from rich.text import Text

from ogrep.core.models import Break, BreakKind, FilenameMode, PrintLine

# Styles per scheme: (filename, matched part, context line)
COLOR_SCHEMES = {
    "grey": {
        "filename": Style(underline=True),
        "match": Style(bold=True),
        "context": Style(dim=True),
    },
    "colored": {
        "filename": Style(color="blue"),
        "match": Style(color="red"),
        "context": Style(dim=True),
    },
}


class OutputFormatter:
    """
    OutputFormatter: renders the scanner's PrintLine and Break events.
    Lines look like '  42: text'; match spans and context lines are
    styled according to the colour scheme.
    """

    def __init__(self, console: Console, scheme: str = "grey",
                 filename_mode: FilenameMode = FilenameMode.NO):
        self.console = console
        self.styles = COLOR_SCHEMES[scheme]
        self.filename_mode = filename_mode

    def _print(self, text: Text):
        # soft_wrap keeps long source lines on one terminal line
        self.console.print(text, soft_wrap=True, highlight=False)

    def print_filename(self, source: str):
        """Header printed once before the first group of a file."""
        self.console.print()
        self._print(Text(source, style=self.styles["filename"]))
        self.console.print()

    def emit(self, event: Union[PrintLine, Break], source: Optional[str] = None):
        if isinstance(event, Break):
            self.print_break(event)
        else:
            self.print_line(event, source)

    def print_break(self, event: Break):
        if event.kind is BreakKind.BLANK:
            self.console.print()
            return
        noun = "line" if event.count == 1 else "lines"
        self._print(Text(f"   … ({event.count} {noun} skipped)", style=self.styles["context"]))

    def print_line(self, line: PrintLine, source: Optional[str] = None):
        text = Text()
        if self.filename_mode is FilenameMode.PER_LINE and source is not None:
            text.append(f"{source}:", style=self.styles["filename"])
        text.append(f"{line.number:4}: ")

        if line.is_match:
            body = Text(line.text)
            for start, end in line.spans:
                if end > start:
                    body.stylize(self.styles["match"], start, end)
        else:
            body = Text(line.text, style=self.styles["context"])

        text.append_text(body)
        self._print(text)

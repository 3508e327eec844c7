"""
report.py
---------

Per-file console report.

Prints one block per file:

    Path: /photos/image.txt
    Name: image.txt
    Current:  txt
    Detected: png

followed by the rename line (`old -> new`) when a file is changed.
In silent mode only the rename, conflict and failure lines are printed.

Uses `rich` for rendering; with color off the console is plain text.
"""

from rich.console import Console
from rich.text import Text

from .apply import CONFLICT, DRY_RUN, RENAME_FAILED, RENAMED
from .decision import Mismatch, UnknownSignature, Unreadable
from .resolver import canonical_extension

NO_EXTENSION = "No extension"
NOT_DETECTED = "Not detected"

GOOD = "bright_green"
BAD = "bright_red"
WARN = "yellow"


def make_console(color=False, file=None):
    """Console used for all user-facing output."""
    return Console(
        file=file,
        no_color=not color,
        color_system="auto" if color else None,
        highlight=False,
        soft_wrap=True,
    )


def detected_label(candidate, outcome):
    if isinstance(outcome, Unreadable):
        return f"Error: {outcome.reason}"
    if isinstance(outcome, UnknownSignature):
        return NOT_DETECTED
    return canonical_extension(candidate.detected)


class Reporter:
    def __init__(self, console=None, color=False, silent=False, only_different=False):
        self.color = color
        self.console = console or make_console(color)
        self.silent = silent
        self.only_different = only_different

    def _styled(self, label, value, style):
        line = Text(label)
        line.append(value, style=style if self.color else None)
        return line

    def file(self, candidate, outcome, result):
        """Print the block for one processed file; silent keeps only the rename line."""
        different = isinstance(outcome, Mismatch)
        if not self.silent and (different or not self.only_different):
            self._block(candidate, outcome, different)
        self._action(result)

    def _block(self, candidate, outcome, different):
        current = candidate.extension
        detected = detected_label(candidate, outcome)
        detected_ok = not isinstance(outcome, (UnknownSignature, Unreadable))

        self.console.print()
        self.console.print(self._styled("Path: ", candidate.path, GOOD))
        self.console.print(self._styled("Name: ", candidate.name, GOOD))
        self.console.print(
            self._styled("Current:  ", current or NO_EXTENSION, BAD if different else (GOOD if current else WARN))
        )
        self.console.print(self._styled("Detected: ", detected, GOOD if detected_ok else WARN))

    def _action(self, result):
        if result.status == RENAMED:
            self.console.print(Text(f"{result.old_path} -> {result.new_path}"))
        elif result.status == DRY_RUN:
            self.console.print(Text(f"(dry run) {result.old_path} -> {result.new_path}"))
        elif result.status == CONFLICT:
            self.console.print(
                self._styled("Conflict: ", f"{result.new_path} ({result.detail})", BAD)
            )
        elif result.status == RENAME_FAILED:
            self.console.print(self._styled("Could not rename file: ", result.detail or "", BAD))

    def line(self, msg, style=None):
        self.console.print(Text(str(msg), style=style if self.color else None))

"""
logger.py
---------

Run log for kti.

Lines are timestamped text (`[YYYY-mm-dd HH:MM:SS] msg`) or JSONL
(`{"ts": ..., "msg": ...}`). They are buffered and appended to the log
file in batches; without a log file nothing touches the disk.
"""

import json
from datetime import datetime

FORMATS = ("text", "jsonl")


class BufferedLogger:
    """
    Collects log lines for one run.

    Args:
        log_path: file the lines are appended to (None = no file)
        buffer_limit: lines held before an automatic flush
        mirror_to_console: also print each line
        log_format: "text" or "jsonl"
        keep_lines: keep every line in `lines` for later inspection
    """

    def __init__(
        self,
        log_path=None,
        buffer_limit=200,
        mirror_to_console=False,
        log_format="text",
        keep_lines=False,
    ):
        self.log_format = (log_format or "text").lower()
        if self.log_format not in FORMATS:
            raise ValueError(f"Unknown log format: {log_format!r}")

        self.log_path = log_path or None
        self.buffer_limit = buffer_limit
        self.mirror = mirror_to_console
        self.pending = []
        self.lines = [] if keep_lines else None

    def render(self, msg, now=None):
        now = now or datetime.now()
        if self.log_format == "jsonl":
            return json.dumps({"ts": now.isoformat(timespec="seconds"), "msg": str(msg)}, ensure_ascii=False)
        return f"[{now:%Y-%m-%d %H:%M:%S}] {msg}"

    def log(self, msg):
        line = self.render(msg)

        if self.mirror:
            print(line, flush=True)
        if self.lines is not None:
            self.lines.append(line)

        if self.log_path is None:
            return

        self.pending.append(line)
        if len(self.pending) >= self.buffer_limit:
            self.flush()

    def flush(self):
        """Append pending lines to the log file. Safe to call repeatedly."""
        if not self.pending:
            return

        text = "\n".join(self.pending) + "\n"
        self.pending = []
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(text)

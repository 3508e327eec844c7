"""
tool.py
-------

Command-line entry point for kti.

Provides:
- Argument parsing
- Settings assembly (defaults, persistent config, CLI overrides)
- Logger and reporter setup
- Pipeline launch
- Diagnostics summary generation

Exit status:
    0  run completed (per-file failures included)
    1  target path or settings unusable
    2  bad arguments (argparse)
"""

import argparse
import sys

from .config import CONFIG_FILE, build_settings, save_persistent_config
from .diagnostics import LEVELS, differences, generate_summary
from .errors import KtiError
from .logger import BufferedLogger
from .pipeline import ExtensionFixer
from .report import Reporter, make_console

DESCRIPTION = "A simple tool to correct file extensions to match their file signatures."


# ------------------------------------------------------------
# Runner
# ------------------------------------------------------------
def run(settings, logger=None, console=None):
    """
    Run kti with already-built settings.

    Returns the stats dict.
    """
    if logger is None:
        logger = BufferedLogger(
            log_path=settings.get("LOG_FILE") or None,
            mirror_to_console=settings.get("LOG_TO_CONSOLE", False),
            log_format=settings.get("LOG_FORMAT", "text"),
        )

    color = bool(settings.get("COLOR"))
    reporter = Reporter(
        console=console or make_console(color),
        color=color,
        silent=settings.get("SILENT", False),
        only_different=settings.get("ONLY_DIFFERENT", False),
    )

    try:
        fixer = ExtensionFixer(settings=settings, logger=logger, reporter=reporter)
        stats = fixer.run()

        if settings.get("SILENT"):
            # the count is still printed; the breakdown only goes to the log
            reporter.line(f"Differences found: {differences(stats)}")
            generate_summary(stats, settings.get("DIAGNOSTIC_LEVEL", 1), logger)
        else:
            generate_summary(stats, settings.get("DIAGNOSTIC_LEVEL", 1), logger, reporter)
        return stats
    finally:
        logger.flush()


# ------------------------------------------------------------
# CLI
# ------------------------------------------------------------
def build_parser():
    parser = argparse.ArgumentParser(prog="kti", description=DESCRIPTION)
    _add_arguments(parser)
    return parser


def _add_switch(parser, *flags, dest, help, off):
    """Add an on/off pair; both leave the setting as None when absent."""
    long_flag = next(f for f in flags if f.startswith("--"))
    parser.add_argument(*flags, dest=dest, action="store_true", default=None, help=help)
    parser.add_argument(
        "--no-" + long_flag[2:], dest=dest, action="store_false", default=None, help=off,
    )


def _add_arguments(parser):
    parser.add_argument("path", nargs="?", help="File or directory to check (default: current directory)")
    parser.add_argument("--file", dest="SINGLE_FILE", metavar="FILE", help="Check a single file")
    _add_switch(
        parser, "-a", "-.", "--show-hidden", dest="SHOW_HIDDEN",
        help="Do not ignore hidden files", off="Skip hidden files",
    )
    parser.add_argument(
        "-m", "--max-depth", dest="MAX_DEPTH", type=int, metavar="INTEGER",
        help="Directory levels to descend below the target (0 = target's own files)",
    )
    _add_switch(
        parser, "-d", "--only-diff", dest="ONLY_DIFFERENT",
        help="Only print files with different file extensions", off="Print every file",
    )
    _add_switch(
        parser, "-s", "--silent", dest="SILENT",
        help="Only print renames and the differences count", off="Print per-file results",
    )
    _add_switch(
        parser, "-L", "--follow-links", dest="FOLLOW_LINKS",
        help="Follow symbolic links to directories", off="Do not follow directory links",
    )
    parser.add_argument(
        "-n", "--dry-run", dest="DRY_RUN", action="store_true", default=None,
        help="Run without changing any file",
    )
    _add_switch(
        parser, "-c", "--color", dest="COLOR",
        help="Add colors to the output", off="Plain output",
    )
    parser.add_argument(
        "--level", dest="DIAGNOSTIC_LEVEL", type=int, choices=LEVELS,
        help="Summary detail (1=Standard, 2=Deep, 3=Forensic)",
    )
    parser.add_argument("--log", dest="LOG_FILE", metavar="FILE", help="Write the run log to FILE")
    parser.add_argument(
        "--json", dest="LOG_FORMAT", action="store_const", const="jsonl",
        help="Write log lines as JSON",
    )
    parser.add_argument(
        "--text", dest="LOG_FORMAT", action="store_const", const="text",
        help="Write log lines as plain text",
    )
    _add_switch(
        parser, "-v", "--verbose", dest="LOG_TO_CONSOLE",
        help="Mirror log lines to the console", off="Keep log lines off the console",
    )
    parser.add_argument(
        "-i", "--interactive", dest="INTERACTIVE_MODE", action="store_true", default=None,
        help="Review settings interactively before running",
    )
    parser.add_argument("--config-dir", help="Directory holding kti.json")
    parser.add_argument(
        "--save-config", action="store_true",
        help="Remember the given options in kti.json",
    )


def _overrides_from_args(args):
    overrides = {}

    if args.path:
        overrides["TARGET_PATH"] = args.path

    for key in (
        "SINGLE_FILE",
        "SHOW_HIDDEN",
        "MAX_DEPTH",
        "ONLY_DIFFERENT",
        "SILENT",
        "FOLLOW_LINKS",
        "DRY_RUN",
        "COLOR",
        "DIAGNOSTIC_LEVEL",
        "LOG_FILE",
        "LOG_FORMAT",
        "LOG_TO_CONSOLE",
        "INTERACTIVE_MODE",
    ):
        val = getattr(args, key, None)
        if val is not None:
            overrides[key] = val

    return overrides


def main(argv=None):
    """
    Standard entry point (console script and `python -m kti`).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = build_settings(_overrides_from_args(args), config_dir=args.config_dir)

        if args.save_config:
            if not save_persistent_config(settings, CONFIG_FILE, config_dir=args.config_dir):
                print("[WARN] Could not save settings.", file=sys.stderr, flush=True)

        run(settings)
    except KtiError as e:
        print(f"[ERROR] {e}", file=sys.stderr, flush=True)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr, flush=True)
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())

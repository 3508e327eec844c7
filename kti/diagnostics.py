"""
diagnostics.py
--------------

End-of-run summary.

Features:
- Three diagnostic levels (1 = Standard, 2 = Deep, 3 = Forensic)
- Categorized result tracking
- Output to both console and log

This module does NOT perform detection or renaming.
It only organizes and reports results.
"""

import binascii

from .matcher import read_header

LEVELS = (1, 2, 3)


# ------------------------------------------------------------
# Result categories
# ------------------------------------------------------------
def init_stats():
    """
    Returns a dictionary of categorized path lists.
    unreadable holds (path, reason); rename_conflict and rename_failed
    hold (path, new_path, detail). Everything else holds paths.
    """
    return {
        "match": [],
        "mismatch": [],
        "renamed": [],
        "dry_run": [],
        "unknown": [],
        "zero_byte": [],
        "unreadable": [],
        "rename_conflict": [],
        "rename_failed": [],
    }


def differences(stats):
    """Files whose extension disagrees with their signature."""
    return len(stats["mismatch"])


# ------------------------------------------------------------
# Helper: write to console + log
# ------------------------------------------------------------
def out(msg, logger, reporter=None):
    if reporter is not None:
        reporter.line(msg)
    if msg:
        logger.log(msg)


# ------------------------------------------------------------
# Diagnostic Level 1 (Standard)
# ------------------------------------------------------------
def summary_level_1(stats, logger, reporter=None):
    out("", logger, reporter)
    out(f"Differences found: {differences(stats)}", logger, reporter)

    def count(key):
        return len(stats[key])

    out(f"  Renamed: {count('renamed')}", logger, reporter)
    out(f"  Would rename (dry run): {count('dry_run')}", logger, reporter)
    out(f"  Rename conflicts: {count('rename_conflict')}", logger, reporter)
    out(f"  Rename failures: {count('rename_failed')}", logger, reporter)
    out(f"Already correct extension: {count('match')}", logger, reporter)
    out(f"Unknown format: {count('unknown') + count('zero_byte')}", logger, reporter)
    out(f"Unreadable files: {count('unreadable')}", logger, reporter)


# ------------------------------------------------------------
# Diagnostic Level 2 (Deep)
# ------------------------------------------------------------
def classify_unknown_header(header):
    """Rough family of an unrecognized header."""
    if header.startswith(b"RIFF"):
        return "riff"
    if header[4:8] == b"ftyp":
        return "iso"
    if header.startswith(b"PK"):
        return "zip"
    if header.startswith(b"\xFF\xD8"):
        return "jpeg"
    return "other"


def summary_level_2(stats, logger, reporter=None):
    summary_level_1(stats, logger, reporter)

    out("", logger, reporter)
    out("=== DEEP DIAGNOSTICS ===", logger, reporter)

    if stats["unknown"] or stats["zero_byte"]:
        out("Unknown Format Breakdown:", logger, reporter)
        out(f"  Zero-byte files: {len(stats['zero_byte'])}", logger, reporter)

        families = {"riff": 0, "iso": 0, "zip": 0, "jpeg": 0, "other": 0}
        for path in stats["unknown"]:
            try:
                header = read_header(path, 16)
            except OSError:
                continue
            families[classify_unknown_header(header)] += 1

        out(f"  RIFF-like unknowns: {families['riff']}", logger, reporter)
        out(f"  ISO BMFF-like unknowns: {families['iso']}", logger, reporter)
        out(f"  ZIP-like unknowns: {families['zip']}", logger, reporter)
        out(f"  JPEG-like unknowns: {families['jpeg']}", logger, reporter)
        out(f"  Completely unrecognized: {families['other']}", logger, reporter)

    if stats["unreadable"]:
        out("Unreadable Files:", logger, reporter)
        for path, reason in stats["unreadable"]:
            out(f"  {path} ({reason})", logger, reporter)

    if stats["rename_conflict"]:
        out("Rename Conflicts:", logger, reporter)
        for path, new_path, detail in stats["rename_conflict"]:
            out(f"  {path} -> {new_path} ({detail})", logger, reporter)

    if stats["rename_failed"]:
        out("Rename Failures:", logger, reporter)
        for path, new_path, detail in stats["rename_failed"]:
            out(f"  {path} -> {new_path}: {detail}", logger, reporter)


# ------------------------------------------------------------
# Diagnostic Level 3 (Forensic)
# ------------------------------------------------------------
def summary_level_3(stats, logger, reporter=None):
    summary_level_2(stats, logger, reporter)

    out("", logger, reporter)
    out("=== FORENSIC MODE ===", logger, reporter)

    if stats["unknown"]:
        out("Hex Signatures of Unknown Files:", logger, reporter)
        for path in stats["unknown"]:
            try:
                hexstr = binascii.hexlify(read_header(path, 16)).decode("ascii")
            except OSError:
                hexstr = "<unreadable>"
            out(f"  {path}: {hexstr}", logger, reporter)


# ------------------------------------------------------------
# Main summary dispatcher
# ------------------------------------------------------------
def generate_summary(stats, diagnostic_level, logger, reporter=None):
    """
    Dispatches to the appropriate summary generator.
    """
    if diagnostic_level == 1:
        summary_level_1(stats, logger, reporter)
    elif diagnostic_level == 2:
        summary_level_2(stats, logger, reporter)
    else:
        summary_level_3(stats, logger, reporter)

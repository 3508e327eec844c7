"""
pipeline.py
-----------

Runs a whole extension-fixing pass.

Responsibilities:
- Walk the target (file or directory) lazily
- Evaluate each Candidate with the decision engine
- Rename or report through the apply stage
- Keep renames distinct within one run
- Log every decision and collect stats for diagnostics

Files are handled one at a time; each is finished before the next is
pulled from the walker.
"""

from .apply import CONFLICT, DRY_RUN, RENAME_FAILED, RENAMED, apply
from .decision import DecisionEngine, Match, Mismatch, UnknownSignature, Unreadable
from .diagnostics import init_stats
from .path_utils import is_zero_byte
from .resolver import canonical_extension
from .walker import walk

# categories that each hold exactly one entry per visited file
_FILE_KEYS = ("match", "mismatch", "unknown", "zero_byte", "unreadable")


class ExtensionFixer:
    """
    Processes every file under settings["TARGET_PATH"].

    Settings used:
        TARGET_PATH, DRY_RUN, MAX_DEPTH, SHOW_HIDDEN, FOLLOW_LINKS
    """

    def __init__(self, settings, logger, reporter=None, engine=None):
        self.settings = settings
        self.logger = logger
        self.reporter = reporter
        self.engine = engine or DecisionEngine()
        self.stats = init_stats()
        self.claimed = set()
        self.vacated = set()

    @property
    def dry_run(self):
        return bool(self.settings.get("DRY_RUN", False))

    def candidates(self):
        settings = self.settings
        return walk(
            settings["TARGET_PATH"],
            max_depth=settings.get("MAX_DEPTH"),
            skip_hidden=not settings.get("SHOW_HIDDEN", False),
            follow_links=settings.get("FOLLOW_LINKS", False),
            on_error=self._on_walk_error,
        )

    def run(self):
        """
        Process every candidate and return the stats dict.

        Raises RootPathError if the target itself is unusable.
        """
        target = self.settings["TARGET_PATH"]
        mode = "dry run" if self.dry_run else "fixing"
        self.logger.log(f"Scanning: {target} ({mode})")

        for candidate in self.candidates():
            self.process(candidate)

        total = sum(len(self.stats[key]) for key in _FILE_KEYS)
        self.logger.log(f"Finished: {total} files")
        return self.stats

    def process(self, candidate):
        outcome = self.engine.evaluate(candidate)
        result = apply(candidate, outcome, self.dry_run, self.claimed, self.vacated)
        self._record(candidate, outcome, result)
        if self.reporter is not None:
            self.reporter.file(candidate, outcome, result)
        return result

    # --------------------------------------------------------
    # Stats + log
    # --------------------------------------------------------
    def _record(self, candidate, outcome, result):
        stats = self.stats
        logger = self.logger
        path = candidate.path

        if isinstance(outcome, Match):
            stats["match"].append(path)
            logger.log(f"OK correct ext: {path}")
            return

        if isinstance(outcome, Unreadable):
            stats["unreadable"].append((path, outcome.reason))
            logger.log(f"SKIP unreadable: {path} ({outcome.reason})")
            return

        if isinstance(outcome, UnknownSignature):
            if is_zero_byte(path):
                stats["zero_byte"].append(path)
                logger.log(f"SKIP zero-byte: {path}")
            else:
                stats["unknown"].append(path)
                logger.log(f"SKIP unknown type: {path}")
            return

        if not isinstance(outcome, Mismatch):
            raise TypeError(f"Unexpected outcome: {outcome!r}")

        stats["mismatch"].append(path)
        ext = canonical_extension(candidate.detected)

        if result.status == RENAMED:
            stats["renamed"].append(path)
            logger.log(f"RENAME: {path} -> {result.new_path} (type: {ext})")
        elif result.status == DRY_RUN:
            stats["dry_run"].append(path)
            logger.log(f"DRY-RUN: {path} -> {result.new_path} (type: {ext})")
        elif result.status == CONFLICT:
            stats["rename_conflict"].append((path, result.new_path, result.detail))
            logger.log(f"CONFLICT: {path} -> {result.new_path} ({result.detail})")
        elif result.status == RENAME_FAILED:
            stats["rename_failed"].append((path, result.new_path, result.detail))
            logger.log(f"ERROR renaming {path}: {result.detail}")

    def _on_walk_error(self, path, error):
        self.logger.log(f"ERROR reading directory {path}: {error}")


def run(settings, logger, reporter=None):
    """Run one pass and return its stats."""
    return ExtensionFixer(settings, logger, reporter).run()

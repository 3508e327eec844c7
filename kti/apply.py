"""
apply.py
--------

Apply/report stage: turns an Outcome into an ApplyResult.

Only a Mismatch outside dry-run touches the filesystem, through a
rename that refuses to overwrite. Failures come back as results;
nothing here raises for a single file.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .decision import Candidate, Match, Mismatch, Outcome, UnknownSignature, Unreadable
from .path_utils import rename_no_clobber

# ApplyResult.status values
OK = "ok"
RENAMED = "renamed"
DRY_RUN = "dry_run"
CONFLICT = "conflict"
RENAME_FAILED = "rename_failed"


@dataclass(frozen=True)
class ApplyResult:
    status: str
    outcome: Outcome
    old_path: str
    new_path: Optional[str] = None
    detail: Optional[str] = None

    @property
    def changed(self):
        return self.status == RENAMED


def apply(
    candidate: Candidate, outcome: Outcome, dry_run: bool, claimed=None, vacated=None
) -> ApplyResult:
    """
    Act on one decision.

    Args:
        candidate: the file being handled
        outcome: what the decision engine concluded
        dry_run: report the rename instead of doing it
        claimed: optional set of target paths already taken in this run;
                 updated in place when a target is claimed
        vacated: optional set of source paths that earlier dry-run renames
                 in this run would free; updated in place on a dry-run rename
    """
    path = candidate.path

    if isinstance(outcome, (Match, UnknownSignature)):
        return ApplyResult(OK, outcome, path)

    if isinstance(outcome, Unreadable):
        return ApplyResult(OK, outcome, path, detail=outcome.reason)

    if not isinstance(outcome, Mismatch):
        raise TypeError(f"Unexpected outcome: {outcome!r}")

    new_path = outcome.new_path
    key = os.path.normcase(new_path)

    if claimed is not None and key in claimed:
        return ApplyResult(CONFLICT, outcome, path, new_path, "target claimed by another file in this run")

    if dry_run:
        freed = vacated is not None and key in vacated
        if os.path.lexists(new_path) and not freed:
            return ApplyResult(CONFLICT, outcome, path, new_path, "target already exists")
        if claimed is not None:
            claimed.add(key)
        if vacated is not None:
            vacated.add(os.path.normcase(path))
        return ApplyResult(DRY_RUN, outcome, path, new_path)

    status, detail = rename_no_clobber(path, new_path)

    if status == "ok":
        if claimed is not None:
            claimed.add(key)
        return ApplyResult(RENAMED, outcome, path, new_path)

    if status == "conflict":
        return ApplyResult(CONFLICT, outcome, path, new_path, "target already exists")

    return ApplyResult(RENAME_FAILED, outcome, path, new_path, str(detail))

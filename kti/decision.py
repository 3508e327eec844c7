"""
decision.py
-----------

Decision engine: classifies one Candidate.

Outcomes:
    Match              extension already agrees with the signature
    Mismatch(new_path) signature disagrees; new_path carries the canonical ext
    UnknownSignature   no rule matched (never renamed)
    Unreadable(reason) the signature window could not be read

evaluate() never raises for per-file I/O problems.
"""

import os
from dataclasses import dataclass
from typing import Optional, Union

from .matcher import SignatureMatcher, default_matcher
from .path_utils import get_extension, with_extension
from .resolver import canonical_extension, is_alias
from .signatures import FileType


# ------------------------------------------------------------
# Outcomes
# ------------------------------------------------------------
@dataclass(frozen=True)
class Match:
    kind = "match"


@dataclass(frozen=True)
class Mismatch:
    new_path: str
    kind = "mismatch"


@dataclass(frozen=True)
class UnknownSignature:
    kind = "unknown"


@dataclass(frozen=True)
class Unreadable:
    reason: str
    kind = "unreadable"


Outcome = Union[Match, Mismatch, UnknownSignature, Unreadable]


# ------------------------------------------------------------
# Candidate
# ------------------------------------------------------------
@dataclass
class Candidate:
    path: str
    extension: str = ""
    detected: FileType = FileType.UNKNOWN
    outcome: Optional[Outcome] = None

    @classmethod
    def from_path(cls, path):
        path = os.path.abspath(os.fspath(path))
        return cls(path=path, extension=get_extension(path))

    @property
    def name(self):
        return os.path.basename(self.path)


# ------------------------------------------------------------
# Engine
# ------------------------------------------------------------
class DecisionEngine:
    def __init__(self, matcher: Optional[SignatureMatcher] = None):
        self.matcher = matcher or default_matcher()

    def evaluate(self, candidate: Candidate) -> Outcome:
        try:
            detected = self.matcher.classify_file(candidate.path)
        except OSError as e:
            outcome = Unreadable(e.strerror or str(e))
            candidate.outcome = outcome
            return outcome

        candidate.detected = detected

        if detected is FileType.UNKNOWN:
            outcome = UnknownSignature()
        elif is_alias(candidate.extension, detected):
            outcome = Match()
        else:
            # No extension claims UNKNOWN, so it always lands here
            outcome = Mismatch(with_extension(candidate.path, canonical_extension(detected)))

        candidate.outcome = outcome
        return outcome


_DEFAULT_ENGINE = DecisionEngine()


def evaluate(candidate):
    """Evaluate candidate with the default signature table."""
    return _DEFAULT_ENGINE.evaluate(candidate)

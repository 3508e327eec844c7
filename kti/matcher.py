"""
matcher.py
----------

Signature matching.

Handles:
- Reading the signature window from a file
- Picking the best matching rule for a byte prefix
- Falling back to FileType.UNKNOWN when nothing matches

Strict Mode Rules:
- Only classify when magic bytes match a known signature.
- Bytes past the end of the file never match, wildcards included.
- No extension-based heuristics.
"""

from .signatures import (
    DEFAULT_TABLE,
    SIGNATURE_LENGTH,
    FileType,
    lookup_candidates,
)


# ------------------------------------------------------------
# Helper: read header bytes
# ------------------------------------------------------------
def read_header(path, length=SIGNATURE_LENGTH):
    """
    Read up to `length` leading bytes of path.

    OSError (permission denied, vanished file, directory...) propagates;
    the decision engine turns it into an Unreadable outcome.
    """
    with open(path, "rb") as f:
        return f.read(length)


class SignatureMatcher:
    """Classifies byte prefixes against a rule table."""

    def __init__(self, table=DEFAULT_TABLE):
        self.table = table
        self.window = max((rule.span for rule in table), default=0)
        if self.window > SIGNATURE_LENGTH:
            raise ValueError(
                f"Rule table needs {self.window} bytes, window is {SIGNATURE_LENGTH}"
            )

    def best_rule(self, prefix):
        """Winning rule for prefix, or None."""
        candidates = lookup_candidates(prefix, self.table)
        if not candidates:
            return None
        # lookup_candidates keeps table order, which is already the tie-break order
        return candidates[0][0]

    def classify(self, prefix):
        rule = self.best_rule(prefix)
        if rule is None:
            return FileType.UNKNOWN
        return rule.file_type

    def classify_file(self, path):
        return self.classify(read_header(path, SIGNATURE_LENGTH))


_DEFAULT_MATCHER = SignatureMatcher()


def classify(prefix):
    """Classify prefix against the default signature table."""
    return _DEFAULT_MATCHER.classify(prefix)


def default_matcher():
    return _DEFAULT_MATCHER

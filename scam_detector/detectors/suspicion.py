"""
scam_detector/detectors/suspicion.py
Scam-likelihood heuristic for phone numbers and SMS senders.
Pure Python, no I/O. Rules run in order and the first match wins:

  1. denylist           — exact match against known-bad identifiers
  2. banned_substring   — contains "private" / "restricted", or is "unknown"
  3. low_entropy_digits — >= 10 digits drawn from <= 2 distinct values

The denylist is injectable so it can come from config or a test.
"""

import re
from typing import Iterable, Optional, Tuple

DEFAULT_DENYLIST: Tuple[str, ...] = (
    '0700000000',
    '0711111111',
    '0755555555',
    '0800000000',
    'unknown',
    'private',
    'restricted',
    'telemarketing',
    'suspicious',
)

BANNED_SUBSTRINGS: Tuple[str, ...] = ('private', 'restricted')
UNKNOWN_IDENTIFIER = 'unknown'

MIN_DIGITS         = 10
MAX_DISTINCT_DIGITS = 2

_NON_DIGIT = re.compile(r'[^0-9]')


def normalize_identifier(identifier: str) -> str:
    return identifier.lower().strip()


class SuspicionClassifier:
    """
    Usage:
        classifier = SuspicionClassifier()
        classifier.is_suspicious(' PRIVATE ')      # True
        classifier.explain('1212121212')           # 'low_entropy_digits'
    """

    def __init__(
        self,
        denylist:          Iterable[str] = DEFAULT_DENYLIST,
        banned_substrings: Iterable[str] = BANNED_SUBSTRINGS,
    ):
        # Ordered and de-duplicated, compared in normalized form
        self.denylist = tuple(dict.fromkeys(normalize_identifier(e) for e in denylist))
        self.banned_substrings = tuple(normalize_identifier(s) for s in banned_substrings)
        self._denyset = frozenset(self.denylist)

    def explain(self, identifier: str) -> Optional[str]:
        """Name of the first rule that fires, or None."""
        normalized = normalize_identifier(identifier)

        if normalized in self._denyset:
            return 'denylist'

        if normalized == UNKNOWN_IDENTIFIER or any(
            s in normalized for s in self.banned_substrings
        ):
            return 'banned_substring'

        digits = _NON_DIGIT.sub('', normalized)
        if len(digits) >= MIN_DIGITS and len(set(digits)) <= MAX_DISTINCT_DIGITS:
            return 'low_entropy_digits'

        return None

    def is_suspicious(self, identifier: str) -> bool:
        return self.explain(identifier) is not None


_default = SuspicionClassifier()


def is_suspicious(identifier: str) -> bool:
    """Verdict with the built-in denylist."""
    return _default.is_suspicious(identifier)

from scam_detector.detectors.suspicion import (
    DEFAULT_DENYLIST,
    SuspicionClassifier,
    is_suspicious,
    normalize_identifier,
)

__all__ = [
    "DEFAULT_DENYLIST",
    "SuspicionClassifier",
    "is_suspicious",
    "normalize_identifier",
]

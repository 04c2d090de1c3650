from scam_detector.models.record import (
    CALL_TYPES,
    UNKNOWN_SENDER,
    CallRecord,
    MessageRecord,
)

__all__ = [
    "CALL_TYPES",
    "UNKNOWN_SENDER",
    "CallRecord",
    "MessageRecord",
]

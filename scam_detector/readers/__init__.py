from scam_detector.readers.call_log import DEFAULT_LIMIT, read_call_logs
from scam_detector.readers.sms import read_sms

__all__ = [
    "DEFAULT_LIMIT",
    "read_call_logs",
    "read_sms",
]

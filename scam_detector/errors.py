"""
scam_detector/errors.py
Failure taxonomy for the readers. Each error carries the short code
the calling layer receives, plus a human-readable message.
"""

from typing import Optional


class ScamDetectorError(Exception):
    code = 'ERROR'

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ContextUnavailableError(ScamDetectorError):
    """No handle to the backing store could be obtained."""
    code = 'CONTEXT_ERROR'


class PermissionDeniedError(ScamDetectorError):
    """The store exists but the caller is not authorized to read it."""
    code = 'PERMISSION_DENIED'


class ReadError(ScamDetectorError):
    code = 'READ_ERROR'


class SmsReadError(ScamDetectorError):
    code = 'SMS_READ_ERROR'

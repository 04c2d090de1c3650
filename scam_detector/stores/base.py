"""
scam_detector/stores/base.py
Abstract base classes for the read-only stores behind the readers.
To add a new backend: subclass CallLogStore or SmsStore and implement query().

Rows are plain dicts keyed by the Android provider column names.
A column the backend does not have is simply absent from the row;
NULL values come through as None. The readers apply the defaults.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Tuple

Row = Dict[str, Any]

# CallLog.Calls: NUMBER, CACHED_NAME, DATE, DURATION, TYPE
CALL_COLUMNS: Tuple[str, ...] = ('number', 'name', 'date', 'duration', 'type')

# Telephony.Sms: ADDRESS, BODY, DATE
SMS_COLUMNS: Tuple[str, ...] = ('address', 'body', 'date')

# Telephony.Sms.MESSAGE_TYPE_INBOX
SMS_INBOX_TYPE = 1


class CallLogStore(ABC):

    @abstractmethod
    def query(self, limit: int) -> Iterator[Row]:
        """
        Yield at most `limit` call rows, newest first.
        Implementations are generators that release their handle in a
        `finally` block, so callers can close() them early.
        Raises PermissionDeniedError when the store is not readable.
        """
        ...


class SmsStore(ABC):

    @abstractmethod
    def query(self, limit: int) -> Iterator[Row]:
        """Yield at most `limit` inbox rows, newest first."""
        ...

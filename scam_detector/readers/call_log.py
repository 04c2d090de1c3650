"""
scam_detector/readers/call_log.py
Call Record Enumerator — reads the newest call log rows from a store
and annotates each one with the suspicion verdict for its number.

All-or-nothing: on failure the caller gets an exception, never a
partial list. The store handle is closed on every exit path.
"""

import logging
from contextlib import closing
from itertools import islice
from typing import Any, List, Optional

from scam_detector.detectors.suspicion import SuspicionClassifier
from scam_detector.errors import (
    ContextUnavailableError,
    PermissionDeniedError,
    ReadError,
    ScamDetectorError,
)
from scam_detector.models.record import CallRecord
from scam_detector.stores.base import CallLogStore, Row

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50

# CallLog.Calls.INCOMING_TYPE / OUTGOING_TYPE / MISSED_TYPE
CALL_TYPE = {1: 'incoming', 2: 'outgoing', 3: 'missed'}
DEFAULT_CALL_TYPE = 'incoming'

PERMISSION_MESSAGE = (
    "Call log permission not granted. "
    "Please enable call log permissions in app settings."
)


def read_call_logs(
    store:      Optional[CallLogStore],
    limit:      int = DEFAULT_LIMIT,
    classifier: Optional[SuspicionClassifier] = None,
) -> List[CallRecord]:
    """
    Return at most `limit` CallRecords, newest first.

    Raises:
        ContextUnavailableError — no store to read from
        PermissionDeniedError   — store not readable by this process
        ReadError               — anything else
    """
    if store is None:
        raise ContextUnavailableError("Application context is not available")

    classifier = classifier or SuspicionClassifier()

    try:
        limit = max(int(limit), 0)
        with closing(store.query(limit)) as rows:
            records = [_to_record(row, classifier) for row in islice(rows, limit)]
    except (PermissionDeniedError, PermissionError) as e:
        logger.warning(f"Call log read refused: {e}")
        raise PermissionDeniedError(PERMISSION_MESSAGE, details=str(e)) from e
    except ScamDetectorError:
        raise
    except Exception as e:
        logger.error(f"Call log read failed: {e}")
        raise ReadError(f"Failed to read call logs: {e}", details=repr(e)) from e

    flagged = sum(1 for r in records if r.is_scam_suspected)
    logger.info(f"Read {len(records)} calls ({flagged} suspected)")
    return records


def _to_record(row: Row, classifier: SuspicionClassifier) -> CallRecord:
    phone_number = _text(row.get('number'))
    return CallRecord(
        phone_number      = phone_number,
        caller_name       = _text(row.get('name')),
        call_date         = _integer(row.get('date')),
        duration          = max(_integer(row.get('duration')), 0),
        call_type         = _call_type(row.get('type')),
        is_scam_suspected = classifier.is_suspicious(phone_number),
    )


def _call_type(value: Any) -> str:
    if value is None or value == '':
        return DEFAULT_CALL_TYPE
    try:
        return CALL_TYPE.get(int(value), DEFAULT_CALL_TYPE)
    except (TypeError, ValueError):
        return DEFAULT_CALL_TYPE


def _text(value: Any) -> str:
    return '' if value is None else str(value)


def _integer(value: Any) -> int:
    # A present but non-numeric value is a malformed row, not a default
    if value is None or value == '':
        return 0
    return int(value)

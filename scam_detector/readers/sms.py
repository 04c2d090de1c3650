"""
scam_detector/readers/sms.py
Message Record Enumerator — reads the newest inbox messages from a store.

The suspicion verdict is opt-in here: pass a classifier to have each
sender checked the same way call log numbers are. Without one, records
keep the plain sender/body/timestamp shape.
"""

import logging
from contextlib import closing
from itertools import islice
from typing import List, Optional

from scam_detector.detectors.suspicion import SuspicionClassifier
from scam_detector.errors import SmsReadError
from scam_detector.models.record import UNKNOWN_SENDER, MessageRecord
from scam_detector.readers.call_log import DEFAULT_LIMIT
from scam_detector.stores.base import Row, SmsStore

logger = logging.getLogger(__name__)


def read_sms(
    store:      Optional[SmsStore],
    limit:      int = DEFAULT_LIMIT,
    classifier: Optional[SuspicionClassifier] = None,
) -> List[MessageRecord]:
    """Return up to `limit` inbox MessageRecords, newest first. Raises SmsReadError."""
    if store is None:
        raise SmsReadError("Failed to read SMS: store is not available")

    try:
        limit = max(int(limit), 0)
        with closing(store.query(limit)) as rows:
            records = [_to_record(row, classifier) for row in islice(rows, limit)]
    except Exception as e:
        # Body text never goes to the log
        logger.error(f"Error reading SMS: {e}")
        raise SmsReadError(f"Failed to read SMS: {e}", details=repr(e)) from e

    logger.info(f"Read {len(records)} inbox messages")
    return records


def _to_record(row: Row, classifier: Optional[SuspicionClassifier]) -> MessageRecord:
    sender = row.get('address')
    sender = UNKNOWN_SENDER if sender is None else str(sender)
    body   = row.get('body')
    return MessageRecord(
        sender            = sender,
        body              = '' if body is None else str(body),
        timestamp         = _integer(row.get('date')),
        is_scam_suspected = classifier.is_suspicious(sender) if classifier else None,
    )


def _integer(value) -> int:
    if value is None or value == '':
        return 0
    return int(value)

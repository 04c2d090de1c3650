"""
scam_detector/models/record.py
Shared dataclass schema. Readers, plugins, and the API layer
use these types. Do not add logic here — data only.
"""

from dataclasses import dataclass
from typing import Optional

# Wire values for CallRecord.call_type
CALL_TYPES = ('incoming', 'outgoing', 'missed')

# Placeholder sender for inbox rows with no address
UNKNOWN_SENDER = 'Unknown'


@dataclass(frozen=True)
class CallRecord:
    """One call log entry, newest first in every result list."""
    phone_number:     str
    caller_name:      str
    call_date:        int       # epoch ms
    duration:         int       # seconds
    call_type:        str       # incoming / outgoing / missed
    is_scam_suspected: bool


@dataclass(frozen=True)
class MessageRecord:
    """One inbox SMS entry."""
    sender:            str
    body:              str
    timestamp:         int      # epoch ms
    is_scam_suspected: Optional[bool] = None   # None unless annotation is enabled

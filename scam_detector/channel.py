"""
scam_detector/channel.py
Typed request/response boundary for the two reader plugins.

The host calls methods by name with named arguments. decode_request() is
the only place a method name is looked at; everything past it works on
request dataclasses and returns one of three results:

    Success(result)                   — payload for the caller
    Failure(code, message, details)   — one tagged error, never retried
    NotImplementedResult(method)      — the plugin does not answer that call

Wire payloads:
    readCallLogs → JSON string of an array of call objects
    readSms      → list of {sender, body, timestamp} dicts
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from scam_detector.detectors.suspicion import SuspicionClassifier
from scam_detector.errors import ScamDetectorError
from scam_detector.models.record import CallRecord, MessageRecord
from scam_detector.readers.call_log import DEFAULT_LIMIT, read_call_logs
from scam_detector.readers.sms import read_sms
from scam_detector.stores.base import CallLogStore, SmsStore

logger = logging.getLogger(__name__)

CALL_LOG_CHANNEL = 'com.example.scam_detector_app/call_log_reader'
SMS_CHANNEL      = 'com.example.scam_detector_app/sms_reader'

# Failure code for a call whose named arguments do not decode
INVALID_ARGUMENT = 'INVALID_ARGUMENT'


# ── REQUESTS ─────────────────────────────────────────────────

@dataclass(frozen=True)
class ReadCallLogs:
    limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class IsCallLogSupported:
    pass


@dataclass(frozen=True)
class ReadSms:
    limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class IsSmsSupported:
    pass


Request = Union[ReadCallLogs, IsCallLogSupported, ReadSms, IsSmsSupported]


# ── RESULTS ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Success:
    result: Any


@dataclass(frozen=True)
class Failure:
    code:    str
    message: str
    details: Optional[str] = None

    @classmethod
    def from_error(cls, error: ScamDetectorError) -> 'Failure':
        return cls(code=error.code, message=error.message, details=error.details)


@dataclass(frozen=True)
class NotImplementedResult:
    method: str


Result = Union[Success, Failure, NotImplementedResult]


# ── DECODING ─────────────────────────────────────────────────

def _limit(arguments: Mapping[str, Any]) -> int:
    limit = arguments.get('limit')
    if limit is None:
        return DEFAULT_LIMIT
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValueError(f"limit must be an integer, got {limit!r}")
    return limit


_DECODERS = {
    'readCallLogs':       lambda args: ReadCallLogs(limit=_limit(args)),
    'isCallLogSupported': lambda args: IsCallLogSupported(),
    'readSms':            lambda args: ReadSms(limit=_limit(args)),
    'isSmsSupported':     lambda args: IsSmsSupported(),
}


def decode_request(
    method: str, arguments: Optional[Mapping[str, Any]] = None,
) -> Optional[Request]:
    """
    Map a named call onto its request variant.
    Returns None for an unknown method. Raises ValueError on a bad argument.
    """
    decoder = _DECODERS.get(method)
    if decoder is None:
        return None
    return decoder(arguments or {})


# ── WIRE ENCODING ────────────────────────────────────────────

def call_to_wire(record: CallRecord) -> Dict[str, Any]:
    return {
        'phoneNumber':     record.phone_number,
        'callerName':      record.caller_name,
        'callDate':        record.call_date,
        'duration':        record.duration,
        'callType':        record.call_type,
        'isScamSuspected': record.is_scam_suspected,
    }


def message_to_wire(record: MessageRecord) -> Dict[str, Any]:
    wire: Dict[str, Any] = {
        'sender':    record.sender,
        'body':      record.body,
        'timestamp': record.timestamp,
    }
    if record.is_scam_suspected is not None:
        wire['isScamSuspected'] = record.is_scam_suspected
    return wire


def encode_calls(records: List[CallRecord]) -> str:
    return json.dumps([call_to_wire(r) for r in records], separators=(',', ':'))


# ── PLUGINS ──────────────────────────────────────────────────

class _Plugin(ABC):
    channel = ''

    @abstractmethod
    def handle(self, request: Request) -> Result:
        """Answer one typed request. Requests for another channel are not implemented."""
        ...

    def on_method_call(
        self, method: str, arguments: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        """
        Entry point for name-based callers. Unknown names are not implemented;
        a malformed argument comes back as an INVALID_ARGUMENT failure.
        """
        try:
            request = decode_request(method, arguments)
        except ValueError as e:
            logger.warning(f"{self.channel}: bad arguments for {method}: {e}")
            return Failure(INVALID_ARGUMENT, str(e))
        if request is None:
            logger.debug(f"{self.channel}: no handler for {method}")
            return NotImplementedResult(method)
        result = self.handle(request)
        if isinstance(result, NotImplementedResult):
            return NotImplementedResult(method)
        return result


class CallLogReaderPlugin(_Plugin):
    channel = CALL_LOG_CHANNEL

    def __init__(
        self,
        store:      Optional[CallLogStore],
        classifier: Optional[SuspicionClassifier] = None,
    ):
        self.store      = store
        self.classifier = classifier or SuspicionClassifier()

    def handle(self, request: Request) -> Result:
        if isinstance(request, IsCallLogSupported):
            return Success(True)
        if isinstance(request, ReadCallLogs):
            try:
                records = read_call_logs(self.store, request.limit, self.classifier)
            except ScamDetectorError as e:
                return Failure.from_error(e)
            return Success(encode_calls(records))
        return NotImplementedResult(type(request).__name__)


class SmsReaderPlugin(_Plugin):
    channel = SMS_CHANNEL

    def __init__(
        self,
        store:      Optional[SmsStore],
        classifier: Optional[SuspicionClassifier] = None,
    ):
        # classifier=None keeps the three-field message payload
        self.store      = store
        self.classifier = classifier

    def handle(self, request: Request) -> Result:
        if isinstance(request, IsSmsSupported):
            return Success(True)
        if isinstance(request, ReadSms):
            try:
                records = read_sms(self.store, request.limit, self.classifier)
            except ScamDetectorError as e:
                return Failure.from_error(e)
            return Success([message_to_wire(r) for r in records])
        return NotImplementedResult(type(request).__name__)

"""
tests/test_channel.py
Request decoding, plugin dispatch, and wire payload shape.
"""

import json

import pytest

from scam_detector.channel import (
    CALL_LOG_CHANNEL,
    INVALID_ARGUMENT,
    SMS_CHANNEL,
    CallLogReaderPlugin,
    Failure,
    IsCallLogSupported,
    IsSmsSupported,
    NotImplementedResult,
    ReadCallLogs,
    ReadSms,
    SmsReaderPlugin,
    Success,
    _Plugin,
    decode_request,
)
from scam_detector.detectors.suspicion import SuspicionClassifier
from scam_detector.stores.base import CallLogStore
from scam_detector.stores.sqlite_store import SqliteCallLogStore, SqliteSmsStore


class _DeniedStore(CallLogStore):
    def query(self, limit):
        raise PermissionError('EACCES')
        yield


# ── DECODING ─────────────────────────────────────────────────

class TestDecodeRequest:

    def test_read_call_logs_default_limit(self):
        assert decode_request('readCallLogs') == ReadCallLogs(limit=50)
        assert decode_request('readCallLogs', {'limit': None}) == ReadCallLogs(limit=50)

    def test_read_call_logs_limit(self):
        assert decode_request('readCallLogs', {'limit': 7}) == ReadCallLogs(limit=7)

    def test_read_sms(self):
        assert decode_request('readSms', {'limit': 3}) == ReadSms(limit=3)

    def test_supported_queries(self):
        assert decode_request('isCallLogSupported') == IsCallLogSupported()
        assert decode_request('isSmsSupported', {}) == IsSmsSupported()

    def test_unknown_method(self):
        assert decode_request('deleteCallLogs') is None

    @pytest.mark.parametrize('bad', ['10', 2.5, True])
    def test_non_integer_limit_rejected(self, bad):
        with pytest.raises(ValueError):
            decode_request('readCallLogs', {'limit': bad})


# ── CALL LOG PLUGIN ──────────────────────────────────────────

class TestCallLogReaderPlugin:

    def test_channel_name(self):
        assert CallLogReaderPlugin(None).channel == CALL_LOG_CHANNEL

    def test_supported(self):
        assert CallLogReaderPlugin(None).on_method_call('isCallLogSupported') == Success(True)

    def test_payload_is_json_string(self, call_log_db):
        plugin = CallLogReaderPlugin(SqliteCallLogStore(call_log_db))
        result = plugin.on_method_call('readCallLogs', {'limit': 2})
        assert isinstance(result, Success)
        assert isinstance(result.result, str)
        calls = json.loads(result.result)
        assert len(calls) == 2
        assert set(calls[0]) == {
            'phoneNumber', 'callerName', 'callDate',
            'duration', 'callType', 'isScamSuspected',
        }
        assert calls[1] == {
            'phoneNumber':     '+16125550001',
            'callerName':      'Test Contact',
            'callDate':        1704067800000,
            'duration':        300,
            'callType':        'outgoing',
            'isScamSuspected': False,
        }

    def test_limit_zero_is_empty_array(self, call_log_db):
        plugin = CallLogReaderPlugin(SqliteCallLogStore(call_log_db))
        assert plugin.handle(ReadCallLogs(limit=0)) == Success('[]')

    def test_injected_classifier(self, call_log_db):
        plugin = CallLogReaderPlugin(
            SqliteCallLogStore(call_log_db), SuspicionClassifier(denylist=[]),
        )
        calls = json.loads(plugin.handle(ReadCallLogs()).result)
        flagged = {c['phoneNumber'] for c in calls if c['isScamSuspected']}
        # "0711111111" only matched the denylist
        assert flagged == {'PRIVATE'}

    def test_context_error(self):
        result = CallLogReaderPlugin(None).handle(ReadCallLogs())
        assert result == Failure('CONTEXT_ERROR', 'Application context is not available')

    def test_permission_denied(self):
        result = CallLogReaderPlugin(_DeniedStore()).handle(ReadCallLogs())
        assert isinstance(result, Failure)
        assert result.code    == 'PERMISSION_DENIED'
        assert result.details == 'EACCES'

    def test_read_error(self, tmp_path):
        result = CallLogReaderPlugin(SqliteCallLogStore(tmp_path / 'x.db')).handle(ReadCallLogs())
        assert isinstance(result, Failure)
        assert result.code == 'READ_ERROR'
        assert result.message.startswith('Failed to read call logs: ')

    def test_unknown_method_not_implemented(self):
        assert CallLogReaderPlugin(None).on_method_call('wipe') == NotImplementedResult('wipe')

    def test_sms_method_not_answered(self):
        result = CallLogReaderPlugin(None).on_method_call('readSms')
        assert result == NotImplementedResult('readSms')


# ── SMS PLUGIN ───────────────────────────────────────────────

class TestSmsReaderPlugin:

    def test_channel_name(self):
        assert SmsReaderPlugin(None).channel == SMS_CHANNEL

    def test_supported(self):
        assert SmsReaderPlugin(None).handle(IsSmsSupported()) == Success(True)

    def test_payload_is_list_of_three_field_dicts(self, sms_db):
        result = SmsReaderPlugin(SqliteSmsStore(sms_db)).on_method_call('readSms', {'limit': 1})
        assert result == Success([
            {'sender': '+16125550001', 'body': 'hi', 'timestamp': 1704067400000},
        ])

    def test_annotation_adds_flag(self, sms_db):
        plugin = SmsReaderPlugin(SqliteSmsStore(sms_db), SuspicionClassifier())
        messages = plugin.handle(ReadSms()).result
        assert all('isScamSuspected' in m for m in messages)
        assert [m['sender'] for m in messages if m['isScamSuspected']] == [
            'Unknown', 'Private Number',
        ]

    def test_read_error(self):
        result = SmsReaderPlugin(None).handle(ReadSms())
        assert isinstance(result, Failure)
        assert result.code == 'SMS_READ_ERROR'

    def test_call_method_not_answered(self):
        assert SmsReaderPlugin(None).on_method_call('readCallLogs') == NotImplementedResult('readCallLogs')


# ── BAD ARGUMENTS ────────────────────────────────────────────

class TestInvalidArguments:

    @pytest.mark.parametrize('bad', ['10', 2.5, True, [10]])
    def test_call_log_bad_limit_is_failure(self, call_log_db, bad):
        plugin = CallLogReaderPlugin(SqliteCallLogStore(call_log_db))
        result = plugin.on_method_call('readCallLogs', {'limit': bad})
        assert isinstance(result, Failure)
        assert result.code == INVALID_ARGUMENT
        assert 'limit must be an integer' in result.message

    def test_sms_bad_limit_is_failure(self, sms_db):
        result = SmsReaderPlugin(SqliteSmsStore(sms_db)).on_method_call('readSms', {'limit': '1'})
        assert isinstance(result, Failure)
        assert result.code == INVALID_ARGUMENT

    def test_bad_limit_checked_before_store(self):
        # No store configured, but the argument error wins
        result = CallLogReaderPlugin(None).on_method_call('readCallLogs', {'limit': 'ten'})
        assert result.code == INVALID_ARGUMENT

    def test_unknown_method_arguments_ignored(self):
        result = SmsReaderPlugin(None).on_method_call('wipe', {'limit': 'ten'})
        assert result == NotImplementedResult('wipe')


# ── PLUGIN BASE ──────────────────────────────────────────────

class TestPluginBase:

    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            _Plugin()

    def test_subclass_must_handle(self):
        class _Silent(_Plugin):
            channel = 'com.example/silent'

        with pytest.raises(TypeError):
            _Silent()

    def test_subclass_gets_dispatch(self):
        class _Echo(_Plugin):
            channel = 'com.example/echo'

            def handle(self, request):
                return Success(request)

        assert _Echo().on_method_call('readSms', {'limit': 4}) == Success(ReadSms(limit=4))

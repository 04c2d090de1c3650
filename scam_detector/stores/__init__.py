from scam_detector.stores.base import (
    CALL_COLUMNS,
    SMS_COLUMNS,
    CallLogStore,
    SmsStore,
)
from scam_detector.stores.sqlite_store import SqliteCallLogStore, SqliteSmsStore
from scam_detector.stores.xml_backup import XmlBackupCallLogStore, XmlBackupSmsStore

__all__ = [
    "CALL_COLUMNS",
    "SMS_COLUMNS",
    "CallLogStore",
    "SmsStore",
    "SqliteCallLogStore",
    "SqliteSmsStore",
    "XmlBackupCallLogStore",
    "XmlBackupSmsStore",
]

"""
tests/conftest.py
Synthetic provider databases and XML exports — no real device data needed.
"""

import sqlite3

import pytest

from scam_detector.config import DEFAULT_CONFIG


# ── CALL LOG: calllog.db ─────────────────────────────────────

# (number, name, date, duration, type) — inserted out of order on purpose
CALL_ROWS = [
    ('0711111111',      None,           1704067200000, 0,   3),
    ('+16125550001',    'Test Contact', 1704067800000, 300, 2),
    ('+1 612-555-0002', 'Other',        1704067500000, 120, 1),
    (None,              None,           1704068000000, 45,  1),
    ('PRIVATE',         None,           1704066000000, 10,  5),
]


# ── SMS: mmssms.db ───────────────────────────────────────────

# (address, body, date, type) — type 1 = inbox, 2 = sent
SMS_ROWS = [
    ('MPESA',          'You have received KES 1,000', 1704067300000, 1),
    ('+16125550001',   'hi',                          1704067400000, 1),
    (None,             'no sender',                   1704067350000, 1),
    ('+16125550001',   'sent from this phone',        1704067500000, 2),
    ('Private Number', None,                          1704067000000, 1),
]


SAMPLE_CALLS_XML = """<?xml version='1.0' encoding='UTF-8' standalone='yes' ?>
<?xml-stylesheet type="text/xsl" href="calls.xsl"?>
<calls count="4">
  <call number="+16125550001" duration="120" date="1704067200000"
        type="1" readable_date="Jan 1, 2024 12:00:00 AM"
        contact_name="Test Contact" />
  <call number="1212121212" duration="0" date="1704067500000"
        type="3" readable_date="Jan 1, 2024 12:05:00 AM"
        contact_name="null" />
  <call number="+16125550001" duration="300" date="1704067800000"
        type="2" readable_date="Jan 1, 2024 12:10:00 AM"
        contact_name="Test Contact" />
  <call number="private" duration="5" date="1704067100000"
        type="6" readable_date="Jan 1, 2024 11:58:20 PM"
        contact_name="(Unknown)" />
</calls>
"""

SAMPLE_SMS_XML = """<?xml version='1.0' encoding='UTF-8' standalone='yes' ?>
<smses count="4">
  <sms protocol="0" address="+16125550001" date="1704067200000"
       type="1" subject="null" body="Are we still on for Friday?"
       read="1" contact_name="Test Contact" />
  <sms protocol="0" address="+16125550001" date="1704067260000"
       type="2" subject="null" body="Yes, see you then."
       read="1" contact_name="Test Contact" />
  <sms protocol="0" address="TELEMARKETING" date="1704067320000"
       type="1" subject="null" body="You have won a prize!"
       read="0" contact_name="null" />
  <sms protocol="0" address="null" date="1704067380000"
       type="1" subject="null" body="null"
       read="0" contact_name="null" />
</smses>
"""


@pytest.fixture
def call_log_db(tmp_path):
    db = tmp_path / 'calllog.db'
    conn = sqlite3.connect(str(db))
    conn.execute(
        "CREATE TABLE calls (_id INTEGER PRIMARY KEY, number TEXT, name TEXT, "
        "date INTEGER, duration INTEGER, type INTEGER)"
    )
    conn.executemany(
        "INSERT INTO calls (number, name, date, duration, type) VALUES (?,?,?,?,?)",
        CALL_ROWS,
    )
    conn.commit()
    conn.close()
    return db


@pytest.fixture
def sms_db(tmp_path):
    db = tmp_path / 'mmssms.db'
    conn = sqlite3.connect(str(db))
    conn.execute(
        "CREATE TABLE sms (_id INTEGER PRIMARY KEY, address TEXT, body TEXT, "
        "date INTEGER, type INTEGER)"
    )
    conn.executemany(
        "INSERT INTO sms (address, body, date, type) VALUES (?,?,?,?)",
        SMS_ROWS,
    )
    conn.commit()
    conn.close()
    return db


@pytest.fixture
def xml_dir(tmp_path):
    export = tmp_path / 'backup'
    export.mkdir()
    (export / 'calls-2024-01-01.xml').write_text(SAMPLE_CALLS_XML, encoding='utf-8')
    (export / 'sms-2024-01-01.xml').write_text(SAMPLE_SMS_XML, encoding='utf-8')
    return export


@pytest.fixture
def config(call_log_db, sms_db):
    return {
        **DEFAULT_CONFIG,
        'call_log_source': str(call_log_db),
        'sms_source':      str(sms_db),
    }

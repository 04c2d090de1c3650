"""
scam_detector/stores/xml_backup.py
Reads SMS Backup & Restore XML exports (calls-*.xml, sms-*.xml).
`path` may be a single export file or a directory of them.

Streaming: files are walked with ET.iterparse() and elements are cleared
as soon as they are read. Encoding: UTF-8, UTF-8-BOM, UTF-16-LE/BE by BOM.

Unlike a lenient importer, a malformed file is an error here — the
readers turn it into READ_ERROR / SMS_READ_ERROR instead of returning
a silently truncated list.

Schema: https://synctech.com.au/sms-backup-restore/fields-in-xml-backup-files/
"""

import io
import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterator, List, Optional

from scam_detector.errors import PermissionDeniedError
from scam_detector.stores.base import (
    SMS_INBOX_TYPE,
    CallLogStore,
    Row,
    SmsStore,
)

logger = logging.getLogger(__name__)

BOM_UTF8     = b'\xef\xbb\xbf'
BOM_UTF16_LE = b'\xff\xfe'
BOM_UTF16_BE = b'\xfe\xff'


def _read_xml_text(path: Path) -> str:
    try:
        raw = path.read_bytes()
    except PermissionError as e:
        raise PermissionDeniedError(
            f"Not authorized to read {path.name}", details=str(e),
        ) from e
    if raw.startswith(BOM_UTF8):
        return raw[len(BOM_UTF8):].decode('utf-8', errors='replace')
    if raw.startswith(BOM_UTF16_LE):
        return raw[len(BOM_UTF16_LE):].decode('utf-16-le', errors='replace')
    if raw.startswith(BOM_UTF16_BE):
        return raw[len(BOM_UTF16_BE):].decode('utf-16-be', errors='replace')
    try:
        return raw.decode('utf-8', errors='strict')
    except UnicodeDecodeError:
        return raw.decode('utf-8', errors='replace')


def _strip_stylesheet(content: str) -> str:
    return re.sub(r'<\?xml-stylesheet[^?]*\?>', '', content)


def _attr(el: ET.Element, name: str) -> Optional[str]:
    # The exporter writes the literal string "null" for empty columns
    val = el.get(name)
    if val is None or val.lower() == 'null':
        return None
    return val


def _iter_elements(path: Path, tag: str) -> Iterator[ET.Element]:
    content = _strip_stylesheet(_read_xml_text(path))
    for _event, el in ET.iterparse(io.StringIO(content), events=('end',)):
        if el.tag.lower() == tag:
            yield el
        el.clear()


def _export_files(path: Path, pattern: str) -> List[Path]:
    if path.is_dir():
        files = sorted(path.glob(pattern))
        if not files:
            logger.warning(f"No {pattern} files found in {path}")
        return files
    if not path.exists():
        raise FileNotFoundError(f"Backup not found: {path}")
    return [path]


def _date_key(row: Row) -> int:
    try:
        return int(row.get('date') or 0)
    except (TypeError, ValueError):
        return 0


class XmlBackupCallLogStore(CallLogStore):

    def __init__(self, path: Path):
        self.path = Path(path)

    def query(self, limit: int) -> Iterator[Row]:
        rows: List[Row] = []
        seen: set = set()

        for file in _export_files(self.path, 'calls-*.xml'):
            for el in _iter_elements(file, 'call'):
                row = {
                    'number':   _attr(el, 'number'),
                    'name':     _attr(el, 'contact_name'),
                    'date':     _attr(el, 'date'),
                    'duration': _attr(el, 'duration'),
                    'type':     _attr(el, 'type'),
                }
                # Overlapping exports repeat the same call
                key = (row['date'], row['number'])
                if key in seen:
                    continue
                seen.add(key)
                rows.append(row)

        rows.sort(key=_date_key, reverse=True)
        logger.info(f"Loaded {len(rows)} calls from {self.path.name}")
        yield from rows[:limit]


class XmlBackupSmsStore(SmsStore):

    def __init__(self, path: Path):
        self.path = Path(path)

    def query(self, limit: int) -> Iterator[Row]:
        rows: List[Row] = []
        seen: set = set()

        for file in _export_files(self.path, 'sms-*.xml'):
            for el in _iter_elements(file, 'sms'):
                if _attr(el, 'type') != str(SMS_INBOX_TYPE):
                    continue
                row = {
                    'address': _attr(el, 'address'),
                    'body':    _attr(el, 'body'),
                    'date':    _attr(el, 'date'),
                }
                key = (row['date'], row['address'])
                if key in seen:
                    continue
                seen.add(key)
                rows.append(row)

        rows.sort(key=_date_key, reverse=True)
        logger.info(f"Loaded {len(rows)} inbox messages from {self.path.name}")
        yield from rows[:limit]

"""
scam_detector/config.py
JSON config with auto-detection. Persists to scam_detector_config.json.
Also turns config values into runtime objects (stores, classifier).

Source paths pick their backend by shape:
  *.db            → SQLite provider snapshot (calllog.db / mmssms.db)
  *.xml, a dir    → SMS Backup & Restore export(s)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from scam_detector.detectors.suspicion import DEFAULT_DENYLIST, SuspicionClassifier
from scam_detector.readers.call_log import DEFAULT_LIMIT
from scam_detector.stores.base import CallLogStore, SmsStore
from scam_detector.stores.sqlite_store import SqliteCallLogStore, SqliteSmsStore
from scam_detector.stores.xml_backup import XmlBackupCallLogStore, XmlBackupSmsStore

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "scam_detector_config.json"

DEFAULT_CONFIG = {
    "call_log_source": None,
    "sms_source": None,
    "default_limit": DEFAULT_LIMIT,
    "denylist": list(DEFAULT_DENYLIST),
    "annotate_sms": False,
    "host": "127.0.0.1",
    "port": 8765,
}

# Common places a pulled database or a backup export ends up
AUTO_DETECT_PATHS = [
    Path.home() / "SMSBackup",
    Path.home() / "Chat Message Backup",
    Path.home() / "android-dump",
    Path("/sdcard/SMSBackup"),
    Path("/sdcard/Download/SMSBackup"),
]

_DETECT_PATTERNS = {
    "calls": ("calllog.db", "calls-*.xml"),
    "sms":   ("mmssms.db", "sms-*.xml"),
}


def _config_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path.cwd()
    return root / CONFIG_FILENAME


def load_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load config from scam_detector_config.json. Returns defaults if missing."""
    path = _config_path(project_root)
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Config load failed: {e}")
    return dict(DEFAULT_CONFIG)


def save_config(config: Dict[str, Any], project_root: Optional[Path] = None) -> Path:
    """Persist config to scam_detector_config.json."""
    path = _config_path(project_root)
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    return path


def auto_detect_source(kind: str) -> Optional[Path]:
    """
    Scan common paths for a call log ("calls") or SMS ("sms") source.
    A database file wins over an XML export directory. Returns None if nothing found.
    """
    db_name, xml_glob = _DETECT_PATTERNS[kind]
    for d in AUTO_DETECT_PATHS:
        if not d.is_dir():
            continue
        if (d / db_name).is_file():
            return d / db_name
        if list(d.glob(xml_glob)):
            return d
    return None


def ensure_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load config and fill in any unset source from auto-detection."""
    config = load_config(project_root)
    for key, kind in (("call_log_source", "calls"), ("sms_source", "sms")):
        if not config.get(key):
            detected = auto_detect_source(kind)
            if detected:
                config[key] = str(detected)
                logger.info(f"Auto-detected {kind} source: {detected}")
    return config


def open_store(
    source: Optional[Union[str, Path]], kind: str,
) -> Optional[Union[CallLogStore, SmsStore]]:
    """
    Build the store for a configured source path, or None if unset.
    kind: "calls" or "sms".
    """
    if not source:
        return None
    if kind not in _DETECT_PATTERNS:
        raise ValueError(f"Unknown store kind: {kind}")

    path = Path(source).expanduser()
    if path.suffix.lower() in (".db", ".sqlite", ".sqlite3"):
        return SqliteCallLogStore(path) if kind == "calls" else SqliteSmsStore(path)
    return XmlBackupCallLogStore(path) if kind == "calls" else XmlBackupSmsStore(path)


def build_classifier(config: Dict[str, Any]) -> SuspicionClassifier:
    denylist = config.get("denylist")
    if denylist is None:
        denylist = DEFAULT_DENYLIST
    return SuspicionClassifier(denylist=denylist)


def configured_limit(config: Dict[str, Any]) -> int:
    """default_limit from config. Only an unset value falls back; 0 is a real limit."""
    value = config.get("default_limit")
    return DEFAULT_LIMIT if value is None else int(value)

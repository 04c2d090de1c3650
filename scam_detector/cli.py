"""
scam_detector/cli.py
Command-line interface for the scam detector.

USAGE:
  python -m scam_detector.cli calls --source calllog.db --limit 20
  python -m scam_detector.cli calls --source ./backups --json
  python -m scam_detector.cli sms   --source mmssms.db --annotate
  python -m scam_detector.cli check "Private Caller" 0711111111 +15551234567
  python -m scam_detector.cli serve --port 8765

Sources: *.db → Android provider snapshot, *.xml or a directory →
SMS Backup & Restore export(s). Without --source the value from
scam_detector_config.json (or auto-detection) is used.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from scam_detector.channel import call_to_wire, message_to_wire
from scam_detector.config import build_classifier, configured_limit, ensure_config, open_store
from scam_detector.errors import ScamDetectorError
from scam_detector.readers.call_log import read_call_logs
from scam_detector.readers.sms import read_sms

logger = logging.getLogger(__name__)

GREEN  = '\033[92m'
YELLOW = '\033[93m'
RED    = '\033[91m'
CYAN   = '\033[96m'
RESET  = '\033[0m'
BOLD   = '\033[1m'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog        = 'scam-detector',
        description = 'Scam Detector — call log & SMS readers with scam-likelihood flags',
        formatter_class = argparse.RawDescriptionHelpFormatter,
        epilog = """
NOTE:
  The scam flag is a naive string heuristic, not a fraud model.
  All processing is local — no data leaves your device.
        """
    )
    parser.add_argument(
        '--config', '-c',
        type    = Path,
        default = None,
        help    = 'Directory holding scam_detector_config.json (default: cwd)',
    )
    parser.add_argument(
        '--verbose', '-v',
        action  = 'store_true',
        help    = 'Enable debug logging',
    )

    sub = parser.add_subparsers(dest='command', required=True)

    for name, help_text in (('calls', 'Read call log records'),
                            ('sms',   'Read inbox SMS messages')):
        p = sub.add_parser(name, help=help_text)
        p.add_argument(
            '--source', '-s',
            type    = Path,
            default = None,
            help    = 'Database file, XML export, or export directory',
        )
        p.add_argument(
            '--limit', '-n',
            type    = int,
            default = None,
            help    = 'Max records (default: config default_limit, 50)',
        )
        p.add_argument(
            '--json',
            action  = 'store_true',
            help    = 'Print the wire payload as JSON',
        )
        if name == 'sms':
            p.add_argument(
                '--annotate',
                action  = 'store_true',
                help    = 'Flag suspicious senders too',
            )

    p = sub.add_parser('check', help='Check identifiers against the heuristic')
    p.add_argument('identifiers', nargs='+', help='Phone numbers or sender names')

    p = sub.add_parser('serve', help='Run the local HTTP API')
    p.add_argument('--host', default=None, help='Host to bind (default: 127.0.0.1)')
    p.add_argument('--port', type=int, default=None, help='Port to bind (default: 8765)')

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # ── LOGGING SETUP ────────────────────────────────────────
    logging.basicConfig(
        level   = logging.DEBUG if args.verbose else logging.WARNING,
        format  = '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt = '%H:%M:%S',
    )

    config     = ensure_config(args.config)
    classifier = build_classifier(config)

    if args.command == 'check':
        return _check(args.identifiers, classifier)

    if args.command == 'serve':
        from scam_detector.api import serve
        serve(config, host=args.host, port=args.port)
        return 0

    limit = args.limit if args.limit is not None else configured_limit(config)

    try:
        if args.command == 'calls':
            store   = open_store(args.source or config.get('call_log_source'), 'calls')
            records = read_call_logs(store, limit, classifier)
            payload = [call_to_wire(r) for r in records]
        else:
            annotate = args.annotate or bool(config.get('annotate_sms'))
            store    = open_store(args.source or config.get('sms_source'), 'sms')
            records  = read_sms(store, limit, classifier if annotate else None)
            payload  = [message_to_wire(r) for r in records]
    except ScamDetectorError as e:
        _print(f"{RED}{e.code}: {e.message}{RESET}", err=True)
        return 1

    if args.json:
        _print(json.dumps(payload, indent=2))
    elif args.command == 'calls':
        _print_calls(records)
    else:
        _print_messages(records)
    return 0


def _check(identifiers, classifier) -> int:
    for ident in identifiers:
        rule = classifier.explain(ident)
        if rule:
            _print(f"  {RED}✗ SUSPICIOUS{RESET}  {ident!r}  ({rule})")
        else:
            _print(f"  {GREEN}✓ ok{RESET}          {ident!r}")
    return 0


# ── PRINT HELPERS ────────────────────────────────────────────

def _print_calls(records):
    if not records:
        _print(f"{YELLOW}No call records.{RESET}")
        return
    flagged = 0
    for r in records:
        mark = f"{RED}⚠{RESET}" if r.is_scam_suspected else ' '
        flagged += r.is_scam_suspected
        who = r.caller_name or r.phone_number or '(no number)'
        _print(f" {mark} {_fmt_ts(r.call_date)}  {r.call_type:<8}  {_fmt_duration(r.duration):>8}  {who}")
    _print(f"\n{BOLD}{len(records)} calls, {flagged} suspected{RESET}")


def _print_messages(records):
    if not records:
        _print(f"{YELLOW}No messages.{RESET}")
        return
    for r in records:
        mark = f"{RED}⚠{RESET}" if r.is_scam_suspected else ' '
        _print(f" {mark} {_fmt_ts(r.timestamp)}  {CYAN}{r.sender}{RESET}  {r.body[:60]}")
    _print(f"\n{BOLD}{len(records)} messages{RESET}")


def _fmt_ts(epoch_ms: int) -> str:
    try:
        return datetime.fromtimestamp(epoch_ms / 1000).strftime('%Y-%m-%d %H:%M:%S')
    except (OSError, OverflowError, ValueError):
        return 'INVALID_DATE'


def _fmt_duration(seconds: int) -> str:
    if seconds <= 0:
        return '0s'
    h, rem = divmod(seconds, 3600)
    m, s   = divmod(rem, 60)
    if h:
        return f"{h}h {m}m {s}s"
    if m:
        return f"{m}m {s}s"
    return f"{s}s"


def _print(msg, err=False):
    print(msg, file=sys.stderr if err else sys.stdout)


if __name__ == '__main__':
    sys.exit(main())

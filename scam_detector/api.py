"""
scam_detector/api.py
─────────────────────────────────────────────────────────────────────────────
Scam Detector — dual-mode API layer

TWO USAGE MODES:
  1. Importable module:
         from scam_detector.api import ScamDetectorAPI
         api = ScamDetectorAPI(config={"call_log_source": "calllog.db"})
         calls = api.get_calls(limit=20)

  2. FastAPI HTTP server (host app / UI via fetch()):
         python -m scam_detector.api               # default: port 8765
         python -m scam_detector.api --port 9000
         uvicorn scam_detector.api:app --port 8765

ENDPOINTS:
  POST /channels/{channel}/{method}  — method-channel call, JSON body = named arguments
  GET  /calls                        — call records with scam flag
  GET  /sms                          — inbox messages
  GET  /check                        — verdict for one identifier
  GET  /health                       — liveness + configured sources

PRIVACY NOTE:
  Binds to 127.0.0.1 by default. No outbound HTTP calls are made.
  Message bodies are returned to the caller but never logged.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from scam_detector import __version__
from scam_detector.channel import (
    INVALID_ARGUMENT,
    CallLogReaderPlugin,
    Failure,
    NotImplementedResult,
    Result,
    SmsReaderPlugin,
    Success,
    call_to_wire,
    message_to_wire,
)
from scam_detector.config import build_classifier, configured_limit, load_config, open_store
from scam_detector.detectors.suspicion import normalize_identifier
from scam_detector.errors import ScamDetectorError
from scam_detector.readers.call_log import read_call_logs
from scam_detector.readers.sms import read_sms

logger = logging.getLogger(__name__)

# Failure code → HTTP status for the REST endpoints
HTTP_STATUS = {
    "CONTEXT_ERROR":     503,
    "PERMISSION_DENIED": 403,
    "READ_ERROR":        500,
    "SMS_READ_ERROR":    500,
}


# ── RESPONSE MODELS ──────────────────────────────────────────────────────────

class CallOut(BaseModel):
    phoneNumber:     str
    callerName:      str
    callDate:        int
    duration:        int
    callType:        str
    isScamSuspected: bool


class CallsResponse(BaseModel):
    count: int
    calls: List[CallOut]


class MessageOut(BaseModel):
    sender:          str
    body:            str
    timestamp:       int
    isScamSuspected: Optional[bool] = None


class MessagesResponse(BaseModel):
    count:    int
    messages: List[MessageOut]


class CheckResponse(BaseModel):
    identifier: str
    normalized: str
    suspicious: bool
    rule:       Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════
# IMPORTABLE CLASS
# ═══════════════════════════════════════════════════════════════════════════

class ScamDetectorAPI:
    """
    Pure-Python wrapper around the two reader plugins.
    No HTTP layer required — import and call directly.

    Usage:
        api = ScamDetectorAPI(config=load_config())
        calls   = api.get_calls()
        result  = api.invoke(CALL_LOG_CHANNEL, "readCallLogs", {"limit": 10})
        verdict = api.check("+1 (555) 555-5555")
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config     = config if config is not None else load_config()
        self.classifier = build_classifier(self.config)
        self.default_limit = configured_limit(self.config)

        sms_classifier = self.classifier if self.config.get("annotate_sms") else None
        self.call_plugin = CallLogReaderPlugin(
            open_store(self.config.get("call_log_source"), "calls"), self.classifier,
        )
        self.sms_plugin = SmsReaderPlugin(
            open_store(self.config.get("sms_source"), "sms"), sms_classifier,
        )
        self.plugins = {
            self.call_plugin.channel: self.call_plugin,
            self.sms_plugin.channel:  self.sms_plugin,
        }

    # ── METHOD CHANNEL ────────────────────────────────────────────────────

    def invoke(
        self,
        channel:   str,
        method:    str,
        arguments: Optional[Dict[str, Any]] = None,
    ) -> Result:
        """
        Dispatch a named call to the plugin registered on `channel`.
        Raises KeyError for an unknown channel. A bad argument is an
        INVALID_ARGUMENT failure.
        """
        plugin = self.plugins[channel]
        logger.debug(f"invoke {channel}#{method}")
        return plugin.on_method_call(method, arguments)

    # ── DIRECT QUERIES ────────────────────────────────────────────────────

    def get_calls(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Raises ScamDetectorError subclasses on failure."""
        records = read_call_logs(
            self.call_plugin.store,
            self.default_limit if limit is None else limit,
            self.classifier,
        )
        return [call_to_wire(r) for r in records]

    def get_sms(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        records = read_sms(
            self.sms_plugin.store,
            self.default_limit if limit is None else limit,
            self.sms_plugin.classifier,
        )
        return [message_to_wire(r) for r in records]

    def check(self, identifier: str) -> Dict[str, Any]:
        rule = self.classifier.explain(identifier)
        return {
            "identifier": identifier,
            "normalized": normalize_identifier(identifier),
            "suspicious": rule is not None,
            "rule":       rule,
        }


def result_to_envelope(result: Result) -> Dict[str, Any]:
    if isinstance(result, Success):
        return {"status": "success", "result": result.result}
    if isinstance(result, Failure):
        return {"status": "error", **asdict(result)}
    return {"status": "not_implemented", "method": result.method}


def _http_error(exc: ScamDetectorError) -> HTTPException:
    return HTTPException(
        status_code = HTTP_STATUS.get(exc.code, 500),
        detail      = {"code": exc.code, "message": exc.message},
    )


# ═══════════════════════════════════════════════════════════════════════════
# FASTAPI HTTP APP
# ═══════════════════════════════════════════════════════════════════════════

def build_app(config: Optional[Dict[str, Any]] = None) -> FastAPI:
    """Build and return the FastAPI application instance."""
    _api = ScamDetectorAPI(config=config)

    _app = FastAPI(
        title       = "Scam Detector API",
        description = "Call log & SMS readers with scam-likelihood flags — local API",
        version     = __version__,
        docs_url    = "/docs",
        redoc_url   = None,
    )

    # CORS: localhost origins only
    _app.add_middleware(
        CORSMiddleware,
        allow_origins     = [
            "http://localhost",
            "http://localhost:8765",
            "http://127.0.0.1",
            "http://127.0.0.1:8765",
            "null",   # file:// origin
        ],
        allow_methods     = ["GET", "POST", "OPTIONS"],
        allow_headers     = ["Content-Type"],
        allow_credentials = False,
    )

    # ── ENDPOINTS ───────────────────────────────────────────────────────

    @_app.post("/channels/{channel:path}/{method}", summary="Invoke a plugin method")
    def invoke(channel: str, method: str, arguments: Dict[str, Any] = Body(default_factory=dict)):
        """
        Method-channel style call. The JSON body holds the named arguments,
        e.g. {"limit": 20}. Failures come back as a 200 error envelope,
        bad arguments as a 400 one, unknown methods as 501.
        """
        try:
            result = _api.invoke(channel, method, arguments)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown channel: {channel}")

        envelope = result_to_envelope(result)
        if isinstance(result, NotImplementedResult):
            return JSONResponse(content=envelope, status_code=501)
        if isinstance(result, Failure) and result.code == INVALID_ARGUMENT:
            return JSONResponse(content=envelope, status_code=400)
        return envelope

    @_app.get("/calls", summary="List call records", response_model=CallsResponse)
    def get_calls(limit: Optional[int] = Query(None, ge=0, le=1000)):
        """Newest first. Each record carries isScamSuspected."""
        try:
            data = _api.get_calls(limit=limit)
        except ScamDetectorError as exc:
            raise _http_error(exc) from exc
        return {"count": len(data), "calls": data}

    @_app.get(
        "/sms", summary="List inbox messages",
        response_model=MessagesResponse, response_model_exclude_none=True,
    )
    def get_sms(limit: Optional[int] = Query(None, ge=0, le=1000)):
        try:
            data = _api.get_sms(limit=limit)
        except ScamDetectorError as exc:
            raise _http_error(exc) from exc
        return {"count": len(data), "messages": data}

    @_app.get("/check", summary="Suspicion verdict for one identifier", response_model=CheckResponse)
    def check(identifier: str = Query(..., description="Phone number or SMS sender")):
        return _api.check(identifier)

    @_app.get("/health", summary="Health check")
    def health():
        return {
            "status":          "ok",
            "version":         __version__,
            "call_log_source": _api.config.get("call_log_source"),
            "sms_source":      _api.config.get("sms_source"),
            "annotate_sms":    bool(_api.config.get("annotate_sms")),
        }

    return _app


def serve(
    config: Optional[Dict[str, Any]] = None,
    host:   Optional[str] = None,
    port:   Optional[int] = None,
) -> None:
    import uvicorn

    config = config if config is not None else load_config()
    host = host or config.get("host") or "127.0.0.1"
    port = port or int(config.get("port") or 8765)
    logger.info(f"Serving on http://{host}:{port}")
    uvicorn.run(build_app(config), host=host, port=port, log_level="info")


# Module-level app instance — used by uvicorn scam_detector.api:app
app = build_app()


# ═══════════════════════════════════════════════════════════════════════════
# CLI ENTRYPOINT — python -m scam_detector.api
# ═══════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        prog        = "scam_detector.api",
        description = "Scam Detector API Server",
    )
    parser.add_argument("--port",   type=int, default=None,
                        help="Port to bind (default: config or 8765)")
    parser.add_argument("--host",   type=str, default=None,
                        help="Host to bind — DO NOT change to 0.0.0.0 on shared networks")
    parser.add_argument("--config", type=Path, default=None,
                        help="Directory holding scam_detector_config.json (default: cwd)")
    args = parser.parse_args()

    logging.basicConfig(
        level   = logging.INFO,
        format  = "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt = "%H:%M:%S",
    )
    serve(load_config(args.config), host=args.host, port=args.port)

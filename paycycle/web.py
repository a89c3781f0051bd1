from __future__ import annotations

import json
import logging
from decimal import Decimal
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import parse_qs, unquote, urlparse

from paycycle.core.models import Transaction, UserRecord
from paycycle.errors import PersistenceError, ValidationError
from paycycle.report import format_report
from paycycle.store import TransactionStore

logger = logging.getLogger(__name__)

API_PREFIX = "/api/transactions"


def transaction_payload(tx: Transaction) -> dict[str, Any]:
    payload = tx.to_dict()
    payload["amount"] = float(tx.amount)
    return payload


def record_payload(record: UserRecord) -> dict[str, Any]:
    return {
        "userId": record.user_id,
        "transactions": [transaction_payload(tx) for tx in record.transactions],
    }


def _parse_bool(value: str | None) -> bool | None:
    if value is None or value == "":
        return None
    return value.lower() in ("1", "true", "yes")


def _json_response(handler: BaseHTTPRequestHandler, payload: Any, status: int = 200) -> None:
    body = json.dumps(payload).encode("utf-8")
    handler.send_response(status)
    handler.send_header("Content-Type", "application/json")
    handler.send_header("Cache-Control", "no-store")
    handler.send_header("Content-Length", str(len(body)))
    handler.end_headers()
    handler.wfile.write(body)


def _split_api_path(path: str) -> list[str] | None:
    """Return the path segments after the API prefix, or None for other paths."""
    if path != API_PREFIX and not path.startswith(API_PREFIX + "/"):
        return None
    rest = path[len(API_PREFIX):]
    return [unquote(part) for part in rest.split("/") if part]


def _get_param(query: dict[str, list[str]], key: str) -> str | None:
    values = query.get(key)
    return values[0] if values else None


class TransactionHandler(BaseHTTPRequestHandler):
    store: TransactionStore
    autosave: bool = True

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        parsed = urlparse(self.path)
        segments = _split_api_path(parsed.path)
        if segments is None or len(segments) > 2:
            _json_response(self, {"error": "not found"}, status=404)
            return
        query = parse_qs(parsed.query)

        try:
            self._handle_get(segments, query)
        except PersistenceError as exc:
            logger.error("Storage failure on GET %s: %s", parsed.path, exc)
            _json_response(self, {"error": str(exc)}, status=500)

    def _handle_get(self, segments: list[str], query: dict[str, list[str]]) -> None:
        if not segments:
            payload = [record_payload(rec) for rec in self.store.get_data()]
            _json_response(self, payload)
            return

        user_id = segments[0]
        if len(segments) == 1:
            payload = [transaction_payload(tx) for tx in self.store.get_by_user_id(user_id)]
            _json_response(self, payload)
            return

        action = segments[1]
        if action == "sum":
            total: Decimal = self.store.get_sum_by_user_id(user_id)
            _json_response(self, {"userId": user_id, "sum": float(total)})
            return

        if action == "report":
            report = self.store.get_report_by_user_id(
                user_id,
                include_open_period=_parse_bool(_get_param(query, "includeOpenPeriod")),
            )
            _json_response(self, format_report(report))
            return

        tx = self.store.find(user_id, action)
        if tx is None:
            _json_response(self, {"error": "Transaction not found"}, status=404)
            return
        _json_response(self, transaction_payload(tx))

    def do_POST(self) -> None:
        parsed = urlparse(self.path)
        segments = _split_api_path(parsed.path)
        if segments is None or len(segments) > 1:
            _json_response(self, {"error": "not found"}, status=404)
            return

        try:
            body = self._read_json_body()
            user_id = segments[0] if segments else None
            tx = self.store.add(
                user_id,
                body.get("amount"),
                body.get("description") or "",
                body.get("date"),
            )
            if self.autosave:
                self.store.persist()
        except ValidationError as exc:
            _json_response(self, {"error": str(exc)}, status=400)
            return
        except PersistenceError as exc:
            logger.error("Storage failure on POST %s: %s", parsed.path, exc)
            _json_response(self, {"error": str(exc)}, status=500)
            return

        _json_response(self, transaction_payload(tx), status=201)

    def _read_json_body(self) -> dict[str, Any]:
        length = int(self.headers.get("Content-Length") or 0)
        raw = self.rfile.read(length) if length else b""
        if not raw:
            return {}
        try:
            body = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ValidationError(f"Request body is not valid JSON: {exc}") from exc
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return body


def make_handler(store: TransactionStore, autosave: bool = True) -> type[TransactionHandler]:
    return type(
        "TransactionHandler",
        (TransactionHandler,),
        {"store": store, "autosave": autosave},
    )


def make_server(store: TransactionStore, host: str, port: int, autosave: bool = True) -> HTTPServer:
    return HTTPServer((host, port), make_handler(store, autosave))

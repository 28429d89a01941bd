"""Small JSON-over-HTTP client shared by the tracker and code-review adapters."""

from __future__ import annotations

import base64
import http.client
import json
import urllib.error
import urllib.request
from dataclasses import dataclass

from .services.errors import ConfigurationError, NotFoundError, TransportError, UnexpectedError

DEFAULT_TIMEOUT_SECONDS = 30.0
_MAX_ERROR_DETAIL_CHARS = 500


def basic_auth_header(username: str, password: str) -> str:
    """Return an HTTP basic ``Authorization`` header value.

    Example:
        >>> basic_auth_header("", "pat")
        'Basic OnBhdA=='
    """
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def bearer_auth_header(token: str) -> str:
    return f"Bearer {token}"


@dataclass(frozen=True)
class JsonHttpClient:
    """Blocking JSON client with a fixed authorization header.

    Raises ``TransportError`` for network and authentication failures,
    ``NotFoundError`` for HTTP 404, and ``UnexpectedError`` for undecodable
    responses.
    """

    authorization: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def get_json(self, url: str, *, context: str) -> object:
        return self.request_json("GET", url, context=context)

    def post_json(self, url: str, payload: object, *, context: str) -> object:
        return self.request_json("POST", url, payload=payload, context=context)

    def request_json(
        self,
        method: str,
        url: str,
        *,
        payload: object | None = None,
        context: str,
    ) -> object:
        headers = {
            "Authorization": self.authorization,
            "Accept": "application/json",
        }
        body = None
        if payload is not None:
            body = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"
        try:
            request = urllib.request.Request(url, data=body, headers=headers, method=method)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid URL while {context}: {url}",
                recovery_hint="Base URLs must start with http:// or https://.",
            ) from exc
        try:
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as response:
                data = response.read()
        except urllib.error.HTTPError as exc:
            raise _http_error(exc, context=context) from exc
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            reason = getattr(exc, "reason", None) or exc
            raise TransportError(f"Network error while {context}: {reason}") from exc
        try:
            raw = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise UnexpectedError(f"Undecodable response while {context}: {exc}") from exc
        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise UnexpectedError(f"Invalid JSON response while {context}: {exc}") from exc


def _http_error(exc: urllib.error.HTTPError, *, context: str) -> Exception:
    detail = ""
    if exc.fp is not None:
        detail = exc.read().decode("utf-8", errors="ignore").strip()
    if len(detail) > _MAX_ERROR_DETAIL_CHARS:
        detail = detail[:_MAX_ERROR_DETAIL_CHARS].rstrip() + "..."
    status = f"HTTP {exc.code} - {exc.reason}"
    if exc.code in (401, 403):
        return TransportError(
            f"Authentication failed while {context}: {status}",
            recovery_hint="Check the configured credentials.",
        )
    message = f"Failed while {context}: {status}"
    if detail:
        message = f"{message}\nDetails: {detail}"
    if exc.code == 404:
        return NotFoundError(message)
    return TransportError(message)

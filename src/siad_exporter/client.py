from __future__ import annotations
import base64
import http.client
import json
import os
import socket
from decimal import Decimal
from typing import Any, Dict, Optional
from urllib import request, error as urlerror

from .types import FetchError, ModuleNotLoadedError

# API configuration
API_ADDR_ENV = "SIA_API_ADDR"
API_PASSWORD_ENV = "SIA_API_PASSWORD"
API_TIMEOUT_ENV = "SIA_API_TIMEOUT"
DEFAULT_API_ADDR = "http://127.0.0.1:9980"
DEFAULT_TIMEOUT = 5.0

# siad refuses requests that do not carry this user agent.
USER_AGENT = "Sia-Agent"


def _normalize_addr(addr: str) -> str:
    addr = addr.strip().rstrip("/")
    if "://" not in addr:
        addr = "http://" + addr
    return addr


def _error_message(e: urlerror.HTTPError) -> str:
    """Pull the node's ``message`` field out of an error body, if any."""
    try:
        body = json.loads(e.read().decode() or "{}")
    except Exception:
        return str(e.reason)
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return str(e.reason)


class NodeClient:
    """Read-only client for the local siad JSON API."""

    def __init__(self, addr: Optional[str] = None, password: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.addr = _normalize_addr(addr or os.environ.get(API_ADDR_ENV, DEFAULT_API_ADDR))
        self.password = password if password is not None else os.environ.get(API_PASSWORD_ENV)
        if timeout is None:
            timeout = float(os.environ.get(API_TIMEOUT_ENV, DEFAULT_TIMEOUT))
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if self.password:
            token = base64.b64encode(f":{self.password}".encode()).decode()
            headers["Authorization"] = f"Basic {token}"
        return headers

    def _http_get(self, path: str) -> Dict[str, Any]:
        """GET ``path`` and decode the JSON body.

        Raises ModuleNotLoadedError on 404, which is how siad answers calls
        to modules it has not loaded. Everything else becomes FetchError.
        """
        url = self.addr + path
        req = request.Request(url, headers=self._headers())
        try:
            with request.urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read()
        except socket.timeout:
            raise FetchError(f"GET timeout after {self.timeout}s (url={url})")
        except urlerror.HTTPError as e:
            if e.code == 404:
                raise ModuleNotLoadedError(f"API call not recognized: {path}")
            raise FetchError(f"HTTP {e.code} for {url}: {_error_message(e)}")
        except urlerror.URLError as e:
            reason = getattr(e, "reason", e)
            if isinstance(reason, socket.timeout):
                raise FetchError(f"GET timeout after {self.timeout}s (url={url})")
            raise FetchError(f"Connection error (url={url}): {reason}")
        except http.client.HTTPException as e:
            raise FetchError(f"Bad HTTP response (url={url}): {e!r}")
        except OSError as e:
            raise FetchError(f"Unexpected error (url={url}): {e}")

        try:
            # Floats are kept exact; currency values normally arrive as strings anyway.
            data = json.loads(raw.decode() or "{}", parse_float=Decimal)
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {url}: {e}")
        if not isinstance(data, dict):
            raise FetchError(f"Unexpected response type from {url}: {type(data).__name__}")
        return data

    def consensus_get(self) -> Dict[str, Any]:
        return self._http_get("/consensus")

    def wallet_get(self) -> Dict[str, Any]:
        return self._http_get("/wallet")

    def wallet_addresses_get(self) -> Dict[str, Any]:
        return self._http_get("/wallet/addresses")

    def host_get(self) -> Dict[str, Any]:
        return self._http_get("/host")

    def host_storage_get(self) -> Dict[str, Any]:
        return self._http_get("/host/storage")

    def host_bandwidth_get(self) -> Dict[str, Any]:
        return self._http_get("/host/bandwidth")

    def hostdb_all_get(self) -> Dict[str, Any]:
        return self._http_get("/hostdb/all")

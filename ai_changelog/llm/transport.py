"""HTTP transport for the completions endpoint."""

import http.client
import socket
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class HttpResponse:
    """A request that completed, whatever its status."""
    status: int
    body: str


class TransportFailure(Exception):
    """Raised when a request failed to complete (timeout, DNS, refused, dropped)."""
    pass


class Transport(Protocol):
    def post(self, url: str, body: bytes, headers: dict[str, str], timeout: float) -> HttpResponse:
        ...


def _decode(raw: bytes) -> str:
    return raw.decode('utf-8', errors='replace')


class UrllibTransport:
    """Transport backed by urllib. Non-2xx statuses are returned, not raised."""

    def post(self, url: str, body: bytes, headers: dict[str, str], timeout: float) -> HttpResponse:
        req = urllib.request.Request(url, data=body, headers=headers, method='POST')
        try:
            with urllib.request.urlopen(req, timeout=timeout) as response:
                return HttpResponse(status=response.status, body=_decode(response.read()))
        except urllib.error.HTTPError as e:
            try:
                error_body = _decode(e.read())
            except (OSError, http.client.HTTPException):
                error_body = ""
            return HttpResponse(status=e.code, body=error_body)
        except urllib.error.URLError as e:
            if isinstance(e.reason, socket.timeout):
                raise TransportFailure(f"Request timed out after {timeout}s")
            raise TransportFailure(f"Connection failed: {e.reason}")
        except socket.timeout:
            raise TransportFailure(f"Request timed out after {timeout}s")
        except http.client.HTTPException as e:
            raise TransportFailure(f"Incomplete response: {e}")
        except OSError as e:
            raise TransportFailure(f"Connection lost: {e}")

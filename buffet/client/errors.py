"""Errors raised by the dashboard API client.

Everything that can go wrong on the wire is normalized into this small
hierarchy before it reaches controller code:

- ValidationError: the server rejected the request (4xx)
- ServerError: the server failed (5xx)
- NetworkError: no response at all (timeout or connection failure)
"""

from typing import Optional

import httpx


class ApiError(Exception):
    """Base error with a human-readable message and optional HTTP status"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r}, status={self.status})"


class ValidationError(ApiError):
    pass


class ServerError(ApiError):
    pass


class NetworkError(ApiError):
    def __init__(self, message: str, is_timeout: bool = False):
        super().__init__(message)
        self.is_timeout = is_timeout


def error_message(response: httpx.Response) -> str:
    """Best message from an error body ({"message"} or {"error"}), else the status line"""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "error"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]

    return f"HTTP {response.status_code}: {response.reason_phrase or 'Request failed'}"


def error_from_response(response: httpx.Response) -> ApiError:
    message = error_message(response)
    if response.status_code >= 500:
        return ServerError(message, response.status_code)
    return ValidationError(message, response.status_code)


def normalize_error(exc: BaseException) -> ApiError:
    """Map any transport failure onto the ApiError hierarchy"""
    if isinstance(exc, ApiError):
        return exc
    if isinstance(exc, httpx.HTTPStatusError):
        return error_from_response(exc.response)
    if isinstance(exc, httpx.TimeoutException):
        return NetworkError(f"Request timeout: {exc}", is_timeout=True)
    if isinstance(exc, httpx.TransportError):
        return NetworkError(f"Network error: {exc}")
    return ApiError(str(exc) or type(exc).__name__)

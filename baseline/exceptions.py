"""Exception types for pybaseline."""

from __future__ import annotations


class BaselineError(Exception):
    """Base exception for expected application errors."""


class CssParseError(BaselineError):
    """Raised when CSS text cannot be turned into structural nodes."""

    def __init__(self, source: str, line: int, column: int, message: str) -> None:
        self.source = source
        self.line = line
        self.column = column
        super().__init__(f"{source}:{line}:{column}: {message}")


class JsSyntaxError(BaselineError):
    """Raised when JavaScript/TypeScript source does not parse cleanly."""

    def __init__(self, message: str, line: int, column: int) -> None:
        self.line = line
        self.column = column
        super().__init__(f"{message} ({line}:{column})")


class DatasetError(BaselineError):
    """Raised when a feature dataset document has an unexpected shape."""

    def __init__(self, origin: str, *, cause: str | None = None) -> None:
        detail = f"Invalid web-features dataset from {origin}"
        if cause:
            detail = f"{detail} ({cause})"
        super().__init__(detail)


class NetworkError(BaselineError):
    """Raised when a network operation fails."""

    def __init__(self, url: str, *, cause: str | None = None) -> None:
        detail = f"Unable to connect for {url}"
        if cause:
            detail = f"{detail} ({cause})"
        super().__init__(detail)


class RequestTimeoutError(BaselineError):
    """Raised when a request times out."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Request timed out for {url}")


class HttpStatusError(BaselineError):
    """Raised when a non-200 HTTP response is returned."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"Request failed with HTTP {status_code} for {url}")


class ContentError(BaselineError):
    """Raised when a response body is invalid or unexpectedly empty."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Received empty or invalid content from {url}")

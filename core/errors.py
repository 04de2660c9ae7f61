from __future__ import annotations


class ScrapeError(Exception):
    """Base class for every failure raised by the scraping engine."""

    code = "scrape_failed"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LoginRequired(ScrapeError):
    """The session is not authenticated, or the search surface is gated."""

    code = "login_required"

    def __init__(self, message: str, debug_files: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.debug_files = tuple(debug_files)


class NavigationError(ScrapeError):
    code = "navigation_failed"

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class NavigationTimeout(NavigationError):
    code = "navigation_timeout"


class NavigationFailure(NavigationError):
    pass


class ExtractionItemError(ScrapeError):
    code = "extraction_item"


class DiagnosticWriteFailure(ScrapeError):
    code = "diagnostic_write"

"""Domain exceptions."""

from pathlib import Path


class DomainException(Exception):
    """Base exception for domain layer errors."""
    pass


class BundleReadError(DomainException):
    """Raised when the input bundle cannot be opened or holds no pages."""

    def __init__(self, path: str | Path, reason: str, cause: Exception | None = None):
        super().__init__(f"cannot read input {path}: {reason}")
        self.path = str(path)
        self.reason = reason
        self.cause = cause


class SegmentClosedError(DomainException):
    """Raised when a closed segment is asked to change."""

    def __init__(self, start_page: int, end_page: int | None):
        super().__init__(f"Segment {start_page}-{end_page} is closed")
        self.start_page = start_page
        self.end_page = end_page


class ClassificationParseError(DomainException):
    """Raised when a classifier payload cannot be interpreted."""

    def __init__(self, message: str):
        super().__init__(message)


class SegmentMaterializationError(DomainException):
    """Raised when a single segment cannot be written out."""

    def __init__(self, start_page: int, end_page: int, cause: Exception | None = None):
        message = f"Failed to materialize pages {start_page}-{end_page}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.start_page = start_page
        self.end_page = end_page
        self.cause = cause


class ConfigurationError(DomainException):
    """Raised when required settings are missing."""
    pass

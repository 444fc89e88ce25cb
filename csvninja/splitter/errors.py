"""Typed errors raised by the CSV splitting engine and its adapters.

Each error carries a stable ``code``, the HTTP ``status`` the API maps it to,
a message key into :mod:`csvninja.messages` and optional ``details``.
"""

from typing import Any, Dict, Optional

from csvninja.messages import render


class SplitterError(Exception):
    """Stable error contract shared by the engine, the API and the CLI."""

    code = "INTERNAL_ERROR"
    status = 500
    message_key = "processing_error"

    def __init__(
        self,
        message_key: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
        **params: Any,
    ) -> None:
        if message_key is not None:
            self.message_key = message_key
        self.params = params
        self.details = details or {}
        super().__init__(self.message("en"))

    def message(self, locale: str = "en") -> str:
        return render(self.message_key, locale, **self.params)

    def to_payload(self, locale: str = "en") -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message(locale), "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class NoFileProvidedError(SplitterError):
    code = "NO_FILE_PROVIDED"
    status = 400
    message_key = "no_file_provided"


class UnsupportedFileTypeError(SplitterError):
    code = "UNSUPPORTED_FILE_TYPE"
    status = 400
    message_key = "unsupported_file_type"


class UploadTooLargeError(SplitterError):
    code = "UPLOAD_TOO_LARGE"
    status = 413
    message_key = "upload_too_large"


class InvalidRowLimitError(SplitterError):
    code = "INVALID_ROW_LIMIT"
    status = 400
    message_key = "row_limit_too_small"


class EmptyOrUndersizedInputError(SplitterError):
    code = "EMPTY_OR_UNDERSIZED_INPUT"
    status = 400
    message_key = "no_data_rows"


class UnresolvableHeaderError(SplitterError):
    code = "UNRESOLVABLE_HEADER"
    status = 400
    message_key = "header_unresolvable"


class InvalidFilenameError(SplitterError):
    code = "INVALID_FILENAME"
    status = 400
    message_key = "invalid_filename"


class ArtifactNotFoundError(SplitterError):
    code = "ARTIFACT_NOT_FOUND"
    status = 404
    message_key = "artifact_not_found"


class StorageDisabledError(SplitterError):
    code = "STORAGE_DISABLED"
    status = 409
    message_key = "storage_disabled"


class RateLimitedError(SplitterError):
    code = "RATE_LIMITED"
    status = 429
    message_key = "rate_limited"


class ParseError(SplitterError):
    code = "PARSE_ERROR"
    status = 500
    message_key = "parse_error"


class SerializationError(SplitterError):
    code = "SERIALIZATION_ERROR"
    status = 500
    message_key = "serialization_error"


class ProcessingTimeoutError(SplitterError):
    code = "TIMEOUT"
    status = 408
    message_key = "timeout"

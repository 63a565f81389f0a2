"""
Audit Exceptions

Errors raised by the LLM relay and the report store, each carrying the
HTTP status the endpoints translate it to.
"""


class AuditError(Exception):
    """Base exception for audit errors."""

    status_code: int = 500

    def __init__(self, message: str, code: str = "AUDIT_ERROR", details: dict = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            'error': self.code,
            'message': self.message,
            'details': self.details
        }


class LLMConfigurationError(AuditError):
    """Raised before any call when the Gemini API key is missing."""

    def __init__(self, message: str = "Server missing Google API key"):
        super().__init__(message=message, code="LLM_NOT_CONFIGURED")


class LLMProviderError(AuditError):
    """Raised when Gemini is unreachable or answers with a non-2xx status."""

    def __init__(self, message: str = "Google API Error", status: int = None):
        super().__init__(
            message=message,
            code="LLM_PROVIDER_ERROR",
            details={'status': status} if status else {}
        )
        self.status = status


class ReportParseError(AuditError):
    """Raised when the model output is not a valid compliance report."""

    status_code = 502

    def __init__(self, message: str = "Model output is not a valid compliance report"):
        super().__init__(message=message, code="REPORT_PARSE_ERROR")


class ReportNotFoundError(AuditError):
    status_code = 404

    def __init__(self, report_id: str):
        super().__init__(
            message="Report not found",
            code="REPORT_NOT_FOUND",
            details={'report_id': report_id}
        )
        self.report_id = report_id


class ReportAccessError(AuditError):
    """Raised when a user acts on a report they do not own."""

    status_code = 403

    def __init__(self, report_id: str):
        super().__init__(
            message="Report belongs to another user",
            code="REPORT_ACCESS_DENIED",
            details={'report_id': report_id}
        )
        self.report_id = report_id

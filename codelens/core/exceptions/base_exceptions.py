"""Root of the CodeLens exception hierarchy."""

from typing import Optional, Dict, Any


class CodeLensException(Exception):
    """Base class for every error CodeLens raises on purpose.

    Subclasses set ``default_error_code`` and ``default_suggestion`` instead
    of threading them through ``__init__``; explicit arguments still win.
    The CLI prints ``message`` and ``suggestion`` and logs ``to_dict()``.
    """

    default_error_code: Optional[str] = None
    default_suggestion: Optional[str] = None

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 suggestion: Optional[str] = None):
        """Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable code (falls back to ``default_error_code``)
            details: Structured context for logs
            suggestion: What the user can do about it (falls back to ``default_suggestion``)
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = dict(details) if details else {}
        self.suggestion = suggestion or self.default_suggestion

    def add_detail(self, key: str, value: Any) -> None:
        if value is not None:
            self.details[key] = value

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used as structured log context."""
        return {
            'exception_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code,
            'details': self.details,
            'suggestion': self.suggestion,
        }

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}. Suggestion: {self.suggestion}"
        return self.message


class CodeLensError(CodeLensException):
    """An error the current command can report and carry on from."""


class CodeLensCriticalError(CodeLensException):
    """An error that ends the current command."""

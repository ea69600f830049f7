"""
Custom Exceptions for envbind
==============================

Structured error handling lets callers react to a failed bind by type
rather than by parsing strings.

Error Codes:
- 1xxx: Bind errors (a key is missing or its value cannot be parsed)
- 5xxx: Schema errors (the configuration type itself is malformed)
"""

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Structured error codes for user-friendly messages"""

    # 1xxx: Bind Errors
    ENV_VAR_MISSING = 1001
    PARSE_ERROR = 1002

    # 5xxx: Schema Errors
    SCHEMA_ERROR = 5001


class EnvBindError(Exception):
    """Base exception for all envbind errors"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.SCHEMA_ERROR,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging"""
        return {
            'error_type': self.__class__.__name__,
            'error_code': int(self.error_code),
            'message': self.message,
            'details': self.details
        }

    def user_message(self) -> str:
        """Get user-friendly error message based on error code"""
        code_messages = {
            ErrorCode.ENV_VAR_MISSING: "Required configuration value is missing",
            ErrorCode.PARSE_ERROR: "Configuration value could not be parsed",
            ErrorCode.SCHEMA_ERROR: "Configuration schema is invalid",
        }
        return f"Error {self.error_code}: {code_messages.get(self.error_code, self.message)}"


class BindError(EnvBindError):
    """
    Base for the two bind-time failures.

    Both carry the fully qualified key that could not be resolved and
    compare equal when type and key match.
    """

    def __init__(self, message: str, key: str, error_code: ErrorCode):
        super().__init__(message, error_code, {'key': key})
        self.key = key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BindError):
            return NotImplemented
        return type(self) is type(other) and self.key == other.key

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.key))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self.key!r})"


class EnvVarMissingError(BindError):
    """Raised when a required key is absent from the source"""

    def __init__(self, key: str):
        super().__init__(f"Env variable is missing: {key}", key, ErrorCode.ENV_VAR_MISSING)


class ParseError(BindError):
    """Raised when a sourced or default value cannot be converted to the field type"""

    def __init__(self, key: str):
        super().__init__(f"Failed to parse env variable: {key}", key, ErrorCode.PARSE_ERROR)


class SchemaError(EnvBindError):
    """Raised while a schema is built when its declaration is contradictory"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.SCHEMA_ERROR, details)

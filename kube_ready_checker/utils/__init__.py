"""
工具模块
"""

from .errors import (
    DiagnosticError,
    DiagnosticErrorCode,
    ListError,
    MissingComponentsError,
    CommandError,
    WaitTimeoutError,
)
from .retry import poll_until_ready

__all__ = [
    "DiagnosticError",
    "DiagnosticErrorCode",
    "ListError",
    "MissingComponentsError",
    "CommandError",
    "WaitTimeoutError",
    "poll_until_ready",
]

"""
Session Use Cases

Session ledger management and retention.
"""

from .session_query_use_case import SessionQueryUseCase
from .session_cleanup_use_case import SessionCleanupUseCase
from .dtos import (
    ActiveSessionsResponse,
    CleanupReport,
    SessionActionResponse,
    SessionHistoryResponse,
    SessionInfo,
    SessionStatsResponse,
)

__all__ = [
    # Use Cases
    "SessionQueryUseCase",
    "SessionCleanupUseCase",
    # DTOs
    "ActiveSessionsResponse",
    "CleanupReport",
    "SessionActionResponse",
    "SessionHistoryResponse",
    "SessionInfo",
    "SessionStatsResponse",
]

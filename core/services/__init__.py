# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .missing_info_service import (
    MissingInfoError,
    NoMainTableError,
    NoTablesFoundError,
    detect_missing_info,
)

__all__ = [
    "MissingInfoError",
    "NoMainTableError",
    "NoTablesFoundError",
    "detect_missing_info",
]

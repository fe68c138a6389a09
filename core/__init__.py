# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for schema discovery, reports and tools
# - services/: The missing-information detection flow
#
# Code in this package should NOT import from FastAPI or the agent layer.
# This keeps the logic testable and reusable.
# =============================================================================

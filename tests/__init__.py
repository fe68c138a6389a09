# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the ContactGap API:
# - test_schema_analyzer.py / test_query_builder.py / test_report_assembler.py:
#   Unit tests for the detector stages
# - test_missing_info_service.py: End-to-end detection on SQLite
# - test_tools.py / test_assistant.py: Agent tools and the chat loop
# - test_api.py: HTTP endpoints
#
# Run tests with: pytest
# =============================================================================

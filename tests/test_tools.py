# =============================================================================
# tests/test_tools.py - Agent Tool Tests
# =============================================================================
# This module contains tests for:
# - Tool registration and OpenAI definitions
# - Input validation (camelCase arguments, invalid email, bounds)
# - Structured failures instead of exceptions
# =============================================================================

import json

import pytest

from agents.tools import ToolContext, get_tool_definitions, list_tools, run_tool
from lib.gmail_client import EmailTransportError
from lib.query_executor import DatabaseConnectionError


# =============================================================================
# Registry
# =============================================================================

class TestRegistry:

    def test_tools_registered(self):
        assert list_tools() == ["detect-missing-info", "send-email"]

    def test_definitions_use_camel_case_names(self):
        definitions = {d["function"]["name"]: d for d in get_tool_definitions()}

        detect = definitions["detect-missing-info"]
        assert detect["type"] == "function"
        properties = detect["function"]["parameters"]["properties"]
        assert set(properties) == {
            "includeRecoveryAnalysis",
            "limitResults",
            "priorityFilter",
            "autoDiscoverTables",
        }

    def test_send_email_requires_fields(self):
        definitions = {d["function"]["name"]: d for d in get_tool_definitions()}

        parameters = definitions["send-email"]["function"]["parameters"]
        assert set(parameters["required"]) == {"to", "subject", "body"}

    def test_unknown_tool(self):
        result = run_tool("delete-everything", {}, ToolContext())

        assert result["success"] is False
        assert result["error"] == "UNKNOWN_TOOL"
        assert result["details"]["available_tools"] == list_tools()


# =============================================================================
# detect-missing-info
# =============================================================================

class TestDetectTool:

    def test_success(self, sqlite_executor):
        result = run_tool(
            "detect-missing-info",
            {"includeRecoveryAnalysis": False, "limitResults": 10},
            ToolContext(executor=sqlite_executor),
        )

        assert result["success"] is True
        assert result["database_analysis"]["main_table"] == "candidates"
        assert result["query_info"] == {
            "included_recovery_analysis": False,
            "results_limited_to": 10,
            "priority_filter": "none",
            "auto_discovered_schema": True,
        }
        # JSON safe
        json.dumps(result)

    def test_arguments_as_json_string(self, sqlite_executor):
        result = run_tool(
            "detect-missing-info",
            '{"priorityFilter": "High"}',
            ToolContext(executor=sqlite_executor),
        )

        assert result["success"] is True
        assert [r["priority"] for r in result["missing_info_report"]] == ["High"]

    def test_snake_case_arguments_accepted(self, sqlite_executor):
        result = run_tool(
            "detect-missing-info",
            {"limit_results": 1},
            ToolContext(executor=sqlite_executor),
        )

        assert result["query_info"]["results_limited_to"] == 1

    def test_large_limit_accepted(self, sqlite_executor):
        result = run_tool(
            "detect-missing-info",
            {"limitResults": 5000},
            ToolContext(executor=sqlite_executor),
        )

        assert result["success"] is True
        assert result["query_info"]["results_limited_to"] == 5000

    @pytest.mark.parametrize(
        "arguments",
        [
            {"limitResults": 0},
            {"limitResults": -1},
            {"priorityFilter": "Urgent"},
        ],
    )
    def test_invalid_input(self, sqlite_executor, arguments):
        result = run_tool("detect-missing-info", arguments, ToolContext(executor=sqlite_executor))

        assert result["success"] is False
        assert result["error"] == "INVALID_INPUT"
        assert result["details"]["errors"]

    def test_malformed_json(self):
        result = run_tool("detect-missing-info", "{not json", ToolContext())

        assert result["error"] == "INVALID_INPUT"

    def test_no_executor(self):
        result = run_tool("detect-missing-info", {}, ToolContext())

        assert result["success"] is False
        assert result["error"] == "DATABASE_CONNECTION_FAILED"

    def test_connection_error(self, fake_executor):
        executor = fake_executor(error=DatabaseConnectionError("timeout expired"))

        result = run_tool("detect-missing-info", {}, ToolContext(executor=executor))

        assert result["error"] == "DATABASE_CONNECTION_FAILED"
        assert "timeout expired" in result["message"]
        assert result["suggestion"]

    def test_no_main_table(self, fake_executor, make_columns):
        executor = fake_executor(catalog=make_columns("orders", "id", "total"))

        result = run_tool("detect-missing-info", {}, ToolContext(executor=executor))

        assert result["error"] == "NO_MAIN_TABLE"
        assert result["details"] == {"available_tables": ["orders"]}

    def test_unexpected_error(self, fake_executor):
        executor = fake_executor(error=RuntimeError("boom"))

        result = run_tool("detect-missing-info", {}, ToolContext(executor=executor))

        assert result["success"] is False
        assert result["error"] == "TOOL_EXECUTION_FAILED"
        assert result["message"] == "boom"


# =============================================================================
# send-email
# =============================================================================

class TestSendEmailTool:

    def test_success(self, mock_sender):
        result = run_tool(
            "send-email",
            {"to": "jane@acme.org", "subject": "Missing phone", "body": "Please send your number."},
            ToolContext(sender=mock_sender),
        )

        assert result == {"success": True, "message_id": "msg-123"}
        mock_sender.send.assert_called_once_with("jane@acme.org", "Missing phone", "Please send your number.")

    @pytest.mark.parametrize(
        "arguments",
        [
            {"to": "", "subject": "Hi", "body": "Hello"},
            {"to": "not-an-email", "subject": "Hi", "body": "Hello"},
            {"to": "jane@acme.org", "subject": "   ", "body": "Hello"},
            {"to": "jane@acme.org", "subject": "Hi", "body": ""},
            {"subject": "Hi", "body": "Hello"},
        ],
    )
    def test_invalid_input_never_sends(self, mock_sender, arguments):
        result = run_tool("send-email", arguments, ToolContext(sender=mock_sender))

        assert result["success"] is False
        assert result["error"] == "INVALID_INPUT"
        mock_sender.send.assert_not_called()

    def test_transport_failure(self, mock_sender):
        mock_sender.send.side_effect = EmailTransportError("quota exceeded")

        result = run_tool(
            "send-email",
            {"to": "jane@acme.org", "subject": "Hi", "body": "Hello"},
            ToolContext(sender=mock_sender),
        )

        assert result["success"] is False
        assert result["error"] == "EMAIL_SEND_FAILED"
        assert "quota exceeded" in result["message"]

    def test_no_sender(self):
        result = run_tool(
            "send-email",
            {"to": "jane@acme.org", "subject": "Hi", "body": "Hello"},
            ToolContext(),
        )

        assert result["error"] == "EMAIL_SEND_FAILED"

"""
Store Client Tests

TableClient over a mocked psycopg2 connection:
1. Query parameters for filters, ordering and limits
2. Empty IN-filters short-circuit without touching the database
3. psycopg2 errors become STORE_ERROR
4. Unfiltered writes are refused
5. Connection configuration errors
"""

import pytest
from unittest.mock import patch, MagicMock
import psycopg2
from psycopg2.extras import Json

from fitbot.config import Settings
from fitbot.db import TableClient, connect, open_client
from fitbot.shared.errors import ErrorCode, FitbotException


@pytest.fixture
def conn():
    return MagicMock()


@pytest.fixture
def cursor(conn):
    cur = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cur
    cur.fetchall.return_value = []
    return cur


# ============================================
# READS
# ============================================

class TestSelect:

    def test_filter_order_limit_params(self, conn, cursor):
        cursor.fetchall.return_value = [{"id": "run-1", "status": "in_progress"}]

        rows = TableClient(conn).select(
            "questionnaire.runs",
            columns=["id", "status"],
            filters={"user_id": "user-1", "form_id": "form-1"},
            order_by="started_at",
            descending=True,
            limit=1,
        )

        assert rows == [{"id": "run-1", "status": "in_progress"}]
        params = cursor.execute.call_args.args[1]
        assert params == ["user-1", "form-1", 1]

    def test_list_filter_rendered_as_in_tuple(self, conn, cursor):
        """A Python list would be sent as text[]; uuid = text has no operator."""
        TableClient(conn).select("questionnaire.questions", filters={"id": ["q1", "q2"]})

        query, params = cursor.execute.call_args.args
        assert params == [("q1", "q2")]
        assert "SQL(' IN %s')" in repr(query)
        assert "ANY" not in repr(query)

    def test_list_filter_combined_with_equality(self, conn, cursor):
        TableClient(conn).select(
            "questionnaire.runs", filters={"user_id": "user-1", "id": {"r1"}}, limit=1,
        )

        assert cursor.execute.call_args.args[1] == ["user-1", ("r1",), 1]

    def test_none_filter_has_no_param(self, conn, cursor):
        TableClient(conn).select("questionnaire.runs", filters={"submitted_at": None})

        assert cursor.execute.call_args.args[1] == []

    def test_empty_in_filter_short_circuits(self, conn, cursor):
        rows = TableClient(conn).select("questionnaire.questions", filters={"id": []})

        assert rows == []
        cursor.execute.assert_not_called()

    def test_select_one_none_when_empty(self, conn, cursor):
        assert TableClient(conn).select_one("questionnaire.forms", filters={"slug": "x"}) is None

    def test_database_error_becomes_store_error(self, conn, cursor):
        cursor.execute.side_effect = psycopg2.OperationalError("server closed the connection")

        with pytest.raises(FitbotException) as exc_info:
            TableClient(conn).select("questionnaire.forms")

        assert exc_info.value.error_code == ErrorCode.STORE_ERROR
        assert "server closed the connection" in exc_info.value.message


# ============================================
# WRITES
# ============================================

class TestWrites:

    def test_insert_adapts_json_columns(self, conn, cursor):
        cursor.fetchall.return_value = [{"id": "a1"}]

        stored = TableClient(conn).insert("questionnaire.answers", [
            {"run_id": "r", "question_id": "q", "selected_values": ["yes"]},
        ])

        assert stored == [{"id": "a1"}]
        params = cursor.execute.call_args.args[1]
        assert params[:2] == ["r", "q"]
        assert isinstance(params[2], Json)

    def test_insert_nothing_skips_database(self, conn, cursor):
        assert TableClient(conn).insert("questionnaire.answers", []) == []
        cursor.execute.assert_not_called()

    def test_update_params_values_then_filters(self, conn, cursor):
        TableClient(conn).update("questionnaire.runs", {"status": "submitted"}, {"id": "run-1"})

        assert cursor.execute.call_args.args[1] == ["submitted", "run-1"]

    def test_unfiltered_update_refused(self, conn, cursor):
        with pytest.raises(FitbotException) as exc_info:
            TableClient(conn).update("public.Users", {"fitness_level": 1}, {})

        assert exc_info.value.error_code == ErrorCode.STORE_ERROR
        cursor.execute.assert_not_called()

    def test_unfiltered_delete_refused(self, conn, cursor):
        with pytest.raises(FitbotException):
            TableClient(conn).delete("questionnaire.answers", {})

        cursor.execute.assert_not_called()

    def test_replace_deletes_then_inserts_in_one_transaction(self, conn, cursor):
        TableClient(conn).replace("questionnaire.answers", {"run_id": "r"}, [
            {"run_id": "r", "question_id": "q", "text_value": "yes", "selected_values": None},
        ])

        assert cursor.execute.call_count == 2
        assert conn.__enter__.call_count == 1

    def test_replace_with_no_rows_only_deletes(self, conn, cursor):
        assert TableClient(conn).replace("questionnaire.answers", {"run_id": "r"}, []) == []
        assert cursor.execute.call_count == 1

    def test_replace_failure_propagates(self, conn, cursor):
        cursor.execute.side_effect = [None, psycopg2.IntegrityError("duplicate key")]

        with pytest.raises(FitbotException) as exc_info:
            TableClient(conn).replace("questionnaire.answers", {"run_id": "r"}, [
                {"run_id": "r", "question_id": "q", "text_value": "yes", "selected_values": None},
            ])

        assert exc_info.value.error_code == ErrorCode.STORE_ERROR
        # The connection context manager saw the exception and rolls back.
        exit_args = conn.__exit__.call_args.args
        assert exit_args[0] is psycopg2.IntegrityError

    def test_unscoped_replace_refused(self, conn, cursor):
        with pytest.raises(FitbotException):
            TableClient(conn).replace("questionnaire.answers", {}, [])


# ============================================
# CONNECTIONS
# ============================================

class TestConnect:

    def test_missing_database_url(self):
        with pytest.raises(FitbotException) as exc_info:
            connect(Settings())

        assert exc_info.value.error_code == ErrorCode.CONFIGURATION_ERROR

    def test_connection_failure(self):
        with patch("fitbot.db.psycopg2.connect", side_effect=psycopg2.OperationalError("refused")):
            with pytest.raises(FitbotException) as exc_info:
                connect(Settings(database_url="postgresql://nowhere/db"))

        assert exc_info.value.error_code == ErrorCode.STORE_ERROR

    def test_open_client_closes_connection(self):
        mock_conn = MagicMock()
        with patch("fitbot.db.psycopg2.connect", return_value=mock_conn):
            with open_client(Settings(database_url="postgresql://db/x")) as client:
                assert isinstance(client, TableClient)
                mock_conn.close.assert_not_called()

        mock_conn.close.assert_called_once()

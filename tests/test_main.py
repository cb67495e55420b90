"""Tests for the persist-query command line."""

from __future__ import annotations

import io
import json

import pytest

import persist_query.main as main_module
from persist_query.exceptions import RemoteMutationError
from persist_query.main import main


QUERY = """
query Viewer($login: String!) @persistedQueryConfiguration(
  accessToken: { environmentVariable: "PERSIST_QUERY_CLI_TOKEN" }
) {
  user(login: $login) { name }
}
"""


@pytest.fixture
def query_file(tmp_path):
    path = tmp_path / "viewer.graphql"
    path.write_text(QUERY, encoding="utf-8")
    return path


def test_dry_run_prints_transformed_query(monkeypatch, capsys, query_file):
    monkeypatch.setenv("PERSIST_QUERY_CLI_TOKEN", "token")

    assert main(["--dry-run", str(query_file)]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["freeVariables"] == ["login"]
    assert output["accessTokenConfigured"] is True
    assert "persistedQueryConfiguration" not in output["query"]
    assert "token" not in output["query"]


def test_dry_run_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("{ viewer { id } }"))

    assert main(["--dry-run"]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["freeVariables"] == []
    assert output["accessTokenConfigured"] is False


def test_missing_variable_exits_with_failure(monkeypatch, capsys, query_file):
    monkeypatch.delenv("PERSIST_QUERY_CLI_TOKEN", raising=False)

    assert main(["--dry-run", str(query_file)]) == 1
    assert capsys.readouterr().out == ""


def test_prints_persisted_query_id(monkeypatch, capsys, query_file):
    received = []

    async def fake_persist_query(query_text):
        received.append(query_text)
        return "abc123"

    monkeypatch.setattr(main_module, "persist_query", fake_persist_query)

    assert main([str(query_file)]) == 0
    assert capsys.readouterr().out.strip() == "abc123"
    assert received == [QUERY]


def test_remote_failure_exits_with_failure(monkeypatch, capsys, query_file):
    async def failing_persist_query(query_text):
        raise RemoteMutationError([{"message": "bad query"}], '[{"message": "bad query"}]')

    monkeypatch.setattr(main_module, "persist_query", failing_persist_query)

    assert main([str(query_file)]) == 1
    assert capsys.readouterr().out == ""


def test_missing_file_exits_with_failure(tmp_path, capsys):
    assert main([str(tmp_path / "missing.graphql")]) == 1
    assert capsys.readouterr().out == ""


def test_missing_credentials_exit_with_failure(monkeypatch, tmp_path, capsys, query_file):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PERSIST_QUERY_CLI_TOKEN", "token")
    monkeypatch.delenv("RAZZLE_ONEGRAPH_APP_ID", raising=False)
    monkeypatch.delenv("OG_DASHBOARD_ACCESS_TOKEN", raising=False)

    assert main([str(query_file)]) == 1
    assert capsys.readouterr().out == ""

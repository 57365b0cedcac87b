from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from quotequeue.cli import approve_quote, list_quotes, refuse_quote, submit_quote


def _prepare_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    path = repo / "frontend" / "static" / "quotes" / "english.json"
    path.parent.mkdir(parents=True)
    payload = {
        "language": "english",
        "groups": [[0, 100]],
        "quotes": [
            {"text": "The quick brown fox jumps over the lazy dog.", "source": "Typing lore", "length": 44, "id": 1}
        ],
    }
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return repo


def _settings_args(tmp_path: Path, repo: Path) -> list[str]:
    return ["--repo-path", str(repo), "--db-path", str(tmp_path / "staging.db")]


def _read_output(capsys: Any) -> dict[str, Any]:
    return json.loads(capsys.readouterr().out)


def test_submit_list_and_refuse_round_trip(tmp_path: Path, capsys: Any) -> None:
    repo = _prepare_repo(tmp_path)
    settings_args = _settings_args(tmp_path, repo)

    exit_code = submit_quote.main(
        [
            "--text",
            "Curiouser and curiouser!",
            "--source",
            "Alice in Wonderland",
            "--language",
            "english",
            "--submitted-by",
            "user-1",
            *settings_args,
        ]
    )
    submitted = _read_output(capsys)

    assert exit_code == 0
    assert submitted["status"] == "accepted"
    pending_id = submitted["pending_id"]

    assert list_quotes.main(["--language", "english", *settings_args]) == 0
    listed = _read_output(capsys)
    assert [item["id"] for item in listed["results"]] == [pending_id]
    assert listed["results"][0]["approved"] is False

    assert refuse_quote.main(["--id", pending_id, *settings_args]) == 0
    assert _read_output(capsys) == {"refused": pending_id}

    assert list_quotes.main(["--language", "english", *settings_args]) == 0
    assert _read_output(capsys)["results"] == []


def test_submit_reports_duplicate_with_non_zero_exit(tmp_path: Path, capsys: Any) -> None:
    repo = _prepare_repo(tmp_path)

    exit_code = submit_quote.main(
        [
            "--text",
            "The quick brown fox jumps over the lazy dog.",
            "--source",
            "Copy",
            "--language",
            "english",
            "--submitted-by",
            "user-1",
            *_settings_args(tmp_path, repo),
        ]
    )
    payload = _read_output(capsys)

    assert exit_code == 1
    assert payload["status"] == "duplicate"
    assert payload["duplicate_id"] == 1
    assert payload["similarity"] == 1.0


def test_approve_unknown_id_reports_not_found(tmp_path: Path, capsys: Any) -> None:
    repo = _prepare_repo(tmp_path)

    exit_code = approve_quote.main(
        ["--id", "missing", "--approver", "moderator", *_settings_args(tmp_path, repo)]
    )
    payload = _read_output(capsys)

    assert exit_code == 1
    assert payload["kind"] == "NotFoundError"


def test_commands_fail_uniformly_when_repo_is_not_a_working_copy(tmp_path: Path, capsys: Any) -> None:
    repo = tmp_path / "plain"
    repo.mkdir()

    exit_code = list_quotes.main(_settings_args(tmp_path, repo))
    payload = _read_output(capsys)

    assert exit_code == 1
    assert payload["kind"] == "InfrastructureError"
    assert "Git not available" in payload["error"]


def test_missing_repo_path_is_a_config_error(tmp_path: Path, capsys: Any, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("QUOTEQUEUE_REPO_PATH", raising=False)
    monkeypatch.chdir(tmp_path)

    exit_code = refuse_quote.main(["--id", "abc", "--db-path", str(tmp_path / "staging.db")])
    payload = _read_output(capsys)

    assert exit_code == 2
    assert payload["kind"] == "ConfigError"
    assert "QUOTEQUEUE_REPO_PATH" in payload["error"]

"""Tests for the contract verification CLI."""

from __future__ import annotations

import json
import logging

import pytest

from ballot_verifier import run_checks
from ballot_verifier.cases import BALLOT_WINNER_HEX

ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
ZERO_WORD = "0x" + "00" * 32


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    monkeypatch.setattr(run_checks, "load_dotenv", lambda: False)
    for name in (
        "BALLOT_EXPECTED_WINNER",
        "BALLOT_CALL_TIMEOUT",
        "BALLOT_ADDRESS_PATTERN",
        "BALLOT_DECODER",
        "BALLOT_LOG_PATH",
        "BALLOT_SHARE_HANDLE",
    ):
        monkeypatch.delenv(name, raising=False)


def _write_fixture(tmp_path, **overrides):
    payload = {"address": ADDRESS, "winner_name": BALLOT_WINNER_HEX}
    payload.update(overrides)
    path = tmp_path / "deployment.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_cli_passing_run(tmp_path, capsys) -> None:
    fixture = _write_fixture(tmp_path)
    output = tmp_path / "out" / "checks.jsonl"

    exit_code = run_checks.main(["--deployment", str(fixture), "--output", str(output)])

    assert exit_code == 0
    assert output.exists()
    assert len(output.read_text(encoding="utf-8").splitlines()) == 2
    stdout = capsys.readouterr().out
    assert "CONTRACT VERIFICATION RESULTS" in stdout
    assert "Passed: 2" in stdout


def test_cli_mismatch_returns_failure(tmp_path, capsys) -> None:
    fixture = _write_fixture(tmp_path, winner_name=ZERO_WORD)

    exit_code = run_checks.main(["--deployment", str(fixture), "--output", str(tmp_path / "checks.jsonl")])

    assert exit_code == 1
    stdout = capsys.readouterr().out
    assert "BALLOT-WINNER-001 [assertion_failed]" in stdout


def test_cli_expected_winner_override(tmp_path) -> None:
    fixture = _write_fixture(tmp_path, winner_name=ZERO_WORD)

    exit_code = run_checks.main(
        [
            "--deployment",
            str(fixture),
            "--output",
            str(tmp_path / "checks.jsonl"),
            "--expected-winner",
            ZERO_WORD,
            "--per-case-handle",
            "--decoder",
            "hex",
        ]
    )

    assert exit_code == 0


def test_cli_deploy_failure_returns_failure(tmp_path, capsys) -> None:
    fixture = _write_fixture(tmp_path, fail_deploy=True)

    exit_code = run_checks.main(["--deployment", str(fixture), "--output", str(tmp_path / "checks.jsonl")])

    assert exit_code == 1
    assert "Deployment errors: 2" in capsys.readouterr().out


def test_cli_uses_log_path_from_env(tmp_path, monkeypatch) -> None:
    fixture = _write_fixture(tmp_path)
    log_path = tmp_path / "env" / "checks.jsonl"
    monkeypatch.setenv("BALLOT_LOG_PATH", str(log_path))

    assert run_checks.main(["--deployment", str(fixture)]) == 0
    assert log_path.exists()


def test_cli_missing_fixture(tmp_path, capsys) -> None:
    exit_code = run_checks.main(["--deployment", str(tmp_path / "missing.json")])
    assert exit_code == 2
    assert "not found" in capsys.readouterr().out


def test_cli_invalid_fixture(tmp_path, capsys) -> None:
    fixture = _write_fixture(tmp_path, winner_name="zz")
    exit_code = run_checks.main(["--deployment", str(fixture), "--output", str(tmp_path / "checks.jsonl")])
    assert exit_code == 2
    assert "Invalid deployment fixture" in capsys.readouterr().out


def test_cli_invalid_timeout(tmp_path, capsys) -> None:
    fixture = _write_fixture(tmp_path)
    exit_code = run_checks.main(["--deployment", str(fixture), "--timeout", "-1"])
    assert exit_code == 2
    assert "Invalid configuration" in capsys.readouterr().out


def test_cli_directory_fixture(tmp_path, capsys) -> None:
    exit_code = run_checks.main(["--deployment", str(tmp_path)])
    assert exit_code == 2
    assert "not found" in capsys.readouterr().out


def test_cli_unreadable_fixture(tmp_path, monkeypatch, capsys) -> None:
    fixture = _write_fixture(tmp_path)

    def _deny(path):
        raise PermissionError(f"Permission denied: '{path}'")

    monkeypatch.setattr(run_checks, "load_deployment", _deny)
    exit_code = run_checks.main(["--deployment", str(fixture)])
    assert exit_code == 2
    assert "Permission denied" in capsys.readouterr().out


def test_cli_verbose_logs_raw_payload(tmp_path, caplog) -> None:
    fixture = _write_fixture(tmp_path)
    caplog.set_level(logging.DEBUG, logger="ballot_verifier")

    exit_code = run_checks.main(["--deployment", str(fixture), "--output", str(tmp_path / "checks.jsonl"), "--verbose"])

    assert exit_code == 0
    assert any("raw payload" in record.getMessage() for record in caplog.records)

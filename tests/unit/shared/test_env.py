from __future__ import annotations

import logging
import os

import pytest

from inventory.shared.env import load_secret_file_variables


def _unset(monkeypatch: pytest.MonkeyPatch, key: str) -> None:
    monkeypatch.delenv(key, raising=False)


def test_load_secret_file_variables_reads_content(tmp_path, monkeypatch):
    secret_file = tmp_path / "mongo_password"
    secret_file.write_text("s3cr3t\n", encoding="utf-8")

    monkeypatch.setenv("DB_PASSWORD_FILE", str(secret_file))
    _unset(monkeypatch, "DB_PASSWORD")

    resolved = load_secret_file_variables()

    assert os.environ["DB_PASSWORD"] == "s3cr3t"
    assert "DB_PASSWORD" in resolved
    monkeypatch.delenv("DB_PASSWORD")


def test_load_secret_file_variables_logs_missing_file(monkeypatch, caplog):
    monkeypatch.setenv("MISSING_SECRET_FILE", "/tmp/does-not-exist")
    _unset(monkeypatch, "MISSING_SECRET")

    with caplog.at_level(logging.WARNING):
        resolved = load_secret_file_variables()

    assert "MISSING_SECRET" not in resolved
    assert "MISSING_SECRET" not in os.environ
    assert any(
        record.message == "env.secret_file.load_failed" for record in caplog.records
    )


def test_load_secret_file_variables_handles_decode_error(tmp_path, monkeypatch, caplog):
    binary_file = tmp_path / "binary.bin"
    binary_file.write_bytes(b"\xff\xfe\xfd")

    monkeypatch.setenv("BINARY_SECRET_FILE", str(binary_file))
    _unset(monkeypatch, "BINARY_SECRET")

    with caplog.at_level(logging.WARNING):
        load_secret_file_variables()

    assert "BINARY_SECRET" not in os.environ
    assert any(
        record.message == "env.secret_file.load_failed" for record in caplog.records
    )


def test_load_secret_file_variables_skips_existing_target(monkeypatch):
    monkeypatch.setenv("EXISTING_SECRET", "present")
    monkeypatch.setenv("EXISTING_SECRET_FILE", "/tmp/ignored")

    load_secret_file_variables()

    assert os.environ["EXISTING_SECRET"] == "present"


def test_load_secret_file_variables_skips_empty_path(monkeypatch):
    _unset(monkeypatch, "EMPTY_SECRET")
    monkeypatch.setenv("EMPTY_SECRET_FILE", "")

    load_secret_file_variables()

    assert "EMPTY_SECRET" not in os.environ

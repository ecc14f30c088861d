import logging
import os

import pytest

from burpcert.cli import EXIT_CONFIG, EXIT_FAILED, EXIT_OK, main
from burpcert.config import HOST_ENV
from burpcert.issuer import CERT_FILE, KEY_FILE


def run_cli(args):
    if "--config" not in args:
        args = args + ["--config", "absent.yaml"]
    with pytest.raises(SystemExit) as exc:
        main(args)
    return exc.value.code


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(HOST_ENV, raising=False)
    return tmp_path


def test_generates_then_skips(workdir):
    assert run_cli(["--host", "127.0.0.1,localhost"]) == EXIT_OK
    assert sorted(os.listdir(workdir)) == sorted([CERT_FILE, KEY_FILE])

    before = (workdir / CERT_FILE).read_bytes()
    assert run_cli(["--host", "127.0.0.1,localhost"]) == EXIT_OK
    assert (workdir / CERT_FILE).read_bytes() == before


def test_empty_host_fails(workdir):
    assert run_cli(["--host", ""]) == EXIT_FAILED
    assert os.listdir(workdir) == []


def test_no_host_at_all_fails(workdir):
    assert run_cli([]) == EXIT_FAILED
    assert os.listdir(workdir) == []


def test_host_from_environment(workdir, monkeypatch):
    monkeypatch.setenv(HOST_ENV, "localhost")
    assert run_cli([]) == EXIT_OK
    assert (workdir / KEY_FILE).exists()


def test_partial_run_exits_ok(workdir):
    (workdir / KEY_FILE).mkdir()
    assert run_cli(["--host", "localhost"]) == EXIT_OK
    assert (workdir / CERT_FILE).exists()


def test_bad_config_exits(workdir):
    (workdir / "bad.yaml").write_text("key:\n  algorithm: dsa\n")
    assert run_cli(["--host", "localhost", "--config", "bad.yaml"]) == EXIT_CONFIG
    assert os.listdir(workdir) == ["bad.yaml"]


@pytest.mark.parametrize("body", [
    "certificate:\n  validity_hours: 100000000\n",
    "certificate:\n  host: 127.1\n",
    "output:\n  directory: null\n",
])
def test_config_values_that_cannot_be_used(workdir, body):
    (workdir / "c.yaml").write_text(body)
    assert run_cli(["--config", "c.yaml"]) == EXIT_CONFIG
    assert os.listdir(workdir) == ["c.yaml"]


def test_partial_warning_names_the_missing_file(workdir, caplog):
    (workdir / "legacy.key").mkdir()
    (workdir / "c.yaml").write_text("output:\n  legacy_key: legacy.key\n")

    with caplog.at_level(logging.WARNING):
        assert run_cli(["--host", "localhost", "--config", "c.yaml"]) == EXIT_OK

    assert (workdir / KEY_FILE).exists()
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "legacy.key" in warnings[0]
    assert KEY_FILE not in warnings[0]

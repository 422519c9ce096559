import logging
import logging.handlers
import os
from pathlib import Path
from typing import Iterator

import pytest
from click.testing import CliRunner

from bytesize import cli, logging_setup
from bytesize.logging_setup import ContextEnricherFilter

LOG_VARIABLES = ("BYTESIZE_LOG_LEVEL", "BYTESIZE_LOG_FILE", "BYTESIZE_LOG_MAX_BYTES")


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "setup_logging", lambda: None)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_parse_prints_bytes(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, ["parse", "1.5 GB"])
    assert result.exit_code == 0
    assert result.output.strip() == "1610612736"


def test_parse_rejects_invalid_input(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, ["parse", "1XB"])
    assert result.exit_code == 2
    assert "invalid size suffix: XB" in result.output


def test_format_prints_human_readable(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, ["format", "1048576"])
    assert result.exit_code == 0
    assert result.output.strip() == "1.00 MB"


def test_format_accepts_negative_after_separator(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, ["format", "--", "-2048"])
    assert result.exit_code == 0
    assert result.output.strip() == "-2.00 KB"


def test_convert_to_unit(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, ["convert", "1GB", "--unit", "MB"])
    assert result.exit_code == 0
    assert float(result.output.strip()) == 1024.0

    result = runner.invoke(cli.main, ["convert", "2K", "--unit", "b"])
    assert result.exit_code == 0
    assert result.output.strip() == "2048"


def test_convert_rejects_invalid_input(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, ["convert", "lots", "--unit", "KB"])
    assert result.exit_code == 2


def test_check_config_lists_limits(runner: CliRunner, tmp_path: Path) -> None:
    config_file = tmp_path / "limits.yaml"
    config_file.write_text("limits:\n  upload_max: 1.5GB\n  chunk: 8MB\n", encoding="utf-8")

    result = runner.invoke(cli.main, ["check-config", str(config_file)])
    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "chunk: 8388608 (8.00 MB)",
        "upload_max: 1610612736 (1.50 GB)",
    ]


def test_check_config_reports_invalid_file(runner: CliRunner, tmp_path: Path) -> None:
    config_file = tmp_path / "limits.yaml"
    config_file.write_text("limits:\n  chunk: 8XB\n", encoding="utf-8")

    result = runner.invoke(cli.main, ["check-config", str(config_file)])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so monkeypatch restores the variables the env file creates.
    for name in LOG_VARIABLES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def real_logging_setup(monkeypatch: pytest.MonkeyPatch) -> Iterator[logging.Logger]:
    monkeypatch.setattr(cli, "setup_logging", logging_setup.setup_logging)
    root = logging.getLogger()
    level = root.level
    try:
        yield root
    finally:
        for handler in list(root.handlers):
            if any(isinstance(f, ContextEnricherFilter) for f in handler.filters):
                root.removeHandler(handler)
                handler.close()
        root.setLevel(level)
        if hasattr(root, "_bytesize_logging_installed"):
            delattr(root, "_bytesize_logging_installed")


def test_env_file_is_loaded_before_logging_setup(
    runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, clean_env: None
) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("BYTESIZE_LOG_LEVEL=DEBUG\nBYTESIZE_LOG_MAX_BYTES=2MB\n", encoding="utf-8")
    seen = {}

    def record_env() -> None:
        seen.update({name: os.environ.get(name) for name in LOG_VARIABLES})

    monkeypatch.setattr(cli, "setup_logging", record_env)

    result = runner.invoke(cli.main, ["--env-file", str(env_file), "format", "4096"])
    assert result.exit_code == 0
    assert result.output.strip() == "4.00 KB"
    assert seen == {"BYTESIZE_LOG_LEVEL": "DEBUG", "BYTESIZE_LOG_FILE": None, "BYTESIZE_LOG_MAX_BYTES": "2MB"}


def test_env_file_configures_logging_of_the_run(
    runner: CliRunner, tmp_path: Path, clean_env: None, real_logging_setup: logging.Logger
) -> None:
    log_file = tmp_path / "logs" / "out.log"
    env_file = tmp_path / ".env"
    env_file.write_text(
        f"BYTESIZE_LOG_LEVEL=DEBUG\nBYTESIZE_LOG_FILE={log_file}\nBYTESIZE_LOG_MAX_BYTES=1MB\n",
        encoding="utf-8",
    )

    result = runner.invoke(cli.main, ["--env-file", str(env_file), "parse", "1KB"])
    assert result.exit_code == 0
    assert real_logging_setup.level == logging.DEBUG

    file_handlers = [h for h in real_logging_setup.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert [h.maxBytes for h in file_handlers] == [1024 * 1024]
    for handler in file_handlers:
        handler.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "| DEBUG | CLI |" in text
    assert "CLI parse text='1KB' bytes=1024" in text


def test_env_file_with_invalid_size_is_rejected(runner: CliRunner, tmp_path: Path, clean_env: None) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("BYTESIZE_LOG_LEVEL=DEBUG\nBYTESIZE_LOG_MAX_BYTES=lots\n", encoding="utf-8")

    result = runner.invoke(cli.main, ["--env-file", str(env_file), "format", "1"])
    assert result.exit_code == 1
    assert "invalid size for BYTESIZE_LOG_MAX_BYTES: lots" in result.output
    assert "BYTESIZE_LOG_LEVEL" not in os.environ

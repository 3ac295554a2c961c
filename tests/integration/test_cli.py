"""Tests for the command line entry point."""

import time

import pytest
from structlog.testing import capture_logs

from logs_downloader.__main__ import (
    EXIT_CONFIG,
    EXIT_FAILURE,
    EXIT_OK,
    cli_options,
    main,
    parse_args,
    run,
)

BASE_URL = "https://logs.example.com/zones/abc/logs/requests"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("LOGS_AUTH_EMAIL", "LOGS_AUTH_KEY", "LOGS_URL"):
        monkeypatch.delenv(var, raising=False)


def base_argv(tmp_path, *extra):
    return [
        "--auth-email", "support@example.com",
        "--auth-key", "CF",
        "--url", BASE_URL,
        "--dir", str(tmp_path),
        *extra,
    ]


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults_are_unset(self):
        """Test that unset flags stay None so file and env layers apply."""
        options = cli_options(parse_args([]))

        assert set(options.values()) == {None}

    def test_flags(self, tmp_path):
        args = parse_args(base_argv(tmp_path, "--start", "10", "--interval", "5m", "--align", "--no-metadata"))
        options = cli_options(args)

        assert options["start"] == 10
        assert options["interval"] == "5m"
        assert options["align"] is True
        assert options["metadata"] is False


class TestRun:
    """Tests for run() exit statuses."""

    def test_success(self, tmp_path, fake_api):
        now = int(time.time())
        args = parse_args(base_argv(tmp_path, "--start", str(now - 150), "--end", str(now)))

        assert run(args, transport=fake_api.transport) == EXIT_OK
        assert len(fake_api.requests) == 3
        assert int((tmp_path / "checkpoint").read_text()) == now

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["--auth-email", "support@example.com"],
            ["--auth-email", "support@example.com", "--auth-key", "CF", "--url", ""],
        ],
    )
    def test_missing_required_options(self, argv, fake_api):
        assert run(parse_args(argv), transport=fake_api.transport) == EXIT_CONFIG
        assert fake_api.requests == []

    def test_end_not_after_start(self, tmp_path, fake_api):
        args = parse_args(base_argv(tmp_path, "--start", "42", "--end", "42"))

        assert run(args, transport=fake_api.transport) == EXIT_CONFIG

    def test_negative_end(self, tmp_path, fake_api):
        now = int(time.time())
        args = parse_args(base_argv(tmp_path, "--start", str(now - 10), "--end", "-1"))

        assert run(args, transport=fake_api.transport) == EXIT_CONFIG

    def test_corrupt_checkpoint_before_any_request(self, tmp_path, fake_api):
        (tmp_path / "checkpoint").write_text("notanumber")

        assert run(parse_args(base_argv(tmp_path)), transport=fake_api.transport) == EXIT_CONFIG
        assert fake_api.requests == []

    def test_undecodable_checkpoint_exits_with_config_status(self, tmp_path, fake_api):
        checkpoint = tmp_path / "checkpoint"
        checkpoint.write_bytes(b"\xff\xfe12")

        with capture_logs() as logs:
            status = run(parse_args(base_argv(tmp_path)), transport=fake_api.transport)

        assert status == EXIT_CONFIG
        assert fake_api.requests == []
        event = next(e for e in logs if e["event"] == "invalid_configuration")
        assert event["path"] == str(checkpoint)

    def test_api_error(self, tmp_path, fake_api):
        now = int(time.time())
        start = now - 150
        fake_api.fail_at(start + 60)
        args = parse_args(base_argv(tmp_path, "--start", str(start), "--end", str(now)))

        with capture_logs() as logs:
            status = run(args, transport=fake_api.transport)

        assert status == EXIT_FAILURE
        assert int((tmp_path / "checkpoint").read_text()) == start + 60
        event = next(e for e in logs if e["event"] == "fatal_error")
        assert event["error_type"] == "APIError"
        assert event["url"] == f"{BASE_URL}?start={start + 60}&end={start + 120}"

    def test_config_file(self, tmp_path, fake_api):
        now = int(time.time())
        config = tmp_path / "downloader.yml"
        config.write_text(
            "auth_email: support@example.com\n"
            "auth_key: CF\n"
            f"url: {BASE_URL}\n"
            f"dir: {tmp_path}\n"
            "interval: 2m\n"
        )
        args = parse_args(["--config", str(config), "--start", str(now - 150), "--end", str(now)])

        assert run(args, transport=fake_api.transport) == EXIT_OK
        assert len(fake_api.requests) == 2


class TestMain:
    """Tests for main()."""

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == EXIT_OK
        assert "logs-downloader" in capsys.readouterr().out

    def test_invalid_configuration_exit_code(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--dir", str(tmp_path)])

        assert exc_info.value.code == EXIT_CONFIG

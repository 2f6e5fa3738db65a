"""Tests for the command-line entry point."""

from unittest.mock import patch

from fabricui.__main__ import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.config is None
    assert args.port is None
    assert args.debug is False


def test_main_runs_the_app(tmp_path):
    config = tmp_path / "config.toml"
    config.write_text('port = 9001\nstructured_logs = false\n')

    with patch("fabricui.__main__.FabricUI") as app_class, patch(
        "fabricui.__main__.configure_logging"
    ):
        assert main(["--config", str(config), "--host", "0.0.0.0", "--debug"]) == 0

    settings = app_class.call_args.kwargs["settings"]
    assert settings.port == 9001
    assert settings.host == "0.0.0.0"
    app_class.return_value.run.assert_called_once_with(host="0.0.0.0", port=9001, debug=True)


def test_main_rejects_invalid_config(tmp_path, capsys):
    config = tmp_path / "config.toml"
    config.write_text('failure_policy = "sometimes"\n')
    assert main(["--config", str(config)]) == 2
    assert "Invalid configuration" in capsys.readouterr().err

# ABOUTME: Tests for CLI argument parsing and command dispatch.
# ABOUTME: Validates argparse configuration, subcommand routing and command error handling.

import argparse
import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from translated_newsletter.__main__ import (
    cmd_run,
    cmd_serve,
    cmd_upload_config,
    create_parser,
    main,
)
from translated_newsletter.errors import ConfigError


class TestCreateParser:
    """Tests for argument parser creation."""

    def test_parser_creation(self) -> None:
        """Parser is created successfully."""
        assert isinstance(create_parser(), argparse.ArgumentParser)

    def test_serve_defaults(self) -> None:
        args = create_parser().parse_args(["serve"])
        assert args.command == "serve"
        assert args.host == "0.0.0.0"
        assert args.port is None

    def test_serve_with_port(self) -> None:
        args = create_parser().parse_args(["serve", "--port", "8080", "--host", "127.0.0.1"])
        assert args.port == 8080
        assert args.host == "127.0.0.1"

    def test_run_command(self) -> None:
        assert create_parser().parse_args(["run"]).command == "run"

    def test_upload_config(self) -> None:
        args = create_parser().parse_args(["upload-config", "config.json", "--document-id", "prod"])
        assert args.command == "upload-config"
        assert args.file == "config.json"
        assert args.document_id == "prod"


class TestMain:
    """Tests for main() dispatch."""

    def test_no_command_prints_help(self) -> None:
        with (
            patch("sys.argv", ["translated_newsletter"]),
            patch("translated_newsletter.__main__.configure_logging"),
        ):
            assert main() == 1

    def test_dispatches_run(self) -> None:
        with (
            patch("sys.argv", ["translated_newsletter", "run"]),
            patch("translated_newsletter.__main__.configure_logging"),
            patch("translated_newsletter.__main__.cmd_run", return_value=0) as run,
        ):
            assert main() == 0
        run.assert_called_once()


class TestCommands:
    """Tests for command handlers."""

    def test_run_failure_returns_one(self) -> None:
        with patch(
            "translated_newsletter.__main__._run_once",
            new=AsyncMock(side_effect=ConfigError("Configuration document 'defaultConfig' not found")),
        ):
            assert cmd_run(argparse.Namespace()) == 1

    def test_serve_uses_explicit_port(self) -> None:
        uvicorn = MagicMock()
        with patch.dict("sys.modules", {"uvicorn": uvicorn}):
            assert cmd_serve(argparse.Namespace(host="127.0.0.1", port=8080)) == 0

        uvicorn.run.assert_called_once_with(
            "translated_newsletter.web.app:app", host="127.0.0.1", port=8080
        )

    def test_serve_falls_back_to_configured_port(self) -> None:
        uvicorn = MagicMock()
        with (
            patch.dict("sys.modules", {"uvicorn": uvicorn}),
            patch("translated_newsletter.__main__._configured_port", return_value=3000),
        ):
            cmd_serve(argparse.Namespace(host="0.0.0.0", port=None))

        assert uvicorn.run.call_args.kwargs["port"] == 3000

    def test_upload_config_unreadable_file(self, tmp_path: Path) -> None:
        args = argparse.Namespace(file=str(tmp_path / "missing.json"), document_id="defaultConfig")
        assert cmd_upload_config(args) == 1

    def test_upload_config_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{broken", encoding="utf-8")
        args = argparse.Namespace(file=str(path), document_id="defaultConfig")
        assert cmd_upload_config(args) == 1

    def test_upload_config_stores_document(self, tmp_path: Path, sample_config_document) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps(sample_config_document), encoding="utf-8")
        args = argparse.Namespace(file=str(path), document_id="prod")

        session_cm = MagicMock()
        session_cm.__aenter__ = AsyncMock(return_value=MagicMock())
        session_cm.__aexit__ = AsyncMock(return_value=False)

        with (
            patch("translated_newsletter.db.session.get_session", return_value=session_cm),
            patch("translated_newsletter.db.session.close_db", new=AsyncMock()),
            patch(
                "translated_newsletter.services.configuration_service.ConfigurationService.upload_document",
                new=AsyncMock(),
            ) as upload,
        ):
            assert cmd_upload_config(args) == 0

        upload.assert_awaited_once_with(sample_config_document, "prod")

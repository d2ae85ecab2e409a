"""
Unit tests for the command line interface.

The shared router is patched with the fake-backed one from the fixtures.
"""

from unittest.mock import patch

import pytest
from click.testing import CliRunner
from rich.console import Console

from hera_ai import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def patched_router(ai_router):
    with patch("hera_ai.cli.get_ai_router", return_value=ai_router), \
            patch("hera_ai.cli.console", Console(width=200)):
        yield ai_router


class TestCLI:

    @pytest.mark.unit
    def test_ask(self, runner, patched_router, fake_providers):
        result = runner.invoke(cli.main, ["ask", "How many bookings today?"])

        assert result.exit_code == 0
        assert "openai answer" in result.output
        assert fake_providers["openai"].calls[0].smart_code == "HERA.AI.CLI.CHAT.v1"

    @pytest.mark.unit
    def test_ask_with_provider_and_task(self, runner, patched_router, fake_providers):
        result = runner.invoke(cli.main, ["ask", "Write a parser", "--task", "code", "--provider", "deepseek"])

        assert result.exit_code == 0
        assert fake_providers["deepseek"].calls[0].task == "code"

    @pytest.mark.unit
    def test_ask_failure_shows_error(self, runner, patched_router, registry):
        for name in registry.provider_ids():
            registry.mark_unavailable(name)

        result = runner.invoke(cli.main, ["ask", "hello"])

        assert result.exit_code == 0
        assert "No AI providers available" in result.output

    @pytest.mark.unit
    def test_invalid_task(self, runner, patched_router):
        result = runner.invoke(cli.main, ["ask", "hello", "--task", "telepathy"])
        assert result.exit_code != 0

    @pytest.mark.unit
    def test_stream(self, runner, patched_router, fake_providers):
        fake_providers["openai"].chunks = ["streamed ", "text"]

        result = runner.invoke(cli.main, ["stream", "hello"])

        assert result.exit_code == 0
        assert "streamed" in result.output
        assert "text" in result.output

    @pytest.mark.unit
    def test_providers(self, runner, patched_router):
        result = runner.invoke(cli.main, ["providers"])

        assert result.exit_code == 0
        for name in ("openai", "claude", "deepseek"):
            assert name in result.output

    @pytest.mark.unit
    def test_serve(self, runner):
        with patch("uvicorn.run") as mock_run:
            result = runner.invoke(cli.main, ["serve", "--port", "9000"])

        assert result.exit_code == 0
        mock_run.assert_called_once_with("hera_ai.main:app", host="0.0.0.0", port=9000, reload=False)

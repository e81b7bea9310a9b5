"""Unit tests for the command-line entry point (next_fhi_cli.cli).

Tests cover:
- Parser: version, subcommands, no-command help
- init: positional name, interactive prompt, invalid names, exit codes
- check-naming: valid and invalid paths, exit codes
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from next_fhi_cli.cli import build_parser, main, prompt_project_name


def _exit_code(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


@pytest.fixture
def clean_env():
    with patch.dict(os.environ, {}, clear=True):
        yield


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class TestParser:
    @pytest.mark.unit
    def test_version(self, capsys: pytest.CaptureFixture[str]):
        assert _exit_code(["--version"]) == 0
        assert "next-fhi-cli 1.0.0" in capsys.readouterr().out

    @pytest.mark.unit
    def test_init_arguments(self, tmp_path: Path):
        args = build_parser().parse_args(["init", "patient-portal", "--cwd", str(tmp_path)])
        assert args.command == "init"
        assert args.project_name == "patient-portal"
        assert args.cwd == tmp_path
        assert args.skip_preflight is False

    @pytest.mark.unit
    def test_init_name_optional(self):
        args = build_parser().parse_args(["init"])
        assert args.project_name is None

    @pytest.mark.unit
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]):
        assert _exit_code([]) == 2
        assert "init" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


class TestPrompt:
    @pytest.mark.unit
    def test_reprompts_until_valid(self):
        answers = iter(["", "My App", "  my-app  "])
        with patch("next_fhi_cli.cli.Prompt.ask", side_effect=lambda *a, **k: next(answers)) as ask:
            assert prompt_project_name() == "my-app"
        assert ask.call_count == 3


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


def _pipeline_mock(success: bool) -> MagicMock:
    pipeline = MagicMock()
    pipeline.run = AsyncMock(return_value={"success": success})
    return pipeline


class TestInit:
    @pytest.mark.unit
    def test_success(self, tmp_path: Path, clean_env):
        pipeline = _pipeline_mock(True)
        with patch("next_fhi_cli.cli.ScaffoldPipeline", return_value=pipeline) as cls:
            assert _exit_code(["init", "patient-portal", "--cwd", str(tmp_path), "--skip-preflight"]) == 0
        config = cls.call_args.args[0]
        assert config.project_name == "patient-portal"
        assert config.base_dir == tmp_path
        assert config.skip_preflight is True
        pipeline.run.assert_awaited_once()

    @pytest.mark.unit
    def test_failure_exit_code(self, tmp_path: Path, clean_env):
        with patch("next_fhi_cli.cli.ScaffoldPipeline", return_value=_pipeline_mock(False)):
            assert _exit_code(["init", "patient-portal", "--cwd", str(tmp_path)]) == 1

    @pytest.mark.unit
    def test_invalid_name_never_runs_pipeline(self, clean_env):
        with patch("next_fhi_cli.cli.ScaffoldPipeline") as cls:
            assert _exit_code(["init", "Patient_Portal"]) == 1
        cls.assert_not_called()

    @pytest.mark.unit
    def test_bad_environment(self, clean_env):
        with patch.dict(os.environ, {"NEXT_FHI_COMMAND_TIMEOUT": "soon"}), \
             patch("next_fhi_cli.cli.ScaffoldPipeline") as cls:
            assert _exit_code(["init", "patient-portal"]) == 1
        cls.assert_not_called()

    @pytest.mark.unit
    def test_prompts_when_name_missing(self, tmp_path: Path, clean_env):
        with patch("next_fhi_cli.cli.prompt_project_name", return_value="asked-name") as prompt, \
             patch("next_fhi_cli.cli.ScaffoldPipeline", return_value=_pipeline_mock(True)) as cls:
            assert _exit_code(["init", "--cwd", str(tmp_path)]) == 0
        prompt.assert_called_once()
        assert cls.call_args.args[0].project_name == "asked-name"


# ---------------------------------------------------------------------------
# check-naming
# ---------------------------------------------------------------------------


class TestCheckNaming:
    @pytest.mark.unit
    def test_valid(self, tmp_path: Path):
        argv = [
            "check-naming",
            "--root", str(tmp_path),
            "src/components/UserCard.tsx",
            "src/lib/user-service.ts",
            "src/app/[id]/page.tsx",
        ]
        assert _exit_code(argv) == 0

    @pytest.mark.unit
    def test_no_files(self):
        assert _exit_code(["check-naming"]) == 0

    @pytest.mark.unit
    def test_invalid(self, tmp_path: Path):
        with patch("next_fhi_cli.cli.print_error") as print_error:
            code = _exit_code(
                ["check-naming", "--root", str(tmp_path), "src/components/user_card.tsx"]
            )
        assert code == 1
        messages = [c.args[0] for c in print_error.call_args_list]
        assert 'Error: Component "src/components/user_card.tsx" must use PascalCase!' in messages

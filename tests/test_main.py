# =============================================================================
# WASMFORGE CLI TESTS
# =============================================================================
# Tests for the command line entry point.
# =============================================================================

from unittest.mock import patch

from typer.testing import CliRunner

from src.domain.models import PipelineResult, StepName
from src.main import app

cli = CliRunner()


class TestRunCommand:
    """Exit code propagation through the CLI."""

    @patch("src.main.Pipeline")
    def test_no_arguments_runs_pipeline(self, mock_pipeline, workspace):
        mock_pipeline.return_value.run.return_value = PipelineResult()

        result = cli.invoke(app, ["--workdir", str(workspace)])

        assert result.exit_code == 0
        mock_pipeline.return_value.run.assert_called_once()

    @patch("src.main.Pipeline")
    def test_failing_step_exit_code_is_returned(self, mock_pipeline, workspace):
        mock_pipeline.return_value.run.return_value = PipelineResult(
            failed_step=StepName.BUILD, exit_code=101
        )

        result = cli.invoke(app, ["--workdir", str(workspace)])

        assert result.exit_code == 101

    @patch("src.main.Pipeline")
    def test_interrupt_exits_130(self, mock_pipeline, workspace):
        mock_pipeline.return_value.run.side_effect = KeyboardInterrupt

        result = cli.invoke(app, ["--workdir", str(workspace)])

        assert result.exit_code == 130

    def test_bad_config_exits_2(self, workspace):
        (workspace / "wasmforge.yaml").write_text("unknown_key: 1\n")

        result = cli.invoke(app, ["--workdir", str(workspace)])

        assert result.exit_code == 2

    def test_dry_run_prints_plan(self, workspace):
        result = cli.invoke(app, ["--workdir", str(workspace), "--dry-run"])

        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[0] == "clean: cargo clean"
        assert lines[1] == "build: cargo build --target wasm32-unknown-unknown --release"
        assert lines[-1] == "deploy: near dev-deploy ../res/non_fungible_token.wasm"


class TestEndToEnd:
    """Full run with the fake runner behind the real Pipeline."""

    def test_full_run_exit_zero(self, workspace, fake_runner):
        with patch("src.core.pipeline.CommandRunner", return_value=fake_runner):
            result = cli.invoke(app, ["--workdir", str(workspace)])

        assert result.exit_code == 0
        assert (workspace.parent / "res" / "non_fungible_token.wasm").exists()

    def test_full_run_deploy_failure(self, workspace, fake_runner):
        fake_runner.fail["dev-deploy"] = 1

        with patch("src.core.pipeline.CommandRunner", return_value=fake_runner):
            result = cli.invoke(app, ["--workdir", str(workspace)])

        assert result.exit_code == 1

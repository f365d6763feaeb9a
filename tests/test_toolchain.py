# =============================================================================
# WASMFORGE TOOLCHAIN & STAGER TESTS
# =============================================================================
# cargo clean/build invocation and the artifact copy.
# =============================================================================

import hashlib
from unittest.mock import patch

import pytest

from fakes import WASM_BYTES
from src.core.errors import StagingError, ToolchainError
from src.core.stager import Stager, sha256_file
from src.core.toolchain import Toolchain
from src.domain.models import PipelineConfig


class TestToolchain:
    """cargo wrapper."""

    def test_clean_command(self, config, fake_runner):
        Toolchain(config, fake_runner).clean()

        assert fake_runner.calls == [["cargo", "clean"]]

    def test_build_targets_wasm_release(self, config, fake_runner):
        Toolchain(config, fake_runner).build()

        assert fake_runner.calls == [
            ["cargo", "build", "--target", "wasm32-unknown-unknown", "--release"]
        ]

    def test_custom_profile_uses_profile_flag(self, fake_runner):
        config = PipelineConfig(profile="wasm-opt")

        assert Toolchain(config, fake_runner).build_command()[-2:] == ["--profile", "wasm-opt"]

    def test_build_failure_raises(self, config, fake_runner):
        fake_runner.fail["build"] = 101

        with pytest.raises(ToolchainError) as exc_info:
            Toolchain(config, fake_runner).build()

        assert exc_info.value.exit_code == 101
        assert exc_info.value.command[:2] == ["cargo", "build"]

    def test_clean_failure_raises(self, config, fake_runner):
        fake_runner.fail["clean"] = 1

        with pytest.raises(ToolchainError):
            Toolchain(config, fake_runner).clean()


class TestStager:
    """Artifact copy into the release directory."""

    def _build(self, workspace, config):
        out = workspace / config.toolchain_output
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(WASM_BYTES)

    def test_copies_to_release_dir(self, workspace, config):
        self._build(workspace, config)

        result = Stager(config, workspace).stage()

        assert result.exit_code == 0
        assert (workspace.parent / "res" / "non_fungible_token.wasm").read_bytes() == WASM_BYTES

    def test_missing_artifact_raises(self, workspace, config):
        with pytest.raises(StagingError) as exc_info:
            Stager(config, workspace).stage()

        assert exc_info.value.exit_code == 1
        assert "not found" in str(exc_info.value)
        assert not (workspace.parent / "res").exists()

    def test_copy_error_raises(self, workspace, config):
        self._build(workspace, config)

        with patch("src.core.stager.shutil.copyfile", side_effect=OSError("disk full")):
            with pytest.raises(StagingError) as exc_info:
                Stager(config, workspace).stage()

        assert "disk full" in str(exc_info.value)

    def test_digest_matches_content(self, workspace, config):
        self._build(workspace, config)
        stager = Stager(config, workspace)
        stager.stage()

        assert stager.digest() == hashlib.sha256(WASM_BYTES).hexdigest()

    def test_sha256_file(self, tmp_path):
        path = tmp_path / "blob.bin"
        path.write_bytes(b"x" * 200_000)

        assert sha256_file(path) == hashlib.sha256(b"x" * 200_000).hexdigest()

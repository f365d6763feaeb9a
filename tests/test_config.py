"""
Tests for configuration loading (defaults -> YAML -> environment).
"""

import os
from unittest.mock import patch

import pytest

from src.core.config import DEFAULT_CONFIG_NAME, load_config
from src.core.errors import ConfigError


class TestLoadConfig:
    """Tests for load_config layering."""

    def test_defaults_without_file(self, workspace):
        config = load_config(workdir=workspace)

        assert config.artifact_name == "non_fungible_token"
        assert config.release_dir == "../res"

    def test_default_file_is_picked_up(self, workspace):
        (workspace / DEFAULT_CONFIG_NAME).write_text("artifact_name: market\nrelease_dir: out\n")

        config = load_config(workdir=workspace)

        assert config.artifact_name == "market"
        assert config.staged_artifact == "out/market.wasm"

    def test_explicit_file(self, workspace, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("near_bin: near-dev\nstep_timeout_seconds: 30\n")

        config = load_config(path, workspace)

        assert config.near_bin == "near-dev"
        assert config.step_timeout_seconds == 30

    def test_explicit_missing_file_raises(self, workspace, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml", workspace)

    def test_empty_file_means_defaults(self, workspace):
        (workspace / DEFAULT_CONFIG_NAME).write_text("")

        assert load_config(workdir=workspace).profile == "release"

    def test_invalid_yaml_raises(self, workspace):
        (workspace / DEFAULT_CONFIG_NAME).write_text("artifact_name: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(workdir=workspace)

    def test_non_mapping_raises(self, workspace):
        (workspace / DEFAULT_CONFIG_NAME).write_text("- just\n- a list\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(workdir=workspace)

    def test_unknown_key_raises(self, workspace):
        (workspace / DEFAULT_CONFIG_NAME).write_text("artefact_name: typo\n")

        with pytest.raises(ConfigError, match="Invalid pipeline configuration"):
            load_config(workdir=workspace)

    def test_environment_overrides_file(self, workspace):
        (workspace / DEFAULT_CONFIG_NAME).write_text("artifact_name: market\n")

        with patch.dict(os.environ, {"WASMFORGE_ARTIFACT": "staking", "NEAR_BIN": "near2"}):
            config = load_config(workdir=workspace)

        assert config.artifact_name == "staking"
        assert config.near_bin == "near2"

    def test_environment_timeout_is_coerced(self, workspace):
        with patch.dict(os.environ, {"WASMFORGE_STEP_TIMEOUT": "45"}):
            assert load_config(workdir=workspace).step_timeout_seconds == 45

"""
Pytest configuration and fixtures for wasmforge tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path for `src.` imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fakes import FakeRunner
from src.domain.models import PipelineConfig

# Keep the developer's environment out of config resolution
for _name in (
    "WASMFORGE_ARTIFACT",
    "WASMFORGE_TARGET_DIR",
    "WASMFORGE_RELEASE_DIR",
    "WASMFORGE_STATE_DIR",
    "WASMFORGE_STEP_TIMEOUT",
    "WASMFORGE_RPC_URL",
    "WASMFORGE_RUN_LOG_DIR",
    "CARGO_BIN",
    "NEAR_BIN",
):
    os.environ.pop(_name, None)


@pytest.fixture
def workspace(tmp_path):
    """A crate directory nested one level down, so ../target and ../res land inside tmp_path."""
    crate = tmp_path / "nft"
    crate.mkdir()
    return crate


@pytest.fixture
def config():
    return PipelineConfig()


@pytest.fixture
def fake_runner(workspace, config):
    return FakeRunner(workspace, config)

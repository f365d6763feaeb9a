#!/usr/bin/env python3
"""
Build, stage and dev-deploy the contract in the current directory.

Same as the `wasmforge` console script, usable without installing:

Run from the contract crate:
  python ../deploy.py
  # or
  python deploy.py --workdir nft

Requires: cargo with the wasm32-unknown-unknown target, and near-cli.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.main import main

if __name__ == "__main__":
    main()

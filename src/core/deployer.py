# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# THE DEPLOYER - NEAR DEV-DEPLOY
# -----------------------------------------------------------------------------
# Responsibility: The last two pipeline steps.
#
# - reset_state: force-remove ./neardev so near-cli provisions a fresh dev
#   account. A missing directory is success.
# - deploy: `near dev-deploy <staged artifact>`, then figure out which dev
#   account received the code.
#
# Optional: when an RPC URL is configured, ask the node for the account's
# code and compare its sha256 with the staged artifact.
# -----------------------------------------------------------------------------

import base64
import hashlib
import re
import shutil
import time
from pathlib import Path

import requests
from rich.console import Console

from src.core.errors import DeployError, StateResetError, VerificationError
from src.domain.models import PipelineConfig
from src.infra.process import CommandResult, CommandRunner

console = Console()

# near-cli stores the provisioned account id here
DEV_ACCOUNT_FILE = "dev-account"

RPC_TIMEOUT_SECONDS = 10


class Deployer:
    """
    near-cli dev-deploy handler.

    Owns the local deploy state directory: deletes it before every deploy and
    reads back the account id near-cli writes into it afterwards.
    """

    def __init__(self, config: PipelineConfig, runner: CommandRunner, workdir: Path) -> None:
        self._config = config
        self._runner = runner
        self._workdir = Path(workdir)
        self.last_account: str | None = None

    @property
    def state_path(self) -> Path:
        return self._workdir / self._config.state_dir

    def reset_command(self) -> list[str]:
        return ["rm", "-rf", self._config.state_dir]

    def deploy_command(self) -> list[str]:
        return [self._config.near_bin, "dev-deploy", self._config.staged_artifact]

    def reset_state(self) -> CommandResult:
        """
        Forcibly remove the local deploy state directory.

        Returns:
            CommandResult with exit code 0, also when nothing was there.

        Raises:
            StateResetError: If the directory exists but cannot be removed.
        """
        cmd = self.reset_command()
        path = self.state_path

        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except FileNotFoundError:
            console.print(f"[dim][DEPLOYER] No {self._config.state_dir} to remove[/dim]")
            return CommandResult(command=cmd, exit_code=0)
        except OSError as e:
            message = f"Cannot remove {self._config.state_dir}: {e}"
            console.print(f"[red][DEPLOYER] {message}[/red]")
            raise StateResetError(message, exit_code=1, output=message, command=cmd)

        console.print(f"[cyan][DEPLOYER] Removed {self._config.state_dir}[/cyan]")
        return CommandResult(command=cmd, exit_code=0)

    def deploy(self, expected_sha256: str | None = None) -> CommandResult:
        """
        Push the staged artifact to a fresh dev account.

        Args:
            expected_sha256: Digest of the staged artifact, used by the
                optional on-chain check.

        Returns:
            CommandResult of the near-cli invocation.

        Raises:
            DeployError: If near-cli exits non-zero.
            VerificationError: If the RPC check is enabled and fails.
        """
        self.last_account = None
        cmd = self.deploy_command()

        console.print(f"[cyan][DEPLOYER] Deploying {self._config.staged_artifact}...[/cyan]")
        result = self._runner.run(cmd)

        if result.exit_code != 0:
            console.print(f"[red][DEPLOYER] dev-deploy failed (exit {result.exit_code})[/red]")
            raise DeployError(
                f"near dev-deploy failed with exit code {result.exit_code}",
                exit_code=result.exit_code,
                output=result.output,
                command=cmd,
            )

        self.last_account = self.discover_account(result.output)
        if self.last_account:
            console.print(f"[green][DEPLOYER] LIVE on {self.last_account}[/green]")
        else:
            console.print("[yellow][DEPLOYER] Deployed but couldn't determine dev account[/yellow]")

        if self._config.verify_rpc_url:
            if not self.last_account:
                raise VerificationError(
                    "Cannot verify deployment: dev account unknown", exit_code=1, command=cmd
                )
            if not self.verify(self.last_account, expected_sha256):
                raise VerificationError(
                    f"Deployment verification failed for {self.last_account}",
                    exit_code=1,
                    output=result.output,
                    command=cmd,
                )
            console.print(f"[green][DEPLOYER] Verified code on {self.last_account}[/green]")

        return result

    def discover_account(self, output: str) -> str | None:
        """
        Find the dev account that received the contract.

        Prefers neardev/dev-account (written by near-cli) and falls back to
        the CLI output.
        """
        account_file = self.state_path / DEV_ACCOUNT_FILE
        if account_file.is_file():
            account = account_file.read_text().strip()
            if account:
                return account
        return self._parse_account(output)

    def _parse_account(self, output: str) -> str | None:
        """
        Parse the account id from near-cli output.

        Known formats:
        - "Done deploying to dev-1650000000000-12345678901234"
        - any bare dev-<timestamp>-<random> id
        """
        patterns = [
            r"Done deploying to ([a-z0-9._-]+)",
            r"\b(dev-\d+-\d+)\b",
        ]

        for pattern in patterns:
            match = re.search(pattern, output)
            if match:
                return match.group(1).rstrip(".")

        return None

    def verify(self, account: str, expected_sha256: str | None = None, retries: int = 3) -> bool:
        """
        Ask the RPC node for the account's contract code.

        Args:
            account: Dev account id.
            expected_sha256: If given, the code must hash to this value.
            retries: Attempts before giving up (new accounts take a moment).

        Returns:
            True if code is present (and matches, when a digest is given).
        """
        payload = {
            "jsonrpc": "2.0",
            "id": "wasmforge",
            "method": "query",
            "params": {"request_type": "view_code", "finality": "final", "account_id": account},
        }
        console.print(f"[cyan][DEPLOYER] Verifying {account} via {self._config.verify_rpc_url}[/cyan]")

        for attempt in range(retries):
            if attempt > 0:
                time.sleep(2)

            try:
                response = requests.post(
                    self._config.verify_rpc_url, json=payload, timeout=RPC_TIMEOUT_SECONDS
                )
            except requests.RequestException as e:
                console.print(
                    f"[yellow][DEPLOYER] RPC request failed: {e} (attempt {attempt + 1}/{retries})[/yellow]"
                )
                continue

            if response.status_code != 200:
                console.print(
                    f"[yellow][DEPLOYER] RPC returned {response.status_code} (attempt {attempt + 1}/{retries})[/yellow]"
                )
                continue

            try:
                body = response.json()
                result = body.get("result") if isinstance(body, dict) else None
                code_b64 = result.get("code_base64") if isinstance(result, dict) else None
                code = base64.b64decode(code_b64, validate=True) if code_b64 else None
            except ValueError as e:
                console.print(
                    f"[yellow][DEPLOYER] Unreadable RPC reply: {e} (attempt {attempt + 1}/{retries})[/yellow]"
                )
                continue

            if not code:
                console.print(
                    f"[yellow][DEPLOYER] No code on {account} yet (attempt {attempt + 1}/{retries})[/yellow]"
                )
                continue

            if expected_sha256 is None:
                return True

            actual = hashlib.sha256(code).hexdigest()
            if actual == expected_sha256:
                return True

            console.print(f"[red][DEPLOYER] Code hash mismatch: {actual} != {expected_sha256}[/red]")
            return False

        return False

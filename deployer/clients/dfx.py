# deployer/clients/dfx.py

import logging
import subprocess
from typing import Callable, List, Optional

from ..core.logging import DeployerLogger, log_with_context
from ..types.configs.deployment import DfxConfig, MODES
from ..types.errors import DeploymentFailed, create_lookup_error, create_validation_error
from ..types.results import DeploymentResult
from .interfaces import CanisterIdResolver


MAINNET = "ic"
LOCAL = "local"

# shell conventions for "command not found" and "timed out"
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


def network_flags(network: Optional[str]) -> List[str]:
    if not network or network == LOCAL:
        return []
    if network == MAINNET:
        return ["--ic"]
    return ["--network", network]


class DfxClient(CanisterIdResolver):
    """
    Thin wrapper around the `dfx` binary.

    Every call is synchronous and blocks until the subprocess exits. Nothing
    is retried: a failed reinstall is reported and left to the operator.
    """

    def __init__(self, config: Optional[DfxConfig] = None,
                 runner: Callable[..., subprocess.CompletedProcess] = subprocess.run):
        self.config = config or DfxConfig()
        self.runner = runner
        self.logger = DeployerLogger.get_logger('clients.dfx')

    @property
    def network(self) -> str:
        return self.config.network

    def _run(self, command: List[str]) -> subprocess.CompletedProcess:
        log_with_context(self.logger, logging.DEBUG, "Running dfx command",
                         command=" ".join(command[:3]))
        return self.runner(
            command,
            capture_output=True,
            text=True,
            check=False,
            timeout=self.config.timeout,
            cwd=self.config.working_dir,
        )

    def canister_command(self, name: str, network: Optional[str] = None) -> List[str]:
        return [self.config.binary, "canister", "id", name] + network_flags(network or self.network)

    def deploy_command(self, target: str, argument: str, mode: str,
                       network: Optional[str] = None) -> List[str]:
        command = [self.config.binary, "deploy", target, "--mode", mode, "--argument", argument]
        command.extend(network_flags(network or self.network))
        if self.config.assume_yes:
            command.append("--yes")
        return command

    def canister_id(self, name: str, network: Optional[str] = None) -> str:
        network = network or self.network
        command = self.canister_command(name, network)

        try:
            completed = self._run(command)
        except FileNotFoundError:
            raise create_lookup_error(f"dfx binary not found: {self.config.binary}",
                                      canister=name, network=network)
        except subprocess.TimeoutExpired:
            raise create_lookup_error(f"Timed out resolving canister id for '{name}'",
                                      canister=name, network=network)

        canister_id = (completed.stdout or "").strip()
        if completed.returncode != 0 or not canister_id:
            raise create_lookup_error(
                f"Cannot resolve canister id for '{name}'",
                canister=name,
                network=network,
                output=(completed.stderr or "").strip() or None,
            )

        log_with_context(self.logger, logging.INFO, "Resolved canister id",
                         canister=name, network=network)
        return canister_id

    def deploy(self, target: str, argument: str, mode: str = "reinstall",
               network: Optional[str] = None) -> DeploymentResult:
        """
        Run `dfx deploy` for one canister.

        Args:
            target: Canister name (ledger, minter)
            argument: Serialized Candid init/upgrade argument
            mode: install, reinstall, upgrade or auto
            network: Overrides the configured network

        Returns:
            DeploymentResult with captured output

        Raises:
            DeploymentFailed: dfx exited non-zero, was missing, or timed out
        """
        if mode not in MODES:
            raise create_validation_error(f"Unknown install mode '{mode}'", field="mode",
                                          target=target)

        network = network or self.network
        command = self.deploy_command(target, argument, mode, network)
        log_with_context(self.logger, logging.INFO, "Deploying canister",
                         target=target, mode=mode, network=network)

        try:
            completed = self._run(command)
        except FileNotFoundError:
            result = DeploymentResult(target=target, command=command,
                                      returncode=EXIT_NOT_FOUND,
                                      stderr=f"dfx binary not found: {self.config.binary}")
            raise DeploymentFailed(f"Deployment of {target} failed", result,
                                   {"network": network})
        except subprocess.TimeoutExpired as e:
            result = DeploymentResult(target=target, command=command,
                                      returncode=EXIT_TIMEOUT,
                                      stderr=f"dfx timed out after {e.timeout}s")
            raise DeploymentFailed(f"Deployment of {target} timed out", result,
                                   {"network": network})

        result = DeploymentResult(
            target=target,
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

        if not result.success:
            log_with_context(self.logger, logging.ERROR, "dfx deploy failed",
                             target=target, network=network, returncode=result.returncode)
            raise DeploymentFailed(f"Deployment of {target} failed", result,
                                   {"network": network})

        log_with_context(self.logger, logging.INFO, "Canister deployed",
                         target=target, network=network, returncode=result.returncode)
        return result

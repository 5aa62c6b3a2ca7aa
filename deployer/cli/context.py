# deployer/cli/context.py

"""
CLI Context

Single point for building what commands need:
- deployment configuration (file + environment + inline overrides)
- the dfx client and argument builder
"""

import logging
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import click

from ..builders.argument_builder import ArgumentBuilder, ResolverLike
from ..clients.dfx import DfxClient
from ..core.config import load_deployment_config
from ..core.logging import DeployerLogger, log_with_context
from ..pipeline.deployment_pipeline import DeploymentPipeline
from ..types.configs.deployment import DeploymentConfig
from ..types.errors import DeployerError


class CLIContext:
    """
    Holds the subprocess runner so tests can swap in a fake `dfx`.
    """

    def __init__(self, runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
                 env: Optional[dict] = None):
        self.runner = runner
        self.env = env

    @property
    def logger(self):
        # looked up lazily so the CLI group configures logging first
        return DeployerLogger.get_logger('cli.context')

    def load_config(self, config_path: Optional[Path], overrides: Iterable[str] = (),
                    network: Optional[str] = None,
                    assume_yes: bool = False) -> DeploymentConfig:
        extra: List[str] = list(overrides)
        # command-line flags win over file, environment and --set
        if network:
            extra.append(f"dfx.network={network}")
        if assume_yes:
            extra.append("dfx.assume_yes=true")

        config = load_deployment_config(config_path, extra, self.env)
        log_with_context(self.logger, logging.DEBUG, "CLI configuration loaded",
                         network=config.dfx.network,
                         config_path=str(config_path) if config_path else None)
        return config

    def get_client(self, config: DeploymentConfig) -> DfxClient:
        return DfxClient(config.dfx, runner=self.runner)

    def get_builder(self, resolver: Optional[ResolverLike]) -> ArgumentBuilder:
        return ArgumentBuilder(resolver)

    def get_pipeline(self, config: DeploymentConfig) -> DeploymentPipeline:
        client = self.get_client(config)
        return DeploymentPipeline(config, client, self.get_builder(client))


def resolve_network(mainnet: bool, network: Optional[str]) -> Optional[str]:
    if mainnet and network and network != "ic":
        raise click.UsageError("--ic and --network are mutually exclusive")
    return "ic" if mainnet else network


def fail(ctx: click.Context, error: DeployerError) -> None:
    """Report a deployer error and exit with its code"""
    click.echo(f"❌ {error}", err=True)
    ctx.exit(error.exit_code)

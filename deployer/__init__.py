# deployer/__init__.py

import logging
import os
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

from .core.logging import DeployerLogger, log_with_context
from .core.config import load_deployment_config, log_level_from_env
from .clients.dfx import DfxClient
from .builders.argument_builder import (
    ArgumentBuilder,
    build_ledger_argument,
    build_minter_argument,
    build_minter_upgrade_argument,
)
from .pipeline.deployment_pipeline import DeploymentPipeline
from .types import (
    LedgerConfig,
    MinterConfig,
    MinterUpgradeConfig,
    DeploymentConfig,
    DeployerError,
    ConfigValidationError,
    SerializationError,
    EnvironmentLookupFailed,
    DeploymentFailed,
)


def create_pipeline(config_path: Optional[Union[str, Path]] = None,
                    overrides: Iterable[str] = (),
                    env_vars: Optional[Mapping[str, str]] = None,
                    client: Optional[DfxClient] = None,
                    log_dir: Optional[Union[str, Path]] = None) -> DeploymentPipeline:
    """Load configuration and wire a DfxClient, ArgumentBuilder and pipeline together."""
    env = env_vars if env_vars is not None else os.environ
    DeployerLogger.configure(log_dir=Path(log_dir) if log_dir else None,
                             log_level=log_level_from_env(env))

    logger = DeployerLogger.get_logger('core.init')

    config = load_deployment_config(Path(config_path) if config_path else None,
                                    overrides, env_vars)
    client = client or DfxClient(config.dfx)
    pipeline = DeploymentPipeline(config, client, ArgumentBuilder(client))

    log_with_context(logger, logging.INFO, "Deployment pipeline created",
                     network=config.dfx.network,
                     config_path=str(config_path) if config_path else None)
    return pipeline

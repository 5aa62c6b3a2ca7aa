# deployer/types/__init__.py

# Configuration Types
from .configs.ledger import (
    Account,
    InitialBalance,
    MetadataEntry,
    ArchiveOptions,
    FeatureFlags,
    LedgerConfig,
)
from .configs.minter import MinterConfig, MinterUpgradeConfig
from .configs.deployment import DfxConfig, DeploymentConfig, TARGETS, MODES

# Result Types
from .results import DeploymentResult, TargetOutcome, PipelineResult

# Errors
from .errors import (
    DeployerError,
    ConfigValidationError,
    SerializationError,
    EnvironmentLookupFailed,
    DeploymentFailed,
)

# deployer/builders/__init__.py

from .argument_builder import (
    ArgumentBuilder,
    build_ledger_argument,
    build_minter_argument,
    build_minter_upgrade_argument,
)

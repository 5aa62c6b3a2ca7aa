# deployer/builders/argument_builder.py
"""
Deployment argument builder.

Turns validated canister configs into the Candid text passed to
`dfx deploy --argument`. Serialization is deterministic and does no I/O
beyond the injected canister id resolver.
"""

from typing import Callable, Optional, Union

from ..candid.encoder import encode_args
from ..clients.interfaces import CanisterIdResolver
from ..core.logging import LoggingMixin
from ..types.configs.deployment import DeploymentConfig
from ..types.configs.ledger import LedgerConfig
from ..types.configs.minter import MinterConfig, MinterUpgradeConfig
from ..types.errors import DeployerError, create_lookup_error, create_validation_error
from .ledger import canister_names, ledger_init_value, ledger_upgrade_value
from .minter import minter_init_value, minter_upgrade_value


ResolverLike = Union[CanisterIdResolver, Callable[[str], str]]


class ArgumentBuilder(LoggingMixin):
    def __init__(self, resolver: Optional[ResolverLike] = None):
        self.resolver = resolver

    def resolve(self, name: str) -> str:
        if self.resolver is None:
            raise create_validation_error(
                f"Account owner refers to canister '{name}' but no resolver is available",
                field="owner_canister", target="ledger")

        lookup = (self.resolver.canister_id
                  if isinstance(self.resolver, CanisterIdResolver) else self.resolver)
        try:
            principal = lookup(name)
        except DeployerError:
            raise
        except Exception as e:
            raise create_lookup_error(f"Canister id lookup failed: {e}", canister=name) from e

        if not principal or not principal.strip():
            raise create_lookup_error(f"Empty canister id for '{name}'", canister=name)
        return principal.strip()

    def build_ledger_argument(self, config: LedgerConfig) -> str:
        config.validate()

        # all lookups happen before anything is serialized
        resolved = {name: self.resolve(name) for name in canister_names(config)}
        argument = encode_args(ledger_init_value(config, resolved.__getitem__))

        self.log_debug("Built ledger argument", target="ledger")
        return argument

    def build_minter_argument(self, config: MinterConfig) -> str:
        config.validate()
        argument = encode_args(minter_init_value(config))
        self.log_debug("Built minter init argument", target="minter")
        return argument

    def build_minter_upgrade_argument(self, config: MinterUpgradeConfig) -> str:
        config.validate()
        argument = encode_args(minter_upgrade_value(config))
        self.log_debug("Built minter upgrade argument", target="minter")
        return argument

    def build_ledger_upgrade_argument(self) -> str:
        # `Upgrade = null` keeps every setting of the installed ledger
        argument = encode_args(ledger_upgrade_value())
        self.log_debug("Built ledger upgrade argument", target="ledger")
        return argument

    def build(self, target: str, deployment: DeploymentConfig, mode: str = "reinstall") -> str:
        """
        Pick the argument for a target.

        Upgrades always send the Upgrade variant, since both canisters trap
        on Init arguments in post_upgrade. A minter upgrade without a
        minter_upgrade section sends an empty record.
        """
        if target == "ledger":
            if mode == "upgrade":
                return self.build_ledger_upgrade_argument()
            if deployment.ledger is None:
                raise create_validation_error("No ledger section in configuration",
                                              target="ledger")
            return self.build_ledger_argument(deployment.ledger)

        if target == "minter":
            if mode == "upgrade":
                return self.build_minter_upgrade_argument(
                    deployment.minter_upgrade or MinterUpgradeConfig())
            if deployment.minter is None:
                raise create_validation_error("No minter section in configuration",
                                              target="minter")
            return self.build_minter_argument(deployment.minter)

        raise create_validation_error(f"Unknown target '{target}'", target=target)


def build_ledger_argument(config: LedgerConfig, resolver: Optional[ResolverLike] = None) -> str:
    return ArgumentBuilder(resolver).build_ledger_argument(config)


def build_minter_argument(config: MinterConfig) -> str:
    return ArgumentBuilder().build_minter_argument(config)


def build_minter_upgrade_argument(config: MinterUpgradeConfig) -> str:
    return ArgumentBuilder().build_minter_upgrade_argument(config)

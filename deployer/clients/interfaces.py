# deployer/clients/interfaces.py
"""
Interfaces for resolving canister identifiers.

The ledger argument embeds the minter's principal, which only the
deployment tool's local state knows. Builders receive a resolver
instead of reading that state themselves.
"""
from abc import ABC, abstractmethod
from typing import Dict

from ..types.errors import create_lookup_error


class CanisterIdResolver(ABC):
    """Interface for canister id lookups."""

    @abstractmethod
    def canister_id(self, name: str) -> str:
        """
        Get the principal of a named canister.

        Args:
            name: Canister name as declared in dfx.json

        Returns:
            Principal text

        Raises:
            EnvironmentLookupFailed: if the canister cannot be resolved
        """
        pass


class StaticResolver(CanisterIdResolver):
    """Resolver backed by a fixed name -> principal mapping."""

    def __init__(self, canister_ids: Dict[str, str]):
        self.canister_ids = dict(canister_ids)

    def canister_id(self, name: str) -> str:
        try:
            return self.canister_ids[name]
        except KeyError:
            raise create_lookup_error(f"No canister id configured for '{name}'", canister=name)

# deployer/types/configs/deployment.py

from typing import List, Optional

from msgspec import Struct, field

from ..errors import create_validation_error
from .ledger import LedgerConfig
from .minter import MinterConfig, MinterUpgradeConfig


TARGETS = ("ledger", "minter")
MODES = ("install", "reinstall", "upgrade", "auto")


class DfxConfig(Struct, frozen=True):
    binary: str = "dfx"
    network: str = "local"
    timeout: Optional[float] = None
    assume_yes: bool = False
    working_dir: Optional[str] = None

    def validate(self) -> None:
        if not self.binary.strip():
            raise create_validation_error("dfx.binary cannot be blank", field="dfx.binary")
        if not self.network.strip():
            raise create_validation_error("dfx.network cannot be blank", field="dfx.network")
        if self.timeout is not None and self.timeout <= 0:
            raise create_validation_error(f"dfx.timeout must be positive, got {self.timeout}",
                                          field="dfx.timeout")


class DeploymentConfig(Struct, frozen=True):
    dfx: DfxConfig = field(default_factory=DfxConfig)
    ledger: Optional[LedgerConfig] = None
    minter: Optional[MinterConfig] = None
    minter_upgrade: Optional[MinterUpgradeConfig] = None
    order: List[str] = field(default_factory=lambda: ["minter", "ledger"])

    def validate(self) -> None:
        self.dfx.validate()

        unknown = [t for t in self.order if t not in TARGETS]
        if unknown:
            raise create_validation_error(f"Unknown targets in order: {unknown}", field="order")
        if len(set(self.order)) != len(self.order):
            raise create_validation_error("order lists a target more than once", field="order")

        for section in (self.ledger, self.minter, self.minter_upgrade):
            if section is not None:
                section.validate()

    def has_target(self, target: str, mode: str = "reinstall") -> bool:
        """Whether the configuration can produce an argument for target in mode"""
        if target not in TARGETS:
            return False
        # upgrade arguments have usable defaults for both canisters
        if mode == "upgrade":
            return True
        if target == "ledger":
            return self.ledger is not None
        return self.minter is not None

    def ordered(self, targets: List[str]) -> List[str]:
        """Sort requested targets by configured order"""
        rank = {name: i for i, name in enumerate(self.order)}
        return sorted(dict.fromkeys(targets), key=lambda t: rank.get(t, len(rank)))

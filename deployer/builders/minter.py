# deployer/builders/minter.py

from ..candid.values import Variant, opt, record
from ..types.configs.minter import TEXT_FIELDS, MinterConfig, MinterUpgradeConfig


FIELDS = TEXT_FIELDS + ("minimum_withdrawal_amount",)


def minter_init_value(config: MinterConfig) -> Variant:
    return Variant("Init", record(*[(name, getattr(config, name)) for name in FIELDS]))


def minter_upgrade_value(config: MinterUpgradeConfig) -> Variant:
    # unset fields are left out; the canister keeps its current value for them
    fields = [(name, opt(getattr(config, name)))
              for name in FIELDS if getattr(config, name) is not None]
    return Variant("Upgrade", record(*fields))

# deployer/types/configs/minter.py

from typing import Optional

from msgspec import Struct

from ..errors import create_validation_error


TEXT_FIELDS = (
    "solana_rpc_url",
    "solana_contract_address",
    "solana_initial_signature",
    "ecdsa_key_name",
)


def _check_fields(config, target: str, partial: bool) -> None:
    for field in TEXT_FIELDS:
        value = getattr(config, field)
        if value is None and partial:
            continue
        if value is None or not value.strip():
            raise create_validation_error(f"{field} cannot be blank", field=field, target=target)

    amount = config.minimum_withdrawal_amount
    if amount is None and partial:
        return
    if amount is None or amount <= 0:
        raise create_validation_error(
            f"minimum_withdrawal_amount must be positive, got {amount}",
            field="minimum_withdrawal_amount", target=target)


class MinterConfig(Struct, frozen=True):
    """Init arguments of the minter canister"""
    solana_rpc_url: str
    solana_contract_address: str
    solana_initial_signature: str
    ecdsa_key_name: str
    minimum_withdrawal_amount: int

    def validate(self) -> None:
        _check_fields(self, "minter", partial=False)


class MinterUpgradeConfig(Struct, frozen=True):
    """Upgrade arguments; unset fields keep the canister's current value"""
    solana_rpc_url: Optional[str] = None
    solana_contract_address: Optional[str] = None
    solana_initial_signature: Optional[str] = None
    ecdsa_key_name: Optional[str] = None
    minimum_withdrawal_amount: Optional[int] = None

    def validate(self) -> None:
        _check_fields(self, "minter", partial=True)

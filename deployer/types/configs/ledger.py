# deployer/types/configs/ledger.py

from typing import List, Optional, Literal, Union

from msgspec import Struct, field

from ..errors import create_validation_error


MAX_NAT8 = 255
MAX_NAT16 = 65535
SUBACCOUNT_BYTES = 32


def _require_text(value: Optional[str], field: str) -> None:
    if value is None or not value.strip():
        raise create_validation_error(f"{field} cannot be blank", field=field, target="ledger")


def _require_non_negative(value: Optional[int], field: str) -> None:
    if value is not None and value < 0:
        raise create_validation_error(f"{field} must be non-negative, got {value}",
                                      field=field, target="ledger")


class Account(Struct, frozen=True):
    """ICRC-1 account. `owner_canister` names a canister whose id is looked up at build time."""
    owner: Optional[str] = None
    owner_canister: Optional[str] = None
    subaccount: Optional[str] = None  # hex encoded, 32 bytes

    def validate(self, field: str = "account") -> None:
        if self.owner is None and self.owner_canister is None:
            raise create_validation_error(f"{field} needs owner or owner_canister",
                                          field=field, target="ledger")
        if self.owner is not None and self.owner_canister is not None:
            raise create_validation_error(f"{field} takes owner or owner_canister, not both",
                                          field=field, target="ledger")
        if self.owner is not None:
            _require_text(self.owner, f"{field}.owner")
        if self.owner_canister is not None:
            _require_text(self.owner_canister, f"{field}.owner_canister")
        if self.subaccount is not None:
            try:
                raw = bytes.fromhex(self.subaccount)
            except ValueError:
                raise create_validation_error(f"{field}.subaccount is not valid hex",
                                              field=f"{field}.subaccount", target="ledger")
            if len(raw) != SUBACCOUNT_BYTES:
                raise create_validation_error(
                    f"{field}.subaccount must be {SUBACCOUNT_BYTES} bytes, got {len(raw)}",
                    field=f"{field}.subaccount", target="ledger")


class InitialBalance(Struct, frozen=True):
    account: Account
    amount: int

    def validate(self, index: int) -> None:
        self.account.validate(f"initial_balances[{index}].account")
        _require_non_negative(self.amount, f"initial_balances[{index}].amount")


class MetadataEntry(Struct, frozen=True):
    key: str
    value: Union[int, str]
    kind: Literal["nat", "int", "text", "blob"] = "text"

    def validate(self, index: int) -> None:
        field = f"metadata[{index}]"
        _require_text(self.key, f"{field}.key")
        if self.kind in ("nat", "int"):
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                raise create_validation_error(f"{field} of kind {self.kind} needs an integer value",
                                              field=field, target="ledger")
            if self.kind == "nat":
                _require_non_negative(self.value, f"{field}.value")
        elif self.kind == "text":
            if not isinstance(self.value, str):
                raise create_validation_error(f"{field} of kind text needs a string value",
                                              field=field, target="ledger")
        else:
            if not isinstance(self.value, str):
                raise create_validation_error(f"{field} of kind blob needs a hex string value",
                                              field=field, target="ledger")
            try:
                bytes.fromhex(self.value)
            except ValueError:
                raise create_validation_error(f"{field} blob value is not valid hex",
                                              field=field, target="ledger")


class ArchiveOptions(Struct, frozen=True):
    trigger_threshold: int
    num_blocks_to_archive: int
    controller_id: str
    max_message_size_bytes: Optional[int] = None
    cycles_for_archive_creation: Optional[int] = None
    node_max_memory_size_bytes: Optional[int] = None
    max_transactions_per_response: Optional[int] = None
    more_controller_ids: Optional[List[str]] = None

    def validate(self) -> None:
        _require_text(self.controller_id, "archive_options.controller_id")
        for name in ("trigger_threshold", "num_blocks_to_archive", "max_message_size_bytes",
                     "cycles_for_archive_creation", "node_max_memory_size_bytes",
                     "max_transactions_per_response"):
            _require_non_negative(getattr(self, name), f"archive_options.{name}")
        for i, controller in enumerate(self.more_controller_ids or []):
            _require_text(controller, f"archive_options.more_controller_ids[{i}]")


class FeatureFlags(Struct, frozen=True):
    icrc2: bool = True


class LedgerConfig(Struct, frozen=True):
    token_name: str
    token_symbol: str
    minting_account: Account
    archive_options: ArchiveOptions
    transfer_fee: int = 0
    decimals: Optional[int] = None
    initial_balances: List[InitialBalance] = field(default_factory=list)
    metadata: List[MetadataEntry] = field(default_factory=list)
    feature_flags: Optional[FeatureFlags] = None
    fee_collector_account: Optional[Account] = None
    max_memo_length: Optional[int] = None

    def validate(self) -> None:
        _require_text(self.token_name, "token_name")
        _require_text(self.token_symbol, "token_symbol")

        if self.decimals is not None and not 0 <= self.decimals <= MAX_NAT8:
            raise create_validation_error(f"decimals must be 0-{MAX_NAT8}, got {self.decimals}",
                                          field="decimals", target="ledger")
        if self.max_memo_length is not None and not 0 <= self.max_memo_length <= MAX_NAT16:
            raise create_validation_error(
                f"max_memo_length must be 0-{MAX_NAT16}, got {self.max_memo_length}",
                field="max_memo_length", target="ledger")

        _require_non_negative(self.transfer_fee, "transfer_fee")

        self.minting_account.validate("minting_account")
        if self.fee_collector_account is not None:
            self.fee_collector_account.validate("fee_collector_account")
        self.archive_options.validate()

        for i, balance in enumerate(self.initial_balances):
            balance.validate(i)
        for i, entry in enumerate(self.metadata):
            entry.validate(i)

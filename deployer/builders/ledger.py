# deployer/builders/ledger.py

from typing import Any, Callable, List, Optional

from ..candid.values import Blob, Principal, Record, Variant, opt, record, tuple_record
from ..types.configs.ledger import Account, ArchiveOptions, LedgerConfig, MetadataEntry


Resolve = Callable[[str], str]

METADATA_TAGS = {"nat": "Nat", "int": "Int", "text": "Text", "blob": "Blob"}


def account_value(account: Account, resolve: Resolve) -> Record:
    owner = account.owner if account.owner is not None else resolve(account.owner_canister)
    fields = [("owner", Principal(owner))]
    if account.subaccount is not None:
        fields.append(("subaccount", opt(Blob.from_hex(account.subaccount))))
    return record(*fields)


def metadata_value(entry: MetadataEntry) -> Record:
    value = Blob.from_hex(entry.value) if entry.kind == "blob" else entry.value
    return tuple_record(entry.key, Variant(METADATA_TAGS[entry.kind], value))


def archive_options_value(options: ArchiveOptions) -> Record:
    fields: List[tuple] = [
        ("trigger_threshold", options.trigger_threshold),
        ("num_blocks_to_archive", options.num_blocks_to_archive),
        ("controller_id", Principal(options.controller_id)),
    ]
    for name in ("max_message_size_bytes", "cycles_for_archive_creation",
                 "node_max_memory_size_bytes", "max_transactions_per_response"):
        value = getattr(options, name)
        if value is not None:
            fields.append((name, opt(value)))
    if options.more_controller_ids is not None:
        fields.append(("more_controller_ids",
                       opt([Principal(p) for p in options.more_controller_ids])))
    return record(*fields)


def ledger_init_value(config: LedgerConfig, resolve: Resolve) -> Variant:
    """Init record of the ICRC-1 ledger, fields in the order the ledger declares them."""
    fields: List[tuple] = [
        ("token_name", config.token_name),
        ("token_symbol", config.token_symbol),
    ]
    if config.decimals is not None:
        fields.append(("decimals", opt(config.decimals)))

    fields.append(("minting_account", account_value(config.minting_account, resolve)))

    if config.fee_collector_account is not None:
        fields.append(("fee_collector_account",
                       opt(account_value(config.fee_collector_account, resolve))))

    fields.extend([
        ("initial_balances", [
            tuple_record(account_value(b.account, resolve), b.amount)
            for b in config.initial_balances
        ]),
        ("metadata", [metadata_value(entry) for entry in config.metadata]),
        ("transfer_fee", config.transfer_fee),
    ])

    if config.max_memo_length is not None:
        fields.append(("max_memo_length", opt(config.max_memo_length)))

    fields.append(("archive_options", archive_options_value(config.archive_options)))

    if config.feature_flags is not None:
        fields.append(("feature_flags", opt(record(icrc2=config.feature_flags.icrc2))))

    return Variant("Init", record(*fields))


def ledger_upgrade_value() -> Variant:
    return Variant("Upgrade")


def canister_names(config: LedgerConfig) -> List[str]:
    """Canister names whose ids must be looked up before serialization"""
    accounts: List[Optional[Account]] = [config.minting_account, config.fee_collector_account]
    accounts.extend(b.account for b in config.initial_balances)
    names: List[str] = []
    for account in accounts:
        if account is not None and account.owner_canister and account.owner_canister not in names:
            names.append(account.owner_canister)
    return names

# tests/test_builders.py

import msgspec
import pytest

from deployer.builders import (
    ArgumentBuilder,
    build_ledger_argument,
    build_minter_argument,
    build_minter_upgrade_argument,
)
from deployer.candid import Blob, Opt, Principal, Variant, parse_args
from deployer.clients import StaticResolver
from deployer.types import (
    Account,
    ConfigValidationError,
    EnvironmentLookupFailed,
    InitialBalance,
    MetadataEntry,
    MinterUpgradeConfig,
)

from conftest import CONTROLLER, MINTER_ID


def _init_record(argument):
    (value,) = parse_args(argument)
    assert isinstance(value, Variant)
    return value


# -- ledger

def test_ledger_scenario(ledger_config):
    argument = build_ledger_argument(ledger_config)

    assert 'token_name = "ICP Solana"' in argument
    assert 'token_symbol = "gSol"' in argument
    assert "decimals = opt 9" in argument
    assert "transfer_fee = 0;" in argument
    assert 'owner = principal "abc-principal"' in argument
    assert argument.startswith("(variant {")
    assert argument.endswith("})")


def test_ledger_argument_is_deterministic(ledger_config):
    assert build_ledger_argument(ledger_config) == build_ledger_argument(ledger_config)


def test_ledger_round_trip(ledger_config):
    variant = _init_record(build_ledger_argument(ledger_config))
    init = variant.value

    assert variant.tag == "Init"
    assert init.get("token_name") == ledger_config.token_name
    assert init.get("token_symbol") == ledger_config.token_symbol
    assert init.get("decimals") == Opt(ledger_config.decimals)
    assert init.get("minting_account").get("owner") == Principal("abc-principal")
    assert init.get("initial_balances") == []
    assert init.get("metadata") == []
    assert init.get("transfer_fee") == 0

    archive = init.get("archive_options")
    assert archive.get("trigger_threshold") == 2000
    assert archive.get("num_blocks_to_archive") == 1000
    assert archive.get("controller_id") == Principal(CONTROLLER)
    assert init.get("feature_flags").value.get("icrc2") is True


def test_ledger_field_order_follows_ledger_declaration(ledger_config):
    init = _init_record(build_ledger_argument(ledger_config)).value
    assert init.names() == (
        "token_name", "token_symbol", "decimals", "minting_account", "initial_balances",
        "metadata", "transfer_fee", "archive_options", "feature_flags",
    )


def test_decimals_zero_and_absent_differ(ledger_config):
    zero = build_ledger_argument(msgspec.structs.replace(ledger_config, decimals=0))
    absent = build_ledger_argument(msgspec.structs.replace(ledger_config, decimals=None))

    assert zero != absent
    assert "decimals = opt 0;" in zero
    assert "decimals" not in absent


def test_non_zero_transfer_fee(ledger_config):
    argument = build_ledger_argument(msgspec.structs.replace(ledger_config, transfer_fee=10_000))
    assert "transfer_fee = 10000;" in argument


@pytest.mark.parametrize("changes", [
    {"transfer_fee": -1},
    {"decimals": 256},
    {"decimals": -1},
    {"token_name": "  "},
    {"token_symbol": ""},
    {"max_memo_length": 70000},
])
def test_invalid_ledger_config_rejected(ledger_config, changes):
    with pytest.raises(ConfigValidationError):
        build_ledger_argument(msgspec.structs.replace(ledger_config, **changes))


def test_minting_account_needs_exactly_one_owner(ledger_config):
    with pytest.raises(ConfigValidationError):
        build_ledger_argument(msgspec.structs.replace(ledger_config, minting_account=Account()))

    both = Account(owner="abc-principal", owner_canister="minter")
    with pytest.raises(ConfigValidationError):
        build_ledger_argument(msgspec.structs.replace(ledger_config, minting_account=both),
                              resolver=lambda name: MINTER_ID)


def test_owner_canister_resolved_with_callable(ledger_config):
    config = msgspec.structs.replace(ledger_config,
                                     minting_account=Account(owner_canister="minter"))
    looked_up = []

    def resolver(name):
        looked_up.append(name)
        return MINTER_ID

    argument = build_ledger_argument(config, resolver)
    assert looked_up == ["minter"]
    assert f'owner = principal "{MINTER_ID}"' in argument


def test_owner_canister_resolved_with_resolver_object(ledger_config):
    config = msgspec.structs.replace(ledger_config,
                                     minting_account=Account(owner_canister="minter"))
    argument = build_ledger_argument(config, StaticResolver({"minter": MINTER_ID}))
    assert f'principal "{MINTER_ID}"' in argument


def test_owner_canister_without_resolver_is_a_config_error(ledger_config):
    config = msgspec.structs.replace(ledger_config,
                                     minting_account=Account(owner_canister="minter"))
    with pytest.raises(ConfigValidationError):
        build_ledger_argument(config)


def test_failed_lookup_raises_environment_error(ledger_config):
    config = msgspec.structs.replace(ledger_config,
                                     minting_account=Account(owner_canister="minter"))

    with pytest.raises(EnvironmentLookupFailed) as exc_info:
        build_ledger_argument(config, StaticResolver({}))
    assert exc_info.value.context["canister"] == "minter"

    def broken(name):
        raise RuntimeError("state file missing")

    with pytest.raises(EnvironmentLookupFailed):
        build_ledger_argument(config, broken)

    with pytest.raises(EnvironmentLookupFailed):
        build_ledger_argument(config, lambda name: "  ")


def test_balances_metadata_and_subaccount(ledger_config):
    subaccount = "01" * 32
    config = msgspec.structs.replace(
        ledger_config,
        initial_balances=[InitialBalance(Account(owner="aaaaa-aa", subaccount=subaccount), 500)],
        metadata=[
            MetadataEntry("icrc1:logo", "data:image/png;base64,AAAA"),
            MetadataEntry("icrc1:max_supply", 21_000_000, kind="nat"),
            MetadataEntry("icrc1:hash", "beef", kind="blob"),
        ],
        max_memo_length=32,
    )
    init = _init_record(build_ledger_argument(config)).value

    (balance,) = init.get("initial_balances")
    assert balance.get(0).get("owner") == Principal("aaaaa-aa")
    assert balance.get(0).get("subaccount") == Opt(Blob(bytes.fromhex(subaccount)))
    assert balance.get(1) == 500

    logo, supply, digest = init.get("metadata")
    assert logo.get(0) == "icrc1:logo"
    assert logo.get(1) == Variant("Text", "data:image/png;base64,AAAA")
    assert supply.get(1) == Variant("Nat", 21000000)
    assert digest.get(1) == Variant("Blob", Blob(b"\xbe\xef"))
    assert init.get("max_memo_length") == Opt(32)


@pytest.mark.parametrize("entry", [
    MetadataEntry("icrc1:fee", "ten", kind="nat"),
    MetadataEntry("icrc1:fee", -1, kind="nat"),
    MetadataEntry("icrc1:hash", "not hex", kind="blob"),
    MetadataEntry("", "x"),
])
def test_invalid_metadata_rejected(ledger_config, entry):
    with pytest.raises(ConfigValidationError):
        build_ledger_argument(msgspec.structs.replace(ledger_config, metadata=[entry]))


def test_bad_subaccount_rejected(ledger_config):
    account = Account(owner="abc-principal", subaccount="00")
    with pytest.raises(ConfigValidationError):
        build_ledger_argument(msgspec.structs.replace(ledger_config, minting_account=account))


# -- minter

def test_minter_amount_has_no_digit_grouping(minter_config):
    argument = build_minter_argument(minter_config)
    assert "minimum_withdrawal_amount = 20000000;" in argument
    assert "20_000_000" not in argument
    assert "20,000,000" not in argument


def test_minter_round_trip(minter_config):
    variant = _init_record(build_minter_argument(minter_config))
    assert variant.tag == "Init"
    assert variant.value.as_dict() == {
        "solana_rpc_url": minter_config.solana_rpc_url,
        "solana_contract_address": minter_config.solana_contract_address,
        "solana_initial_signature": minter_config.solana_initial_signature,
        "ecdsa_key_name": minter_config.ecdsa_key_name,
        "minimum_withdrawal_amount": 20000000,
    }


@pytest.mark.parametrize("changes", [
    {"ecdsa_key_name": " "},
    {"solana_contract_address": ""},
    {"solana_initial_signature": ""},
    {"solana_rpc_url": ""},
    {"minimum_withdrawal_amount": 0},
    {"minimum_withdrawal_amount": -5},
])
def test_invalid_minter_config_rejected(minter_config, changes):
    with pytest.raises(ConfigValidationError):
        build_minter_argument(msgspec.structs.replace(minter_config, **changes))


def test_minter_upgrade_only_sends_set_fields():
    argument = build_minter_upgrade_argument(
        MinterUpgradeConfig(ecdsa_key_name="key_1", minimum_withdrawal_amount=5)
    )
    (variant,) = parse_args(argument)

    assert variant.tag == "Upgrade"
    assert variant.value.as_dict() == {
        "ecdsa_key_name": Opt("key_1"),
        "minimum_withdrawal_amount": Opt(5),
    }


def test_minter_upgrade_validates_present_fields():
    with pytest.raises(ConfigValidationError):
        build_minter_upgrade_argument(MinterUpgradeConfig(ecdsa_key_name=""))


# -- ArgumentBuilder.build

def test_build_picks_upgrade_section_for_upgrade_mode(deployment_config):
    config = msgspec.structs.replace(
        deployment_config, minter_upgrade=MinterUpgradeConfig(ecdsa_key_name="key_1"))
    builder = ArgumentBuilder(StaticResolver({"minter": MINTER_ID}))

    assert "Upgrade" in builder.build("minter", config, "upgrade")
    assert "Init" in builder.build("minter", config, "reinstall")
    assert MINTER_ID in builder.build("ledger", config, "reinstall")


def test_build_without_section_is_a_config_error(deployment_config):
    config = msgspec.structs.replace(deployment_config, ledger=None)
    with pytest.raises(ConfigValidationError):
        ArgumentBuilder().build("ledger", config)
    with pytest.raises(ConfigValidationError):
        ArgumentBuilder().build("archive", config)


def test_minter_upgrade_without_section_sends_empty_upgrade(deployment_config):
    argument = ArgumentBuilder().build("minter", deployment_config, "upgrade")
    assert argument == "(variant { Upgrade = record {} })"


def test_ledger_upgrade_keeps_installed_settings(deployment_config):
    argument = ArgumentBuilder().build("ledger", deployment_config, "upgrade")

    assert argument == "(variant { Upgrade })"
    (variant,) = parse_args(argument)
    assert variant == Variant("Upgrade")


@pytest.mark.parametrize("mode", ["install", "reinstall", "auto"])
def test_non_upgrade_modes_send_init(deployment_config, mode):
    builder = ArgumentBuilder(StaticResolver({"minter": MINTER_ID}))
    for target in ("ledger", "minter"):
        assert "Init = record" in builder.build(target, deployment_config, mode)

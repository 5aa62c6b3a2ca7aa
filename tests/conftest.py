# tests/conftest.py
"""
pytest configuration and fixtures for deployer tests
"""

import subprocess
from pathlib import Path
from typing import Dict, List, Tuple

import msgspec
import pytest

from deployer.core.logging import DeployerLogger
from deployer.types import (
    Account,
    ArchiveOptions,
    DeploymentConfig,
    DfxConfig,
    FeatureFlags,
    LedgerConfig,
    MinterConfig,
)


PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"

CONTROLLER = "p5mpn-lgd4x-logst-tftlf-ocwbj-b53ah-5mgue-b665z-lv63u-mmvdj-iqe"
MINTER_ID = "bkyz2-fmaaa-aaaaa-qaaaq-cai"


class FakeDfx:
    """
    Stand-in for subprocess.run. Responses are keyed by the dfx subcommand
    ("deploy", "canister") and optionally by target: ("deploy", "ledger").
    """

    def __init__(self, responses: Dict = None):
        self.calls: List[List[str]] = []
        self.kwargs: List[dict] = []
        self.responses = {
            "canister": (0, f"{MINTER_ID}\n", ""),
            "deploy": (0, "Deployed canisters.\n", ""),
        }
        self.responses.update(responses or {})

    def __call__(self, command, **kwargs):
        self.calls.append(list(command))
        self.kwargs.append(kwargs)

        subcommand = command[1]
        target = command[2] if subcommand == "deploy" else command[3]
        response = self.responses.get((subcommand, target), self.responses.get(subcommand))
        if isinstance(response, BaseException):
            raise response

        returncode, stdout, stderr = response
        return subprocess.CompletedProcess(command, returncode, stdout, stderr)

    def subcommands(self) -> List[Tuple[str, str]]:
        return [(c[1], c[2] if c[1] == "deploy" else c[3]) for c in self.calls]

    def deploy_calls(self) -> List[List[str]]:
        return [c for c in self.calls if c[1] == "deploy"]


@pytest.fixture
def fake_dfx():
    return FakeDfx()


@pytest.fixture
def ledger_config():
    return LedgerConfig(
        token_name="ICP Solana",
        token_symbol="gSol",
        decimals=9,
        minting_account=Account(owner="abc-principal"),
        archive_options=ArchiveOptions(
            trigger_threshold=2000,
            num_blocks_to_archive=1000,
            controller_id=CONTROLLER,
        ),
        transfer_fee=0,
        feature_flags=FeatureFlags(icrc2=True),
    )


@pytest.fixture
def minter_config():
    return MinterConfig(
        solana_rpc_url="https://api.devnet.solana.com",
        solana_contract_address="8eaZqKD2CDYakH5qW1kPT7HsbeWyn2f7AXbTWZYLSsSN",
        solana_initial_signature="64RLMFMcmqvC3EXMkKJZWzAnHKrKwaZxV6bqC64M1zzvcCM46ixaRwhVViCS5xef6y3NBXUAgHxbcNVdcgkUjnQS",
        ecdsa_key_name="dfx_test_key",
        minimum_withdrawal_amount=20_000_000,
    )


@pytest.fixture
def deployment_config(ledger_config, minter_config):
    """Both canisters, ledger owner resolved from the minter canister"""
    ledger = msgspec.structs.replace(ledger_config,
                                     minting_account=Account(owner_canister="minter"))
    return DeploymentConfig(dfx=DfxConfig(), ledger=ledger, minter=minter_config)


@pytest.fixture
def devnet_config_path():
    return CONFIG_DIR / "devnet.yaml"


@pytest.fixture
def mainnet_config_path():
    return CONFIG_DIR / "mainnet.yaml"


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI invocations bind the console handler to the runner's stderr"""
    yield
    DeployerLogger.reset()

# deployer/cli/commands/config.py

"""
Configuration CLI Commands
"""

from pathlib import Path

import click
import yaml

from ...core.config import dump_config
from ...types.errors import DeployerError
from ..context import fail


@click.group()
def config():
    """Inspect and validate deployment configuration files"""
    pass


@config.command('validate')
@click.argument('config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--set', 'overrides', multiple=True, metavar='KEY=VALUE',
              help='Override a configuration value')
@click.pass_context
def validate(ctx, config_path, overrides):
    """Validate a configuration file

    Examples:
        config validate config/devnet.yaml
    """
    cli_context = ctx.obj['cli_context']

    try:
        deployment = cli_context.load_config(config_path, overrides)
    except DeployerError as e:
        fail(ctx, e)
        return

    click.echo(f"✅ Configuration valid: {config_path}")
    click.echo(f"   Network: {deployment.dfx.network}")
    click.echo(f"   Order: {', '.join(deployment.order)}")
    if deployment.ledger is not None:
        ledger = deployment.ledger
        click.echo(f"   Ledger: {ledger.token_name} ({ledger.token_symbol})")
    if deployment.minter is not None:
        click.echo(f"   Minter: {deployment.minter.solana_contract_address}")
    if deployment.minter_upgrade is not None:
        click.echo("   Minter upgrade: configured")


@config.command('show')
@click.argument('config_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--set', 'overrides', multiple=True, metavar='KEY=VALUE',
              help='Override a configuration value')
@click.pass_context
def show(ctx, config_path, overrides):
    """Print the resolved configuration as YAML"""
    cli_context = ctx.obj['cli_context']

    try:
        deployment = cli_context.load_config(config_path, overrides)
    except DeployerError as e:
        fail(ctx, e)
        return

    click.echo(yaml.safe_dump(dump_config(deployment), default_flow_style=False,
                              sort_keys=False, indent=2))

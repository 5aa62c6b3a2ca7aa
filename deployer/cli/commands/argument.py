# deployer/cli/commands/argument.py

"""
Argument CLI Command

Prints the Candid argument for one canister, e.g. for use with
`dfx deploy --argument "$(deployer argument ledger -c devnet.yaml)"`.
"""

from pathlib import Path

import click

from ...clients.interfaces import StaticResolver
from ...types.configs.deployment import MODES, TARGETS
from ...types.errors import DeployerError
from ..context import fail, resolve_network


@click.command('argument')
@click.argument('target', type=click.Choice(TARGETS))
@click.option('--config', '-c', 'config_path',
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Deployment configuration file (YAML or JSON)')
@click.option('--mode', default='reinstall', show_default=True, type=click.Choice(MODES),
              help='Install mode; upgrade selects the minter_upgrade section')
@click.option('--minter-id', help='Minter principal; skips the dfx canister id lookup')
@click.option('--ic', 'mainnet', is_flag=True, help='Resolve canister ids on mainnet')
@click.option('--network', help='Named dfx network (default: local)')
@click.option('--set', 'overrides', multiple=True, metavar='KEY=VALUE',
              help='Override a configuration value')
@click.pass_context
def argument(ctx, target, config_path, mode, minter_id, mainnet, network, overrides):
    """Print the serialized init/upgrade argument for TARGET"""
    cli_context = ctx.obj['cli_context']

    try:
        config = cli_context.load_config(config_path, overrides, resolve_network(mainnet, network))
        resolver = (StaticResolver({'minter': minter_id}) if minter_id
                    else cli_context.get_client(config))
        text = cli_context.get_builder(resolver).build(target, config, mode)
    except DeployerError as e:
        fail(ctx, e)
        return

    click.echo(text)

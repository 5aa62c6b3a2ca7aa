# deployer/cli/commands/deploy.py

"""
Deploy CLI Commands
"""

from pathlib import Path

import click

from ...types.configs.deployment import MODES, TARGETS
from ...types.errors import DeployerError
from ..context import fail, resolve_network


STATUS_ICONS = {
    'deployed': '✅',
    'dry_run': '🔍',
    'failed': '❌',
    'skipped': '⏭️',
}


@click.command('deploy')
@click.argument('targets', nargs=-1, required=True, type=click.Choice(TARGETS))
@click.option('--config', '-c', 'config_path',
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Deployment configuration file (YAML or JSON)')
@click.option('--mode', default='reinstall', show_default=True, type=click.Choice(MODES),
              help='dfx install mode')
@click.option('--ic', 'mainnet', is_flag=True, help='Deploy to mainnet (dfx --ic)')
@click.option('--network', help='Named dfx network (default: local)')
@click.option('--set', 'overrides', multiple=True, metavar='KEY=VALUE',
              help='Override a configuration value, e.g. ledger.transfer_fee=10')
@click.option('--yes', 'assume_yes', is_flag=True, help='Pass --yes to dfx')
@click.option('--dry-run', is_flag=True, help='Build arguments without deploying')
@click.pass_context
def deploy(ctx, targets, config_path, mode, mainnet, network, overrides, assume_yes, dry_run):
    """Deploy canisters with arguments built from configuration

    Targets run in configured order (minter before ledger by default) and
    stop at the first failure. The exit code mirrors dfx's exit code.

    Examples:
        # Reinstall both canisters locally
        deploy minter ledger -c config/devnet.yaml

        # Reinstall the minter on mainnet
        deploy minter -c config/mainnet.yaml --ic

        # Show the ledger argument without touching any canister
        deploy ledger -c config/devnet.yaml --dry-run
    """
    cli_context = ctx.obj['cli_context']

    try:
        config = cli_context.load_config(config_path, overrides,
                                         resolve_network(mainnet, network), assume_yes)
        pipeline = cli_context.get_pipeline(config)
        result = pipeline.run(list(targets), mode=mode, dry_run=dry_run)
    except DeployerError as e:
        fail(ctx, e)
        return

    click.echo(f"🚀 Deployment ({result.mode}) on network '{result.network}'")
    click.echo("=" * 60)

    for outcome in result.outcomes:
        icon = STATUS_ICONS.get(outcome.status, '•')
        click.echo(f"{icon} {outcome.target}: {outcome.status}")
        if outcome.status == 'dry_run' and outcome.argument:
            click.echo(outcome.argument)
        if outcome.status == 'deployed' and ctx.obj.get('verbose') and outcome.result:
            click.echo(outcome.result.stdout)
        if outcome.status == 'failed' and outcome.error:
            click.echo(outcome.error, err=True)

    if not result.success:
        ctx.exit(result.returncode)

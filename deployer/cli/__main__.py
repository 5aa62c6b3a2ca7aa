# deployer/cli/__main__.py

"""
Canister Deployment CLI

Usage: python -m deployer.cli [command] [options]

Replaces the deploy-token.sh / deploy-minter*.sh scripts with
configuration-driven `dfx deploy` invocations.
"""

from pathlib import Path

import click

from deployer.cli.context import CLIContext
from deployer.core.config import log_level_from_env
from deployer.core.logging import DeployerLogger


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-dir', envvar='DEPLOYER_LOG_DIR',
              type=click.Path(file_okay=False, path_type=Path),
              help='Also write deployer.log and deployer_errors.log to this directory')
@click.pass_context
def cli(ctx, verbose, log_dir):
    """Deployer CLI - gSol ledger and minter deployment

    Builds canister init arguments from configuration files and runs
    `dfx deploy` with them.
    """
    log_level = "DEBUG" if verbose else log_level_from_env()
    DeployerLogger.configure(
        log_dir=log_dir,
        log_level=log_level,
        console_enabled=True,
        structured_format=True
    )

    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    if 'cli_context' not in ctx.obj:
        ctx.obj['cli_context'] = CLIContext()


# Import commands
from deployer.cli.commands.deploy import deploy
from deployer.cli.commands.argument import argument
from deployer.cli.commands.config import config

# Register commands
cli.add_command(deploy)
cli.add_command(argument)
cli.add_command(config)


if __name__ == '__main__':
    cli()

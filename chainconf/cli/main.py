"""
chainconf CLI - Validate and inspect node configuration files.

Main entry point for all CLI commands.
"""

import logging
import os
import sys

import click
from dotenv import load_dotenv

from chainconf import __version__
from chainconf.errors import ConfigError
from chainconf.utils.logger import setup_logging, get_logger

# Environment variable naming the default config file
CONFIG_FILE_ENV = "CHAINCFG_FILE"


def _config_file_argument(func):
    return click.argument(
        "config_file",
        required=False,
        type=click.Path(exists=True, dir_okay=False),
    )(func)


def _resolve_config_file(config_file):
    config_file = config_file or os.environ.get(CONFIG_FILE_ENV)
    if not config_file:
        raise click.UsageError(f"No config file given and {CONFIG_FILE_ENV} is not set")
    return config_file


def _load(config_file):
    from chainconf.core.config import load_config

    logger = get_logger("cli")
    try:
        return load_config(_resolve_config_file(config_file))
    except ConfigError as e:
        logger.debug(f"Load failed at {e.path}: {e.constraint}")
        click.echo(f"✗ Invalid configuration: {e}", err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(f"✗ Cannot read configuration: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, debug):
    """chainconf - Node configuration loader and validator"""
    load_dotenv()

    level = logging.DEBUG if debug else logging.WARNING
    setup_logging(level=level)

    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command("check")
@_config_file_argument
def check(config_file):
    """Validate a configuration file"""
    config = _load(config_file)
    click.echo("✓ Configuration is valid")
    click.echo(f"  Chain id: {config.blockchain.chain_id}")
    click.echo(f"  Pruning:  {config.pruning.mode.kind}")


@cli.command("show")
@_config_file_argument
@click.option("--section", default=None, help="Only show one section (node, network, blockchain, mining, pruning)")
def show(config_file, section):
    """Print a summary of a configuration file"""
    summary = _load(config_file).summary()

    if section is not None:
        if section not in summary:
            raise click.BadParameter(f"unknown section {section!r}", param_hint="--section")
        summary = {section: summary[section]}

    for name, values in summary.items():
        click.echo(f"[{name}]")
        for key, value in values.items():
            click.echo(f"  {key}: {'-' if value is None else value}")


@cli.command("reward")
@_config_file_argument
@click.option("--block", "block_number", type=click.IntRange(min=0), required=True, help="Block number")
def reward(config_file, block_number):
    """Show the base block reward and DAO fork rules at a block"""
    blockchain = _load(config_file).blockchain
    monetary = blockchain.monetary_policy_config
    dao = blockchain.dao_fork_config

    try:
        era = monetary.era(block_number)
        block_reward = monetary.block_reward(block_number)
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(f"Block {block_number}:")
    click.echo(f"  Era:          {era}")
    click.echo(f"  Block reward: {block_reward}")
    if dao is not None:
        extra = dao.get_extra_data(block_number)
        click.echo(f"  DAO fork block: {'yes' if dao.is_dao_fork_block(block_number) else 'no'}")
        click.echo(f"  Extra data required: {extra.hex() if extra is not None else 'no'}")


if __name__ == "__main__":
    cli()

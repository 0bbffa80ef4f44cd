from functools import wraps
from typing import Optional

import click

from .checksum import HASHER_ENV, HASHERS, resolve_hasher
from .exceptions import DeploymentError
from .networks import resolve_chain, supported_chains
from .paths import ROOT_ENV
from .pipeline import init_registry, prepare_template, reconcile, sync_upgrade_constants

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
BANNER = "=" * 60


def common_options(func):
    """Chain argument plus --root / --hasher, shared by every tool."""

    @click.argument("chain", required=False)
    @click.option(
        "--root",
        type=click.Path(file_okay=False, path_type=str),
        envvar=ROOT_ENV,
        default=None,
        help="Contracts project root (default: current directory)",
    )
    @click.option(
        "--hasher",
        type=click.Choice(sorted(HASHERS)),
        envvar=HASHER_ENV,
        default="keccak256",
        show_default=True,
        help="Checksum hasher; sha3-256 is a degraded fallback",
    )
    @click.pass_context
    @wraps(func)
    def wrapper(ctx: click.Context, chain: Optional[str], **kwargs):
        if chain is None:
            click.echo(ctx.get_help())
            click.echo(f"\nSupported chains:\n  {', '.join(supported_chains())}")
            ctx.exit(0)

        try:
            meta = resolve_chain(chain)
            hasher = resolve_hasher(kwargs.pop("hasher"))
            return func(meta, hasher=hasher, **kwargs)
        except DeploymentError as e:
            raise click.ClickException(str(e)) from e

    return wrapper


def _section(title: str, body: str) -> None:
    click.echo(BANNER)
    click.echo(title)
    click.echo(BANNER)
    click.echo("")
    click.echo(body)
    click.echo("")


@click.command(context_settings=CONTEXT_SETTINGS)
@common_options
def post_deploy(chain, hasher, root) -> None:
    """
    Merge deployment receipts from broadcast/ into deployed/<CHAIN>.toml and
    print the verify and proxy deploy commands.
    """

    outcome = reconcile(chain, root=root, hasher=hasher)
    click.echo(f"Updated {outcome.registry_path}")
    click.echo("")

    if outcome.commands.verify_command is not None:
        _section("VERIFY IMPLEMENTATION COMMAND:", outcome.commands.verify_command)
    _section("DEPLOY PROXY COMMAND:", outcome.commands.upgrade_command)


@click.command(context_settings=CONTEXT_SETTINGS)
@common_options
@click.option(
    "--target",
    type=click.Path(dir_okay=False, path_type=str),
    default=None,
    help="Source file to rewrite (default: src/Quote.sol)",
)
def prepare_deploy(chain, hasher, root, target) -> None:
    """
    Write the chain's protocol addresses into the Quote contract source.
    """

    outcome = prepare_template(chain, root=root, target=target, hasher=hasher)
    if outcome.written:
        click.echo(f"Updated {outcome.path}")
    else:
        click.echo(f"No changes to {outcome.path}")
    click.echo("")
    click.echo("Next steps:")
    click.echo(
        f"  forge script script/DeployImpl.s.sol:Deploy --rpc-url {chain.alias} --broadcast -vvvv"
    )


@click.command(context_settings=CONTEXT_SETTINGS)
@common_options
@click.option(
    "--new-impl",
    "new_impl",
    default=None,
    metavar="ADDRESS",
    help="Implementation to upgrade to (default: registry implementation)",
)
@click.option(
    "--target",
    type=click.Path(dir_okay=False, path_type=str),
    default=None,
    help="Script to rewrite (default: script/UpgradeProxy.s.sol)",
)
def sync_upgrade(chain, hasher, root, new_impl, target) -> None:
    """
    Write PROXY, PROXY_ADMIN and NEW_IMPLEMENTATION into the upgrade script.
    """

    outcome = sync_upgrade_constants(
        chain, root=root, new_impl=new_impl, target=target, hasher=hasher
    )
    click.echo(f"{'Updated' if outcome.written else 'No changes to'} {outcome.path}")
    click.echo("")
    click.echo("Next:")
    click.echo(f"  forge script {outcome.path}:UpgradeProxy --rpc-url {chain.alias} --broadcast -vvvv")


@click.command(context_settings=CONTEXT_SETTINGS)
@common_options
def init_chain_registry(chain, hasher, root) -> None:
    """
    Create an empty deployed/<CHAIN>.toml for a chain without one.
    """

    path = init_registry(chain, root=root)
    if path is None:
        click.echo(f"Registry for {chain.alias} already exists")
    else:
        click.echo(f"Created {path}")

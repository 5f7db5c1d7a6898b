"""
XRegions CLI - operator commands against the XRegions database.

Usage:
    xregions initdb          Create the XRegions tables
    xregions list            List stored region policies
    xregions show NAME       Show one region policy
    xregions export          Dump every policy as YAML
"""

import asyncio
import logging
import sys

import click
import yaml

from xregions import __version__
from xregions import config
from xregions.db import create_engine
from xregions.errors import StorageUnavailable
from xregions.store import RegionPolicyStore


def _open_store(database_url: str) -> RegionPolicyStore:
    # No region engine here: policies are shown as stored
    return RegionPolicyStore(create_engine(database_url))


async def _load(database_url: str) -> RegionPolicyStore:
    store = _open_store(database_url)
    try:
        await store.initialize()
        await store.load_all()
    finally:
        await store.dispose()
    return store


def _policy_dict(policy) -> dict:
    return {
        "flags": policy.flag_names(),
        "temp_group": policy.temp_group,
        "banned_items": sorted(policy.banned_items),
        "banned_projectiles": sorted(policy.banned_projectiles),
    }


def _run(coro):
    try:
        return asyncio.run(coro)
    except StorageUnavailable as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="xregions")
@click.option("--database-url", default=config.DATABASE_URL, show_default=True,
              help="SQLAlchemy async database URL")
@click.option("--log-level", default=config.LOG_LEVEL, show_default=True)
@click.pass_context
def main(ctx: click.Context, database_url: str, log_level: str):
    """XRegions - region policy flags."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = {"database_url": database_url}


@main.command()
@click.pass_context
def initdb(ctx: click.Context):
    """Create the XRegions tables if they do not exist."""
    async def _initdb():
        store = _open_store(ctx.obj["database_url"])
        try:
            await store.initialize()
        finally:
            await store.dispose()

    _run(_initdb())
    click.echo("XRegions tables are ready.")


@main.command(name="list")
@click.pass_context
def list_regions(ctx: click.Context):
    """List stored region policies."""
    store = _run(_load(ctx.obj["database_url"]))
    policies = sorted(store.list(), key=lambda p: p.region_name)
    if not policies:
        click.echo("No XRegions are defined.")
        return
    for policy in policies:
        click.echo(f"{policy.region_name}: {', '.join(policy.flag_names()) or 'none'}")


@main.command()
@click.argument("name")
@click.pass_context
def show(ctx: click.Context, name: str):
    """Show the policy stored for region NAME."""
    store = _run(_load(ctx.obj["database_url"]))
    policy = store.get(name)
    if policy is None:
        click.echo(f"Error: No XRegion named '{name}'.", err=True)
        sys.exit(1)

    click.echo(f"Region:             {policy.region_name}")
    click.echo(f"Flags:              {', '.join(policy.flag_names()) or 'none'}")
    click.echo(f"Temporary group:    {policy.temp_group or 'none'}")
    click.echo(f"Banned items:       {', '.join(map(str, sorted(policy.banned_items))) or 'none'}")
    click.echo(f"Banned projectiles: {', '.join(map(str, sorted(policy.banned_projectiles))) or 'none'}")


@main.command()
@click.option("--output", "-o", type=click.File("w"), default="-",
              help="File to write (default: stdout)")
@click.pass_context
def export(ctx: click.Context, output):
    """Dump every stored policy as YAML."""
    store = _run(_load(ctx.obj["database_url"]))
    data = {
        "xregions": {
            policy.region_name: _policy_dict(policy)
            for policy in sorted(store.list(), key=lambda p: p.region_name)
        }
    }
    yaml.safe_dump(data, output, sort_keys=False)


if __name__ == "__main__":
    main()

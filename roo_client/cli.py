# Overview: click command groups for browsing products, drivers and inventory from a terminal.

# roo_client/cli.py
# Commands Legend:
# - roo products list [--search TEXT] [--category ID] [--sort KEY] [--include-inactive]
#   Active products with stock status and next-expiry urgency.
# - roo products low-stock
#   Products the server reports below their reorder level.
# - roo drivers list [--search TEXT] [--status all|active|inactive]
#   Lorry drivers, filtered client-side like the driver list screen.
# - roo inventory stats
#   Dashboard counters (total / low / out of stock / expiring soon).
#
# Global options: --base-url (default $ROO_API_URL), --token (default $ROO_API_TOKEN), -v/--verbose

import logging

import click

from . import create_client
from .config import Config
from .errors import RooClientError
from .query import STATUS_VALUES
from .services.api_client import EnvTokenStore, StaticTokenStore
from .services.filter_service import filter_drivers
from .services.status_service import (
    EXPIRY_LABELS,
    STOCK_LABELS,
    ExpiryUrgency,
    product_expiry_urgency,
    stock_status,
)
from .time_utils import server_now

log = logging.getLogger(__name__)


def _run(fn):
    """Turn client errors into a clean CLI failure (exit code 1)."""
    try:
        return fn()
    except RooClientError as exc:
        log.debug("Command failed", exc_info=True)
        raise click.ClickException(str(exc))


def _product_line(product, now) -> str:
    line = (
        f"{product.product_id:>6}  {product.name:<32}  "
        f"{product.current_stock:>5}/{product.reorder_level:<5}  "
        f"{STOCK_LABELS[stock_status(product)]}"
    )
    urgency = product_expiry_urgency(product, now)
    if urgency is not ExpiryUrgency.NONE:
        line += f"  {EXPIRY_LABELS[urgency]}: {product.next_expiry.isoformat()}"
    return line


@click.group()
@click.option("--base-url", default=None, help="API base URL including /api")
@click.option("--token", default=None, help="Bearer token (defaults to $ROO_API_TOKEN)")
@click.option("-v", "--verbose", is_flag=True, help="Log requests to stderr")
@click.pass_context
def cli(ctx, base_url, token, verbose):
    """Roo Herbals inventory and delivery client."""
    logging.basicConfig(level=logging.DEBUG if verbose else Config.LOG_LEVEL)
    if ctx.obj is not None:
        # a pre-built client (tests, embedding)
        return
    store = StaticTokenStore(token) if token else EnvTokenStore()
    client = create_client(token_store=store, base_url=base_url)
    ctx.obj = client
    ctx.call_on_close(client.close)


@cli.group("products")
def products_group():
    """Product catalogue commands."""


@products_group.command("list")
@click.option("--search", default="", help="Search text")
@click.option("--category", default="", help="Category id (empty for all)")
@click.option("--sort", default=None, help="Server sort key")
@click.option("--include-inactive", is_flag=True, help="Include deactivated products")
@click.pass_obj
def list_products(client, search, category, sort, include_inactive):
    """List products with derived stock status."""
    products = _run(lambda: client.products.list_products(
        search=search,
        category=category,
        sort=sort,
        active=None if include_inactive else True,
    ))
    now = server_now()
    for p in products:
        click.echo(_product_line(p, now))
    click.echo(f"{len(products)} product{'' if len(products) == 1 else 's'} found")


@products_group.command("low-stock")
@click.pass_obj
def low_stock(client):
    """List products below their reorder level."""
    products = _run(client.products.list_low_stock)
    now = server_now()
    for p in products:
        click.echo(_product_line(p, now))


@cli.group("drivers")
def drivers_group():
    """Lorry driver commands."""


@drivers_group.command("list")
@click.option("--search", default="", help="Matches name, area or phone")
@click.option("--status", type=click.Choice(STATUS_VALUES), default="all", show_default=True)
@click.pass_obj
def list_drivers(client, search, status):
    """List drivers, filtered locally."""
    drivers = filter_drivers(_run(client.drivers.list_drivers), search, status)
    for d in drivers:
        state = "Active" if d.is_active else "Inactive"
        click.echo(
            f"{d.user_id:>6}  {d.full_name:<28}  {d.area or '-':<16}  "
            f"{d.phone or '-':<14}  {state:<8}  deliveries={d.current_deliveries}"
        )
    click.echo(f"{len(drivers)} driver{'' if len(drivers) == 1 else 's'} found")


@cli.group("inventory")
def inventory_group():
    """Inventory dashboard commands."""


@inventory_group.command("stats")
@click.pass_obj
def inventory_stats(client):
    """Show inventory dashboard counters."""
    stats = _run(client.inventory.get_stats)
    for key, value in stats.to_dict().items():
        click.echo(f"{key}: {value}")


def main():
    cli(prog_name="roo")


if __name__ == "__main__":
    main()

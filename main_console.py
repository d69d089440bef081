"""Mini README: Entry point CLI for the siteledger console.

Commands:
    * run - serve the FastAPI console with uvicorn.
    * transactions - print the merged receipts/payments view.
    * metrics - print total expenses and cost per square metre.
    * save-settings - validate and store starting capital and floor area.

Backend location and timeouts come from ``SITELEDGER_*`` settings.
"""

from __future__ import annotations

import asyncio

import typer
import uvicorn

from siteledger.configuration import get_settings
from siteledger.controller import FinancialsController
from siteledger.errors import BackendError, ValidationError
from siteledger.formatting import format_currency
from siteledger.interface.presentation import EMPTY_STATE, build_cards
from siteledger.logging_utils import configure_root_logger
from siteledger.metrics import validate_settings
from siteledger.sources import BackendClient

cli = typer.Typer(help="Browse transactions and financial metrics of the back office.")


async def _with_controller(action):
    async with BackendClient.from_settings() as client:
        controller = FinancialsController.over_http(client)
        return await action(controller)


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI console using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting siteledger on {effective_host}:{effective_port} "
        f"(backend {settings.api_base_url}).\n"
        f"Open your browser at http://{browser_host}:{effective_port}"
    )
    uvicorn.run(
        "siteledger.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def transactions(
    receipts: bool = typer.Option(True, "--receipts/--no-receipts", help="Include receipts."),
    payments: bool = typer.Option(True, "--payments/--no-payments", help="Include payments."),
) -> None:
    """Fetch receipts and payments and print them newest first."""

    async def _action(controller: FinancialsController):
        await controller.reload_transactions()
        controller.set_filter(show_receipts=receipts, show_payments=payments)
        return controller.visible_transactions()

    try:
        visible = asyncio.run(_with_controller(_action))
    except BackendError as error:
        typer.echo(f"Could not load transactions: {error}", err=True)
        raise typer.Exit(code=1) from error

    if not visible:
        typer.echo(EMPTY_STATE)
        return
    for card in build_cards(visible):
        typer.echo(f"{card.date:<24} {card.label:<10} {card.signed_amount:>16}  {card.name}  {card.caption}")


@cli.command()
def metrics() -> None:
    """Print total expenses and cost per square metre."""

    async def _action(controller: FinancialsController):
        await controller.load()
        return controller.metrics()

    try:
        result = asyncio.run(_with_controller(_action))
    except BackendError as error:
        typer.echo(f"Could not load financial data: {error}", err=True)
        raise typer.Exit(code=1) from error

    typer.echo(f"Total expenses: {format_currency(result.total_expenses)}")
    if result.has_cost_per_square_meter:
        typer.echo(f"Cost per m2: {format_currency(result.cost_per_square_meter)}")
    else:
        typer.echo("Cost per m2: unavailable (save a floor area greater than zero first)")
    if result.skipped_records:
        typer.echo(f"Counted as 0 (malformed amount): {', '.join(result.skipped_records)}")


@cli.command("save-settings")
def save_settings(
    starting_capital: str = typer.Argument(..., help="Starting capital, zero or more."),
    square_meters: str = typer.Argument(..., help="Floor area in square metres, above zero."),
) -> None:
    """Validate and store the financial settings on the company record."""

    async def _action(controller: FinancialsController):
        await controller.load()
        return await controller.save_settings(starting_capital, square_meters)

    try:
        validate_settings(starting_capital, square_meters)
        company = asyncio.run(_with_controller(_action))
    except ValidationError as error:
        for field_name, reason in error.fields.items():
            typer.echo(f"{field_name}: {reason}", err=True)
        raise typer.Exit(code=2) from error
    except BackendError as error:
        typer.echo(f"Could not save settings: {error}", err=True)
        raise typer.Exit(code=1) from error

    saved = company.settings
    typer.echo(
        f"Saved starting capital {format_currency(saved.starting_capital)} "
        f"and {saved.square_meters} m2"
    )


if __name__ == "__main__":
    cli()

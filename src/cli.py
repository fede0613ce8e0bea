"""Command line entry point: strategy rewards, vault KPI and vault scans."""

import asyncio
import logging
from decimal import Decimal
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from config.settings import get_settings
from src.analytics.kpi import build_kpi_engine
from src.analytics.scan import build_scanner
from src.core.errors import RewardCalculatorError
from src.core.fixed_point import format_wad
from src.rewards import build_reward_calculator
from src.rewards.valuation import ValuationEngine

app = typer.Typer(help="Strategy reward and vault KPI calculator")
console = Console()

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _close(calculator) -> None:
    await calculator.valuation.oracle.close()
    await calculator.reader.close()


def _run(coro):
    try:
        return asyncio.run(coro)
    except RewardCalculatorError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def rewards(
    strategy: str = typer.Argument(..., help="Strategy contract address"),
    period: Optional[int] = typer.Option(None, "--period", "-p", help="Window in seconds (default: reference period)"),
):
    """
    USD value of the rewards a strategy earned over the trailing period.
    """
    _setup_logging()
    settings = get_settings()
    if period is None:
        period = settings.reference_period_seconds

    async def main():
        calculator = build_reward_calculator(settings)
        try:
            return await calculator.strategy_rewards(strategy, period)
        finally:
            await _close(calculator)

    result = _run(main())

    table = Table(title=f"Rewards of {strategy} over {period}s")
    table.add_column("Token")
    table.add_column("Amount", justify="right")
    for token, amount in ValuationEngine.total_by_token(result.events).items():
        table.add_row(token.symbol, f"{Decimal(amount) / token.unit:.6f}")
    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}")
    console.print(f"[green]Total: {result.valuation.display_value}[/green] ({format_wad(result.usd)} USD)")


@app.command()
def kpi(vault: str = typer.Argument(..., help="Vault contract address")):
    """
    Rewards-to-deposits ratio of a vault over the reference period.
    """
    _setup_logging()
    settings = get_settings()

    async def main():
        engine = build_kpi_engine(settings)
        try:
            return await engine.vault_kpi(vault)
        finally:
            await _close(engine.calculator)

    result = _run(main())

    table = Table(title=f"KPI of {vault}")
    table.add_column("Field")
    table.add_column("Value", justify="right")
    table.add_row("Status", result.status.value)
    table.add_row("Rewards USD", format_wad(result.rewards_usd, 2))
    table.add_row("Deposited USD", format_wad(result.deposited_usd, 2))
    table.add_row("KPI", result.display_value)
    console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]warning:[/yellow] {warning}")


@app.command()
def scan(
    period: Optional[int] = typer.Option(None, "--period", "-p", help="Window in seconds (default: reference period)"),
):
    """
    Strategy rewards of every active vault in the registry.
    """
    _setup_logging()
    settings = get_settings()

    async def main():
        scanner = build_scanner(settings)
        try:
            return await scanner.scan(period)
        finally:
            await _close(scanner.calculator)

    report = _run(main())

    table = Table(title=f"Vault rewards over {report.period_seconds}s")
    table.add_column("Vault")
    table.add_column("Strategy")
    table.add_column("Platform")
    table.add_column("USD", justify="right")
    for r in report.results:
        table.add_row(r.vault.name, r.vault.strategy_name, r.vault.platform.value, format_wad(r.usd, 2))
    console.print(table)

    for platform, total in report.by_platform.items():
        console.print(f"{platform.value}: {format_wad(total, 2)}")
    for vault, reason in report.skipped.items():
        console.print(f"[blue]skipped[/blue] {vault}: {reason}")
    for vault, error in report.failed.items():
        console.print(f"[red]failed[/red] {vault}: {error}")
    console.print(f"[green]Total: {report.display_total}[/green]")


if __name__ == "__main__":
    app()

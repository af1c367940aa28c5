from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from rxcost_core.domain.errors import InvalidInput, NoInstallmentDue
from rxcost_core.domain.models import (
    DISEASE_TYPES,
    FREQUENCIES,
    AlertPolicy,
    Prescription,
    ProjectionConfig,
    ProjectionResult,
)
from rxcost_core.io import config as config_io
from rxcost_core.io import prescriptions as prescriptions_io
from rxcost_core.io.store import JsonFileStore
from rxcost_core.services import alerts as alert_service
from rxcost_core.services import dashboard as dashboard_service
from rxcost_core.services import payments as payment_service
from rxcost_core.services import pipeline
from rxcost_core.services import projection as projection_service
from rxcost_core.services import suggestions

app = typer.Typer(help="Prescription cost tracker: log prescriptions, project annual cost, simulate payments.")
console = Console()
logger = logging.getLogger("rxcost_core.cli")

SAVE_FAILED = "Failed to save prescription. Please try again."
PAYMENT_FAILED = "Failed to process payment. Please try again."
LOAD_FAILED = "Failed to load your data. Please try again."


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _projection_to_json(result: ProjectionResult, policy: AlertPolicy) -> dict:
    return {
        "annual_cost": result.annual_cost,
        "monthly_emi": result.monthly_installment,
        "emergency_fund": result.emergency_fund,
        "affordability_risk": alert_service.is_affordability_risk(result.monthly_installment, policy),
        "prediction_data": result.prediction_data(),
    }


def _store_path() -> Path:
    return Path.home() / ".rxcost_store.json"


def _open_store(store: Optional[Path], failure: str = LOAD_FAILED) -> JsonFileStore:
    path = store or _store_path()
    try:
        return JsonFileStore(path)
    except (OSError, ValueError):
        logger.exception("Error opening store %s", path)
        console.print(f"[red]{failure}[/red]")
        raise typer.Exit(code=1)


def _load_settings(config: Optional[Path], seed: Optional[int] = None):
    if config is None:
        return ProjectionConfig(seed=seed), AlertPolicy()
    try:
        proj = config_io.load_projection_config(config)
    except InvalidInput as exc:
        raise typer.BadParameter(str(exc), param_hint="--config")
    if seed is not None:
        proj = dataclasses.replace(proj, seed=seed)
    return proj, config_io.load_alert_policy(config)


def _check_choice(value: str, choices: Sequence[str], name: str) -> str:
    for choice in choices:
        if value.strip().lower() == choice.lower():
            return choice
    raise typer.BadParameter(f"{name} must be one of: {', '.join(choices)}")


def _breakdown_table(result: ProjectionResult, title: str = "Monthly projection") -> Table:
    table = Table(title=title)
    table.add_column("Month")
    table.add_column("Amount", justify="right")
    for point in result.monthly_breakdown:
        table.add_row(point.month, f"${point.amount:,.2f}")
    return table


def _print_projection(result: ProjectionResult, policy: AlertPolicy) -> None:
    console.print(_breakdown_table(result))
    console.print(f"Annual cost: [bold]${result.annual_cost:,.2f}[/bold]")
    console.print(f"Monthly EMI: [bold]${result.monthly_installment:,.2f}[/bold]")
    if alert_service.is_affordability_risk(result.monthly_installment, policy):
        console.print(
            f"[yellow]Your monthly EMI of ${result.monthly_installment:.2f} may be challenging. "
            "Consider discussing cost-reduction strategies with your healthcare provider.[/yellow]"
        )


def _record(user: str, items: Sequence[Prescription], store: Optional[Path], proj, policy) -> None:
    # reject the whole batch before anything is written
    for rx in items:
        try:
            pipeline.validate_prescription(rx)
        except InvalidInput as exc:
            console.print(f"[red]{rx.medicine_name or 'Prescription'}: {exc}[/red]")
            raise typer.Exit(code=1)
    stores = _open_store(store, SAVE_FAILED).stores
    outcome = None
    for rx in items:
        try:
            outcome = pipeline.record_prescription(user, rx, stores, proj, policy)
        except InvalidInput as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1)
        except (OSError, ValueError):
            logger.exception("Error saving prescription %s", rx.medicine_name)
            console.print(f"[red]{SAVE_FAILED}[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green]Saved {outcome.prescription.medicine_name}[/green]")
        if outcome.alert is not None:
            console.print(
                f"[red]This prescription exceeds ${policy.high_cost_threshold:,.0f}/month. "
                "Consider discussing alternatives with your healthcare provider.[/red]"
            )
    if outcome is not None:
        _print_projection(outcome.projection, policy)


@app.command()
def project(
    monthly_cost: float = typer.Option(..., help="Current total monthly prescription cost"),
    seed: Optional[int] = typer.Option(None, help="Random seed for a repeatable projection"),
    config: Optional[Path] = typer.Option(None, help="JSON config with projection/alerts sections"),
    out: Optional[Path] = typer.Option(None, help="Output path for projection JSON"),
):
    """Project twelve months of cost from a monthly total."""
    proj, policy = _load_settings(config, seed)
    try:
        result = projection_service.project(monthly_cost, proj)
    except InvalidInput as exc:
        raise typer.BadParameter(str(exc), param_hint="--monthly-cost")
    payload = _projection_to_json(result, policy)
    if out:
        _save_json(out, payload)
        typer.echo(f"Projection written to {out}")
    else:
        typer.echo(json.dumps(payload, indent=2))


@app.command()
def add(
    medicine_name: str = typer.Option(..., help="e.g. Metformin"),
    dosage: str = typer.Option(..., help="e.g. 500mg"),
    frequency: str = typer.Option(..., help=f"One of: {', '.join(FREQUENCIES)}"),
    monthly_cost: float = typer.Option(..., help="Monthly cost in dollars"),
    disease_type: str = typer.Option(..., help=f"One of: {', '.join(DISEASE_TYPES)}"),
    user: str = typer.Option("default", help="User the prescription belongs to"),
    store: Optional[Path] = typer.Option(None, envvar="RXCOST_STORE", help="JSON store file"),
    config: Optional[Path] = typer.Option(None, help="JSON config with projection/alerts sections"),
):
    """Add a prescription and re-project annual cost."""
    rx = Prescription(
        medicine_name=medicine_name,
        dosage=dosage,
        frequency=_check_choice(frequency, FREQUENCIES, "frequency"),
        monthly_cost=monthly_cost,
        disease_type=_check_choice(disease_type, DISEASE_TYPES, "disease type"),
    )
    proj, policy = _load_settings(config)
    _record(user, [rx], store, proj, policy)


@app.command("import")
def import_prescriptions(
    csv: Path = typer.Option(..., help="CSV with medicine_name,dosage,frequency,monthly_cost,disease_type"),
    user: str = typer.Option("default", help="User the prescriptions belong to"),
    store: Optional[Path] = typer.Option(None, envvar="RXCOST_STORE", help="JSON store file"),
    config: Optional[Path] = typer.Option(None, help="JSON config with projection/alerts sections"),
):
    """Import prescriptions from CSV, projecting after each one."""
    items = prescriptions_io.load_prescriptions(csv)
    if not items:
        console.print("[yellow]No prescriptions found in CSV.[/yellow]")
        return
    proj, policy = _load_settings(config)
    _record(user, items, store, proj, policy)


@app.command()
def dashboard(
    user: str = typer.Option("default", help="User to show"),
    store: Optional[Path] = typer.Option(None, envvar="RXCOST_STORE", help="JSON store file"),
    config: Optional[Path] = typer.Option(None, help="JSON config with projection/alerts sections"),
    tips: bool = typer.Option(False, help="Ask for AI cost-saving ideas (needs HF_TOKEN)"),
):
    """Show totals, the latest projection and recent alerts."""
    _, policy = _load_settings(config)
    stores = _open_store(store).stores
    summary = dashboard_service.build_dashboard(user, stores, policy)

    console.print("[bold cyan]== Dashboard ==[/bold cyan]")
    console.print(f"Total monthly cost: [bold]${summary.total_monthly_cost:,.2f}[/bold]")
    console.print(f"Annual cost: [bold]${summary.annual_cost:,.2f}[/bold]")
    console.print(f"Monthly EMI: [bold]${summary.monthly_installment:,.2f}[/bold]")
    console.print(f"Emergency fund: [bold]${summary.emergency_fund:,.2f}[/bold]")
    console.print(f"Active alerts: [bold]{summary.active_alerts}[/bold]")
    if summary.projection is not None:
        console.print(_breakdown_table(summary.projection, title="Cost trend"))
    else:
        console.print("[yellow]No projection yet. Add a prescription to get started.[/yellow]")
    if summary.affordability_risk:
        console.print("[yellow]Affordability risk: the monthly EMI may be challenging.[/yellow]")

    console.print("\n[bold]Recent alerts[/bold]")
    if not summary.recent_alerts:
        console.print("No alerts")
    for a in summary.recent_alerts:
        colour = "red" if a.alert_type == "high_cost" else "yellow"
        stamp = a.created_at.date().isoformat() if a.created_at else ""
        console.print(f"[{colour}]{a.alert_type}[/{colour}] {a.message} {stamp}")

    if tips and summary.projection is not None:
        try:
            ideas = suggestions.generate_cost_suggestions(
                total_monthly_cost=summary.total_monthly_cost,
                annual_cost=summary.annual_cost,
                monthly_installment=summary.monthly_installment,
                affordability_risk=summary.affordability_risk,
                prescriptions=stores.prescriptions.list(user),
            )
        except Exception:  # noqa: BLE001
            logger.exception("Suggestion request failed")
            ideas = []
        if ideas:
            console.print("\n[bold magenta]Cost-saving ideas:[/bold magenta]")
            for s in ideas:
                console.print(f"- {s}")
        else:
            console.print("[yellow]AI suggestions unavailable (set HF_TOKEN to enable).[/yellow]")


@app.command()
def pay(
    user: str = typer.Option("default", help="User paying"),
    store: Optional[Path] = typer.Option(None, envvar="RXCOST_STORE", help="JSON store file"),
):
    """Simulate paying this month's EMI."""
    stores = _open_store(store, PAYMENT_FAILED).stores
    try:
        payment = payment_service.make_payment(user, stores)
    except NoInstallmentDue:
        console.print("[yellow]Nothing to pay yet. Add a prescription first.[/yellow]")
        raise typer.Exit(code=1)
    except (OSError, ValueError):
        logger.exception("Error processing payment for %s", user)
        console.print(f"[red]{PAYMENT_FAILED}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Payment of ${payment.amount:.2f} processed successfully[/green]")


@app.command()
def payments(
    user: str = typer.Option("default", help="User to show"),
    store: Optional[Path] = typer.Option(None, envvar="RXCOST_STORE", help="JSON store file"),
):
    """List simulated payments."""
    summary = payment_service.summarize_payments(user, _open_store(store).stores)
    console.print(f"Monthly EMI: [bold]${summary.monthly_installment:,.2f}[/bold]")
    console.print(f"Total paid: [bold]${summary.total_paid:,.2f}[/bold] | Pending: {summary.pending_count}")
    if not summary.payments:
        console.print("No transactions yet. Make your first payment to get started.")
        return
    table = Table(title="Transactions")
    table.add_column("Date")
    table.add_column("Amount", justify="right")
    table.add_column("Type")
    table.add_column("Status")
    for p in summary.payments:
        table.add_row(p.payment_date.date().isoformat(), f"${p.amount:,.2f}", p.payment_type, p.status)
    console.print(table)


if __name__ == "__main__":
    app()

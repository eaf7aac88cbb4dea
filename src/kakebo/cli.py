"""Command line interface for the Kakebo budget engine."""

from __future__ import annotations

import shlex
from decimal import Decimal
from typing import Optional

import click

from .config import get_config
from .controller import BudgetController, create_controller
from .logging_config import get_logger, setup_logging
from .models.category import Category
from .models.entries import parse_amount
from .models.snapshot import BudgetSnapshot
from .services.dialogs import DialogMachine, DialogState

logger = get_logger("cli")

SHELL_HELP = """Commands:
  revenue <amount>             set the monthly revenue projection
  spend <amount> <description> record an expense (auto-classified)
  save <amount> <description>  record money saved
  delete <id>                  delete an expense
  list                         show expenses and savings
  status                       show totals and the survival meter
  report                       generate the narrative report
  export                       write the last report and the ledger to disk
  reset                        erase everything
  help                         show this text
  quit                         leave"""


def normalize_amount(raw: str) -> str:
    """Accept ``12,50`` as well as ``12.50``."""

    return raw.strip().replace(",", ".")


def _money(ctl: BudgetController, amount: Decimal) -> str:
    currency = ctl.config.CURRENCY if ctl.config else ""
    return f"{currency} {amount:,.2f}".strip()


def _echo_status(ctl: BudgetController, snapshot: BudgetSnapshot) -> None:
    if not snapshot.is_configured:
        click.echo("Revenue not set yet. Start with: revenue <amount>")
    click.echo(f"Revenue:   {_money(ctl, snapshot.revenue)}")
    click.echo(
        f"Spent:     {_money(ctl, snapshot.total_expenses)} "
        f"({snapshot.expense_percentage:.1f}% of revenue)"
    )
    click.echo(f"Saved:     {_money(ctl, snapshot.total_savings)}")
    click.echo(f"Available: {_money(ctl, snapshot.available_balance)}")
    for category in Category:
        click.echo(f"  {category.display.title:<16} {_money(ctl, snapshot.category_totals[category])}")

    threshold = ctl.monitor.threshold * 100
    over = snapshot.survival_percentage >= threshold
    meter = f"Survival: {snapshot.survival_percentage:.1f}% / {threshold:.0f}%"
    click.secho(meter, fg="red" if over else "green")


def _echo_list(ctl: BudgetController) -> None:
    if not ctl.ledger.transactions:
        click.echo("No expenses recorded. The Piggy Bank is happy!")
    for txn in ctl.ledger.transactions:
        click.echo(
            f"{txn.id:<20} {txn.created_at:%Y-%m-%d}  {txn.category.display.title:<16} "
            f"-{_money(ctl, txn.amount):>14}  {txn.description}"
        )
    for entry in ctl.ledger.savings:
        click.echo(
            f"{entry.id:<20} {entry.created_at:%Y-%m-%d}  {'':<16} "
            f"+{_money(ctl, entry.amount):>14}  {entry.description}"
        )


def _watch_diagnosis(dialog: DialogMachine) -> None:
    if dialog.state is DialogState.LOADING:
        click.secho("Survival spending crossed the limit. The Guardian is analysing...", fg="yellow")
    elif dialog.state is DialogState.READY:
        click.secho("Guardian alert!", fg="red", bold=True)
        click.echo(dialog.content)


def _split_amount_args(args: list[str]) -> Optional[tuple[str, str]]:
    if len(args) < 2:
        return None
    return normalize_amount(args[0]), " ".join(args[1:])


def run_command(ctl: BudgetController, line: str) -> bool:
    """Execute one shell line; returns False when the shell should stop."""

    try:
        parts = shlex.split(line)
    except ValueError as exc:
        click.echo(f"Could not parse input: {exc}")
        return True
    if not parts:
        return True
    command, args = parts[0].lower(), parts[1:]

    if command in {"quit", "exit"}:
        return False
    if command == "help":
        click.echo(SHELL_HELP)
    elif command == "revenue" and args:
        before = ctl.ledger.revenue
        snapshot = ctl.set_revenue(normalize_amount(args[0]))
        if snapshot.revenue == before:
            click.echo("Revenue unchanged (must be positive; use reset to change it).")
        else:
            click.echo(f"Revenue set to {_money(ctl, snapshot.revenue)}.")
    elif command in {"spend", "save"}:
        parsed = _split_amount_args(args)
        if parsed is None:
            click.echo(f"Usage: {command} <amount> <description>")
            return True
        amount, description = parsed
        before = ctl.snapshot()
        if command == "spend":
            snapshot = ctl.add_expense(description, amount)
            if snapshot.transaction_count > before.transaction_count:
                txn = ctl.ledger.transactions[0]
                click.echo(f"Recorded {txn.description} as {txn.category.display.title} [{txn.id}].")
            else:
                click.echo("Expense ignored: description and a positive amount are required.")
        else:
            snapshot = ctl.save_money(description, amount)
            if snapshot.savings_count > before.savings_count:
                click.echo(f"Saved {_money(ctl, ctl.ledger.savings[0].amount)}.")
            else:
                click.echo("Savings ignored: description and a positive amount are required.")
        if ctl.diagnosis.state is DialogState.READY:
            click.pause("Press any key to acknowledge the Guardian...")
            ctl.acknowledge_diagnosis()
    elif command == "delete" and args:
        if ctl.ledger.find_transaction(args[0]) is None:
            click.echo("No such expense.")
        elif click.confirm("Delete this expense? This cannot be undone.", default=False):
            ctl.delete_transaction(args[0])
            click.echo("Deleted.")
        if ctl.diagnosis.state is DialogState.READY:
            ctl.acknowledge_diagnosis()
    elif command == "list":
        _echo_list(ctl)
    elif command == "status":
        _echo_status(ctl, ctl.snapshot())
    elif command == "report":
        click.echo("Generating report...")
        click.echo(ctl.request_report())
        ctl.close_report()
    elif command == "export":
        if ctl.assembler.latest_text() is None:
            click.echo("Generate a report first.")
            return True
        paths = ctl.export_report()
        if paths is None:
            click.echo("Export failed; see the log for details.")
        else:
            click.echo(f"Report written: {paths[0]}")
            click.echo(f"Ledger written: {paths[1]}")
    elif command == "reset":
        if click.confirm("This erases ALL financial data. Continue?", default=False):
            ctl.reset()
            click.echo("All data erased.")
    else:
        click.echo(f"Unknown command {line!r}. Type 'help'.")
    return True


@click.group()
@click.option("--env", "env_name", default=None, help="Configuration name (base, dev, test).")
@click.pass_context
def main(ctx: click.Context, env_name: Optional[str]) -> None:
    """Kakebo envelope budgeting with a survival-spending guardian."""

    config = get_config(env_name)
    setup_logging(config)
    ctx.obj = config


@main.command()
@click.pass_obj
def shell(config) -> None:
    """Start an interactive budgeting session (state lives in memory only)."""

    ctl = create_controller(config)
    ctl.diagnosis.subscribe(_watch_diagnosis)
    logger.info("Shell session started", extra={"hosted": config.use_hosted_collaborators})
    click.echo("Kakebo Guardian. Type 'help' for commands.")
    while True:
        try:
            line = click.prompt("kakebo", prompt_suffix="> ", default="", show_default=False)
        except click.Abort:
            click.echo()
            break
        if not run_command(ctl, line):
            break


@main.command()
@click.argument("amount")
@click.argument("description", nargs=-1, required=True)
@click.pass_obj
def classify(config, amount: str, description: tuple[str, ...]) -> None:
    """Classify a single expense without recording it."""

    ctl = create_controller(config)
    text = " ".join(description)
    value = parse_amount(normalize_amount(amount))
    if value is None:
        raise click.BadParameter("amount must be a positive number", param_hint="AMOUNT")
    category = ctl.gateway.classify(text, value)
    click.echo(category.display.title)


if __name__ == "__main__":  # pragma: no cover
    main()

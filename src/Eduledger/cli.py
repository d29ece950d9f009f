import json
import logging
import functools

import click

from Eduledger.app_init import initialize_store
from Eduledger.core.utils import format_currency
from Eduledger.data.backends import OsPermissionGate
from Eduledger.data.repos import maintenance_repo
from Eduledger.errors import EduledgerError
from Eduledger.ledger import balances, invoices, payroll
from Eduledger import reports

logger = logging.getLogger(__name__)


def _confirm_access(handle, mode):
    return click.confirm(f"Allow {mode.value} access to {handle.path}?", default=True)


def _period(value):
    """'2024-05' -> (5, 2024)."""
    try:
        year_str, month_str = value.split("-")
        year, month = int(year_str), int(month_str)
    except ValueError:
        raise click.BadParameter("expected YYYY-MM") from None
    if not 1 <= month <= 12:
        raise click.BadParameter("month must be between 01 and 12")
    return month, year


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except EduledgerError as e:
            logger.error("%s failed: %s", func.__name__, e)
            raise click.ClickException(str(e)) from e
    return wrapper


@click.group()
@click.pass_context
def main(ctx):
    """Eduledger records and billing store."""
    ctx.obj = initialize_store(gate=OsPermissionGate(prompt=_confirm_access))


@main.command()
@click.pass_obj
@_handle_errors
def info(store):
    """Show which storage backend is active."""
    details = maintenance_repo.storage_info(store)
    click.echo(f"Backend: {details['backend']}")
    if details["path"]:
        click.echo(f"Data file: {details['path']}")
    if not details["fileAccessSupported"]:
        click.echo("File storage is disabled on this platform.")


@main.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_obj
@_handle_errors
def backup(store, path):
    """Write a full backup to PATH."""
    maintenance_repo.write_backup_file(store, path)
    click.echo(f"Backup written to {path}")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
@_handle_errors
def restore(store, path):
    """Merge the backup at PATH into the store."""
    maintenance_repo.restore_data(store, maintenance_repo.read_backup_file(path))
    click.echo("Backup merged.")


@main.command()
@click.confirmation_option(prompt="This deletes all data and reloads the sample dataset. Continue?")
@click.pass_obj
@_handle_errors
def reset(store):
    """Clear both backends and reload the sample dataset."""
    maintenance_repo.reset_to_seed(store)
    click.echo("Store reset to sample data.")


@main.command("use-file")
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_obj
@_handle_errors
def use_file(store, path):
    """Move the data into the JSON file at PATH and keep using it."""
    handle = maintenance_repo.migrate_to_file(store, path)
    click.echo(f"Now storing data in {handle.path}")


@main.command("use-fallback")
@click.pass_obj
@_handle_errors
def use_fallback(store):
    """Move the data back into the built-in storage."""
    if maintenance_repo.migrate_to_fallback(store):
        click.echo("Now using the built-in storage.")
    else:
        click.echo("Already using the built-in storage.")


@main.command("invoices")
@click.argument("period")
@click.pass_obj
@_handle_errors
def generate_invoices(store, period):
    """Generate or refresh tuition invoices for PERIOD (YYYY-MM)."""
    month, year = _period(period)
    summary = invoices.generate_invoices(store, month, year)
    click.echo(
        f"{summary['created']} created, {summary['adjusted']} adjusted, "
        f"{summary['unchanged']} unchanged"
    )


@main.command("payroll")
@click.argument("period")
@click.pass_obj
@_handle_errors
def generate_payroll(store, period):
    """Generate payroll for PERIOD (YYYY-MM)."""
    month, year = _period(period)
    for row in payroll.generate_payrolls(store, month, year):
        click.echo(f"{row['teacherName']}: {format_currency(row['totalSalary'])} ({row['sessionsTaught']} sessions)")


@main.command()
@click.pass_obj
@_handle_errors
def reconcile(store):
    """Rebuild cached student balances from the transactions."""
    drift = balances.reconcile_balances(store)
    if not drift:
        click.echo("All balances match the ledger.")
    for student_id, (cached, expected) in drift.items():
        click.echo(f"{student_id}: {cached} -> {expected}")


@main.command()
@click.argument("period")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON.")
@click.pass_obj
@_handle_errors
def report(store, period, as_json):
    """Monthly KPIs for PERIOD (YYYY-MM)."""
    month, year = _period(period)
    kpis = reports.monthly_kpis(store.load(), month, year)
    if as_json:
        click.echo(json.dumps(kpis, indent=2, ensure_ascii=False))
        return
    for key, value in kpis.items():
        click.echo(f"{key}: {value if key == 'month' else format_currency(value)}")


if __name__ == "__main__":
    main()

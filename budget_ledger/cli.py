# budget_ledger/cli.py
import logging
import os

import click
from dotenv import load_dotenv

from budget_ledger.config import load_config, users_path
from budget_ledger.core.errors import LedgerError
from budget_ledger.core.models import Advisory, Kind
from budget_ledger.credentials import CredentialStore
from budget_ledger.report import period_label, transaction_table
from budget_ledger.session import Session
from budget_ledger.summary import Health, filter_by_period, totals
from budget_ledger import dates

HEALTH_COLORS = {"Danger": "red", "Risk": "red", "Caution": "yellow", "Healthy": "green"}
BUDGET_MESSAGES = {
    "disabled": "Budget checking is disabled.",
    "within": "Spending is within budget.",
    "approaching": "Spending is above 80% of the budget.",
    "exceeded": "Budget limit exceeded!",
}


def _error(message):
    click.echo(click.style(message, fg="red"))


def _money(config, value):
    return f"{config.get('currency', 'Rs.')} {value:.2f}"


def _credentials(config):
    return CredentialStore(users_path(config))


def _login(config, username, password):
    if not _credentials(config).verify(username, password):
        raise click.ClickException("Login failed: unknown user or wrong password.")
    return Session.open(username, config)


def _optional_date(text):
    text = (text or "").strip()
    return dates.parse(text) if text else None


def _echo_totals(config, summary):
    click.echo(f"Total Income : {_money(config, summary.income)}")
    click.echo(f"Total Expense: {_money(config, summary.expense)}")
    click.echo(f"Savings      : {_money(config, summary.net)}")


def _echo_transactions(session, txs):
    if not txs:
        click.echo("No transactions.")
        return
    for line in transaction_table(txs):
        click.echo(line)
    _echo_totals(session.config, totals(txs))


def _echo_advisories(session, advisories):
    for advisory in advisories:
        if advisory is Advisory.OVERSPEND:
            _error("Warning: expenses for this month now exceed income.")
        elif advisory is Advisory.BUDGET_EXCEEDED:
            _error(f"Warning: Budget limit exceeded ({_money(session.config, session.budget.limit)})")


def _echo_monthly(session, month, year):
    health = session.health(month, year)
    s = health.summary
    click.echo(f"\n===== Monthly Summary {period_label(month, year)} =====")
    _echo_totals(session.config, s)
    report = health.report
    label = report.health.value
    if report.health is not Health.DANGER:
        label += f" ({report.ratio:.1f}% of income)"
    click.echo("Health: " + click.style(label, fg=HEALTH_COLORS[report.health.value]))
    click.echo(f"Tip: {report.message}")
    if health.top_categories:
        click.echo("\nTop spending categories:")
        for idx, (category, total) in enumerate(health.top_categories, start=1):
            click.echo(f"{idx}) {category} - {_money(session.config, total)}")
    status = session.budget_status(month, year)
    click.echo(BUDGET_MESSAGES[status.value])


def _echo_yearly(session, year):
    ys = session.yearly(year)
    click.echo(f"\n===== Yearly Summary {year:04d} =====")
    if ys.months_with_data < 12:
        click.echo(click.style(
            f"Note: Data present for {ys.months_with_data} month(s). "
            "Add other months for full yearly summary.", fg="yellow"))
    _echo_totals(session.config, ys)


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Path to a YAML config file (defaults are used when missing)'
)
@click.option(
    '--data-dir', 'data_dir',
    default=None,
    type=click.Path(file_okay=False),
    help='Directory holding users.csv and the per-user ledger files'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file (e.g. BUDGET_LEDGER_LOG=DEBUG)'
)
@click.pass_context
def main(ctx, config_path, data_dir, env_file):
    """Personal budget ledger: record income and expenses, track a monthly
    budget and export reports."""
    if env_file:
        load_dotenv(env_file)
    logging.basicConfig(level=os.getenv("BUDGET_LEDGER_LOG", "WARNING").upper())

    cfg = load_config(config_path)
    if data_dir:
        cfg['data_dir'] = data_dir
    os.makedirs(cfg['data_dir'], exist_ok=True)
    ctx.obj = cfg


@main.command()
@click.argument('username')
@click.password_option()
@click.pass_obj
def register(config, username, password):
    """Create a new user."""
    try:
        created = _credentials(config).register(username, password)
    except LedgerError as e:
        raise click.ClickException(str(e))
    if not created:
        raise click.ClickException(f"Username '{username}' is taken.")
    click.echo(f"Registered {username}.")


@main.command()
@click.argument('username')
@click.option('--old', 'old_password', prompt='Current password', hide_input=True)
@click.option('--new', 'new_password', prompt='New password', hide_input=True,
              confirmation_prompt=True)
@click.pass_obj
def passwd(config, username, old_password, new_password):
    """Change a user's password."""
    if not _credentials(config).change_password(username, old_password, new_password):
        raise click.ClickException("Change failed.")
    click.echo("Password changed.")


@main.command()
@click.argument('username')
@click.option('--password', prompt=True, hide_input=True)
@click.option('--type', 'kind', required=True,
              type=click.Choice(['income', 'expense'], case_sensitive=False))
@click.option('--category', default=None,
              help='Defaults to Salary for income and Others for expenses')
@click.option('--amount', required=True)
@click.option('--date', 'date_text', default=None, help='D/M/Y, defaults to today')
@click.option('--note', default='')
@click.option('--yes', is_flag=True, default=False,
              help='Record the expense even if it exceeds the month\'s income')
@click.pass_obj
def add(config, username, password, kind, category, amount, date_text, note, yes):
    """Record one income or expense entry."""
    session = _login(config, username, password)
    kind = Kind.parse(kind)
    if not category:
        category = "Salary" if kind is Kind.INCOME else "Others"

    def confirm(_advisories):
        return yes or click.confirm("Expenses will exceed income for this month. Continue?")

    try:
        result = session.add_transaction(kind, category, amount, _optional_date(date_text),
                                         note, confirm=confirm)
        if result is None:
            click.echo("Cancelled.")
            return
        if not session.strict:
            session.save()
    except LedgerError as e:
        raise click.ClickException(str(e))
    _echo_advisories(session, result.advisories)
    tx = result.transaction
    click.echo(f"Added {tx.kind.value} #{tx.id}: {tx.category} {_money(config, tx.amount)} on {tx.date}")


@main.command(name='list')
@click.argument('username')
@click.option('--password', prompt=True, hide_input=True)
@click.option('--month', type=click.IntRange(1, 12), default=None)
@click.option('--year', type=int, default=None)
@click.pass_obj
def list_transactions(config, username, password, month, year):
    """Show transactions, optionally for one month or year."""
    session = _login(config, username, password)
    _echo_transactions(session, filter_by_period(session.store, month, year))


@main.command()
@click.argument('username')
@click.option('--password', prompt=True, hide_input=True)
@click.option('--month', type=click.IntRange(1, 12), default=None,
              help='Omit for a yearly summary')
@click.option('--year', type=int, required=True)
@click.pass_obj
def summary(config, username, password, month, year):
    """Monthly summary with financial health, or a yearly summary."""
    session = _login(config, username, password)
    if month is None:
        _echo_yearly(session, year)
    else:
        _echo_monthly(session, month, year)


@main.command()
@click.argument('username')
@click.argument('limit')
@click.option('--password', prompt=True, hide_input=True)
@click.pass_obj
def budget(config, username, limit, password):
    """Set the monthly budget limit (0 disables)."""
    session = _login(config, username, password)
    try:
        value = session.set_budget(limit)
    except LedgerError as e:
        raise click.ClickException(str(e))
    click.echo(f"Budget saved: {_money(config, value)}" if value else "Budget disabled.")


@main.command()
@click.argument('username')
@click.option('--password', prompt=True, hide_input=True)
@click.option('--format', 'fmt', default='txt',
              type=click.Choice(['txt', 'csv', 'excel']),
              help='Output format: txt, csv, or excel')
@click.option('--month', type=click.IntRange(1, 12), default=None)
@click.option('--year', type=int, default=None)
@click.pass_obj
def export(config, username, password, fmt, month, year):
    """Export a report file into the data directory."""
    if month is not None and year is None:
        raise click.UsageError("--month requires --year")
    session = _login(config, username, password)
    try:
        path = session.export_report(fmt, month=month, year=year)
    except LedgerError as e:
        raise click.ClickException(str(e))
    click.echo(f"Report exported to {path}")


# ---------------------------------------------------------------------------
# Interactive menu
# ---------------------------------------------------------------------------

def _prompt_int(text, default=None):
    return click.prompt(text, type=int, default=default, show_default=default is not None)


def _menu_add(session):
    choice = _prompt_int("1. Income  2. Expense (other cancels)", default=0)
    if choice == 1:
        kind = Kind.INCOME
        category = click.prompt("Category (blank for Salary)", default="", show_default=False) or "Salary"
    elif choice == 2:
        kind = Kind.EXPENSE
        names = list(session.categories)
        for idx, name in enumerate(names, start=1):
            click.echo(f"{idx}. {name}")
        pick = _prompt_int("Choose category (0 for custom)", default=0)
        if pick == 0:
            category = click.prompt("Custom category (blank for Others)", default="",
                                    show_default=False) or "Others"
        else:
            try:
                category = session.categories.choose(pick)
            except IndexError as e:
                _error(str(e))
                return
    else:
        click.echo("Cancelled")
        return

    amount = click.prompt("Amount")
    date_text = click.prompt("Date (D/M/Y, blank for today)", default="", show_default=False)
    note = click.prompt("Note", default="", show_default=False)

    def confirm(_advisories):
        return click.confirm("Expenses will exceed income for this month. Continue?")

    try:
        result = session.add_transaction(kind, category, amount, _optional_date(date_text),
                                         note, confirm=confirm)
    except LedgerError as e:
        _error(str(e))
        return
    if result is None:
        click.echo("Cancelled")
        return
    _echo_advisories(session, result.advisories)
    click.echo(click.style(f"{kind.value} added (ID {result.transaction.id}).", fg="green"))


def _menu_categories(session):
    while True:
        choice = _prompt_int("1. List  2. Add  3. Back", default=3)
        if choice == 1:
            for idx, name in enumerate(session.categories, start=1):
                click.echo(f"{idx}. {name}")
        elif choice == 2:
            name = click.prompt("New category", default="", show_default=False)
            if session.categories.add(name):
                click.echo("Category added.")
            else:
                _error("Category is empty or already exists.")
        else:
            return


def _menu_summary(session):
    choice = _prompt_int("1. Monthly  2. Yearly (other cancels)", default=0)
    if choice == 1:
        month = click.prompt("Month (1-12)", type=click.IntRange(1, 12))
        year = _prompt_int("Year (YYYY)")
        _echo_monthly(session, month, year)
    elif choice == 2:
        _echo_yearly(session, _prompt_int("Year (YYYY)"))
    else:
        click.echo("Cancelled")


def _menu_edit(session):
    _echo_transactions(session, session.store.all())
    if not len(session.store):
        return
    txn_id = _prompt_int("Transaction ID to edit")
    if session.store.find_by_id(txn_id) is None:
        _error(f"Transaction {txn_id} not found")
        return
    field = _prompt_int("Edit: 1. Type 2. Category 3. Amount 4. Date 5. Note 0. Cancel", default=0)
    fields = {1: "kind", 2: "category", 3: "amount", 4: "date", 5: "note"}
    if field not in fields:
        return
    value = click.prompt("New value", default="", show_default=False)
    if fields[field] == "date":
        try:
            value = dates.parse(value)
        except LedgerError as e:
            _error(f"{e}; nothing changed.")
            return
    try:
        session.edit_transaction(txn_id, **{fields[field]: value})
    except LedgerError as e:
        _error(str(e))
        return
    click.echo(click.style("Updated.", fg="green"))


def _menu_delete(session):
    _echo_transactions(session, session.store.all())
    if not len(session.store):
        return
    txn_id = _prompt_int("Transaction ID to delete")
    if session.delete_transaction(txn_id):
        click.echo(click.style("Deleted.", fg="green"))
    else:
        _error(f"Transaction {txn_id} not found")


def _menu_budget(session):
    limit = click.prompt("Enter monthly budget limit (0 to disable)")
    try:
        session.set_budget(limit)
    except LedgerError as e:
        _error(str(e))
        return
    click.echo(click.style("Budget saved.", fg="green"))


def _menu_export(session):
    fmt = click.prompt("Format", type=click.Choice(['txt', 'csv', 'excel']), default='txt')
    try:
        path = session.export_report(fmt)
    except LedgerError as e:
        _error(str(e))
        return
    click.echo(f"Report exported to {path}")


def _menu_settings(session):
    choice = _prompt_int("Settings: 1. Change Password  2. Back", default=2)
    if choice != 1:
        return
    old = click.prompt("Enter current password", hide_input=True)
    new = click.prompt("Enter new password", hide_input=True)
    if _credentials(session.config).change_password(session.username, old, new):
        click.echo(click.style("Password changed.", fg="green"))
    else:
        _error("Change failed.")


def _save(session):
    try:
        session.save()
    except LedgerError as e:
        _error(f"Save failed: {e}")
        return False
    click.echo(click.style("Saved.", fg="green"))
    return True


SESSION_MENU = (
    "1. Add Transaction\n2. Show Transactions\n3. Manage Categories\n"
    "4. Summaries\n5. Edit Transaction\n6. Delete Transaction\n"
    "7. Set Budget\n8. Generate & Export Report\n9. Settings\n"
    "10. Logout\n0. Exit"
)


def session_loop(session):
    """Run the per-user menu. Returns True when the user chose to exit."""
    actions = {
        1: _menu_add,
        2: lambda s: _echo_transactions(s, s.store.all()),
        3: _menu_categories,
        4: _menu_summary,
        5: _menu_edit,
        6: _menu_delete,
        7: _menu_budget,
        8: _menu_export,
        9: _menu_settings,
    }
    while True:
        click.echo(click.style(f"\n=== Budget Ledger: {session.username} ===", bold=True))
        click.echo(SESSION_MENU)
        choice = _prompt_int("Choice")
        if choice in actions:
            actions[choice](session)
        elif choice == 10:
            _save(session)
            return False
        elif choice == 0:
            _save(session)
            click.echo("Exiting. Goodbye!")
            return True
        else:
            click.echo("Invalid")


@main.command()
@click.pass_obj
def menu(config):
    """Interactive login/register menu."""
    creds = _credentials(config)
    while True:
        click.echo(click.style("\n=== Budget Ledger ===", bold=True, fg="cyan"))
        click.echo("1. Login\n2. Register\n3. Exit")
        choice = _prompt_int("Choice")
        if choice == 1:
            username = click.prompt("Username")
            password = click.prompt("Password", hide_input=True)
            if not creds.verify(username, password):
                _error("Login failed.")
                continue
            click.echo(click.style("Login successful.", fg="green"))
            try:
                session = Session.open(username, config)
            except LedgerError as e:
                _error(str(e))
                continue
            if session_loop(session):
                return
        elif choice == 2:
            username = click.prompt("Choose username")
            if creds.exists(username):
                _error("Taken.")
                continue
            password = click.prompt("Choose password", hide_input=True)
            try:
                created = creds.register(username, password)
            except LedgerError as e:
                _error(str(e))
                continue
            if created:
                click.echo(click.style("Registered. Login now.", fg="green"))
            else:
                _error("Register failed.")
        elif choice == 3:
            click.echo("Goodbye.")
            return
        else:
            click.echo("Invalid.")

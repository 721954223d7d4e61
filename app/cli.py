"""Flask CLI commands: guarded schema migrations and payment reconciliation."""
import functools
import os

import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import migrate as alembic_migrate, stamp as alembic_stamp, upgrade as alembic_upgrade

from app.services.reconciliation import expire_stale_sessions, unsettled_sessions
from app.utils import transactional

TRUTHY = ("1", "true", "yes")


def _is_production():
    envs = (current_app.config.get("ENV"), os.getenv("APP_ENV"))
    return any((e or "").lower() == "production" for e in envs)


def production_guard(fn):
    """Refuse to touch a production schema unless ALLOW_DB_MIGRATIONS is set."""
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        if _is_production() and (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in TRUTHY:
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")
        return fn(*args, **kwargs)
    return wrapper


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Autogenerate a migration from the current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
@production_guard
def db_upgrade_safe():
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
@production_guard
def db_stamp_safe(revision):
    """Record ``revision`` as applied without running it."""
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("reconcile-payments")
@click.option("--room", "room_id", type=int, default=None, help="Only list sessions of this room")
@with_appcontext
def reconcile_payments(room_id):
    """Expire overdue UPI sessions and list the ones still awaiting a provider result."""
    with transactional("Failed to reconcile payment sessions"):
        expired = expire_stale_sessions()
    click.echo(f"Expired {expired} payment sessions.")
    for session in unsettled_sessions(room_id):
        click.echo(f"{session.reference_id}\t{session.status}\troom={session.room_id}\tamount={session.amount}")


COMMANDS = (db_migrate_safe, db_upgrade_safe, db_stamp_safe, reconcile_payments)


def register_cli(app):
    for command in COMMANDS:
        app.cli.add_command(command)

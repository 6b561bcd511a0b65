"""
Management commands (``flask --app app <command>``).

Admin accounts are never created through the public API; these commands
are the bootstrap path.
"""

import click
from flask import current_app
from flask.cli import with_appcontext

from tortillas.models import Role
from tortillas.services import credential_store
from tortillas.services.sessions import SessionStore


def register_commands(app):
    app.cli.add_command(create_admin)
    app.cli.add_command(promote_user)
    app.cli.add_command(purge_sessions)


@click.command('create-admin')
@click.option('--username', default=None, help='Login name (defaults to ADMIN_USERNAME).')
@click.option('--password', default=None, help='Password (defaults to ADMIN_PASSWORD).')
@with_appcontext
def create_admin(username, password):
    """Create an admin, or promote an existing user and reset its password."""
    username = username or current_app.config['ADMIN_USERNAME']
    password = password or current_app.config['ADMIN_PASSWORD']
    if not password:
        raise click.UsageError('No password given and ADMIN_PASSWORD is not set.')

    user = credential_store.find_by_login_name(username)
    if user is None:
        user = credential_store.create_user(username, password, role=Role.ADMIN)
        click.echo(f'New admin user "{user.username}" created')
    else:
        credential_store.set_role(user, Role.ADMIN)
        credential_store.set_password(user, password)
        click.echo(f'Existing user "{user.username}" promoted to admin')


@click.command('promote-user')
@click.argument('username')
@click.option('--role', type=click.Choice([r.value for r in Role]), default=Role.ADMIN.value,
              show_default=True)
@with_appcontext
def promote_user(username, role):
    """Change the role of an existing user."""
    user = credential_store.find_by_login_name(username)
    if user is None:
        raise click.ClickException(f'User "{username}" not found. Register it first.')
    credential_store.set_role(user, Role(role))
    click.echo(f'User "{user.username}" now has role {role}')


@click.command('purge-sessions')
@with_appcontext
def purge_sessions():
    """Delete expired sessions."""
    removed = SessionStore().purge_expired()
    click.echo(f'Removed {removed} expired session(s)')

import click


@click.group()
def main() -> None:
    """Pagevault - upgradeable keyed page store."""


@main.command()
@click.option("--host", default=None, help="Bind host (default: from PAGEVAULT_HOST or 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Bind port (default: from PAGEVAULT_PORT or 8000).")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the vault API server."""
    import uvicorn

    from pagevault.vault.settings import VaultSettings

    settings = VaultSettings()

    uvicorn.run(
        "pagevault.vault.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level="warning",  # uvicorn's own logging is intercepted by loguru
    )


@main.command()
def builds() -> None:
    """List the logic builds shipped with this package."""
    from pagevault.vault.catalog import default_catalog

    for address, build in default_catalog().items():
        click.echo(f"{build.version}  {address}  {', '.join(build.features)}")


@main.command()
@click.option("--vault-id", default=None, help="Vault to inspect (default: from PAGEVAULT_VAULT_ID).")
@click.option("--limit", default=20, show_default=True, help="Maximum page ids to list.")
def inspect(vault_id: str | None, limit: int) -> None:
    """Summarise the stored snapshot of a vault without starting the server."""
    import asyncio

    from pagevault.vault.app import create_state_store
    from pagevault.vault.catalog import default_catalog
    from pagevault.vault.settings import VaultSettings

    settings = VaultSettings()
    store = create_state_store(settings)
    vault_id = vault_id or settings.vault_id

    try:
        snapshot = asyncio.run(store.read_snapshot(vault_id))
    except FileNotFoundError:
        raise click.ClickException(f"No snapshot for vault '{vault_id}'.") from None

    layout = snapshot.layout
    build = default_catalog().resolve(layout.logic_address)
    click.echo(f"vault:   {vault_id}")
    click.echo(f"block:   {snapshot.block_number}")
    click.echo(f"writer:  {layout.privileged_writer}")
    click.echo(f"logic:   {layout.logic_address} ({build.version if build else 'not deployed'})")
    click.echo(f"pages:   {layout.total_page_count}")
    for page_id in layout.page_id_order[:limit]:
        click.echo(f"  {page_id}  (block {layout.page_last_modified.get(page_id, 0)})")
    if layout.total_page_count > limit:
        click.echo(f"  ... {layout.total_page_count - limit} more")


# ---------------------------------------------------------------------------
# Database management
# ---------------------------------------------------------------------------


def _alembic_config():
    """Build an Alembic Config from the package's alembic.ini.

    Both alembic.ini and the alembic/ directory live inside the package,
    so this works whether running from source or from an installed package.
    """
    from pathlib import Path

    from alembic.config import Config

    ini_path = Path(__file__).parent / "vault" / "alembic.ini"
    return Config(str(ini_path))


@main.group()
def db() -> None:
    """Event journal migration commands."""


@db.command()
@click.option("--revision", default="head", help="Target revision (default: head).")
def upgrade(revision: str) -> None:
    """Run database migrations forward."""
    from alembic import command

    command.upgrade(_alembic_config(), revision)
    click.echo(f"Database upgraded to {revision}.")


@db.command()
@click.option("--revision", default="-1", help="Target revision (default: -1, one step back).")
def downgrade(revision: str) -> None:
    """Roll back database migrations."""
    from alembic import command

    command.downgrade(_alembic_config(), revision)
    click.echo(f"Database downgraded to {revision}.")


@db.command()
@click.argument("message")
def migrate(message: str) -> None:
    """Autogenerate a new migration from model changes."""
    from alembic import command

    command.revision(_alembic_config(), message=message, autogenerate=True)
    click.echo(f"Migration generated: {message}")


@db.command()
def current() -> None:
    """Show current database revision."""
    from alembic import command

    command.current(_alembic_config(), verbose=True)


@db.command()
def history() -> None:
    """Show migration history."""
    from alembic import command

    command.history(_alembic_config(), verbose=True)


if __name__ == "__main__":
    main()

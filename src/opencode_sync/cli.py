from __future__ import annotations

from functools import partial

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from opencode_sync.config import BASE_URL_ENV, SERVICE_NAME, resolve_base_url, resolve_config_path
from opencode_sync.credentials import SecretLookup
from opencode_sync.document import ReadError, WriteError
from opencode_sync.fetcher import EndpointError, NetworkError, ParseError, fetch_model_ids, models_url
from opencode_sync.log import setup_logging
from opencode_sync.registry import (
    all_providers,
    configured_providers,
    get_provider,
    openai_compatible_providers,
    requires_auth,
)
from opencode_sync.resolver import resolve_provider
from opencode_sync.service import ModelSyncService, ServiceError
from opencode_sync.vault import VaultError, delete_api_key, lookup_api_key, store_api_key

app = typer.Typer(help="opencode-sync: keep opencode provider models in step with live endpoints")
console = Console()


@app.command("sync")
def sync(
    base_url: str | None = typer.Option(
        None, "--base-url", help=f"OpenAI-compatible base URL (default: ${BASE_URL_ENV})"
    ),
    provider: str | None = typer.Option(None, "--provider", help="Provider id override"),
    config: str | None = typer.Option(None, "--config", help="Path to opencode.json"),
    use_keyring: bool = typer.Option(
        False, "--keyring", help="Fall back to the OS keyring when no env var holds a key"
    ),
    predefined: bool = typer.Option(
        False, "--predefined", help="Use the registry's predefined models instead of the endpoint"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Merge in memory without writing"),
    timeout: float | None = typer.Option(
        None, "--timeout", help="HTTP timeout in seconds (default: wait indefinitely)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Merge the models served by an endpoint into the opencode config."""
    setup_logging(verbose)
    config_path = resolve_config_path(config)
    service = ModelSyncService(config_path, fetcher=fetch_model_ids)

    secret_lookup: SecretLookup | None = None
    if use_keyring:
        secret_lookup = partial(lookup_api_key, SERVICE_NAME)

    try:
        plan = service.plan(resolve_base_url(base_url), provider, secret_lookup=secret_lookup)
    except (ServiceError, VaultError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    console.print(f"Syncing models from: {escape(plan.base_url)}")
    console.print(f"Provider: {escape(plan.descriptor.name)} ({plan.provider_id})")
    if plan.api_key:
        console.print(f"Using API key (length: {len(plan.api_key)})")

    try:
        result = service.sync(plan, dry_run=dry_run, predefined=predefined, timeout=timeout)
    except ParseError as exc:
        console.print(f"[yellow]No models found: {escape(str(exc))}[/yellow]")
        raise typer.Exit(code=0) from exc
    except (EndpointError, NetworkError) as exc:
        console.print(f"[red]Sync failed: {escape(str(exc))}[/red]")
        console.print("Check that the server is running and the base URL is correct.")
        console.print(f"Test with: curl -s {escape(models_url(plan.base_url))}")
        raise typer.Exit(code=1) from exc
    except (ReadError, WriteError, ServiceError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    if result.empty or result.stats is None:
        console.print(f"[yellow]No models found at {escape(models_url(plan.base_url))}[/yellow]")
        console.print("Make sure your AI server is running and accessible.")
        raise typer.Exit(code=0)

    console.print(f"[green]Found {len(result.model_ids)} models[/green]")
    if result.created:
        console.print(f"Creating new config at: {escape(str(result.config_path))}")

    stats = result.stats
    summary = f"Added: {stats.added} | Updated: {stats.updated} | Removed: {stats.removed}"
    if result.written:
        console.print(f"[green]Config updated:[/green] {escape(str(result.config_path))}")
    else:
        console.print("[yellow]Dry run, config not written[/yellow]")
    console.print(summary)
    if not stats.changed:
        console.print("Model list unchanged")


@app.command("providers")
def list_providers(
    configured: bool = typer.Option(
        False, "--configured", help="Only providers usable with the current environment"
    ),
    openai_compatible: bool = typer.Option(
        False, "--openai-compatible", help="Only providers exposing a models endpoint"
    ),
) -> None:
    """List known providers."""
    descriptors = all_providers()
    if configured:
        ids = {descriptor.id for descriptor in configured_providers()}
        descriptors = [descriptor for descriptor in descriptors if descriptor.id in ids]
    if openai_compatible:
        ids = {descriptor.id for descriptor in openai_compatible_providers()}
        descriptors = [descriptor for descriptor in descriptors if descriptor.id in ids]

    table = Table(title="Providers")
    table.add_column("id")
    table.add_column("name")
    table.add_column("auth")
    table.add_column("env vars")
    table.add_column("models endpoint")
    for descriptor in descriptors:
        auth = descriptor.auth_type if requires_auth(descriptor) else f"{descriptor.auth_type} (no key needed)"
        table.add_row(
            descriptor.id,
            escape(descriptor.name),
            auth,
            ", ".join(descriptor.env_vars) or "-",
            descriptor.models_endpoint or "-",
        )
    console.print(table)


@app.command("detect")
def detect(url: str = typer.Argument(..., help="Base URL to classify")) -> None:
    """Show which provider a base URL belongs to."""
    descriptor = resolve_provider(url)
    console.print(f"{descriptor.id}: {escape(descriptor.name)}")
    if descriptor.env_vars:
        console.print(f"Credentials: {', '.join(descriptor.env_vars)}")
    if descriptor.notes:
        console.print(escape(descriptor.notes))


@app.command("set-key")
def set_key(provider: str) -> None:
    """Store a provider API key in the OS keyring."""
    if get_provider(provider) is None:
        console.print(f"[red]Unknown provider: {escape(provider)}[/red]")
        raise typer.Exit(code=1)

    secret = typer.prompt(f"Enter API key for {provider}", hide_input=True)
    try:
        store_api_key(SERVICE_NAME, provider, secret)
    except VaultError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    console.print(f"[green]API key stored for {provider}[/green]")


@app.command("delete-key")
def delete_key(provider: str) -> None:
    """Remove a provider API key from the OS keyring."""
    try:
        deleted = delete_api_key(SERVICE_NAME, provider)
    except VaultError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc

    if not deleted:
        console.print(f"[yellow]No API key stored for {escape(provider)}[/yellow]")
        raise typer.Exit(code=0)
    console.print(f"[green]API key deleted for {provider}[/green]")


if __name__ == "__main__":
    app()

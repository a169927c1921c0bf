"""CLI entry point for GroupWatch."""

from __future__ import annotations

import asyncio
import sys

import click

from groupwatch.config import ConfigError, ConfigStore, GitLabConfig, RefreshSettings
from groupwatch.dashboard import Dashboard, InvalidFilterError
from groupwatch.gitlab import GitLabClient, GitLabError, describe_connection_error
from groupwatch.hierarchy import GroupNode
from groupwatch.logging import setup_logging
from groupwatch.scanner import ScanCache, Scanner
from groupwatch.state_store import KeyValueStore

DEFAULT_DB_PATH = "groupwatch.db"

db_option = click.option(
    "--db",
    "db_path",
    default=DEFAULT_DB_PATH,
    show_default=True,
    help="SQLite database for the scan cache and saved settings",
)


def _load_config(store: KeyValueStore) -> GitLabConfig:
    """Environment settings, with gaps filled from the saved settings."""
    config = ConfigStore(store).merge_with(GitLabConfig.from_env())
    config.validate()
    return config


def _render_tree(node: GroupNode, depth: int = 0) -> list[str]:
    indent = "  " * depth
    marker = "-" if node.expanded else "+"
    lines = [f"{indent}{marker} {node.full_path}"]
    if not node.expanded:
        return lines
    for child in node.children:
        if isinstance(child, GroupNode):
            lines.extend(_render_tree(child, depth + 1))
        elif child.pipeline is not None:
            lines.append(f"{indent}  {child.path_with_namespace}: {child.pipeline.status}")
        else:
            lines.append(f"{indent}  {child.path_with_namespace}: {child.state}")
    return lines


@click.group()
@click.version_option(package_name="groupwatch")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging on the console")
def main(verbose: bool) -> None:
    """GroupWatch - pipeline status of every project in a GitLab group."""
    setup_logging(level="DEBUG" if verbose else None, console=verbose)


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", type=int, default=8000, show_default=True, help="Bind port")
@db_option
def serve(host: str, port: int, db_path: str) -> None:
    """Run the REST API."""
    import uvicorn  # noqa: PLC0415

    from groupwatch.api import create_app  # noqa: PLC0415

    uvicorn.run(create_app(db_path), host=host, port=port)


@main.command()
@db_option
def check(db_path: str) -> None:
    """Check that the token can read the root group."""

    async def _check(config: GitLabConfig) -> str:
        async with GitLabClient(config.api_url, config.private_token) as client:
            group = await client.check_connection(config.root_group_id_int)
        return group.full_path

    store = KeyValueStore(db_path)
    try:
        config = _load_config(store)
        full_path = asyncio.run(_check(config))
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except GitLabError as e:
        click.echo(describe_connection_error(e), err=True)
        sys.exit(1)
    finally:
        store.close()

    click.echo(f"Connected to {full_path}")


@main.command()
@click.option("--force", is_flag=True, help="Ignore the cached scan")
@db_option
def scan(force: bool, db_path: str) -> None:
    """List the IDs of every project below the root group."""

    async def _scan(config: GitLabConfig) -> list[int]:
        async with GitLabClient(config.api_url, config.private_token) as client:
            scanner = Scanner(client, ScanCache(store))
            return await scanner.get_project_ids(config.root_group_id, force_scan=force)

    store = KeyValueStore(db_path)
    try:
        config = _load_config(store)
        project_ids = asyncio.run(_scan(config))
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except GitLabError as e:
        click.echo(f"Scan failed: {e}", err=True)
        sys.exit(1)
    finally:
        store.close()

    click.echo(f"{len(project_ids)} project(s)")
    for project_id in project_ids:
        click.echo(str(project_id))


@main.command()
@click.option("--search", default=None, help="Only projects whose name or path contains this")
@click.option(
    "--status",
    "pipeline_status",
    default=None,
    help="Pipeline status filter: all, active, none or a GitLab pipeline status",
)
@click.option("--collapsed", is_flag=True, help="Show groups collapsed")
@db_option
def tree(search: str | None, pipeline_status: str | None, collapsed: bool, db_path: str) -> None:
    """Print the group tree with the latest pipeline of every project."""

    async def _tree(config: GitLabConfig) -> GroupNode:
        async with GitLabClient(config.api_url, config.private_token) as client:
            dashboard = Dashboard(
                client=client,
                scanner=Scanner(client, ScanCache(store)),
                root_group_id=config.root_group_id,
                refresh_settings=RefreshSettings(auto_refresh=False),
            )
            try:
                dashboard.update_filter(search_term=search, pipeline_status=pipeline_status)
                await dashboard.load(wait_for_pipelines=True)
                if collapsed:
                    await dashboard.collapse_all()
                return dashboard.require_tree()
            finally:
                await dashboard.close()

    store = KeyValueStore(db_path)
    try:
        config = _load_config(store)
        root = asyncio.run(_tree(config))
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except InvalidFilterError as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    except GitLabError as e:
        click.echo(f"Loading failed: {e}", err=True)
        sys.exit(1)
    finally:
        store.close()

    for line in _render_tree(root):
        click.echo(line)

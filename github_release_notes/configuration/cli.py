"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from datetime import datetime
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from github_release_notes.configuration.env import settings
from github_release_notes.configuration.exceptions import ConflictingFilterOptionsError, GitHubAuthenticationConfigurationUndefinedError
from github_release_notes.configuration.models import ExportFormat, ReleaseItemKind
from github_release_notes.configuration.reconcile import build_release_filter, validate_github_authentication_configuration
from github_release_notes.github.adapter import GitHubKitAdapter
from github_release_notes.github.client import get_github_client
from github_release_notes.github.search import list_repositories, search_repositories
from github_release_notes.release_notes.drafts import DraftStore
from github_release_notes.release_notes.exceptions import FilterNotUsableError, ReleaseItemsFetchError, WorkspaceNotOpenError
from github_release_notes.release_notes.export import export_filename
from github_release_notes.release_notes.models import CommitItem, ReleaseItem
from github_release_notes.release_notes.workspace import WorkspaceController
from github_release_notes.storage.file import JSONFileBackend
from github_release_notes.utils.constants import SHORT_SHA_LENGTH
from github_release_notes.utils.logging_config import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Draft release notes from GitHub pull requests, issues, and commits.")


@typer_app.callback()
def main_callback(
    debug: Annotated[bool, Option("--debug", envvar="DEBUG", help="Enable debug logging.")] = False,
) -> None:
    """Configure logging before any command runs."""
    configure_logging(debug=debug)


def _describe_item(item: ReleaseItem) -> str:
    """One-line listing of a release item."""
    marker = "[x]" if item.included else "[ ]"
    if isinstance(item, CommitItem):
        commit = item.payload
        text = f"{commit.sha[:SHORT_SHA_LENGTH]} {commit.summary} (@{commit.author_name})"
    else:
        text = f"#{item.payload.number} {item.payload.title} (@{item.payload.author_login})"
    note = f"\n      > {item.note}" if item.note else ""
    return f"{marker} {item.id:<20} {text}{note}"


def _draft_store(draft_store_path: Path) -> DraftStore:
    return DraftStore(JSONFileBackend(draft_store_path.expanduser()))


@typer_app.command(name="repos")
def repos_cli(
    query: Annotated[str, Option("--query", "-q", help="Search the repositories you can access by name.")] = "",
    page: Annotated[int, Option("--page", min=1, help="Page of results to show.")] = 1,
    github_api_url: Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = settings.GITHUB_API_URL,
    github_pat_token: Annotated[str | None, Option(envvar="GITHUB_PAT_TOKEN", help="GitHub Personal Access Token.")] = None,
    github_app_id: Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App Installation ID.")] = None,
) -> None:
    """List or search the repositories available to the authenticated user."""
    try:
        github_auth_type = asyncio.run(
            validate_github_authentication_configuration(
                github_pat_token=github_pat_token,
                github_app_id=github_app_id,
                github_app_private_key_path=github_app_private_key_path,
                github_app_installation_id=github_app_installation_id,
            )
        )
    except GitHubAuthenticationConfigurationUndefinedError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    async def find_repositories() -> list[dict]:
        client = await get_github_client(
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        if query:
            return await search_repositories(client, query, page=page)
        repositories, _ = await list_repositories(client, page=page)
        return repositories

    try:
        repositories = asyncio.run(find_repositories())
    except Exception as exc:
        typer.echo(f"Error listing repositories: {exc}", err=True)
        raise typer.Exit(1) from exc

    if not repositories:
        typer.echo("No repositories found.")
        return
    for repository in repositories:
        visibility = "private" if repository.get("private") else "public"
        description = f" - {repository['description']}" if repository.get("description") else ""
        typer.echo(f"{repository['full_name']} ({visibility}){description}")


# --- Typer group for commands working on one repository ---
repo_app = typer.Typer(help="Release notes commands for one repository")


def repo_callback(
    ctx: typer.Context,
    repo: Annotated[str, Argument(help="Repository name (owner/repo).")],
    github_api_url: Annotated[str, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = settings.GITHUB_API_URL,
    github_pat_token: Annotated[str | None, Option(envvar="GITHUB_PAT_TOKEN", help="GitHub Personal Access Token.")] = None,
    github_app_id: Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App Installation ID.")] = None,
    draft_store_path: Annotated[Path, Option(envvar="DRAFT_STORE_PATH", help="File holding release drafts.")] = settings.draft_store_path,
) -> None:
    """Set the repository for the current context."""
    ctx.ensure_object(dict)
    try:
        github_auth_type = asyncio.run(
            validate_github_authentication_configuration(
                github_pat_token=github_pat_token,
                github_app_id=github_app_id,
                github_app_private_key_path=github_app_private_key_path,
                github_app_installation_id=github_app_installation_id,
            )
        )
    except GitHubAuthenticationConfigurationUndefinedError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    ctx.obj["repo"] = repo
    ctx.obj["github_api_url"] = github_api_url
    ctx.obj["github_pat_token"] = github_pat_token
    ctx.obj["github_app_id"] = github_app_id
    ctx.obj["github_app_private_key_path"] = github_app_private_key_path
    ctx.obj["github_app_installation_id"] = github_app_installation_id
    ctx.obj["github_auth_type"] = github_auth_type
    ctx.obj["draft_store_path"] = draft_store_path


repo_app.callback()(repo_callback)


def _create_workspace(ctx: typer.Context) -> WorkspaceController:
    """Build the workspace of the repository in the current context."""

    async def create_adapter() -> GitHubKitAdapter:
        return await GitHubKitAdapter.create(
            repo=ctx.obj["repo"],
            github_auth_type=ctx.obj["github_auth_type"],
            github_pat_token=ctx.obj["github_pat_token"],
            github_app_id=ctx.obj["github_app_id"],
            github_app_private_key_path=ctx.obj["github_app_private_key_path"],
            github_app_installation_id=ctx.obj["github_app_installation_id"],
            github_api_url=ctx.obj["github_api_url"],
        )

    try:
        adapter = asyncio.run(create_adapter())
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    return WorkspaceController(adapter.owner, adapter.repo_name, adapter, _draft_store(ctx.obj["draft_store_path"]))


def _resume_workspace(ctx: typer.Context) -> WorkspaceController:
    """Build the workspace and load its latest draft, which must have items."""
    workspace = _create_workspace(ctx)
    workspace.resume()
    if workspace.draft is None or not workspace.items:
        typer.echo(f"No release items for {ctx.obj['repo']} yet. Run 'fetch' first.", err=True)
        raise typer.Exit(1)
    return workspace


@repo_app.command(name="status")
def status_cli(ctx: typer.Context) -> None:
    """Show the repository's milestones, tags, branches, and current draft."""
    workspace = _create_workspace(ctx)
    try:
        asyncio.run(workspace.open())
    except Exception as exc:
        typer.echo(f"Error loading repository {ctx.obj['repo']}: {exc}", err=True)
        raise typer.Exit(1) from exc

    repository = workspace.repository
    assert repository is not None
    typer.echo(f"Repository: {repository.full_name} ({repository.html_url})")
    if repository.description:
        typer.echo(f"Description: {repository.description}")
    typer.echo(f"Default branch: {repository.default_branch}")
    typer.echo("")

    typer.echo(f"Milestones ({len(workspace.milestones)}):")
    for milestone in workspace.milestones:
        due = f", due {milestone.due_on:%Y-%m-%d}" if milestone.due_on else ""
        typer.echo(f"  #{milestone.number} {milestone.title} [{milestone.state}{due}]")
    typer.echo(f"Tags ({len(workspace.tags)}): {', '.join(workspace.tags)}")
    typer.echo(f"Branches ({len(workspace.branches)}): {', '.join(workspace.branches)}")
    typer.echo("")

    if workspace.draft is None:
        typer.echo("No release draft yet. Run 'fetch' to start one.")
        return
    typer.echo(f"Draft: {workspace.draft.id} (step: {workspace.step.value})")
    typer.echo(f"  Version: {workspace.draft.version or '-'}")
    typer.echo(f"  Title: {workspace.draft.title or '-'}")
    for kind in ReleaseItemKind:
        typer.echo(f"  {kind.value}: {workspace.count(kind.value, included_only=True)}/{workspace.count(kind.value)} included")


@repo_app.command(name="fetch")
def fetch_cli(
    ctx: typer.Context,
    milestone: Annotated[int | None, Option("--milestone", help="Milestone number.")] = None,
    from_tag: Annotated[str | None, Option("--from-tag", help="Tag the release starts after.")] = None,
    to_tag: Annotated[str | None, Option("--to-tag", help="Tag the release ends at. Defaults to the latest commit.")] = None,
    from_date: Annotated[datetime | None, Option("--from-date", help="Start of the release window (UTC).")] = None,
    to_date: Annotated[datetime | None, Option("--to-date", help="End of the release window (UTC). Defaults to now.")] = None,
    base_branch: Annotated[str | None, Option("--base-branch", help="Branch the release is compared against.")] = None,
    compare_branch: Annotated[str | None, Option("--compare-branch", help="Branch holding the release's commits.")] = None,
) -> None:
    """Fetch the pull requests, issues, and commits selected by a release filter."""
    workspace = _create_workspace(ctx)

    async def fetch() -> None:
        await workspace.open()
        release_filter = build_release_filter(
            milestones=workspace.milestones,
            milestone=milestone,
            from_tag=from_tag,
            to_tag=to_tag,
            from_date=from_date,
            to_date=to_date,
            base_branch=base_branch,
            compare_branch=compare_branch,
        )
        await workspace.fetch_items(release_filter)

    try:
        asyncio.run(fetch())
    except (ConflictingFilterOptionsError, FilterNotUsableError, ValueError) as exc:
        typer.echo(f"Invalid release filter: {exc}", err=True)
        raise typer.Exit(1) from exc
    except ReleaseItemsFetchError as exc:
        typer.echo(f"{exc}. Check your credentials and access to {ctx.obj['repo']}, then try again.", err=True)
        raise typer.Exit(1) from exc
    except Exception as exc:
        typer.echo(f"Error loading repository {ctx.obj['repo']}: {exc}", err=True)
        raise typer.Exit(1) from exc

    assert workspace.draft is not None
    typer.echo(f"Fetched release items into draft {workspace.draft.id}:")
    typer.echo(f"  Pull requests: {workspace.count('pr')}")
    typer.echo(f"  Issues: {workspace.count('issue')}")
    typer.echo(f"  Commits: {workspace.count('commit')} (excluded by default)")


@repo_app.command(name="items")
def items_cli(
    ctx: typer.Context,
    item_type: Annotated[ReleaseItemKind | None, Option("--type", help="Only list items of this type.")] = None,
    search: Annotated[str, Option("--search", "-s", help="Only list items matching this text.")] = "",
    included_only: Annotated[bool, Option("--included-only", help="Only list included items.")] = False,
) -> None:
    """List the release items of the current draft."""
    workspace = _resume_workspace(ctx)
    kind = item_type.value if item_type else None
    items = workspace.search(search, item_type=kind)
    if included_only:
        items = [item for item in items if item.included]

    if not items:
        typer.echo("No matching release items.")
        return
    for item in items:
        typer.echo(_describe_item(item))
    typer.echo("")
    typer.echo(f"{workspace.included_count} of {len(workspace.items)} items included")


@repo_app.command(name="item")
def item_cli(
    ctx: typer.Context,
    item_id: Annotated[str, Argument(help="Item ID, e.g. 'pr-42' or 'commit-<sha>'.")],
    note: Annotated[str | None, Option("--note", help="Note shown under the item. Pass an empty string to clear it.")] = None,
    include: Annotated[bool | None, Option("--include/--exclude", help="Include or exclude the item.")] = None,
) -> None:
    """Annotate, include, or exclude one release item."""
    workspace = _resume_workspace(ctx)
    if not workspace.update_item(item_id, note=note, included=include):
        typer.echo(f"No release item with ID '{item_id}'.", err=True)
        raise typer.Exit(1)
    item = next(item for item in workspace.items if item.id == item_id)
    typer.echo(_describe_item(item))


@repo_app.command(name="select")
def select_cli(
    ctx: typer.Context,
    item_type: Annotated[ReleaseItemKind, Argument(help="Item type to include or exclude.")],
    include: Annotated[bool, Option("--include/--exclude", help="Include or exclude every item of the type.")] = True,
) -> None:
    """Include or exclude every release item of one type."""
    workspace = _resume_workspace(ctx)
    changed = workspace.set_inclusion(item_type.value, include)
    action = "Included" if include else "Excluded"
    typer.echo(f"{action} {changed} {item_type.value} item(s)")


@repo_app.command(name="meta")
def meta_cli(
    ctx: typer.Context,
    version: Annotated[str | None, Option("--version", help="Release version, e.g. 'v2.1.0'.")] = None,
    title: Annotated[str | None, Option("--title", help="Release title.")] = None,
    description: Annotated[str | None, Option("--description", help="Release description.")] = None,
) -> None:
    """Show or update the version, title, and description of the current draft."""
    workspace = _resume_workspace(ctx)
    draft = workspace.draft
    if version is not None or title is not None or description is not None:
        draft = workspace.update_metadata(version=version, title=title, description=description)
    assert draft is not None
    typer.echo(f"Version: {draft.version or '-'}")
    typer.echo(f"Title: {draft.title or '-'}")
    typer.echo(f"Description: {draft.description or '-'}")


@repo_app.command(name="export")
def export_cli(
    ctx: typer.Context,
    export_format: Annotated[ExportFormat, Option("--format", "-f", help="Export format.")] = ExportFormat.MARKDOWN,
    output: Annotated[Path | None, Option("--output", "-o", help="File or directory to write to. Defaults to stdout.")] = None,
) -> None:
    """Export the included release items as Markdown or JSON."""
    workspace = _resume_workspace(ctx)
    try:
        asyncio.run(workspace.load_repository())
    except Exception as exc:
        typer.echo(f"Error loading repository {ctx.obj['repo']}: {exc}", err=True)
        raise typer.Exit(1) from exc

    workspace.proceed_to_summary()
    try:
        content = workspace.render(export_format)
    except WorkspaceNotOpenError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    if output is None:
        typer.echo(content)
        return
    assert workspace.draft is not None
    if output.is_dir():
        output = output / export_filename(workspace.draft.version, export_format)
    output.write_text(content, encoding="utf-8")
    typer.echo(f"Wrote release notes to {output}")


@repo_app.command(name="drafts")
def repo_drafts_cli(ctx: typer.Context) -> None:
    """List the stored drafts of the repository."""
    workspace = _create_workspace(ctx)
    drafts = workspace.store.list_for_repo(workspace.owner, workspace.repo)
    if not drafts:
        typer.echo(f"No drafts for {ctx.obj['repo']}.")
        return
    for draft in sorted(drafts, key=lambda draft: draft.updated_at, reverse=True):
        typer.echo(f"{draft.id}  version={draft.version or '-'}  items={len(draft.items)}  updated={draft.updated_at.isoformat()}")


# --- Register the repo_app as a sub-app of the main Typer app ---
typer_app.add_typer(repo_app, name="repo")


# --- Typer group for draft storage maintenance ---
drafts_app = typer.Typer(help="Manage locally stored release drafts")


@drafts_app.command(name="list")
def drafts_list_cli(
    draft_store_path: Annotated[Path, Option(envvar="DRAFT_STORE_PATH", help="File holding release drafts.")] = settings.draft_store_path,
) -> None:
    """List every stored draft."""
    drafts = _draft_store(draft_store_path).list()
    if not drafts:
        typer.echo("No stored drafts.")
        return
    for draft in drafts:
        typer.echo(f"{draft.id}  {draft.owner}/{draft.repo}  items={len(draft.items)}  updated={draft.updated_at.isoformat()}")


@drafts_app.command(name="delete")
def drafts_delete_cli(
    draft_id: Annotated[str, Argument(help="ID of the draft to delete.")],
    draft_store_path: Annotated[Path, Option(envvar="DRAFT_STORE_PATH", help="File holding release drafts.")] = settings.draft_store_path,
) -> None:
    """Delete one stored draft."""
    store = _draft_store(draft_store_path)
    if store.get(draft_id) is None:
        typer.echo(f"No draft with ID '{draft_id}'.", err=True)
        raise typer.Exit(1)
    store.delete(draft_id)
    typer.echo(f"Deleted draft {draft_id}")


@drafts_app.command(name="clear")
def drafts_clear_cli(
    draft_store_path: Annotated[Path, Option(envvar="DRAFT_STORE_PATH", help="File holding release drafts.")] = settings.draft_store_path,
    yes: Annotated[bool, Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
) -> None:
    """Delete every stored draft."""
    if not yes:
        typer.confirm("Delete every stored release draft?", abort=True)
    _draft_store(draft_store_path).clear()
    typer.echo("Cleared stored drafts")


typer_app.add_typer(drafts_app, name="drafts")


if __name__ == "__main__":
    typer_app()

"""CLI entry point for inspecting and publishing a breeder storefront."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Confirm
from rich.status import Status
from rich.table import Table

from .editor import StorefrontEditor, open_editor
from .merger import merge_profiles
from .models import PublishStatus, TenantContext
from .publish import check_publish_ready

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _print_issues(state: dict) -> bool:
    issues = check_publish_ready(state)
    if not issues:
        console.print("[bold green]Ready to publish.[/]")
        return True
    for issue in issues:
        console.print(f"[bold red]{issue.field}:[/] {issue.message}")
    return False


def _print_editor(editor: StorefrontEditor) -> None:
    status = "[bold green]published[/]" if editor.is_published else "[yellow]unpublished[/]"
    console.print(f"\n[bold]{editor.form.get('businessName') or '(no business name)'}[/] - {status}")
    if editor.published_at:
        console.print(f"Published at {editor.published_at}")
    if editor.draft_updated_at:
        console.print(f"Draft updated at {editor.draft_updated_at}")

    table = Table(title="Breeds")
    table.add_column("#", justify="right")
    table.add_column("Breed")
    table.add_column("Species")
    table.add_column("Visibility")
    table.add_column("Removable")
    for i, breed in enumerate(editor.form.get("breeds", [])):
        check = editor.can_remove_breed(breed["name"])
        table.add_row(
            str(i),
            breed["name"],
            breed["species"],
            "public" if breed.get("isPublic") else "unlisted",
            "yes" if check.allowed else f"no - {check.reason}",
        )
    console.print(table)
    _print_issues(editor.form)


async def _load(context: TenantContext) -> StorefrontEditor:
    with Status("[bold cyan]Loading profile...[/]", console=console):
        editor, result = await open_editor(context)
    if not result.ok:
        raise RuntimeError(result.message)
    return editor


async def _show(args) -> int:
    editor = await _load(TenantContext.from_env())
    _print_editor(editor)
    return 0


def _check(args) -> int:
    data = json.loads(Path(args.file).read_text(encoding="utf-8"))
    form = merge_profiles(data.get("published"), data.get("draft"))
    console.print_json(json.dumps(form))
    status = PublishStatus.from_published_at(data.get("publishedAt"))
    console.print(f"Status: {status.value}")
    return 0 if _print_issues(form) else 1


async def _publish(args) -> int:
    editor = await _load(TenantContext.from_env())
    with Status("[bold cyan]Publishing...[/]", console=console):
        result = await editor.publish()
    if not result.ok:
        for issue in result.issues:
            console.print(f"[bold red]{issue.field}:[/] {issue.message}")
        if not result.issues:
            console.print(f"[bold red]Error:[/] {result.message}")
        return 1
    console.print(f"\n[bold green]Done![/] Published at {editor.published_at}\n")
    return 0


async def _unpublish(args) -> int:
    editor = await _load(TenantContext.from_env())
    if not editor.is_published:
        console.print("[yellow]Storefront is not published.[/]")
        return 0

    def confirm(prompt: str) -> bool:
        return args.yes or Confirm.ask(prompt, console=console)

    result = await editor.unpublish(confirm)
    if not result.ok:
        console.print(f"[bold red]Error:[/] {result.message}")
        return 1
    console.print("\n[bold green]Done![/] Storefront removed from the marketplace.\n")
    return 0


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="storefront-profile",
        description="Inspect, check and publish a breeder's marketplace storefront.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="Show the merged profile, breeds and publish readiness")

    check = sub.add_parser("check", help="Merge and check a saved {published, draft} JSON file")
    check.add_argument("file", type=Path, help="JSON file with published/draft/publishedAt keys")

    sub.add_parser("publish", help="Publish the current profile")

    unpublish = sub.add_parser("unpublish", help="Remove the storefront from the marketplace")
    unpublish.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    args = parser.parse_args()
    _setup_logging(args.verbose)

    try:
        if args.command == "check":
            code = _check(args)
        else:
            handler = {"show": _show, "publish": _publish, "unpublish": _unpublish}[args.command]
            code = asyncio.run(handler(args))
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n[bold red]Error:[/] {e}\n")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()

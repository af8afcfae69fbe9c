"""Command-line interface for Scribe.

Administrative commands over a ScribeSession: inspect and page through
posts, create and delete posts, upload files and rebuild the indices.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from scribe.core.blog import UNPUBLISHED, Post, ScribeError
from scribe.core.config import AppConfig, configure_logging, load_app_config
from scribe.core.session import ScribeSession
from scribe.core.storage import ObjectNotFoundError

console = Console()
logger = logging.getLogger(__name__)

Command = Callable[[ScribeSession, argparse.Namespace], Awaitable[int]]


def _format_pub_date(post: Post) -> str:
    if post.pub_date == UNPUBLISHED:
        return "[yellow]draft[/yellow]"
    return post.pub_date.strftime("%Y-%m-%d %H:%M")


async def cmd_rebuild(session: ScribeSession, args: argparse.Namespace) -> int:
    await session.engine.rebuild_indices()
    console.print(
        f"[green]✅ Rebuilt indices:[/green] {len(session.engine.summaries)} posts, "
        f"{len(session.engine.categories)} categories"
    )
    return 0


async def cmd_posts(session: ScribeSession, args: argparse.Namespace) -> int:
    page = await session.blog.list_posts_paged(
        page_number=args.page,
        page_size=args.page_size,
        category=args.category,
        is_admin=args.admin,
    )

    table = Table(title=f"Posts (page {page.page_number} of {max(page.total_pages, 1)})")
    table.add_column("ID", style="dim")
    table.add_column("Title")
    table.add_column("Slug")
    table.add_column("Published")
    table.add_column("Categories")
    for post in page.items:
        table.add_row(
            post.id, post.title, post.slug, _format_pub_date(post), ", ".join(post.categories)
        )

    console.print(table)
    console.print(f"{page.total_items} posts total")
    return 0


async def cmd_categories(session: ScribeSession, args: argparse.Namespace) -> int:
    labels = await session.blog.get_categories(is_admin=args.admin)
    if not labels:
        console.print("[dim]No categories[/dim]")
        return 0
    for label in labels:
        console.print(f"- {label}")
    return 0


async def cmd_show(session: ScribeSession, args: argparse.Namespace) -> int:
    post = await session.blog.get_post_by_slug(args.slug, is_admin=True)
    if post is None:
        console.print(f"[red]ERROR: No post with slug '{args.slug}'[/red]")
        return 1

    console.print(f"[bold]{post.title}[/bold]")
    console.print(f"   ID: {post.id}")
    console.print(f"   Link: {post.get_link()}")
    console.print(f"   Published: {_format_pub_date(post)}")
    if post.categories:
        console.print(f"   Categories: {', '.join(post.categories)}")
    console.print(f"   Comments: {len(post.comments)}")
    console.print()
    console.print(post.content, markup=False)
    return 0


async def cmd_new(session: ScribeSession, args: argparse.Namespace) -> int:
    content = ""
    if args.content_file:
        content = Path(args.content_file).read_text(encoding="utf-8")

    post = await session.blog.create_post(
        args.title,
        content,
        excerpt=args.excerpt or "",
        categories=args.category or [],
        publish=args.publish,
    )
    state = "published" if args.publish else "draft"
    console.print(f"[green]✅ Created {state} post[/green] {post.id} ({post.slug})")
    return 0


async def cmd_delete(session: ScribeSession, args: argparse.Namespace) -> int:
    post = await session.blog.get_post_by_id(args.id, is_admin=True)
    if post is None:
        console.print(f"[red]ERROR: No post with id '{args.id}'[/red]")
        return 1

    await session.blog.delete_post(post)
    console.print(f"[green]✅ Deleted post[/green] {post.id} ({post.slug})")
    return 0


async def cmd_upload(session: ScribeSession, args: argparse.Namespace) -> int:
    path = Path(args.file)
    if not path.is_file():
        console.print(f"[red]ERROR: File not found: {path}[/red]")
        return 1

    uri = await session.blog.save_file(path.read_bytes(), path.name, args.suffix)
    console.print(f"[green]✅ Uploaded[/green] {uri}")
    return 0


COMMANDS: dict[str, Command] = {
    "rebuild": cmd_rebuild,
    "posts": cmd_posts,
    "categories": cmd_categories,
    "show": cmd_show,
    "new": cmd_new,
    "delete": cmd_delete,
    "upload": cmd_upload,
}


async def run_command_async(config: AppConfig, args: argparse.Namespace) -> int:
    """Run one command inside a started session.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    async with ScribeSession(app_config=config) as session:
        return await COMMANDS[args.cmd](session, args)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="scribe",
        description="Scribe - blog post storage and cache administration",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to app config (.json/.yaml; default: config.json if present)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("rebuild", help="Rebuild the summary and category indices from post records")

    posts = sub.add_parser("posts", help="List posts, newest first")
    posts.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    posts.add_argument("--page-size", type=int, default=None, help="Posts per page")
    posts.add_argument("--category", default=None, help="Only posts in this category")
    posts.add_argument("--admin", action="store_true", help="Include unpublished posts")

    categories = sub.add_parser("categories", help="List categories")
    categories.add_argument("--admin", action="store_true", help="Include draft-only categories")

    show = sub.add_parser("show", help="Show a post by slug")
    show.add_argument("slug")

    new = sub.add_parser("new", help="Create a post")
    new.add_argument("--title", required=True, help="Post title")
    new.add_argument("--content-file", default=None, help="File holding the post body")
    new.add_argument("--excerpt", default=None, help="Short teaser")
    new.add_argument(
        "--category", action="append", default=None, help="Category label (repeatable)"
    )
    new.add_argument("--publish", action="store_true", help="Publish immediately")

    delete = sub.add_parser("delete", help="Delete a post by id")
    delete.add_argument("id")

    upload = sub.add_parser("upload", help="Upload a file to the files container")
    upload.add_argument("file")
    upload.add_argument("--suffix", default=None, help="Name suffix (default: timestamp)")

    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    args = build_arg_parser().parse_args(argv)

    try:
        config = load_app_config(args.config)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: Could not load config: {e}[/red]")
        return 1

    configure_logging(config)

    try:
        return asyncio.run(run_command_async(config, args))
    except (ScribeError, ObjectNotFoundError, OSError, ValueError) as e:
        logger.exception(f"Command '{args.cmd}' failed")
        console.print(f"[red]ERROR: {e}[/red]")
        return 1

"""notedex CLI — notes in flat text files with tag and author indexes.

Commands:
    notedex init                    create notedex.toml + storage dirs
    notedex add TITLE [-t TAG ...]  create a note
    notedex show ID                 print one note
    notedex list                    one line per readable note
    notedex tag NAME                notes carrying a tag
    notedex author ID               notes written by an author
    notedex tags                    every tag with its entry count
    notedex check                   report stale index entries
"""

from __future__ import annotations

import contextlib
import logging
import uuid
from typing import TYPE_CHECKING

import click

from notedex.config import NotedexConfig, init_config, load_config
from notedex.errors import BlankTag, NotedexError
from notedex.queries import NoteQueries, parse_note_id

if TYPE_CHECKING:
    from collections.abc import Iterator

    from notedex.models import Note

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@contextlib.contextmanager
def _errors() -> Iterator[None]:
    try:
        yield
    except NotedexError as exc:
        raise click.ClickException(str(exc)) from exc


def _cfg(ctx: click.Context) -> NotedexConfig:
    return ctx.obj["cfg"]


def _queries(ctx: click.Context) -> NoteQueries:
    return NoteQueries.from_config(_cfg(ctx))


def _echo_note(note: Note) -> None:
    click.echo(f"# {note.title}  [{note.note_id}]")
    click.echo(f"author {note.author_id}  created {note.created_at.isoformat(timespec='seconds')}")
    click.echo(f"tags: {', '.join(note.tags) if note.tags else '-'}")
    if note.content:
        click.echo("")
        click.echo(note.content)


def _echo_previews(notes: list[Note], empty: str) -> None:
    if not notes:
        click.echo(empty)
        return
    for note in notes:
        click.echo(note.preview())
    click.echo(f"[{len(notes)} total]")


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="notedex")
@click.option("--root", default=".", show_default=True, help="Storage root")
@click.option("-v", "--verbose", is_flag=True, help="Log store activity to stderr")
@click.pass_context
def cli(ctx: click.Context, root: str, verbose: bool) -> None:
    """notedex — notes in flat files."""
    try:
        cfg = load_config(root)
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc
    level = logging.INFO if verbose else cfg.log_level_number
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(message)s")
    logging.getLogger("notedex").setLevel(level)
    ctx.obj = {"cfg": cfg}


# ---------------------------------------------------------------------------
# notedex init
# ---------------------------------------------------------------------------


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create notedex.toml and the storage directories."""
    cfg = _cfg(ctx)
    try:
        config_path = init_config(cfg.root)
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("notedex.toml already exists — skipping init")

    cfg = load_config(cfg.root)
    cfg.ensure_dirs()
    click.echo(f"Notes dir   : {cfg.notes_dir}")
    click.echo(f"Tags dir    : {cfg.tags_dir}")
    click.echo(f"Authors dir : {cfg.authors_dir}")


# ---------------------------------------------------------------------------
# notedex add / show / list
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("title")
@click.option("--content", "-c", default="", help="Note body (single line)")
@click.option("--author", "-a", "author_id", type=int, default=0, show_default=True)
@click.option("--tag", "-t", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--id", "note_id", default=None, help="Note id (default: new UUID)")
@click.pass_context
def add(ctx: click.Context, title: str, content: str, author_id: int, tags: tuple[str, ...], note_id: str | None) -> None:
    """Create a note and print its id."""
    with _errors():
        nid = parse_note_id(note_id) if note_id else uuid.uuid4()
        _queries(ctx).create(title, content, author_id, note_id=nid, tags=list(tags))
    click.echo(str(nid))


@cli.command()
@click.argument("note_id")
@click.pass_context
def show(ctx: click.Context, note_id: str) -> None:
    """Print one note."""
    with _errors():
        note = _queries(ctx).get(note_id)
    if note is None:
        raise click.ClickException(f"Note not found: {note_id}")
    _echo_note(note)


@cli.command("list")
@click.pass_context
def list_notes(ctx: click.Context) -> None:
    """List every readable note (unreadable records are skipped)."""
    with _errors():
        notes = _queries(ctx).list_all()
    _echo_previews(notes, "No notes found.")


# ---------------------------------------------------------------------------
# notedex tag / author / tags
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("name")
@click.pass_context
def tag(ctx: click.Context, name: str) -> None:
    """Notes carrying tag NAME (case-insensitive)."""
    try:
        notes = _queries(ctx).get_by_tag(name)
    except BlankTag as exc:
        raise click.BadParameter(str(exc), param_hint="NAME") from exc
    except NotedexError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_previews(notes, f"No notes found for tag: {name}")


@cli.command()
@click.argument("author_id", type=int)
@click.option("--ids", is_flag=True, help="Print note ids only")
@click.pass_context
def author(ctx: click.Context, author_id: int, ids: bool) -> None:
    """Notes written by AUTHOR_ID, oldest first."""
    queries = _queries(ctx)
    with _errors():
        if ids:
            for nid in queries.get_by_author(author_id):
                click.echo(str(nid))
            return
        notes = queries.notes_by_author(author_id)
    _echo_previews(notes, f"No notes found for author {author_id}")


@cli.command()
@click.pass_context
def tags(ctx: click.Context) -> None:
    """Every tag with the number of notes indexed under it."""
    with _errors():
        counts = _queries(ctx).tag_counts()
    if not counts:
        click.echo("No tags.")
        return
    width = max(len(name) for name in counts)
    for name, n in counts.items():
        click.echo(f"{name:<{width}}  {n}")


# ---------------------------------------------------------------------------
# notedex check
# ---------------------------------------------------------------------------


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Report index entries that point at missing or unreadable notes."""
    with _errors():
        stale = _queries(ctx).stale_entries()
    if not stale:
        click.echo("All index entries resolve.")
        return
    for entry in stale:
        click.echo(f"{entry.index:<6}  {entry.key}  {entry.note_id or '-'}  {entry.reason}")
    click.echo(f"[{len(stale)} stale]")
    raise SystemExit(1)


if __name__ == "__main__":
    cli()

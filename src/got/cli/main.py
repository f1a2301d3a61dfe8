"""Main CLI entry point for Got."""

import logging
import os
import socket
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from got.constants import (
    AUTHOR_ENV_VAR,
    EXIT_DATA_ERROR,
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    GOT_DIR,
    HASH_LENGTH,
)
from got.core import (
    InlineMessageSource,
    MessageSource,
    TreeBuilder,
    find_repository,
    init_repository,
    load_ignore_names,
)
from got.storage import Commit, CommitBuilder, Kind, ObjectStore, Record
from got.storage import codec
from got.storage.commit_builder import decode_commit
from got.storage.digest import digest_of
from got.storage.errors import (
    DanglingParentReferenceError,
    DanglingTreeReferenceError,
    GotError,
    ObjectFormatError,
    ObjectNotFoundError,
)
from got.storage.tree_codec import decode_entries

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)
app = typer.Typer(
    name="got",
    help="Content-addressed object store using Git's loose-object format",
    add_completion=False,
)


class PromptMessageSource(MessageSource):
    """Asks for the commit message on the terminal."""

    def get_message(self) -> str:
        return typer.prompt("Commit message")


def _fail(e: Exception) -> None:
    """Report an error and exit with a code matching its category."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", style="red")
    if isinstance(e, ObjectFormatError):
        raise typer.Exit(EXIT_DATA_ERROR)
    if isinstance(e, OSError):
        raise typer.Exit(EXIT_SYSTEM_ERROR)
    raise typer.Exit(EXIT_USER_ERROR)


def _open_store() -> ObjectStore:
    """Find the enclosing repository or exit with an error."""
    workspace_root = find_repository(Path.cwd())
    if workspace_root is None:
        err_console.print(
            "[bold red]Error:[/bold red] Not a Got repository",
            style="red",
        )
        err_console.print(
            f"  No {GOT_DIR}/ directory found in {escape(str(Path.cwd()))} or its parents",
            style="dim",
        )
        err_console.print(
            "\nRun [bold]got init[/bold] to initialize a repository",
            style="yellow",
        )
        raise typer.Exit(EXIT_USER_ERROR)
    return ObjectStore(workspace_root / GOT_DIR)


def _expand(store: ObjectStore, digest: str, error_cls, label: str) -> str:
    """Resolve abbreviated digests; full ones pass through unchecked.

    A short digest that matches nothing is reported with the same dangling
    reference error the commit builder raises for a missing full digest.
    """
    if len(digest) == HASH_LENGTH:
        return digest
    try:
        return store.resolve(digest)
    except ObjectNotFoundError as e:
        raise error_cls(f"{label} {digest} does not exist: {e}") from e


def _default_author() -> str:
    author = os.getenv(AUTHOR_ENV_VAR)
    if author:
        return author
    hostname = socket.gethostname()
    username = os.getenv("USER") or os.getenv("USERNAME") or "unknown"
    return f"{username}@{hostname}"


def _format_tree(payload: bytes, name_only: bool = False) -> str:
    lines = []
    for entry in decode_entries(payload):
        if name_only:
            lines.append(entry.display_name)
        else:
            lines.append(
                f"{entry.mode.value} {entry.kind.value} {entry.digest}\t{entry.display_name}"
            )
    return "\n".join(lines)


def _format_commit(commit: Commit) -> str:
    lines = [f"tree {commit.tree}"]
    if commit.parent:
        lines.append(f"parent {commit.parent}")
    lines.append(f"author {commit.author}")
    lines.append(f"timestamp {commit.timestamp}")
    lines.append("")
    lines.append(commit.message)
    return "\n".join(lines)


def _check_payload(kind: Kind, payload: bytes) -> None:
    """Reject tree and commit payloads that would not decode when read back."""
    if kind is Kind.TREE:
        decode_entries(payload)
    elif kind is Kind.COMMIT:
        decode_commit(payload)


def _pretty_print(record: Record) -> None:
    if record.kind is Kind.TREE:
        text = _format_tree(record.payload)
        if text:
            typer.echo(text)
    elif record.kind is Kind.COMMIT:
        typer.echo(_format_commit(decode_commit(record.payload)))
    else:
        typer.echo(record.payload, nl=False)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log object store activity to stderr",
    ),
) -> None:
    """Content-addressed object store using Git's loose-object format."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def version() -> None:
    """Show Got version."""
    from got import __version__
    typer.echo(f"Got version {__version__}")


@app.command()
def init(
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress output except errors",
    ),
) -> None:
    """Initialize a Got repository in the current directory."""
    workspace_root = Path.cwd()
    try:
        got_dir = init_repository(workspace_root)
    except (GotError, OSError) as e:
        _fail(e)

    if not quiet:
        console.print(
            f"[bold green]✓[/bold green] Initialized Got repository in {escape(str(got_dir))}"
        )


@app.command("cat-file")
def cat_file(
    digest: str = typer.Argument(..., help="Object digest (4 or more hex characters)"),
    pretty_print: bool = typer.Option(
        False,
        "-p",
        help="Pretty-print the object's content",
    ),
    show_type: bool = typer.Option(
        False,
        "-t",
        help="Show the object's kind",
    ),
    show_size: bool = typer.Option(
        False,
        "-s",
        help="Show the object's payload size",
    ),
) -> None:
    """Show the content, kind or size of a stored object."""
    if sum((pretty_print, show_type, show_size)) != 1:
        err_console.print(
            "[bold red]Error:[/bold red] Exactly one of -p, -t or -s is required",
            style="red",
        )
        raise typer.Exit(EXIT_USER_ERROR)

    store = _open_store()
    try:
        record = store.read(store.resolve(digest))
        if show_type:
            typer.echo(record.kind.value)
        elif show_size:
            typer.echo(str(record.size))
        else:
            _pretty_print(record)
    except (GotError, OSError) as e:
        _fail(e)


@app.command("hash-object")
def hash_object(
    path: Path = typer.Argument(..., help="File whose content is hashed"),
    write: bool = typer.Option(
        False,
        "-w",
        help="Write the object into the store",
    ),
    kind: str = typer.Option(
        "blob",
        "-t",
        help="Object kind: blob, tree, commit or tag",
    ),
) -> None:
    """Compute the digest of a file's content, optionally storing it."""
    try:
        object_kind = Kind.parse(kind)
        content = path.read_bytes()
        _check_payload(object_kind, content)
    except (GotError, OSError) as e:
        _fail(e)

    if write:
        store = _open_store()
        try:
            digest = store.write(object_kind, content)
        except OSError as e:
            _fail(e)
    else:
        digest = digest_of(codec.encode(object_kind, content))

    typer.echo(digest)


@app.command("ls-tree")
def ls_tree(
    tree: str = typer.Argument(..., help="Tree (or commit) digest"),
    name_only: bool = typer.Option(
        False,
        "--name-only",
        help="List only entry names",
    ),
) -> None:
    """List the entries of a tree object."""
    store = _open_store()
    try:
        record = store.read(store.resolve(tree))
        if record.kind is Kind.COMMIT:
            record = store.read(decode_commit(record.payload).tree)
        if record.kind is not Kind.TREE:
            err_console.print(
                f"[bold red]Error:[/bold red] {escape(tree)} is a {record.kind.value}, not a tree",
                style="red",
            )
            raise typer.Exit(EXIT_USER_ERROR)

        text = _format_tree(record.payload, name_only=name_only)
    except (GotError, OSError) as e:
        _fail(e)

    if text:
        typer.echo(text)


@app.command("write-tree")
def write_tree() -> None:
    """Write the working directory as tree objects and print the root digest."""
    store = _open_store()
    workspace_root = store.got_dir.parent
    try:
        ignore = load_ignore_names(workspace_root)
        digest = TreeBuilder(store).build(workspace_root, ignore)
    except (GotError, OSError) as e:
        _fail(e)

    typer.echo(digest)


@app.command("commit-tree")
def commit_tree(
    tree: str = typer.Argument(..., help="Tree digest to commit"),
    parent: Optional[str] = typer.Option(
        None,
        "--parent",
        "-p",
        help="Parent commit digest",
    ),
    message: Optional[str] = typer.Option(
        None,
        "--message",
        "-m",
        help="Commit message (prompted for if omitted)",
    ),
    author: Optional[str] = typer.Option(
        None,
        "--author",
        help="Override default author (format: name@host)",
    ),
) -> None:
    """Create a commit object for a tree and print its digest."""
    store = _open_store()
    source = InlineMessageSource(message) if message is not None else PromptMessageSource()

    try:
        tree_digest = _expand(store, tree, DanglingTreeReferenceError, "Tree")
        parent_digest = (
            _expand(store, parent, DanglingParentReferenceError, "Parent")
            if parent
            else None
        )
        digest = CommitBuilder(store).build(
            tree_digest,
            parent_digest,
            author=author or _default_author(),
            message=source.get_message(),
        )
    except (GotError, OSError, ValueError) as e:
        _fail(e)

    typer.echo(digest)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

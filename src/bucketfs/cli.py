"""Command-line interface for bucketfs.

Commands:
    - ls: List a directory
    - cat: Print a file
    - put: Upload a local file
    - rm / rmdir / mkdir: Delete files, delete or create directories
    - cp / mv: Copy or move a file
    - stat: Show file metadata
    - visibility: Show or change a file's visibility
    - url / presign: Print a public or a time-limited signed URL

Connection options go before the command:
    bucketfs --bucket media --aws-profile prod ls images --recursive
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer

from . import __version__
from .adapter import ObjectStorageAdapter, create_adapter
from .cli_params import (
    AccessKeyOption,
    AwsProfileOption,
    BucketOption,
    DomainOption,
    EndpointUrlOption,
    LogLevelOption,
    PrefixOption,
    RecursiveOption,
    RegionOption,
    SecretKeyOption,
    SessionTokenOption,
    VisibilityOption,
)
from .core.exceptions import BucketFSError
from .core.observability import setup_logging
from .schemas import S3StorageConfig, WriteConfig

app = typer.Typer(
    name="bucketfs",
    help="Filesystem-style access to S3-compatible object storage.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"bucketfs {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    bucket: BucketOption = None,
    prefix: PrefixOption = "",
    domain: DomainOption = None,
    access_key_id: AccessKeyOption = None,
    secret_access_key: SecretKeyOption = None,
    session_token: SessionTokenOption = None,
    region_name: RegionOption = "us-east-1",
    endpoint_url: EndpointUrlOption = None,
    aws_profile: AwsProfileOption = None,
    log_level: LogLevelOption = None,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    bucketfs: files and directories on top of an object storage bucket.
    """
    if log_level:
        try:
            setup_logging(log_level)
        except BucketFSError as e:
            _fail(str(e))

    ctx.obj = {
        "bucket": bucket,
        "prefix": prefix,
        "domain": domain,
        "access_key_id": access_key_id,
        "secret_access_key": secret_access_key,
        "session_token": session_token,
        "region_name": region_name,
        "endpoint_url": endpoint_url,
        "aws_profile": aws_profile,
    }


def _adapter(ctx: typer.Context) -> ObjectStorageAdapter:
    """Build the adapter from the connection options."""
    options = dict(ctx.obj or {})
    if not options.get("bucket"):
        typer.echo("Error: --bucket is required", err=True)
        raise typer.Exit(1)
    try:
        return create_adapter(S3StorageConfig(**options))
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


@app.command("ls")
def list_cmd(
    ctx: typer.Context,
    directory: Annotated[str, typer.Argument(help="Directory to list")] = "",
    recursive: RecursiveOption = False,
) -> None:
    """
    List the contents of a directory.

    Examples:
        bucketfs --bucket media ls images
        bucketfs --bucket media ls images --recursive
    """
    adapter = _adapter(ctx)
    try:
        entries = adapter.list_contents(directory, recursive, raise_on_error=True)
    except BucketFSError as e:
        _fail(str(e))

    for entry in entries:
        if entry.is_dir:
            typer.echo(f"{'DIR':>12}  {entry.path}/")
        else:
            typer.echo(f"{entry.size or 0:>12,}  {entry.path}")


@app.command("cat")
def cat_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File to print")],
) -> None:
    """Print a file to standard output."""
    result = _adapter(ctx).read(path)
    if result is None:
        _fail(f"cannot read {path}")
    typer.echo(result.contents, nl=False)


@app.command("put")
def put_cmd(
    ctx: typer.Context,
    source: Annotated[Path, typer.Argument(help="Local file to upload", exists=True)],
    path: Annotated[str, typer.Argument(help="Destination path")],
    visibility: VisibilityOption = None,
    content_type: Annotated[
        Optional[str], typer.Option("--content-type", help="Content type to store")
    ] = None,
) -> None:
    """Upload a local file."""
    headers = {"ContentType": content_type} if content_type else {}
    with source.open("rb") as stream:
        result = _adapter(ctx).write_stream(
            path, stream, WriteConfig(visibility=visibility, headers=headers)
        )
    if result is None:
        _fail(f"cannot write {path}")
    typer.echo(f"Wrote {result.size:,} bytes to {result.path}")


@app.command("rm")
def delete_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File to delete")],
) -> None:
    """Delete a file."""
    if not _adapter(ctx).delete(path):
        _fail(f"cannot delete {path}")


@app.command("rmdir")
def delete_dir_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Directory to delete")],
) -> None:
    """Delete a directory and everything below it."""
    if not _adapter(ctx).delete_dir(path):
        _fail(f"cannot delete directory {path}")


@app.command("mkdir")
def create_dir_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Directory to create")],
    visibility: VisibilityOption = None,
) -> None:
    """Create a directory."""
    if _adapter(ctx).create_dir(path, WriteConfig(visibility=visibility)) is None:
        _fail(f"cannot create directory {path}")


@app.command("cp")
def copy_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Source file")],
    new_path: Annotated[str, typer.Argument(help="Destination file")],
) -> None:
    """Copy a file."""
    if not _adapter(ctx).copy(path, new_path):
        _fail(f"cannot copy {path} to {new_path}")


@app.command("mv")
def move_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Source file")],
    new_path: Annotated[str, typer.Argument(help="Destination file")],
) -> None:
    """Move a file."""
    if not _adapter(ctx).rename(path, new_path):
        _fail(f"cannot move {path} to {new_path}")


@app.command("stat")
def stat_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File to inspect")],
) -> None:
    """Show file metadata."""
    entry = _adapter(ctx).get_metadata(path)
    if entry is None:
        _fail(f"cannot stat {path}")

    typer.echo(f"Path: {entry.path}")
    typer.echo(f"Type: {entry.kind}")
    typer.echo(f"Size: {entry.size or 0:,} bytes")
    typer.echo(f"Content type: {entry.mimetype or '-'}")
    if entry.timestamp is not None:
        modified = datetime.fromtimestamp(entry.timestamp, tz=timezone.utc)
        typer.echo(f"Modified: {modified.isoformat()}")


@app.command("visibility")
def visibility_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File to inspect or change")],
    set_to: Annotated[
        Optional[str], typer.Option("--set", help="New visibility label")
    ] = None,
) -> None:
    """Show or change the visibility of a file."""
    adapter = _adapter(ctx)
    if set_to is not None:
        result = adapter.set_visibility(path, set_to)
    else:
        result = adapter.get_visibility(path)
    if result is None:
        _fail(f"cannot access visibility of {path}")
    typer.echo(f"{result.path}: {result.visibility}")


@app.command("url")
def url_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File path")],
) -> None:
    """Print the public URL of a file."""
    typer.echo(_adapter(ctx).get_url(path))


@app.command("presign")
def presign_cmd(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="File path")],
    expires: Annotated[
        int, typer.Option("--expires", help="URL lifetime in seconds")
    ] = 3600,
) -> None:
    """Print a time-limited signed URL for a file."""
    try:
        url = _adapter(ctx).temporary_url(path, expires)
    except BucketFSError as e:
        _fail(str(e))
    if url is None:
        _fail(f"cannot sign URL for {path}")
    typer.echo(url)


if __name__ == "__main__":
    app()

# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Command line interface: ``pcloud-stream``.

Thin Click wrappers around PCloudClient and RemoteFile, useful for smoke
testing a token or copying files between remote paths.

Usage:
    export PCLOUD_TOKEN=...
    pcloud-stream ls /
    pcloud-stream new /example.txt "Hello, World!"
    pcloud-stream copy /example.txt /example_copy.txt --chunked
    pcloud-stream rm /example_copy.txt
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

import click

from .config import pcloud_config_from_env
from .errors import PCloudError
from .http_client import PCloudClient
from .stream_file import RemoteFile, WritePolicy


def _client(ctx: click.Context) -> PCloudClient:
    return ctx.obj


def _fail(exc: PCloudError) -> click.ClickException:
    return click.ClickException(str(exc))


@click.group()
@click.version_option(package_name="pcloud-stream")
@click.option("--token", envvar="PCLOUD_TOKEN", help="pCloud bearer token")
@click.option("--base-url", envvar="PCLOUD_BASE_URL", help="API base URL")
@click.option("--verbose", "-v", is_flag=True, help="Log every API call")
@click.pass_context
def cli(ctx: click.Context, token: str | None, base_url: str | None, verbose: bool) -> None:
    """pcloud-stream: stream files to and from pCloud."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    client = PCloudClient(base_url, token=token, config=pcloud_config_from_env())
    ctx.obj = client
    ctx.call_on_close(client.close)


@cli.command("userinfo")
@click.pass_context
def userinfo_cmd(ctx: click.Context) -> None:
    """Print account information as JSON."""
    try:
        info = _client(ctx).userinfo()
    except PCloudError as exc:
        raise _fail(exc) from exc
    click.echo(json.dumps(info, indent=2))


@cli.command("ls")
@click.argument("path", default="/")
@click.pass_context
def ls_cmd(ctx: click.Context, path: str) -> None:
    """List the children of a folder."""
    try:
        paths = _client(ctx).list_folder(path)
    except PCloudError as exc:
        raise _fail(exc) from exc
    for child in paths:
        click.echo(child)


@cli.command("stat")
@click.argument("path")
@click.pass_context
def stat_cmd(ctx: click.Context, path: str) -> None:
    """Show metadata of a remote file."""
    try:
        f = RemoteFile(_client(ctx), path)
    except PCloudError as exc:
        raise _fail(exc) from exc
    click.echo(f"path:     {f.path}")
    click.echo(f"id:       {f.id}")
    click.echo(f"name:     {f.name}")
    click.echo(f"size:     {f.size_bytes}")
    click.echo(f"modified: {f.modified_at}")
    click.echo(f"created:  {f.created_at}")
    click.echo(f"folder:   {f.is_folder}")


@cli.command("new")
@click.argument("path")
@click.argument("text")
@click.pass_context
def new_cmd(ctx: click.Context, path: str, text: str) -> None:
    """Create PATH if needed and write TEXT to it."""
    try:
        with RemoteFile.create(_client(ctx), path, write_policy=WritePolicy.IMMEDIATE) as f:
            n = f.write(text.encode())
    except PCloudError as exc:
        raise _fail(exc) from exc
    click.echo(f"Wrote {n} bytes to {path}")


@cli.command("copy")
@click.argument("src")
@click.argument("dst")
@click.option("--chunked", is_flag=True, help="Buffer writes into chunks")
@click.option("--chunk-size", type=int, default=None, help="Chunk size in bytes")
@click.pass_context
def copy_cmd(
    ctx: click.Context, src: str, dst: str, chunked: bool, chunk_size: int | None
) -> None:
    """Stream-copy remote file SRC into remote file DST."""
    client = _client(ctx)
    policy = WritePolicy.CHUNKED if chunked else WritePolicy.IMMEDIATE
    try:
        with RemoteFile(client, src, chunk_size=chunk_size) as source, RemoteFile.create(
            client, dst, write_policy=policy, chunk_size=chunk_size
        ) as target:
            before = target.size_bytes
            shutil.copyfileobj(source, target, source.chunk_size)
            target.flush()
            copied = target.size_bytes - before
    except PCloudError as exc:
        raise _fail(exc) from exc
    click.echo(f"Copied {copied} bytes from {src} to {dst}")


@cli.command("upload")
@click.argument("local_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("folder")
@click.pass_context
def upload_cmd(ctx: click.Context, local_file: Path, folder: str) -> None:
    """Upload LOCAL_FILE into remote FOLDER in a single call."""
    try:
        _client(ctx).upload_file(folder, local_file.name, local_file.read_bytes())
    except PCloudError as exc:
        raise _fail(exc) from exc
    click.echo(f"Uploaded {local_file.name} to {folder}")


@cli.command("rm")
@click.argument("path")
@click.pass_context
def rm_cmd(ctx: click.Context, path: str) -> None:
    """Delete a remote file."""
    try:
        RemoteFile(_client(ctx), path).delete()
    except PCloudError as exc:
        raise _fail(exc) from exc
    click.echo(f"Deleted {path}")


__all__ = ["cli"]

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer

from ..core.errors import ArborError
from ..core.paths import BasePath
from ..core.profile import Profile
from ..core.store import ConfigStore

app = typer.Typer(help="arbor CLI")


def _dumps(value: Any) -> str:
    # plist dates and data are not JSON types
    return json.dumps(value, indent=2, default=str)


def _store(
    profile: str,
    manifest: Optional[Path],
    files: Optional[List[Path]],
    urls: Optional[List[str]],
    env: bool,
    separator: Optional[str],
    verbose: bool,
) -> ConfigStore:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    options = {"separator": separator} if separator else {}
    try:
        p = Profile(profile, manifest_path=manifest, store_options=options)
        for file in files or []:
            p.register_file(file, relative_from=BasePath.PWD)
        for url in urls or []:
            p.register_url(url)
        if env:
            p.register_environment()
        return p.build()
    except (ArborError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


ProfileOption = typer.Option("development", "--profile", help="Profile declared in arbor.yaml")
ManifestOption = typer.Option(None, "--manifest", help="Path to arbor.yaml")
FileOption = typer.Option(None, "--file", help="Configuration file to load (repeatable)")
UrlOption = typer.Option(None, "--url", help="Configuration URL to load (repeatable)")
EnvOption = typer.Option(False, "--env/--no-env", help="Load environment variables last")
SeparatorOption = typer.Option(None, "--separator", help="Path separator, ':' by default")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Log every load")


@app.command()
def get(
    path: str,
    profile: str = ProfileOption,
    manifest: Optional[Path] = ManifestOption,
    file: Optional[List[Path]] = FileOption,
    url: Optional[List[str]] = UrlOption,
    env: bool = EnvOption,
    separator: Optional[str] = SeparatorOption,
    verbose: bool = VerboseOption,
):
    store = _store(profile, manifest, file, url, env, separator, verbose)
    value = store.get(path)
    if value is None:
        typer.echo(f"No value at '{path}'", err=True)
        raise typer.Exit(code=1)
    typer.echo(_dumps(value))


@app.command()
def dump(
    profile: str = ProfileOption,
    manifest: Optional[Path] = ManifestOption,
    file: Optional[List[Path]] = FileOption,
    url: Optional[List[str]] = UrlOption,
    env: bool = EnvOption,
    separator: Optional[str] = SeparatorOption,
    verbose: bool = VerboseOption,
):
    store = _store(profile, manifest, file, url, env, separator, verbose)
    typer.echo(_dumps(store.get_configs()))


@app.command()
def set(
    path: str,
    value: str,
    profile: str = ProfileOption,
    manifest: Optional[Path] = ManifestOption,
    file: Optional[List[Path]] = FileOption,
    url: Optional[List[str]] = UrlOption,
    env: bool = EnvOption,
    separator: Optional[str] = SeparatorOption,
    verbose: bool = VerboseOption,
):
    # Nothing is persisted; the resulting tree is printed.
    store = _store(profile, manifest, file, url, env, separator, verbose)
    parsed: Any = value
    if store.parse_string_to_object:
        parsed = store.registry.decode_string(value)
    store.set(path, parsed)
    typer.echo(_dumps(store.get_configs()))


if __name__ == "__main__":
    app()

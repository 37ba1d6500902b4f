"""Cyclopts CLI entrypoint for creating, generating, serving and deploying sites.

The ``sitepress`` console script works on a project folder containing a
``site.yaml`` file. ``sitepress new`` scaffolds such a folder,
``sitepress generate`` publishes it into ``Output``, ``sitepress run``
generates and then serves ``Output`` locally, and ``sitepress deploy`` runs
the deployment method configured in ``site.yaml``.

Examples
--------
Generate the project in the current directory:

>>> from sitepress.cli import main
>>> main()  # doctest: +SKIP

Serve a project from another folder on a custom port:

>>> from sitepress.cli import app
>>> app(["run", "--root", "my-site", "--port", "8080"])  # doctest: +SKIP
"""

from __future__ import annotations

import functools
import logging
import sys
import typing as typ
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import OUTPUT_FOLDER
from .config import SiteConfigError
from .errors import PublishingError
from .pipeline import RunMode
from .project import ProjectFolderNotEmptyError, new_project, publish_project

DEFAULT_PORT = 8000

logger = logging.getLogger(__name__)

app = App(name="sitepress", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _fail(message: str) -> typ.NoReturn:
    print(message, file=sys.stderr)
    sys.exit(1)


def _publish(root: Path, mode: RunMode) -> None:
    try:
        published = publish_project(root, mode)
    except PublishingError as exc:
        _fail(exc.description)
    except (FileNotFoundError, SiteConfigError) as exc:
        _fail(f"Invalid project configuration: {exc}")
    item_count = sum(len(section) for section in published.sections.values())
    print(
        f"published {len(published.sections)} sections, {item_count} items and "
        f"{len(published.pages)} pages"
    )


@app.command(help="Create a new website project in an empty folder.")
def new(
    *,
    root: typ.Annotated[
        Path, Parameter(help="Folder to create the project in", env_var="INPUT_ROOT")
    ] = Path(),
) -> None:
    """Scaffold ``site.yaml``, ``Content`` and ``Resources`` in ``root``.

    Parameters
    ----------
    root : Path, optional
        Target folder; it is created when missing and must otherwise be
        empty.
    """
    try:
        written = new_project(root)
    except ProjectFolderNotEmptyError as exc:
        _fail(str(exc))
    for path in written:
        print(f"wrote {_format_path(path)}")


@app.command(help="Generate the website into the Output folder.")
def generate(
    *,
    root: typ.Annotated[
        Path, Parameter(help="Project folder holding site.yaml", env_var="INPUT_ROOT")
    ] = Path(),
) -> None:
    """Publish the project at ``root`` in generation mode.

    Parameters
    ----------
    root : Path, optional
        Project folder; defaults to the current directory.

    Raises
    ------
    SystemExit
        With status 1 when publishing fails; the error is printed to stderr.
    """
    _publish(root, RunMode.GENERATION)


@app.command(help="Generate the website and serve it on localhost.")
def run(
    *,
    root: typ.Annotated[
        Path, Parameter(help="Project folder holding site.yaml", env_var="INPUT_ROOT")
    ] = Path(),
    port: typ.Annotated[
        int, Parameter(help="Port for the local web server", env_var="INPUT_PORT")
    ] = DEFAULT_PORT,
) -> None:
    """Generate the project, then serve ``Output`` until interrupted."""
    _publish(root, RunMode.GENERATION)
    output = root / OUTPUT_FOLDER
    if not output.is_dir():
        _fail(f"Could not find the output folder at {_format_path(output)}")
    handler = functools.partial(SimpleHTTPRequestHandler, directory=str(output))
    try:
        server = ThreadingHTTPServer(("localhost", port), handler)
    except OSError as exc:
        _fail(f"Failed to start local web server on port {port}: {exc}")
    print(f"serving {_format_path(output)} at http://localhost:{port}")
    print("Press Ctrl+C to stop the server and exit")
    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("stopping local web server")


@app.command(help="Deploy the generated website using the configured method.")
def deploy(
    *,
    root: typ.Annotated[
        Path, Parameter(help="Project folder holding site.yaml", env_var="INPUT_ROOT")
    ] = Path(),
) -> None:
    """Publish the project at ``root`` in deployment mode."""
    _publish(root, RunMode.DEPLOYMENT)


def main() -> None:
    """Invoke the Cyclopts application that powers the `sitepress` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()

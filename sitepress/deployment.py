"""Deployment methods that ship the generated output.

Deployment runs only when the pipeline executes in deployment mode. The git
based methods stage a copy of ``Output`` in ``.publish/GitDeploy``, commit
it, and push it to the configured remote, shelling out to ``git`` the same
way the rest of the tooling wraps external commands.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import enum
import logging
import subprocess
import typing as typ

from . import storage
from .errors import PublishingError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .context import PublishingContext

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class DeploymentMethod:
    """A named callable that deploys the generated website."""

    name: str
    body: cabc.Callable[[PublishingContext], object]

    def run(self, context: PublishingContext) -> None:
        self.body(context)


class GitHubPagesSource(enum.Enum):
    """Where GitHub Pages serves a site from."""

    MASTER = "master branch"
    MASTER_DOCS = "master branch /docs folder"
    GH_PAGES = "gh-pages branch"


def run_git(args: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    """Invoke ``git`` in ``cwd``, reporting failures as ``PublishingError``."""
    try:
        return subprocess.run(  # noqa: S603
            ["git", *args],  # noqa: S607
            cwd=cwd,
            check=True,
            text=True,
            capture_output=True,
        )
    except subprocess.CalledProcessError as exc:
        message = (exc.stderr or exc.stdout or "").strip() or str(exc)
        raise PublishingError(message) from exc
    except OSError as exc:
        msg = "Could not run git"
        raise PublishingError(msg, underlying_error=exc) from exc


def git(
    remote: str, branch: str = "master", target_folder_path: str | None = None
) -> DeploymentMethod:
    """Deploy by committing the output and pushing it to ``remote``."""

    def _configure(folder: Path) -> None:
        storage.empty_folder(folder)
        run_git(["init"], folder)
        run_git(["remote", "add", "origin", remote], folder)
        run_git(["fetch"], folder)
        if target_folder_path is not None:
            try:
                run_git(["checkout", branch], folder)
            except PublishingError:
                run_git(["checkout", "-b", branch], folder)
        else:
            run_git(["symbolic-ref", "HEAD", f"refs/remotes/origin/{branch}"], folder)

    def _deploy(context: PublishingContext) -> None:
        folder = context.create_deployment_folder(
            "Git", _configure, output_folder_path=target_folder_path
        )
        stamp = dt.datetime.now().astimezone().strftime(context.date_format)
        run_git(["add", "."], folder)
        run_git(["commit", "-a", "-m", f"Publish deploy {stamp}", "--allow-empty"], folder)
        if target_folder_path is None:
            run_git(["checkout", "-b", branch], folder)
        run_git(["push", "origin", branch], folder)

    return DeploymentMethod(name=f"Git ({remote})", body=_deploy)


def github_remote(repository: str, *, use_ssh: bool = True, standard_url: bool = True) -> str:
    prefix = "git@github.com:" if use_ssh else "https://github.com/"
    suffix = ".git" if standard_url else ""
    return f"{prefix}{repository}{suffix}"


def github(
    repository: str,
    branch: str = "master",
    target_folder_path: str | None = None,
    *,
    use_ssh: bool = True,
) -> DeploymentMethod:
    return git(
        github_remote(repository, use_ssh=use_ssh),
        branch=branch,
        target_folder_path=target_folder_path,
    )


def github_pages(
    repository: str,
    source: GitHubPagesSource = GitHubPagesSource.MASTER,
    *,
    use_ssh: bool = True,
) -> DeploymentMethod:
    """Deploy to GitHub Pages, disabling Jekyll processing of the output."""
    remote = github_remote(repository, use_ssh=use_ssh)
    match source:
        case GitHubPagesSource.GH_PAGES:
            branch, target = "gh-pages", None
        case GitHubPagesSource.MASTER_DOCS:
            branch, target = "master", "docs"
        case _:
            branch, target = "master", None

    def _deploy(context: PublishingContext) -> None:
        marker = context.create_output_file(".nojekyll")
        github(repository, branch, target, use_ssh=use_ssh).run(context)
        marker.unlink(missing_ok=True)
        settings = github_remote(repository, use_ssh=False, standard_url=False)
        logger.info(
            'Remember to set your GitHub Pages source to "%s" at %s/settings',
            source.value,
            settings,
        )

    return DeploymentMethod(name=f"GitHub Pages ({remote})", body=_deploy)


__all__ = [
    "DeploymentMethod",
    "GitHubPagesSource",
    "git",
    "github",
    "github_pages",
    "github_remote",
    "run_git",
]

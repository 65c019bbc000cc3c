from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .command import CommandRunner

logger = logging.getLogger(__name__)


def checkout(runner: CommandRunner, resource: str, dest: Path, ref: str = "", *, dry_run: bool = False) -> None:
    """Clone ``resource`` into ``dest`` unless a working copy is already there,
    then switch to ``ref``.

    An existing working copy is refreshed from origin first; an empty ref
    switches it back to the remote's default branch.
    """

    if not (dest / ".git").exists():
        if not dry_run:
            dest.parent.mkdir(parents=True, exist_ok=True)
        runner.run(["git", "clone", resource, str(dest)])
        if ref:
            runner.run(["git", "checkout", "--force", ref], cwd=str(dest))
        return

    logger.info("Working copy %s exists; skipping clone", dest)
    cwd = str(dest)
    runner.run(["git", "fetch", "--tags", "--force", "origin"], cwd=cwd)

    if not ref:
        runner.run(["git", "remote", "set-head", "origin", "--auto"], cwd=cwd)
        runner.run(["git", "checkout", "--force", "origin/HEAD"], cwd=cwd)
        return

    remote_branch = runner.run(
        ["git", "rev-parse", "--verify", "--quiet", f"refs/remotes/origin/{ref}"], cwd=cwd, check=False
    )
    if remote_branch.ok:
        runner.run(["git", "checkout", "--force", "-B", ref, f"origin/{ref}"], cwd=cwd)
    else:
        runner.run(["git", "checkout", "--force", ref], cwd=cwd)


def short_hash(runner: CommandRunner, repo_dir: Path) -> Optional[str]:
    if not (repo_dir / ".git").exists():
        return None
    r = runner.run(["git", "rev-parse", "--short", "HEAD"], cwd=str(repo_dir), check=False)
    h = r.stdout.strip()
    return h if r.ok and h else None


def describe_version(runner: CommandRunner, repo_dir: Path) -> Optional[str]:
    """Most recent tag reachable from HEAD, without a leading 'v'."""

    if not (repo_dir / ".git").exists():
        return None
    r = runner.run(["git", "describe", "--tags", "--abbrev=0"], cwd=str(repo_dir), check=False)
    tag = r.stdout.strip()
    if not r.ok or not tag:
        return None
    return tag[1:] if tag[:1] in {"v", "V"} and tag[1:2].isdigit() else tag


def package_version(nominal: str, commit: Optional[str], append_git_hash: bool) -> str:
    if append_git_hash and commit:
        return f"{nominal}-g{commit}"
    return nominal

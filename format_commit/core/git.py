"""Git operations module."""

import logging
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MAX_DIFF_LINES = 500
DIFF_EXCLUDES = [":(exclude)package-lock.json", ":(exclude)*.lock", ":(exclude)*.min.*"]


class GitError(Exception):
    """Git operation error."""

    pass


@dataclass
class DiffData:
    """Staged changes summarized for the AI prompt."""

    stats: str
    diff: str


def _run(cmd: list[str], action: str) -> str:
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        return result.stdout
    except subprocess.CalledProcessError as e:
        error_msg = e.stderr if e.stderr else str(e)
        raise GitError(f"Failed to {action}: {error_msg}")


class GitOperations:
    """Basic git operations handler."""

    @staticmethod
    def get_current_branch() -> str:
        """Get the name of the checked out branch."""
        return _run(["git", "rev-parse", "--abbrev-ref", "HEAD"], "get current branch").strip()

    @staticmethod
    def stage_all() -> None:
        """Stage every change in the working tree."""
        _run(["git", "add", "-A"], "stage changes")

    @staticmethod
    def has_staged_changes() -> bool:
        """Check whether the index differs from HEAD."""
        status = subprocess.run(
            ["git", "diff", "--cached", "--quiet"],
            capture_output=True,
            text=True,
        )
        return status.returncode != 0

    @staticmethod
    def commit(title: str, description: str | None = None) -> str:
        """Create a commit with the given title and optional description."""
        cmd = ["git", "commit", "-m", title]
        if description:
            cmd.extend(["-m", description])
        return _run(cmd, "create commit")

    @staticmethod
    def push(branch: str, remote: str = "origin") -> str:
        """Push a branch and set its upstream."""
        return _run(["git", "push", "-u", remote, branch], "push changes")

    @staticmethod
    def status() -> str:
        return _run(["git", "status"], "get status")

    @staticmethod
    def branch_exists(name: str) -> bool:
        """Check whether a local branch with this name exists."""
        result = subprocess.run(
            ["git", "show-ref", "--verify", "--quiet", f"refs/heads/{name}"],
            capture_output=True,
            text=True,
        )
        return result.returncode == 0

    @staticmethod
    def create_branch(name: str, checkout: bool = True) -> str:
        """Create a branch, optionally switching to it."""
        if checkout:
            return _run(["git", "checkout", "-b", name], "create branch")
        return _run(["git", "branch", name], "create branch")

    @staticmethod
    def get_optimized_diff() -> DiffData | None:
        """Get a size-limited view of the staged changes.

        Lock files and minified assets are left out and the diff is cut to
        ``MAX_DIFF_LINES`` lines. Returns ``None`` when nothing is staged.
        """
        stats = _run(["git", "diff", "--cached", "--stat"], "get diff stats")
        diff = _run(
            ["git", "diff", "--cached", "--no-color", "--unified=1", "--", "."] + DIFF_EXCLUDES,
            "get diff",
        )
        if not stats.strip() and not diff.strip():
            return None

        lines = diff.split("\n")[:MAX_DIFF_LINES]
        return DiffData(stats=stats, diff="\n".join(lines))

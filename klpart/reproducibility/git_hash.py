"""Code provenance: the git revision of the klpart checkout behind a run."""

import functools
import subprocess
from pathlib import Path

# Repository root when klpart runs from a source checkout.
_REPO_ROOT = Path(__file__).resolve().parents[2]


def _git(*args: str, cwd: Path) -> str:
    return subprocess.check_output(
        ["git", *args], cwd=cwd, stderr=subprocess.DEVNULL
    ).decode().strip()


@functools.lru_cache(maxsize=None)
def get_git_hash(repo_dir: Path | None = None) -> str:
    """Short SHA of HEAD, suffixed with '-dirty' when tracked files changed.

    Args:
        repo_dir: Directory inside the repository to inspect. Defaults to
            the checkout containing this package, independent of the
            current working directory.

    Returns:
        "a3f9c1d", "a3f9c1d-dirty", or "unknown" outside a git checkout or
        without a git executable.
    """
    cwd = repo_dir or _REPO_ROOT
    try:
        sha = _git("rev-parse", "--short", "HEAD", cwd=cwd)
        changes = _git("status", "--porcelain", "--untracked-files=no", cwd=cwd)
    except (subprocess.CalledProcessError, FileNotFoundError, NotADirectoryError):
        return "unknown"
    return f"{sha}-dirty" if changes else sha

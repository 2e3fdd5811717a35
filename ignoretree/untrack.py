"""
Removing now-ignored files from the git index.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Callable, List, Union

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

logger = logging.getLogger(__name__)

# keeps `git rm` command lines well below OS argument limits
CHUNK_SIZE = 200


class UntrackError(Exception):
    """The repository could not be opened or git refused to untrack."""


def open_repo(root_dir: Union[str, Path]) -> Repo:
    try:
        return Repo(str(root_dir), search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise UntrackError(f"{root_dir} is not a valid Git repository") from e


def _repo_prefix(repo: Repo, root_dir: Union[str, Path]) -> str:
    """Path of ``root_dir`` inside the work tree, as an ls-files prefix ('' or 'sub/dir/')."""
    work_tree = Path(repo.working_tree_dir).resolve()
    root = Path(root_dir).resolve()
    try:
        prefix = root.relative_to(work_tree).as_posix()
    except ValueError as e:
        raise UntrackError(f"{root} is outside the work tree {work_tree}") from e
    return "" if prefix == "." else prefix + "/"


def tracked_files(repo: Repo, root_dir: Union[str, Path]) -> List[str]:
    """Tracked file paths below ``root_dir``, relative to ``root_dir`` (posix)."""
    prefix = _repo_prefix(repo, root_dir)
    output = repo.git.ls_files("-z")
    return [path[len(prefix):] for path in output.split("\0") if path and path.startswith(prefix)]


def untrack_ignored(root_dir: Union[str, Path], is_ignored: Callable[[str], bool]) -> List[str]:
    """Remove tracked files that ``is_ignored`` reports as ignored from the index.

    Working-tree files are left in place (``git rm --cached``). Returns the
    untracked paths relative to ``root_dir``.
    """
    repo = open_repo(root_dir)
    prefix = _repo_prefix(repo, root_dir)
    doomed = [path for path in tracked_files(repo, root_dir) if is_ignored(path)]
    if not doomed:
        return []

    in_repo = [prefix + path for path in doomed]
    try:
        for start in range(0, len(in_repo), CHUNK_SIZE):
            repo.git.rm("--cached", "--quiet", "--", *in_repo[start:start + CHUNK_SIZE])
    except GitCommandError as e:
        raise UntrackError(f"git rm --cached failed: {e}") from e
    logger.info(f"Untracked {len(doomed)} file(s) under {root_dir}")
    return doomed

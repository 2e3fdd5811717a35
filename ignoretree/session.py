"""
The editing session: one tree, one ignore file, one matcher.

Load scans the directory and interprets the existing ignore file; toggles
mutate the tree; save regenerates the file and replaces it atomically.
"""

from __future__ import annotations
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ignoretree.generator import generate, merge_lines
from ignoretree.interpreter import GlobMatcher, RuleSet, covers, interpret
from ignoretree.marks import toggle
from ignoretree.models import FileNode, Mark, PatternEntry, PatternKind, PatternLine
from ignoretree.patterns import normalize_path, parse_lines
from ignoretree.tree import build_tree
from ignoretree.utils import IGNORE_FILENAME, scan_directory

logger = logging.getLogger(__name__)


class IgnoreFileError(Exception):
    """The ignore file could not be read or written."""


def read_pattern_file(path: Path) -> List[PatternLine]:
    if not path.exists():
        return []
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IgnoreFileError(f"Could not read {path}: {e}") from e
    return parse_lines(content.splitlines())


def _target_mode(path: Path) -> int:
    """Permissions for the replacement: the existing file's, else what the umask allows."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_atomically(path: Path, content: str) -> None:
    """Replace ``path`` with ``content``; the old file survives any failure.

    The new file keeps the old one's permission bits (mkstemp creates 0600).
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise IgnoreFileError(f"Could not write {path}: {e}") from e


class IgnoreSession:
    def __init__(
        self,
        root_dir: Path,
        root: FileNode,
        lines: List[PatternLine],
        matcher: Optional[GlobMatcher] = None,
        warnings: Optional[List[str]] = None,
        ignore_file: str = IGNORE_FILENAME,
    ):
        self.root_dir = Path(root_dir)
        self.ignore_path = self.root_dir / ignore_file
        self.root = root
        self.lines = lines
        self.rules = RuleSet.from_lines(lines, matcher)
        self.matcher = self.rules.matcher
        self.warnings = warnings or []
        self._final_rules: Optional[RuleSet] = None
        interpret(self.root, self.rules)

    @classmethod
    def load(cls, root_dir: Union[str, Path], matcher: Optional[GlobMatcher] = None,
             ignore_file: str = IGNORE_FILENAME) -> "IgnoreSession":
        root_dir = Path(root_dir)
        if not root_dir.is_dir():
            raise IgnoreFileError(f"Path '{root_dir}' does not exist or is not a directory")
        root, warnings = build_tree(scan_directory(str(root_dir), ignore_file))
        lines = read_pattern_file(root_dir / ignore_file)
        logger.info(f"Loaded {root_dir} with {len(lines)} pattern lines")
        return cls(root_dir, root, lines, matcher, warnings, ignore_file)

    @property
    def posture(self) -> Mark:
        """Ignored means reverse posture: everything ignored unless re-included."""
        return Mark.IGNORED if self.root.mark == Mark.IGNORED else Mark.INCLUDED

    def toggle(self, path: Union[str, Sequence[str]]) -> None:
        parts = normalize_path(path) if isinstance(path, str) else tuple(path)
        toggle(self.root, parts)
        self._final_rules = None

    def is_preserved(self, line: PatternLine) -> bool:
        """Lines the tree does not own: comments, blanks, wildcard lines and
        entries for paths that are not in the tree.
        """
        if line.entry is None or line.entry.kind == PatternKind.GENERIC:
            return True
        return not covers(line.entry, self.root)

    def generate(self) -> List[PatternEntry]:
        return generate(self.root)

    def render_lines(self) -> List[str]:
        return merge_lines(self.lines, self.generate(), self.is_preserved)

    def render(self) -> str:
        lines = self.render_lines()
        return "\n".join(lines) + "\n" if lines else ""

    def save(self) -> Path:
        """Write the regenerated ignore file; all-or-nothing."""
        content = self.render()
        if not content and not self.ignore_path.exists():
            logger.info("Nothing to write and no ignore file present")
            return self.ignore_path
        write_atomically(self.ignore_path, content)
        logger.info(f"Wrote {self.ignore_path}")
        return self.ignore_path

    def final_rules(self) -> RuleSet:
        if self._final_rules is None:
            self._final_rules = RuleSet.from_lines(parse_lines(self.render_lines()), self.matcher)
        return self._final_rules

    def is_ignored(self, relative_path: str) -> bool:
        """Whether a file path is ignored under the generated + preserved lines.

        The edited ignore file is never reported as ignored, whatever `/*` or
        `.*` lines say about it.
        """
        if normalize_path(relative_path) == (self.ignore_path.name,):
            return False
        return self.final_rules().is_ignored(relative_path)

"""

this is the glob matcher
used for the wildcard lines of the .gitignore
"""


# gitignore.py
from __future__ import annotations
from typing import Dict, Sequence, Tuple

import pathspec  # pip install pathspec


class PathspecMatcher:
    """Callable-style matcher that answers: *do these wildcard lines ignore this path?*

    Compiled specs are cached per distinct pattern list, since the interpreter
    asks once per file with the same lines.
    """

    def __init__(self):
        self._specs: Dict[Tuple[str, ...], pathspec.PathSpec] = {}

    def _spec(self, patterns: Sequence[str]) -> pathspec.PathSpec:
        key = tuple(patterns)
        spec = self._specs.get(key)
        if spec is None:
            spec = pathspec.GitIgnoreSpec.from_lines(key)
            self._specs[key] = spec
        return spec

    def matches(self, patterns: Sequence[str], relative_path: str) -> bool:
        """Return True if ``relative_path`` is ignored by ``patterns``."""
        if not patterns:
            return False
        return self._spec(patterns).match_file(relative_path)

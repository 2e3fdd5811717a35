"""
Constants, logging setup and the directory scanner.
"""
from __future__ import annotations
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, Tuple

from ignoretree.models import NodeType

IGNORE_FILENAME = ".gitignore"

# Never shown in the tree, at any depth
ALWAYS_SKIP = (".git",)

# Logs go to the system temp dir so they never draw over the editor.
LOG_PATH = Path(tempfile.gettempdir()) / "ignoretree.log"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        filename=str(LOG_PATH),
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def scan_directory(root_path: str, ignore_file: str = IGNORE_FILENAME) -> Iterator[Tuple[str, NodeType]]:
    """Yield ``(relative posix path, NodeType)`` for every entry under ``root_path``.

    Symlinked directories are reported as files and not followed. The ignore
    file being edited is left out.
    """
    def walk_dir(current_path: str, rel_dir: str) -> Iterator[Tuple[str, NodeType]]:
        try:
            entries = sorted(os.listdir(current_path))
        except OSError as e:
            logging.getLogger(__name__).warning(f"Could not list {current_path}: {e}")
            return

        for entry in entries:
            if entry in ALWAYS_SKIP:
                continue
            if not rel_dir and entry == ignore_file:
                continue
            full_path = os.path.join(current_path, entry)
            rel_path = f"{rel_dir}/{entry}" if rel_dir else entry
            is_dir = os.path.isdir(full_path) and not os.path.islink(full_path)
            if is_dir:
                yield rel_path, NodeType.DIRECTORY
                yield from walk_dir(full_path, rel_path)
            else:
                yield rel_path, NodeType.FILE

    yield from walk_dir(root_path, "")

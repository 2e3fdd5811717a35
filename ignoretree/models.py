"""

where we store the
pydantic Data Structure classes
for the ignore tree and the pattern file

"""

from pydantic import BaseModel, ConfigDict
from typing import Dict, Iterator, Optional, Tuple
from enum import Enum

class NodeType(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"

class Mark(str, Enum):
    INCLUDED = "included"
    IGNORED = "ignored"
    LOCKED = "locked"  # matched by a wildcard line, files only

class Aggregate(str, Enum):
    INCLUDED = "included"
    IGNORED = "ignored"
    MIXED = "mixed"

class PatternKind(str, Enum):
    CLASSIC = "classic"
    EXCEPTION = "exception"
    GENERIC = "generic"


class PatternEntry(BaseModel):
    """One classified line of the ignore file."""
    model_config = ConfigDict(frozen=True)

    kind: PatternKind
    segments: Tuple[str, ...] = ()
    contents_only: bool = False
    raw: str = ""


class PatternLine(BaseModel):
    """A physical line plus its classification (None for blanks and comments)."""
    text: str
    entry: Optional[PatternEntry] = None


class FileNode(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str
    parts: Tuple[str, ...] = ()
    node_type: NodeType
    mark: Mark = Mark.INCLUDED
    children: Optional[Dict[str, 'FileNode']] = None

    @property
    def is_dir(self) -> bool:
        return self.node_type == NodeType.DIRECTORY

    @property
    def path(self) -> str:
        return "/".join(self.parts)

    def iter_children(self) -> Iterator['FileNode']:
        yield from (self.children or {}).values()

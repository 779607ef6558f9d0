from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .arena import Arena

@dataclass(frozen=True)
class Node:
    name: str
    path: str
    is_dir: bool
    size: int = 0
    parent: Optional[int] = None  # индекс родителя в Arena, None только у корня

class TopFile(NamedTuple):
    directory: str  # относительно корня, "" или с завершающим "/"
    name: str
    size: int

    @property
    def relpath(self) -> str:
        return self.directory + self.name

@dataclass
class ScanWarning:
    path: str
    kind: str  # "dir" | "entry"
    message: str

@dataclass
class ScanResult:
    arena: "Arena"
    root: str
    warnings: List[ScanWarning] = field(default_factory=list)
    elapsed_sec: float = 0.0

    @property
    def elements(self) -> int:
        return len(self.arena)

    @property
    def files(self) -> int:
        return self.arena.files

    @property
    def dirs(self) -> int:
        return self.arena.dirs

from __future__ import annotations
import threading
from dataclasses import replace
from typing import Iterator, List, Optional, Tuple
from .models import Node


class Arena:
    """Append-only list of Nodes linked to their parents by index.

    push() is the only mutation and runs under one lock, so the index it
    returns is the node's final position even with many writer threads.
    Once the walk has joined, freeze() the arena; reads need no lock after that.
    """

    def __init__(self):
        self._nodes: List[Node] = []
        self._lock = threading.Lock()
        self._frozen = False
        self.files = 0
        self.dirs = 0

    def push(self, node: Node, parent_index: Optional[int] = None) -> int:
        if parent_index is not None:
            node = replace(node, parent=parent_index)
        with self._lock:
            if self._frozen:
                raise RuntimeError("arena is frozen")
            idx = len(self._nodes)
            if node.parent is None:
                if idx:
                    raise ValueError("arena already has a root")
            elif not 0 <= node.parent < idx:
                raise IndexError(f"parent index {node.parent} is not in the arena")
            self._nodes.append(node)
            if node.is_dir:
                self.dirs += 1
            else:
                self.files += 1
        return idx

    def ancestors(self, index: int) -> List[int]:
        # ближайший родитель первым, корень не включается
        out: List[int] = []
        parent = self._nodes[index].parent
        while parent is not None:
            up = self._nodes[parent].parent
            if up is None:
                break
            out.append(parent)
            parent = up
        return out

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def items(self) -> Iterator[Tuple[int, Node]]:
        return enumerate(self._nodes)

    def __getitem__(self, index: int) -> Node:
        return self._nodes[index]

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

from __future__ import annotations
import heapq
from typing import List, Tuple
from .arena import Arena
from .models import TopFile

HeapItem = Tuple[int, int]  # (size, -index): при равном размере вытесняется более поздний


def _push_top(heap: List[HeapItem], item: HeapItem, limit: int):
    if len(heap) < limit:
        heapq.heappush(heap, item)
    elif item[0] > heap[0][0]:
        heapq.heapreplace(heap, item)


def directory_path(arena: Arena, index: int) -> str:
    """Directory of arena[index] relative to the root: "" or "a/b/"."""
    names = [arena[i].name for i in reversed(arena.ancestors(index))]
    return "".join(n + "/" for n in names)


def top_k(arena: Arena, k: int) -> List[TopFile]:
    """The k largest files in arena, biggest first.

    Equal sizes keep scan order. One pass with a heap bounded at k.
    """
    if k < 0:
        raise ValueError("k must be >= 0")
    if k == 0:
        return []

    heap: List[HeapItem] = []
    for idx, node in arena.items():
        if node.is_dir:
            continue
        _push_top(heap, (node.size, -idx), k)

    ranked = sorted(heap, key=lambda x: (-x[0], -x[1]))
    out: List[TopFile] = []
    for size, neg_idx in ranked:
        idx = -neg_idx
        out.append(TopFile(directory_path(arena, idx), arena[idx].name, size))
    return out

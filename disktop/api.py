from __future__ import annotations
from typing import List, Tuple
from .models import ScanResult, TopFile
from .scanner import scan
from .selector import top_k

DEFAULT_TOP_N = 5


def largest_files(root: str, k: int = DEFAULT_TOP_N, **scan_options) -> Tuple[ScanResult, List[TopFile]]:
    """Scan root and return the scan result with its k largest files.

    scan_options are passed to scanner.scan (workers, follow_symlinks,
    progress, cancel_flag).
    """
    if k < 0:
        raise ValueError("k must be >= 0")
    result = scan(root, **scan_options)
    return result, top_k(result.arena, k)

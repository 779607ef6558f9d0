from __future__ import annotations
from typing import List
from .models import ScanResult, TopFile
from .utils import format_bytes, format_elapsed


def format_size(size: int, exact: bool = False) -> str:
    return f"{size} bytes" if exact else format_bytes(size)


def render(result: ScanResult, top: List[TopFile], exact: bool = False) -> List[str]:
    lines = [f"Total elements: {result.elements}"]
    for item in top:
        lines.append(f"Size: {format_size(item.size, exact)} | Path: {item.relpath}")
    if result.warnings:
        lines.append(f"Skipped: {len(result.warnings)} unreadable entries")
    lines.append(f"Listed files in: {format_elapsed(result.elapsed_sec)}")
    return lines

from __future__ import annotations

def format_bytes(num: int) -> str:
    if num < 0:
        return str(num)
    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    x = float(num)
    for u in units:
        if x < 1024.0 or u == units[-1]:
            return f"{x:.2f} {u}" if u != "B" else f"{int(x)} {u}"
        x /= 1024.0
    return f"{x:.2f} PB"

def format_elapsed(sec: float) -> str:
    if sec < 1.0:
        return f"{sec * 1000.0:.2f}ms"
    return f"{sec:.2f}s"

from __future__ import annotations
import logging
import os
import time
import stat as statmod
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Callable, List, NamedTuple, Optional, Tuple

import psutil

from .arena import Arena
from .errors import ScanCancelled, ScanError
from .models import Node, ScanResult, ScanWarning

log = logging.getLogger(__name__)

MAX_WORKERS = 32
PROGRESS_INTERVAL = 0.10
INVALID_NAME = "Invalid UTF-8"

ProgressCb = Callable[[str, int, int], None]  # (current_dir, files, dirs)
CancelCb = Callable[[], bool]
Pending = Tuple[str, int]  # (dir_path, arena index)


class CancelFlag:
    def __init__(self):
        self._cancel = False

    def cancel(self):
        self._cancel = True

    def __call__(self):
        return self._cancel


class _Listing(NamedTuple):
    path: str
    subdirs: List[Pending]
    warnings: List[ScanWarning]
    error: Optional[OSError]


def default_workers() -> int:
    n = psutil.cpu_count(logical=True) or os.cpu_count() or 4
    return max(1, min(MAX_WORKERS, n * 2))


def _root_name(path: str) -> str:
    return os.path.basename(path.rstrip("\\/")) or path


def _display_name(name: str) -> str:
    # недекодируемые байты приходят как surrogateescape
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return INVALID_NAME
    return name


def _shown(path: str) -> str:
    # пути с surrogateescape ломают строгие обработчики логов
    return path.encode("utf-8", "backslashreplace").decode("utf-8")


def _list_dir(dir_path: str, parent_index: int, arena: Arena,
              follow_symlinks: bool) -> _Listing:
    """Insert the immediate entries of dir_path under parent_index.

    Never raises OSError. Entries are pushed only once the whole listing
    has been read, so a listing that fails midway leaves the directory
    without children and comes back with the error field set.
    """
    found: List[Node] = []
    warnings: List[ScanWarning] = []
    try:
        with os.scandir(dir_path) as it:
            for entry in it:
                try:
                    if not follow_symlinks and entry.is_symlink():
                        continue
                    st = entry.stat(follow_symlinks=follow_symlinks)
                except OSError as e:
                    log.warning("Skipping %s: %s", _shown(entry.path), e)
                    warnings.append(ScanWarning(path=entry.path, kind="entry", message=str(e)))
                    continue

                is_dir = statmod.S_ISDIR(st.st_mode)
                size = int(st.st_size) if statmod.S_ISREG(st.st_mode) else 0
                found.append(Node(name=_display_name(entry.name), path=entry.path,
                                  is_dir=is_dir, size=size))
    except OSError as e:
        return _Listing(dir_path, [], warnings, e)

    subdirs: List[Pending] = []
    for node in found:
        idx = arena.push(node, parent_index)
        if node.is_dir:
            subdirs.append((node.path, idx))
    return _Listing(dir_path, subdirs, warnings, None)


def walk(directory_path: str,
         parent_index: int,
         arena: Arena,
         workers: Optional[int] = None,
         follow_symlinks: bool = True,
         progress: Optional[ProgressCb] = None,
         cancel_flag: Optional[CancelCb] = None) -> List[ScanWarning]:
    """Index everything below directory_path into arena.

    directory_path must already be in the arena at parent_index. If it
    cannot be listed the walk fails with ScanError; any deeper directory
    that cannot be listed is kept without children and reported as a
    warning. Subdirectories are listed on a pool of `workers` threads;
    workers <= 1 walks in the calling thread.
    """
    if workers is None:
        workers = default_workers()

    first = _list_dir(directory_path, parent_index, arena, follow_symlinks)
    if first.error is not None:
        e = first.error
        raise ScanError(directory_path, e.strerror or str(e)) from e

    warnings: List[ScanWarning] = list(first.warnings)

    last_emit = 0.0
    def emit(cur: str):
        nonlocal last_emit
        log.debug("Listed %s", _shown(cur))
        if not progress:
            return
        now = time.time()
        if now - last_emit >= PROGRESS_INTERVAL:
            last_emit = now
            progress(cur, arena.files, arena.dirs)

    def collect(listing: _Listing):
        warnings.extend(listing.warnings)
        if listing.error is not None:
            log.warning("Cannot list %s: %s", _shown(listing.path), listing.error)
            warnings.append(ScanWarning(path=listing.path, kind="dir", message=str(listing.error)))
        emit(listing.path)

    def cancelled() -> bool:
        return bool(cancel_flag and cancel_flag())

    if workers <= 1:
        stack: List[Pending] = list(first.subdirs)
        while stack:
            if cancelled():
                raise ScanCancelled(directory_path)
            path, idx = stack.pop()
            listing = _list_dir(path, idx, arena, follow_symlinks)
            collect(listing)
            stack.extend(listing.subdirs)
        return warnings

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="disktop") as pool:
        pending = {pool.submit(_list_dir, path, idx, arena, follow_symlinks)
                   for path, idx in first.subdirs}
        try:
            while pending:
                if cancelled():
                    raise ScanCancelled(directory_path)
                done, pending = wait(pending, timeout=PROGRESS_INTERVAL, return_when=FIRST_COMPLETED)
                for fut in done:
                    listing = fut.result()
                    collect(listing)
                    for path, idx in listing.subdirs:
                        pending.add(pool.submit(_list_dir, path, idx, arena, follow_symlinks))
        except BaseException:
            # queued listings must not run once the walk is abandoned
            for fut in pending:
                fut.cancel()
            raise
    return warnings


def scan(root: str,
         workers: Optional[int] = None,
         follow_symlinks: bool = True,
         progress: Optional[ProgressCb] = None,
         cancel_flag: Optional[CancelCb] = None) -> ScanResult:
    t0 = time.time()
    root = os.path.abspath(root)
    if workers is None:
        workers = default_workers()

    arena = Arena()
    root_index = arena.push(Node(name=_root_name(root), path=root, is_dir=True))

    log.info("Scanning %s with %d worker(s)", _shown(root), workers)
    warnings = walk(root, root_index, arena,
                    workers=workers,
                    follow_symlinks=follow_symlinks,
                    progress=progress,
                    cancel_flag=cancel_flag)
    arena.freeze()

    elapsed = time.time() - t0
    log.info("Indexed %d elements (%d files, %d dirs) in %.2fs, %d skipped",
             len(arena), arena.files, arena.dirs, elapsed, len(warnings))
    return ScanResult(arena=arena, root=root, warnings=warnings, elapsed_sec=elapsed)

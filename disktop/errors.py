from __future__ import annotations


class DiskTopError(Exception):
    """Base class for disktop errors."""


class ScanError(DiskTopError):
    """The scan root could not be listed."""

    def __init__(self, path: str, message: str):
        shown = path.encode("utf-8", "backslashreplace").decode("utf-8")
        super().__init__(f"{shown}: {message}")
        self.path = path


class ScanCancelled(DiskTopError):
    pass

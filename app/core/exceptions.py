"""
Custom application exceptions.
"""


class DirectoryLookupError(Exception):
    """A geocode directory backend failed to answer a lookup."""

    def __init__(self, detail: str, backend: str = "unknown"):
        super().__init__(f"[{backend}] {detail}")
        self.detail = detail
        self.backend = backend

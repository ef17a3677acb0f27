class LightBnbError(Exception):
    pass

class StoreError(LightBnbError):
    """The store could not run a statement (connectivity, bad SQL, constraint, timeout)."""

class InvalidFilter(LightBnbError, ValueError):
    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []

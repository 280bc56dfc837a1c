"""Errors raised while building pages"""


class BuildError(RuntimeError):
    """Base class for per-document build failures."""


class SourceReadError(BuildError):
    """The source document could not be read."""

    def __init__(self, path, reason):
        self.path = path
        super().__init__(f"Cannot read {path}: {reason}")


class TimestampLookupError(BuildError):
    """The last-change time of a source could not be queried."""


class ConversionError(BuildError):
    """The converter exited non-zero or rendered nothing."""

    def __init__(self, source, returncode=None, message=None):
        self.source = source
        self.returncode = returncode
        if message is None:
            message = f"converter exited with status {returncode}"
        super().__init__(f"Converting {source} failed: {message}")

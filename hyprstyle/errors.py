"""Error hierarchy for hyprstyle operations."""


class HyprstyleError(RuntimeError):
    """Base exception for theming, persistence and backup failures."""


class MalformedColor(HyprstyleError, ValueError):
    """Raised when a value is not a 6-digit hex color."""


class MalformedRecord(HyprstyleError):
    """Raised when a saved palette record cannot be parsed."""


class NotFound(HyprstyleError, LookupError):
    """Raised when a palette name or snapshot id does not exist."""


class InvalidName(HyprstyleError, ValueError):
    """Raised when a palette name cannot be used as a file name."""


class ExtractionFailure(HyprstyleError):
    """Raised when candidate colors cannot be produced at all."""


class RenderError(HyprstyleError):
    """Raised when a configuration template cannot be rendered or applied."""


class UnresolvedPlaceholders(RenderError):
    """Raised when rendered text still contains template placeholders."""

    def __init__(self, placeholders, source=None):
        self.placeholders = sorted(set(placeholders))
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(
            f"Unresolved placeholders{where}: {', '.join(self.placeholders)}"
        )


class PartialFailure(HyprstyleError):
    """Raised when some files of a multi-file operation failed.

    ``failed`` holds ``(path, reason)`` pairs for every file that failed.
    """

    def __init__(self, message, failed):
        self.failed = list(failed)
        paths = ", ".join(path for path, _ in self.failed)
        super().__init__(f"{message}: {paths}")


__all__ = [
    "ExtractionFailure",
    "HyprstyleError",
    "InvalidName",
    "MalformedColor",
    "MalformedRecord",
    "NotFound",
    "PartialFailure",
    "RenderError",
    "UnresolvedPlaceholders",
]

"""
Error taxonomy for the Bundlediff engine.

Every error raised by the parser, the diff engine and the descriptor
loader derives from ManifestError so callers can catch them together.
"""
from typing import Optional


class ManifestError(Exception):
    """Base class for all Bundlediff errors."""


class MalformedHeaderError(ManifestError):
    """
    Raised when a header value violates the clause grammar.

    Attributes:
        header: Name of the header being parsed
        value: The raw header value
        reason: Short description of the violation
        side: "A" or "B" when raised during a comparison, otherwise None
    """

    def __init__(self, header: str, value: str, reason: str, side: Optional[str] = None):
        self.header = header
        self.value = value
        self.reason = reason
        self.side = side
        location = f"header '{header}'"
        if side:
            location += f" (side {side})"
        super().__init__(f"Malformed {location}: {reason}: {value!r}")

    def with_side(self, side: str) -> "MalformedHeaderError":
        """Return a copy of this error attributed to one side of a comparison."""
        return MalformedHeaderError(self.header, self.value, self.reason, side=side)


class ManifestSyntaxError(ManifestError):
    """Raised when the raw descriptor text is not a valid main section."""

    def __init__(self, source: str, message: str, line_number: Optional[int] = None):
        self.source = source
        self.line_number = line_number
        where = f"{source}, line {line_number}" if line_number else source
        super().__init__(f"{where}: {message}")


class DescriptorNotFoundError(ManifestError):
    """Raised when no resolution strategy finds a descriptor for a locator."""

    def __init__(self, locator: str):
        self.locator = locator
        super().__init__(f"Not a bundle file path or URL: {locator}")


class DescriptorLoadError(ManifestError):
    """Raised when a located descriptor cannot be read or parsed."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Failed to load manifest from {source}: {message}")

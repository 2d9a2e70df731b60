"""Typed errors for mapstostructs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

SegmentKind = Literal["field", "row", "map_key", "map_value"]

_MAX_RENDERED = 80


def render_value(value: object) -> str:
    """Render a received value for an error message, truncating long renderings."""
    text = str(value)
    if len(text) > _MAX_RENDERED:
        return text[: _MAX_RENDERED - 3] + "..."
    return text


class MapsToStructsError(Exception):
    """Base exception for all mapstostructs errors."""


class ReceiverError(MapsToStructsError, TypeError):
    """Raised when an entry point argument has the wrong shape.

    These are detected before any conversion starts.
    """

    def __init__(self, argument: str, expected: str, received: str) -> None:
        """Initialize with the offending argument name and the expected/received kinds."""
        self.argument = argument
        self.expected = expected
        self.received = received
        super().__init__(f"the {argument} argument must be a {expected} but a {received} was given")


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One structural step between the top-level input and a failing value."""

    kind: SegmentKind
    # field name, 1-based row number or rendered map type
    name: str
    owner: str | None = None


class ConversionError(MapsToStructsError, ValueError):
    """Raised when a source value cannot be bound to its target type.

    The message grows one annotation per enclosing struct field, row or map
    entry as the error travels outward; ``path`` holds the same information
    in structured form, outermost segment first.
    """

    def __init__(
        self,
        message: str,
        *,
        expected: str,
        received: object,
        path: tuple[PathSegment, ...] = (),
    ) -> None:
        """Initialize with the composed message, the expected type name and the received value."""
        self.message = message
        self.expected = expected
        self.received = received
        self.path = path
        super().__init__(message)

    @classmethod
    def not_convertible(cls, expected: str, received: object) -> ConversionError:
        """Build the innermost error for a value that matches no conversion."""
        return cls(
            f"must be or be convertible to {expected} type, but received '{render_value(received)}'",
            expected=expected,
            received=received,
        )

    @classmethod
    def bad_map_key(cls, map_type: str, key_type: str, key: object) -> ConversionError:
        """Build the error for a map key that cannot be converted to the key type."""
        return cls(
            f"the map key for a {map_type} must be or be convertible to {key_type} type, "
            f"but received '{render_value(key)}'",
            expected=key_type,
            received=key,
            path=(PathSegment("map_key", map_type),),
        )

    def _wrap(self, message: str, segment: PathSegment) -> ConversionError:
        """Return a copy with ``message`` and ``segment`` pushed outermost."""
        return ConversionError(
            message,
            expected=self.expected,
            received=self.received,
            path=(segment, *self.path),
        )

    def in_field(self, field_name: str, struct_name: str) -> ConversionError:
        """Annotate with the struct field the failure occurred in."""
        return self._wrap(
            f"the {field_name} field for a struct of type {struct_name} {self.message}",
            PathSegment("field", field_name, struct_name),
        )

    def in_row(self, row: int) -> ConversionError:
        """Annotate with the 1-based row of the enclosing sequence."""
        return self._wrap(f"{self.message} in row {row}", PathSegment("row", str(row)))

    def in_map_value(self, map_type: str) -> ConversionError:
        """Annotate with the map whose value failed."""
        return self._wrap(f"the map value for a {map_type} {self.message}", PathSegment("map_value", map_type))


class RecursionDepthError(MapsToStructsError):
    """Raised when the source value nests deeper than the configured ceiling."""

    def __init__(self, max_depth: int) -> None:
        """Initialize with the exceeded depth ceiling."""
        self.max_depth = max_depth
        super().__init__(f"the input is too deeply nested (more than {max_depth} levels)")

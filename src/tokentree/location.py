"""Joinable source locations for diagnostics.

Location wraps the host's NativeSpan behind a small value type. As tokens
combine during parsing, their locations are joined into wider ranges so that
errors can point at the exact run of tokens involved.

Thread Safety:
    Location is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass

from tokentree.config import get_parse_config
from tokentree.native.span import NativeSpan


@dataclass(frozen=True, slots=True)
class Location:
    """An opaque, joinable handle to a region of source text.

    Examples:
            >>> a = Location.from_native(NativeSpan(0, 1, 1, 1, 1, 2))
            >>> b = Location.from_native(NativeSpan(2, 4, 1, 3, 1, 5))
            >>> a.join(b).to_native().end
            4
            >>> a.join(Location.call_site()) is None
            True

    """

    native: NativeSpan

    def __str__(self) -> str:
        return str(self.native)

    @classmethod
    def from_native(cls, native: NativeSpan) -> Location:
        return cls(native)

    def to_native(self) -> NativeSpan:
        return self.native

    @classmethod
    def call_site(cls) -> Location:
        """Synthetic location used when no better location is available."""
        return cls(NativeSpan.call_site())

    @classmethod
    def mixed_site(cls) -> Location:
        """Synthetic location for tokens fabricated by a grammar."""
        return cls(NativeSpan.mixed_site())

    @classmethod
    def new(cls, start: Location, end: Location) -> Location:
        """Create a location running from ``start`` to ``end``.

        Falls back to the mixed-site location when the two cannot be joined.
        """
        return start.join(end) or cls.mixed_site()

    @property
    def is_synthetic(self) -> bool:
        return self.native.is_synthetic

    @property
    def lineno(self) -> int:
        return self.native.lineno

    @property
    def col_offset(self) -> int:
        return self.native.col_offset

    def join(self, other: Location) -> Location | None:
        """Create a location covering both locations.

        Returns:
            The covering location, or None when the host cannot represent it
            (synthetic or cross-file locations, or span joining disabled in
            the active ParseConfig)
        """
        if not get_parse_config().span_join_enabled:
            return None
        joined = self.native.join(other.native)
        return Location(joined) if joined is not None else None

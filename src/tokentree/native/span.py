"""Host source spans.

A NativeSpan records where a token came from. Real spans carry absolute
offsets plus line/column coordinates; synthetic spans (call-site and
mixed-site) stand in for tokens that have no place in the source, such as
tokens fabricated by a grammar for error messages.

Thread Safety:
    NativeSpan is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass

CALL_SITE = "call_site"
MIXED_SITE = "mixed_site"


@dataclass(frozen=True, slots=True)
class NativeSpan:
    """A region of host source text.

    All line and column numbers are 1-indexed; offsets are 0-indexed and
    half-open (``start <= i < end``).

    Attributes:
        start: Absolute start offset in the source buffer
        end: Absolute end offset in the source buffer
        lineno: Starting line number
        col_offset: Starting column
        end_lineno: Ending line number
        end_col_offset: Column just past the last character
        source_file: Source file path (optional)
        site: None for real spans, or CALL_SITE / MIXED_SITE

    """

    start: int = 0
    end: int = 0
    lineno: int = 0
    col_offset: int = 0
    end_lineno: int = 0
    end_col_offset: int = 0
    source_file: str | None = None
    site: str | None = None

    def __str__(self) -> str:
        if self.site is not None:
            return f"<{self.site}>"
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @classmethod
    def call_site(cls) -> NativeSpan:
        """The span of the extension invocation itself."""
        return cls(site=CALL_SITE)

    @classmethod
    def mixed_site(cls) -> NativeSpan:
        """The span used for tokens fabricated by the extension."""
        return cls(site=MIXED_SITE)

    @property
    def is_synthetic(self) -> bool:
        return self.site is not None

    def join(self, other: NativeSpan) -> NativeSpan | None:
        """Create a span covering both spans.

        Returns None when either span is synthetic or the spans come from
        different source files.
        """
        if self.is_synthetic or other.is_synthetic:
            return None
        if self.source_file != other.source_file:
            return None

        first, last = (self, other) if self.start <= other.start else (other, self)
        tail = last if last.end >= first.end else first
        return NativeSpan(
            start=first.start,
            end=tail.end,
            lineno=first.lineno,
            col_offset=first.col_offset,
            end_lineno=tail.end_lineno,
            end_col_offset=tail.end_col_offset,
            source_file=self.source_file,
        )

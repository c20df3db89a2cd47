"""Tests for Location and NativeSpan joining."""

import pytest

from tokentree import Location, NativeSpan, ParseConfig, parse_config_context


def loc(start: int, end: int, source_file: str | None = None) -> Location:
    return Location.from_native(
        NativeSpan(start, end, 1, start + 1, 1, end + 1, source_file=source_file)
    )


class TestJoin:
    """Joining two locations into one covering range."""

    def test_join_covers_both(self) -> None:
        joined = loc(0, 1).join(loc(4, 6))
        assert joined is not None
        native = joined.to_native()
        assert (native.start, native.end) == (0, 6)
        assert (native.col_offset, native.end_col_offset) == (1, 7)

    def test_join_is_order_independent(self) -> None:
        assert loc(0, 1).join(loc(4, 6)) == loc(4, 6).join(loc(0, 1))

    def test_join_contained(self) -> None:
        """Joining with a location inside the first keeps the outer bounds."""
        joined = loc(0, 10).join(loc(2, 3))
        assert (joined.to_native().start, joined.to_native().end) == (0, 10)

    @pytest.mark.parametrize("synthetic", [Location.call_site(), Location.mixed_site()])
    def test_join_with_synthetic_fails(self, synthetic: Location) -> None:
        assert loc(0, 1).join(synthetic) is None
        assert synthetic.join(loc(0, 1)) is None

    def test_join_across_files_fails(self) -> None:
        assert loc(0, 1, "a.rs").join(loc(2, 3, "b.rs")) is None

    def test_join_same_file(self) -> None:
        joined = loc(0, 1, "a.rs").join(loc(2, 3, "a.rs"))
        assert joined is not None
        assert joined.to_native().source_file == "a.rs"

    def test_join_disabled_by_config(self) -> None:
        """A host without span joining reports every join as failed."""
        with parse_config_context(ParseConfig(span_join_enabled=False)):
            assert loc(0, 1).join(loc(2, 3)) is None
        assert loc(0, 1).join(loc(2, 3)) is not None


class TestConstruction:
    """Constructors and accessors."""

    def test_new_joins(self) -> None:
        assert Location.new(loc(0, 1), loc(2, 3)) == loc(0, 1).join(loc(2, 3))

    def test_new_falls_back_to_mixed_site(self) -> None:
        assert Location.new(loc(0, 1), Location.call_site()) == Location.mixed_site()

    def test_round_trip_native(self) -> None:
        native = NativeSpan(3, 4, 2, 1, 2, 2)
        assert Location.from_native(native).to_native() is native

    def test_synthetic_flags(self) -> None:
        assert Location.call_site().is_synthetic
        assert Location.mixed_site().is_synthetic
        assert not loc(0, 1).is_synthetic

    def test_str(self) -> None:
        assert str(loc(4, 5)) == "1:5"
        assert str(loc(4, 5, "unit.rs")) == "unit.rs:1:5"
        assert str(Location.call_site()) == "<call_site>"

    def test_line_and_column(self) -> None:
        location = loc(4, 5)
        assert (location.lineno, location.col_offset) == (1, 5)

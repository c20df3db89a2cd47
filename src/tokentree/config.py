"""ContextVar-based configuration for tokentree.

Settings that describe host capabilities (whether spans can be joined) and
resource budgets (how deeply groups may nest) are read from a ContextVar, so
each thread or asyncio task sees its own configuration without locking.

Usage:
    from tokentree.config import ParseConfig, parse_config_context

    with parse_config_context(ParseConfig(span_join_enabled=False)):
        tokens = TokenInput.from_source("a + b")
        tokens.span(0, 3)  # call-site: joining is unavailable

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable tokentree configuration.

    Attributes:
        span_join_enabled: Whether the host can join spans into a covering
            range. When False, every join reports failure and span lookups
            fall back to the call-site location.
        max_nesting_depth: Deepest group nesting the native lexer accepts,
            and the most active re-entries a recursive parser may make,
            before raising NestingDepthError. None disables the limit.

    """

    span_join_enabled: bool = True
    max_nesting_depth: int | None = 32

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ParseConfig":
        """Create ParseConfig from a dictionary.

        Unknown keys are ignored.

        Example:
            >>> ParseConfig.from_dict({"max_nesting_depth": 8, "other": 1})
            ParseConfig(span_join_enabled=True, max_nesting_depth=8)

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


_DEFAULT_CONFIG: ParseConfig = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "tokentree_parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get the configuration active in the current context."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set the configuration for the current context."""
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Restore the default configuration for the current context."""
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    The previous configuration is restored even if the body raises.

    Example:
        >>> with parse_config_context(ParseConfig(max_nesting_depth=4)):
        ...     get_parse_config().max_nesting_depth
        4

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "ParseConfig",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
]

"""ContextVar-based format configuration for erlpretty.

Provides thread-local configuration using Python's ContextVars (PEP 567).
A config is usually passed straight to ``format()``; when it is omitted the
config active in the current context is used.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Explicit config
    from erlpretty import FormatConfig, format
    text = format(tree, FormatConfig(paper=100, ribbon=72))

    # Or set it for a whole block of work
    with format_config_context(FormatConfig.for_profile("classic")):
        text = format(tree)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from enum import Enum

from erlpretty.errors import ConfigError


class TextEncoding(Enum):
    """Source encoding of the generated text.

    Only affects how atoms, characters and strings spell code points
    outside printable ASCII.

    """

    UTF8 = "utf8"
    LATIN1 = "latin1"


PAPER = 80
RIBBON = 56
BREAK_INDENT = 4
SUB_INDENT = 2

# Ribbon widths of the known profiles. "classic" matches the documented
# default of the stock Erlang pretty printer.
PROFILES: dict[str, int] = {
    "default": RIBBON,
    "classic": 65,
}


@dataclass(frozen=True, slots=True)
class FormatConfig:
    """Immutable format configuration.

    Attributes:
        paper: Preferred maximum number of characters on any line,
            including indentation
        ribbon: Preferred maximum number of characters on any line,
            not counting indentation
        break_indent: Indentation for broken clause bodies and operands
        sub_indent: Indentation for nested blocks (case/if/receive bodies)
        encoding: Encoding of the generated source text

    """

    paper: int = PAPER
    ribbon: int = RIBBON
    break_indent: int = BREAK_INDENT
    sub_indent: int = SUB_INDENT
    encoding: TextEncoding = TextEncoding.UTF8

    def __post_init__(self) -> None:
        if self.paper <= 0:
            raise ConfigError(f"paper must be positive, got {self.paper}")
        if self.ribbon <= 0:
            raise ConfigError(f"ribbon must be positive, got {self.ribbon}")
        if self.break_indent < 0 or self.sub_indent < 0:
            raise ConfigError("indentation must not be negative")
        if not isinstance(self.encoding, TextEncoding):
            # Accept the plain string spelling ("utf8", "latin1")
            try:
                object.__setattr__(self, "encoding", TextEncoding(self.encoding))
            except ValueError:
                raise ConfigError(f"unknown encoding {self.encoding!r}") from None

    @classmethod
    def for_profile(cls, profile: str, **overrides: object) -> "FormatConfig":
        """Create a config from a named ribbon profile.

        Args:
            profile: One of the names in ``PROFILES``
            **overrides: Field values that take precedence over the profile

        Raises:
            ConfigError: If the profile is unknown.

        """
        try:
            ribbon = PROFILES[profile]
        except KeyError:
            raise ConfigError(f"unknown profile {profile!r}") from None
        values: dict[str, object] = {"ribbon": ribbon}
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]

    @classmethod
    def from_dict(cls, config_dict: dict) -> "FormatConfig":
        """Create FormatConfig from dictionary.

        Useful when options come from a build tool's configuration file.
        A ``profile`` key selects the base ribbon width; explicit keys win.
        Only includes keys that are valid FormatConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = FormatConfig.from_dict({
            ...     "paper": 100,
            ...     "encoding": "latin1",
            ...     "unknown_key": "ignored",
            ... })
            >>> config.paper
            100

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        profile = config_dict.get("profile")
        if profile is not None:
            return cls.for_profile(profile, **filtered)
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: FormatConfig = FormatConfig()

_format_config: ContextVar[FormatConfig] = ContextVar(
    "format_config",
    default=_DEFAULT_CONFIG,
)


def get_format_config() -> FormatConfig:
    """Get current format configuration (thread-local)."""
    return _format_config.get()


def set_format_config(config: FormatConfig) -> None:
    """Set format configuration for current context.

    Only affects the current thread's context. Other threads are unaffected.

    """
    _format_config.set(config)


def reset_format_config() -> None:
    """Reset to default configuration."""
    _format_config.set(_DEFAULT_CONFIG)


@contextmanager
def format_config_context(config: FormatConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Example:
        >>> with format_config_context(FormatConfig(paper=60)):
        ...     get_format_config().paper
        60

    Properly restores the previous config even if an exception is raised.

    """
    previous = _format_config.get()
    _format_config.set(config)
    try:
        yield
    finally:
        _format_config.set(previous)


__all__ = [
    "FormatConfig",
    "PROFILES",
    "TextEncoding",
    "format_config_context",
    "get_format_config",
    "reset_format_config",
    "set_format_config",
]

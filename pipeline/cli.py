"""Argument helpers shared by the role entrypoints."""

from pipeline.exceptions import ConfigError


def positive_int(value: str, name: str = "argument") -> int:
    """Parse a strictly positive integer command line argument."""
    try:
        number = int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}", field=name) from None
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {number}", field=name)
    return number

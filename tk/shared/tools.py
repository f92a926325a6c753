import re

import click

# Go style durations, i.e. 1m, 90s, 1h30m, 500ms
_duration_units: dict = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_duration_part = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")


# docstrings
def docstrings(*sub):
    """Returns a docstring that substitutes values."""

    def dec(obj):
        obj.__doc__ = obj.__doc__.format(*sub)
        return obj

    return dec


def tk_log(msg: str, level: str = "info") -> None:
    """Writes a message to the console."""
    level = level.upper()
    click.echo(f"tk - [{level}] - {msg}", err=level in ("ERROR", "WARNING"))


def parse_duration(value: str) -> float:
    """Converts a duration string into seconds.

    Args:
        value (str): The duration, i.e. "5m" or "1h30m". A bare "0" is accepted.

    Returns:
        float: The duration in seconds.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    _value = (value or "").strip()
    if _value == "0":
        return 0.0

    _pos = 0
    _total = 0.0
    for match in _duration_part.finditer(_value):
        if match.start() != _pos:
            break
        _total += float(match.group(1)) * _duration_units[match.group(2)]
        _pos = match.end()

    if _pos == 0 or _pos != len(_value):
        raise ValueError(f"invalid duration {value!r}")

    return _total


class Duration(click.ParamType):
    """Validates a duration flag, the original string is kept for the manifest."""

    name = "duration"

    def convert(self, value, param, ctx):
        try:
            parse_duration(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)

        return value

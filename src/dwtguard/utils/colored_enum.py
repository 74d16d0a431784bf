# topmark:header:start
#
#   project      : DwtGuard
#   file         : colored_enum.py
#   file_relpath : src/dwtguard/utils/colored_enum.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""String enum carrying a display colorizer.

`ColoredStrEnum` members compare and serialize as their plain text value, while
`.color` exposes a callable (typically a `yachalk` builder) for terminal output.

Example:
    ```python
    from yachalk import chalk

    class Outcome(ColoredStrEnum):
        UPDATED = ("updated", chalk.green)
        FAILED = ("failed", chalk.red_bright)

    print(Outcome.UPDATED.styled())
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class Colorizer(Protocol):
    """Callable that decorates a string for display.

    Compatible with `yachalk.ChalkBuilder.__call__`.
    """

    def __call__(self, *args: object, sep: str = " ") -> str:
        """Colorize ``args`` joined by ``sep``."""
        ...


class ColoredStrEnum(str, Enum):
    """Enum whose value is a string and that carries an associated colorizer."""

    _value_: str
    _color: Colorizer

    def __new__(cls, text: str, color: Colorizer) -> ColoredStrEnum:
        """Construct a member storing ``text`` as value and ``color`` aside.

        Args:
            text (str): The textual value of the member.
            color (Colorizer): Callable used to colorize text for display.

        Returns:
            ColoredStrEnum: The new member.
        """
        obj: ColoredStrEnum = str.__new__(cls, text)
        obj._value_ = text
        obj._color = color
        return obj

    @property
    def value(self) -> str:
        """Textual value of the member."""
        return self._value_

    @property
    def color(self) -> Colorizer:
        """Colorizer associated with the member."""
        return self._color

    def styled(self) -> str:
        """Return the member's value rendered with its own colorizer."""
        return self._color(self._value_)

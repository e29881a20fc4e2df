"""Display formatting helpers.

All helpers are pure and accept ``None`` for values that Zerion or Zapper
may leave out, returning an empty result instead of raising.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from treasury_dashboard.core.models import Changes

_NAME_SEPARATORS = re.compile(r"\s|\.")
_INITIAL = re.compile(r".\d*")

# Values at or above this magnitude drop their fraction digits in adaptive mode
ADAPTIVE_THRESHOLD = 1000


def initials(name: str | None) -> str:
    """
    Build up to three initials from a display name.

    The name is split on whitespace and dots; each of the first three terms
    contributes its first character plus any digits right after it, so
    version tags survive.

    Examples
    --------
    >>> initials("Uniswap V3")
    'UV3'
    >>> initials("a.b.c.d")
    'ABC'

    """
    if not name:
        return ""
    terms = _NAME_SEPARATORS.split(name)[:3]
    return "".join(_initial(term) for term in terms).upper()


def _initial(term: str) -> str:
    match = _INITIAL.match(term)
    return match.group(0) if match else ""


def capitalize(label: str | None) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    if not label:
        return ""
    return label[0].upper() + label[1:]


def format_number(value: float | None, decimals: int | None = None) -> str:
    """
    Format a number with thousands separators.

    Parameters
    ----------
    value : float | None
        Number to format; ``None`` yields an empty string
    decimals : int | None
        Exact number of fraction digits. When omitted, 0 digits are used
        for magnitudes of 1000 and above and 2 digits otherwise.

    Returns
    -------
    str
        Formatted number, e.g. ``"1,235"`` or ``"12.35"``

    Examples
    --------
    >>> format_number(1234.5)
    '1,235'
    >>> format_number(12.3456, 2)
    '12.35'

    """
    if value is None:
        return ""
    if not math.isfinite(value):
        return str(value)

    if decimals is None:
        decimals = 0 if abs(value) >= ADAPTIVE_THRESHOLD else 2

    number = Decimal(str(value))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + decimals + 2)
        # Halves round away from zero, like toLocaleString
        rounded = number.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        rounded = abs(rounded)
    return f"{rounded:,.{decimals}f}"


def format_usd(value: float | None, decimals: int | None = None) -> str:
    """Format a USD amount as ``$1,234``; empty for ``None``."""
    if value is None:
        return ""
    return "$" + format_number(value, decimals)


class ChangeDirection(StrEnum):
    """Styling bucket for a value change. There is no neutral bucket."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


class ChangeLabel(BaseModel):
    """
    Rendered one-day change.

    Attributes
    ----------
    text : str
        e.g. ``"+1.25% ($310.00)"``
    direction : ChangeDirection
        Styling bucket

    """

    model_config = ConfigDict(frozen=True)

    text: str
    direction: ChangeDirection

    @property
    def is_positive(self) -> bool:
        return self.direction == ChangeDirection.POSITIVE


def classify_change(changes: Changes | None) -> ChangeLabel | None:
    """
    Render a one-day change with its styling bucket.

    Only a strictly positive absolute change is positive; zero is styled
    as negative and rendered without a sign.

    Returns
    -------
    ChangeLabel | None
        None when Zerion reported no change data

    """
    if changes is None or changes.absolute_1d is None or changes.percent_1d is None:
        return None

    if changes.absolute_1d > 0:
        direction = ChangeDirection.POSITIVE
        sign = "+"
    else:
        direction = ChangeDirection.NEGATIVE
        sign = ""

    percent = format_number(changes.percent_1d, 2)
    absolute = format_number(abs(changes.absolute_1d), 2)
    return ChangeLabel(text=f"{sign}{percent}% (${absolute})", direction=direction)


class IconComposition(BaseModel):
    """
    Icons to draw for a multi-token asset.

    Attributes
    ----------
    primary : list[str]
        Full-size icon URLs, in drawing order
    badge : str | None
        Small app icon overlaid on the primary icons
    overflow : str | None
        ``"+N"`` counter for token icons that were not drawn

    """

    model_config = ConfigDict(frozen=True)

    primary: list[str]
    badge: str | None = None
    overflow: str | None = None


def compose_icons(images: list[str], app_image: str) -> IconComposition:
    """
    Decide which icons represent an asset.

    - no token images: the app icon alone
    - one or two token images: those icons plus the app badge
    - three or more: the first token icon, the app badge and ``"+N"``
      where N is the number of token images minus one
    """
    if not images:
        return IconComposition(primary=[app_image])
    if len(images) <= 2:
        return IconComposition(primary=list(images), badge=app_image)
    return IconComposition(
        primary=[images[0]],
        badge=app_image,
        overflow=f"+{len(images) - 1}",
    )

"""View projections over the in-memory filament collection.

Pure functions: nothing here talks to the backend or touches the data file.
"""

import math
from numbers import Real

from backend.app.schemas.filament import DEFAULT_COLOR

# Brightness above which the dark spool outline is drawn over the fill
SPOOL_BRIGHTNESS_THRESHOLD = 125


def parse_amount(value) -> float | None:
    """Coerce user input to a finite number, or None if it isn't one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip()) if value.strip() else 0.0
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    # Whole numbers stay ints so they serialize the way they were typed
    return int(number) if number.is_integer() else number


def mass_of(filament: dict, field: str) -> float:
    """Numeric value of a mass field. Imported records may hold strings."""
    return parse_amount(filament.get(field)) or 0


def is_empty(filament: dict) -> bool:
    """A spool with no mass left (or a negative one) is empty."""
    return mass_of(filament, "currentMass") <= 0


def matches_search(filament: dict, query: str) -> bool:
    needle = (query or "").lower()
    if not needle:
        return True
    for field in ("name", "brand", "material"):
        value = filament.get(field) or ""
        if needle in str(value).lower():
            return True
    return False


def search_filaments(filaments: list[dict], query: str) -> list[dict]:
    """Case-insensitive substring match on name, brand or material."""
    return [f for f in filaments if matches_search(f, query)]


def partition_filaments(filaments: list[dict]) -> tuple[list[dict], list[dict]]:
    """Split into (available, empty), each keeping collection order."""
    available = [f for f in filaments if not is_empty(f)]
    empty = [f for f in filaments if is_empty(f)]
    return available, empty


def percent_remaining(filament: dict) -> float:
    start = mass_of(filament, "startMass")
    if not start:
        return 0
    return mass_of(filament, "currentMass") / start * 100


def gauge_percent(filament: dict) -> float:
    """Percentage to draw on the spool gauge.

    Clamped to [0, 100]. Empty spools are drawn full so the colour stays
    visible in the empty section.
    """
    if is_empty(filament):
        return 100
    return min(100, max(0, percent_remaining(filament)))


def remaining_after_use(current_mass, used) -> float | None:
    """New mass after using `used` grams, clamped at zero.

    Returns None when `used` is not a positive number.
    """
    amount = parse_amount(used)
    if amount is None or amount <= 0:
        return None
    return max(0, (parse_amount(current_mass) or 0) - amount)


def spool_colour(filament: dict) -> str:
    return filament.get("color") or DEFAULT_COLOR


def colour_brightness(hex_colour: str | None) -> float:
    """Perceived brightness (0-255) of a #rgb or #rrggbb colour."""
    if not hex_colour:
        return 0
    c = hex_colour.strip().lstrip("#")
    if len(c) == 3:
        c = "".join(x + x for x in c)
    try:
        r = int(c[0:2], 16)
        g = int(c[2:4], 16)
        b = int(c[4:6], 16)
    except ValueError:
        return 0
    return 0.299 * r + 0.587 * g + 0.114 * b


def spool_image(hex_colour: str | None) -> str:
    if colour_brightness(hex_colour) > SPOOL_BRIGHTNESS_THRESHOLD:
        return "spool-black.png"
    return "spool-white.png"

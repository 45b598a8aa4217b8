"""Integer-unit helpers.

Balances travel as integer strings in the asset's smallest unit; the
formatted decimal strings built here are derived, never authoritative.
"""

from typing import Union

IntLike = Union[int, str]


def _split(raw: IntLike, decimals: int):
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    value = int(raw)
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), 10 ** decimals)
    return sign, whole, frac


def format_units(raw: IntLike, decimals: int) -> str:
    """Scale a raw integer amount by 10^decimals, trimming trailing zeros.

    Keeps at least one fractional digit, e.g. ``format_units(1500000, 6)``
    gives ``"1.5"`` and ``format_units(0, 18)`` gives ``"0.0"``.
    """
    sign, whole, frac = _split(raw, decimals)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{sign}{whole}.{frac_str or '0'}"


def format_fixed(raw: IntLike, decimals: int) -> str:
    """Scale a raw integer amount keeping exactly ``decimals`` fractional digits.

    ``format_fixed(100000000, 8)`` gives ``"1.00000000"``.
    """
    sign, whole, frac = _split(raw, decimals)
    if not decimals:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{str(frac).rjust(decimals, '0')}"


def parse_hex_quantity(value: str) -> int:
    """Decode a JSON-RPC hex quantity ("0x1a") into an int.

    Raises:
        ValueError: If the value is not a hex string
    """
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError(f"Not a hex quantity: {value!r}")
    # "0x" alone is what some nodes return for an empty eth_call result
    return int(value, 16) if len(value) > 2 else 0

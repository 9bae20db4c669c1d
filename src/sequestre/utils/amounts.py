"""
Token amount conversion.

Converts between human-entered decimal amounts ("120.5") and the integer
base units the token program moves ("120500000" for 6 decimals).
"""


def decimal_to_base_units(text: str, decimals: int) -> str:
    """
    Convert a decimal amount string to base units.

    The fractional part is padded with zeros or truncated to exactly
    ``decimals`` digits. Extra precision is discarded, never rounded.
    A missing integer part counts as zero (".5" is 0.5). Only ASCII digits
    and one point are accepted: signs, digit separators ("1_000") and a
    second point are rejected.

    Args:
        text: Decimal amount, e.g. "120" or "120.5"
        decimals: Token decimals (6 for USDC)

    Returns:
        Integer amount in base units, as a string

    Raises:
        ValueError: If the text is not an unsigned decimal number

    Examples:
        >>> decimal_to_base_units("120.5", 2)
        '12050'
        >>> decimal_to_base_units("1.9999999", 6)
        '1999999'
    """
    parts = text.strip().split(".")
    if len(parts) > 2:
        raise ValueError(f"More than one decimal point: {text!r}")
    for part in parts:
        if part and not (part.isascii() and part.isdigit()):
            raise ValueError(f"Not a decimal amount: {text!r}")

    whole = parts[0]
    fraction = parts[1] if len(parts) > 1 else ""

    fraction = (fraction + "0" * decimals)[:decimals]

    value = int(whole or "0") * 10**decimals + int(fraction or "0")
    return str(value)


def base_units_to_decimal(base_units, decimals: int) -> str:
    """
    Convert base units back to a decimal amount string.

    Trailing fractional zeros are trimmed, so the output fed back into
    ``decimal_to_base_units`` yields the original base units.

    Examples:
        >>> base_units_to_decimal("12050", 2)
        '120.5'
        >>> base_units_to_decimal(120000000, 6)
        '120'
    """
    value = int(base_units)
    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10**decimals)

    if decimals == 0 or fraction == 0:
        return f"{sign}{whole}"

    digits = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole}.{digits}"

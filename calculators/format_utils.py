"""
Display formatting helpers for portfolio reports.

These helpers only shape numbers for display; no calculation reads their
output.
"""

import math

# Format: (threshold, suffix), largest first
COMPACT_SUFFIXES = [
    (1e12, 'T'),
    (1e9, 'B'),
    (1e6, 'M'),
    (1e3, 'K'),
]


def _trim(value: float) -> str:
    """Round to two decimals and drop trailing zeros (4.50 -> 4.5, 2.00 -> 2)."""
    text = f"{value:.2f}".rstrip('0').rstrip('.')
    return '0' if text == '-0' else text


def format_currency(value: float) -> str:
    """
    Format a dollar amount in compact notation.

    Args:
        value: Amount to format

    Returns:
        String such as "$4.5", "$1.23K", "$2M" or "-$3.5B"

    Example:
        >>> format_currency(1234.5)
        '$1.23K'
    """
    if math.isnan(value):
        return "$NaN"
    if math.isinf(value):
        return "-$∞" if value < 0 else "$∞"

    sign = '-' if value < 0 else ''
    magnitude = abs(value)

    for index, (threshold, suffix) in enumerate(COMPACT_SUFFIXES):
        if magnitude >= threshold:
            scaled = round(magnitude / threshold, 2)
            # 999.999K rounds up to 1000K; promote to the next suffix
            if scaled >= 1000 and index > 0:
                larger_threshold, larger_suffix = COMPACT_SUFFIXES[index - 1]
                return f"{sign}${_trim(magnitude / larger_threshold)}{larger_suffix}"
            return f"{sign}${_trim(scaled)}{suffix}"

    scaled = round(magnitude, 2)
    if scaled >= 1000:
        return f"{sign}$1K"
    text = _trim(scaled)
    if text == '0':
        sign = ''
    return f"{sign}${text}"


def format_percent(value: float) -> str:
    """Format a decimal rate as a percentage with one decimal (0.085 -> "8.5%")."""
    return f"{value * 100:.1f}%"

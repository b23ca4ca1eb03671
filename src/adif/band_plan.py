"""Frequency-to-band lookup.

This module maps a frequency in MHz onto an amateur band name using a
fixed table of inclusive ranges.
"""

from __future__ import annotations

from core.constants import UNKNOWN_BAND

BAND_RANGES_MHZ: tuple[tuple[float, float, str], ...] = (
    (1.8, 2.0, "160m"),
    (3.5, 4.0, "80m"),
    (5.3, 5.4, "60m"),
    (7.0, 7.3, "40m"),
    (10.1, 10.15, "30m"),
    (14.0, 14.35, "20m"),
    (18.068, 18.168, "17m"),
    (21.0, 21.45, "15m"),
    (24.89, 24.99, "12m"),
    (28.0, 29.7, "10m"),
    (50.0, 54.0, "6m"),
    (144.0, 148.0, "2m"),
    (420.0, 450.0, "70cm"),
)


def frequency_to_band(frequency_mhz: float) -> str:
    """Return the band containing a frequency.

    Args:
        frequency_mhz: Frequency in MHz.

    Returns:
        Band name such as ``20m``, or the unknown-band sentinel.
    """
    for lower, upper, band in BAND_RANGES_MHZ:
        if lower <= frequency_mhz <= upper:
            return band
    return UNKNOWN_BAND

"""
Station number helpers.

NVE station numbers are written rrmmmmm: the regine (region) number followed
by a five-digit main (sequence) number, i.e. number = regine * 100000 + main.
"""

from typing import Tuple

STATION_FACTOR = 100000


def split_station_number(station_number: int) -> Tuple[int, int]:
    """
    Split a station number into (region, sequence).

    Examples:
        >>> split_station_number(200011)
        (2, 11)
    """
    station_number = int(station_number)
    if station_number < 0:
        raise ValueError(f"Station number must be non-negative, got {station_number}")
    region = station_number // STATION_FACTOR
    return region, station_number - region * STATION_FACTOR


def station_number(region: int, sequence: int) -> int:
    """
    Compose a station number from region and sequence.

    Examples:
        >>> station_number(2, 11)
        200011
    """
    if not 0 <= int(sequence) < STATION_FACTOR:
        raise ValueError(f"Sequence number must be in [0, {STATION_FACTOR}), got {sequence}")
    return int(region) * STATION_FACTOR + int(sequence)


def station_label(station_number: int) -> str:
    """Label used in meteorological tables, e.g. '2.11.0'"""
    region, sequence = split_station_number(station_number)
    return f"{region}.{sequence}.0"

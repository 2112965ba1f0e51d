"""
Seat layout for the city bus fleet: 10 rows of columns A-E, 50 seats.
"""

import re
from typing import List

SEAT_COLUMNS = "ABCDE"
SEAT_ROWS = 10
TOTAL_SEATS = len(SEAT_COLUMNS) * SEAT_ROWS

# Seats shown as taken on a fresh layout; filled first when seeding
DEFAULT_BOOKED_SEATS = ['A2', 'B3', 'C1', 'D4', 'E5', 'A7', 'C8', 'D9', 'E2']

_SEAT_PATTERN = re.compile(rf'^[{SEAT_COLUMNS}](10|[1-9])$')


def all_seat_numbers() -> List[str]:
    """Every seat in row order: A1, B1, C1, D1, E1, A2, ..."""
    return [f"{col}{row}" for row in range(1, SEAT_ROWS + 1) for col in SEAT_COLUMNS]


def is_valid_seat(seat_number: str) -> bool:
    return bool(_SEAT_PATTERN.match(seat_number))


def seats_to_prebook(count: int) -> List[str]:
    """
    Deterministic set of already-taken seats for a bus with `count` bookings.

    The default booked seats come first, then the remaining seats in row order.
    """
    count = min(TOTAL_SEATS, max(0, count))
    ordered = DEFAULT_BOOKED_SEATS + [s for s in all_seat_numbers() if s not in DEFAULT_BOOKED_SEATS]
    return ordered[:count]

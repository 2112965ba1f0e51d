"""
Input validation utilities for the city bus API.
Provides validation functions for coordinates, stop names, seats, passengers and payments.
"""

import re
from typing import List

from utils.seat_layout import is_valid_seat


class CoordinateValidationError(ValueError):
    """Raised when coordinate validation fails."""
    pass


class SeatValidationError(ValueError):
    """Raised when a seat selection is malformed."""
    pass


class PaymentValidationError(ValueError):
    """Raised when payment details are incomplete."""
    pass


PAYMENT_METHODS = ("upi", "qr", "card", "netbanking", "wallet")

MAX_STOP_NAME_LENGTH = 100


def validate_latitude(lat: float) -> float:
    """
    Validate latitude is within valid range.

    Args:
        lat: Latitude in decimal degrees

    Returns:
        Validated latitude

    Raises:
        CoordinateValidationError: If latitude is out of range
    """
    if not isinstance(lat, (int, float)):
        raise CoordinateValidationError(f"Latitude must be a number, got {type(lat)}")

    if not -90 <= lat <= 90:
        raise CoordinateValidationError(f"Latitude must be between -90 and 90, got {lat}")

    return float(lat)


def validate_longitude(lon: float) -> float:
    """
    Validate longitude is within valid range.

    Raises:
        CoordinateValidationError: If longitude is out of range
    """
    if not isinstance(lon, (int, float)):
        raise CoordinateValidationError(f"Longitude must be a number, got {type(lon)}")

    if not -180 <= lon <= 180:
        raise CoordinateValidationError(f"Longitude must be between -180 and 180, got {lon}")

    return float(lon)


def validate_stop_name(name: str, field: str = "stop") -> str:
    """
    Validate a stop name supplied by a client.

    Unknown names are allowed; only empty or oversized names are rejected.

    Raises:
        ValueError: If the name is blank or too long
    """
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"{field} cannot be empty")

    if len(name) > MAX_STOP_NAME_LENGTH:
        raise ValueError(f"{field} cannot exceed {MAX_STOP_NAME_LENGTH} characters")

    return name.strip()


def validate_seat_numbers(seats: List[str]) -> List[str]:
    """
    Validate a seat selection.

    Args:
        seats: Seat numbers such as "A1" or "E10"

    Returns:
        Upper-cased seat numbers in the order given

    Raises:
        SeatValidationError: If the selection is empty, malformed or repeats a seat
    """
    if not seats:
        raise SeatValidationError("At least one seat must be selected")

    normalized = [s.strip().upper() for s in seats]
    invalid = [s for s in normalized if not is_valid_seat(s)]
    if invalid:
        raise SeatValidationError(f"Unknown seat numbers: {', '.join(invalid)}")

    if len(set(normalized)) != len(normalized):
        raise SeatValidationError("Seat numbers must not repeat")

    return normalized


def validate_phone(phone: str) -> str:
    digits = re.sub(r'[\s-]', '', phone or '')
    if not re.match(r'^\d{10}$', digits):
        raise ValueError('phone must be a 10-digit number')
    return digits


def validate_payment_details(method: str, upi_id: str = None) -> str:
    """
    Validate the selected payment method.

    Raises:
        PaymentValidationError: If the method is unknown or a UPI ID is missing
    """
    method = (method or "").strip().lower()
    if method not in PAYMENT_METHODS:
        raise PaymentValidationError(f"method must be one of: {', '.join(PAYMENT_METHODS)}")

    if method == "upi" and (not upi_id or "@" not in upi_id):
        raise PaymentValidationError("upi_id must look like name@bank for UPI payments")

    return method

import pytest

from utils.seat_layout import DEFAULT_BOOKED_SEATS, TOTAL_SEATS, all_seat_numbers, seats_to_prebook
from utils.validation import (
    CoordinateValidationError, PaymentValidationError, SeatValidationError,
    validate_latitude, validate_payment_details, validate_phone,
    validate_seat_numbers, validate_stop_name
)


def test_seat_numbers_are_normalized():
    assert validate_seat_numbers(["a1", " e10 "]) == ["A1", "E10"]


@pytest.mark.parametrize("seats", [[], ["F1"], ["A11"], ["A0"], ["A1", "a1"]])
def test_bad_seat_selections(seats):
    with pytest.raises(SeatValidationError):
        validate_seat_numbers(seats)


def test_seat_layout():
    seats = all_seat_numbers()
    assert len(seats) == TOTAL_SEATS == 50
    assert seats[:6] == ["A1", "B1", "C1", "D1", "E1", "A2"]


def test_prebooked_seats_start_with_defaults():
    seats = seats_to_prebook(35)
    assert seats[:len(DEFAULT_BOOKED_SEATS)] == DEFAULT_BOOKED_SEATS
    assert len(seats) == len(set(seats)) == 35
    assert seats_to_prebook(80) == seats_to_prebook(50)
    assert seats_to_prebook(-1) == []


def test_phone_validation():
    assert validate_phone("98450-12345") == "9845012345"
    with pytest.raises(ValueError):
        validate_phone("12345")


def test_payment_validation():
    assert validate_payment_details("UPI", "rider@okbank") == "upi"
    assert validate_payment_details("card") == "card"
    with pytest.raises(PaymentValidationError):
        validate_payment_details("upi", "rider")
    with pytest.raises(PaymentValidationError):
        validate_payment_details("cash")


def test_stop_name_validation():
    assert validate_stop_name("  Market ") == "Market"
    with pytest.raises(ValueError):
        validate_stop_name("   ", "from")


def test_latitude_range():
    with pytest.raises(CoordinateValidationError):
        validate_latitude(91)

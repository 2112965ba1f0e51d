import pytest

from transit_data.routes import route_pairs

PASSENGERS = [
    {"name": "Asha", "age": 29, "gender": "female", "phone": "9845012345"},
    {"name": "Ravi", "age": 34, "gender": "male", "phone": "98450 54321"},
]


def _booking(client, **overrides):
    body = {
        "bus_id": "6",
        "from_stop": "Gvt Bus Stand",
        "to_stop": "Navle",
        "travel_date": "2026-11-02",
        "seats": ["D10", "E10"],
        "passengers": PASSENGERS,
    }
    body.update(overrides)
    return client.post("/bookings", json=body)


# Stops

def test_list_stops(client):
    response = client.get("/stops")
    assert response.status_code == 200
    assert len(response.json()) == 36
    assert response.headers["Cache-Control"].startswith("public")
    assert "X-Process-Time" in response.headers


def test_stop_coordinates(client):
    body = client.get("/stops/Market").json()
    assert body == {"name": "Market", "lat": 13.9287, "lng": 75.5672, "fallback": False}


def test_unknown_stop_uses_fallback(client):
    body = client.get("/stops/Atlantis").json()
    assert body["fallback"] is True
    assert (body["lat"], body["lng"]) == (13.9299, 75.5681)


def test_nearest_stop(client):
    body = client.get("/stops/nearest", params={"lat": 13.9287, "lng": 75.5672}).json()
    assert body["name"] == "Market"
    assert body["distance_km"] == 0.0


def test_nearest_stop_rejects_bad_latitude(client):
    response = client.get("/stops/nearest", params={"lat": 120, "lng": 75.5})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


# Routes

def test_list_routes(client):
    body = client.get("/routes").json()
    assert len(body) == len(route_pairs())
    assert {"from_stop": "Market", "to_stop": "JNNC", "stop_count": 5} in body


def test_resolve_forward(client):
    body = client.get("/routes/resolve", params={"from": "Gvt Bus Stand", "to": "JNNC"}).json()
    assert body["source"] == "forward"
    assert body["path"] == ["Gvt Bus Stand", "Market", "Church", "Gurupura", "Vinoba Nagara", "JNNC"]
    assert body["intermediate_stops"] == ["Market", "Church", "Gurupura", "Vinoba Nagara"]
    assert body["distance_km"] > 0


def test_resolve_reverse_and_direct(client):
    reverse = client.get("/routes/resolve", params={"from": "Circuit House", "to": "Gvt Bus Stand"}).json()
    assert reverse["source"] == "reverse"
    assert reverse["path"] == ["Circuit House", "Meghan Hospital", "Gvt Bus Stand"]

    direct = client.get("/routes/resolve", params={"from": "Atlantis", "to": "Market"}).json()
    assert direct["source"] == "direct"
    assert direct["path"] == ["Atlantis", "Market"]
    assert direct["intermediate_stops"] == []


def test_resolve_requires_both_stops(client):
    response = client.get("/routes/resolve", params={"from": "Market"})
    assert response.status_code == 400


def test_route_shape(client):
    body = client.get("/routes/shape", params={"from": "Gvt Bus Stand", "to": "JNNC"}).json()
    assert body["type"] == "FeatureCollection"
    line = body["features"][0]
    assert line["geometry"]["type"] == "LineString"
    assert line["geometry"]["coordinates"][0] == [75.5681, 13.9299]
    assert len(line["geometry"]["coordinates"]) == 6
    points = body["features"][1:]
    assert [p["properties"]["role"] for p in points] == ["origin"] + ["stop"] * 4 + ["destination"]


# Buses

def test_search_buses(client):
    assert len(client.get("/buses").json()) == 6
    body = client.get("/buses", params={"from": "gvt", "to": "navle"}).json()
    assert [b["operator"] for b in body] == ["Anjali"]
    assert client.get("/buses").headers["Cache-Control"].startswith("no-cache")


def test_unknown_bus(client):
    response = client.get("/buses/99")
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "BUS_NOT_FOUND"
    assert error["request_id"]


def test_update_bus_location(client):
    body = client.post("/buses/1/location", json={"location": "Near Market", "delay": 5}).json()
    assert body["current_location"] == "Near Market"
    assert body["delay_minutes"] == 5
    assert body["status"] == "delayed"

    body = client.post("/buses/1/location", json={"location": "Circuit House"}).json()
    assert body["status"] == "on-time"


def test_update_bus_location_rejects_unknown_status(client):
    response = client.post("/buses/1/location", json={"location": "Market", "status": "lost"})
    assert response.status_code == 400


def test_crowd_report(client):
    body = client.get("/buses/6/crowd").json()
    assert body["level"] == "Medium"
    assert body["occupancy_percent"] == 56.0
    assert 28 <= body["onboard_estimate"] <= 32
    assert client.get("/buses/1/crowd").json()["level"] == "High"


# Seats

def test_seat_availability(client):
    body = client.get("/seats/1").json()
    assert body["available_seats"] == 15
    assert len(body["reserved_seats"]) == 35
    assert "A2" in body["reserved_seats"]
    assert len(body["layout"]) == 10
    assert body["layout"][0] == ["A1", "B1", "C1", "D1", "E1"]


def test_reserve_seats(client):
    response = client.post("/seats/reserve", json={"bus_id": "1", "seats": ["e10"]})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["available_seats"] == 14
    assert "E10" in body["reserved_seats"]
    assert client.get("/buses/1").json()["available_seats"] == 14


def test_reserving_taken_seat_conflicts(client):
    client.post("/seats/reserve", json={"bus_id": "1", "seats": ["E10"]})
    response = client.post("/seats/reserve", json={"bus_id": "1", "seats": ["E10"]})
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "SEAT_UNAVAILABLE"

    response = client.post("/seats/reserve", json={"bus_id": "1", "seats": ["A2"]})
    assert response.status_code == 409
    assert client.get("/buses/1").json()["available_seats"] == 14


def test_reserve_rejects_bad_seats(client):
    response = client.post("/seats/reserve", json={"bus_id": "1", "seats": ["Z9"]})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SEAT"

    response = client.post("/seats/reserve", json={"bus_id": "1", "seats": []})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_reserve_on_unknown_bus(client):
    response = client.post("/seats/reserve", json={"bus_id": "99", "seats": ["A1"]})
    assert response.status_code == 404


# Bookings and payment

def test_booking_and_payment(client):
    response = _booking(client)
    assert response.status_code == 201
    booking = response.json()
    assert booking["booking_id"].startswith("SY")
    assert booking["status"] == "pending_payment"
    assert booking["total_amount"] == 30
    assert booking["operator"] == "Anjali"
    assert [p["seat_number"] for p in booking["passengers"]] == ["D10", "E10"]
    assert booking["passengers"][1]["phone"] == "9845054321"
    assert client.get("/seats/6").json()["available_seats"] == 20

    booking_id = booking["booking_id"]
    response = client.post(f"/bookings/{booking_id}/payment", json={"method": "upi", "upi_id": "asha@okbank"})
    assert response.status_code == 200
    result = response.json()
    assert result["status"] == "confirmed"
    assert result["amount_paid"] == 30

    stored = client.get(f"/bookings/{booking_id}").json()
    assert stored["status"] == "confirmed"
    assert stored["payment_method"] == "upi"

    response = client.post(f"/bookings/{booking_id}/payment", json={"method": "card"})
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "BOOKING_STATE_CONFLICT"


def test_booking_needs_one_passenger_per_seat(client):
    response = _booking(client, seats=["D10"])
    assert response.status_code == 400
    assert client.get("/seats/6").json()["available_seats"] == 22


def test_booking_rejects_bad_phone(client):
    passengers = [dict(PASSENGERS[0], phone="123"), PASSENGERS[1]]
    assert _booking(client, passengers=passengers).status_code == 400


def test_booking_taken_seat(client):
    response = _booking(client, seats=["A2", "E10"])
    assert response.status_code == 409
    assert "E10" not in client.get("/seats/6").json()["reserved_seats"]


def test_booking_passenger_seat_must_be_booked(client):
    passengers = [dict(PASSENGERS[0], seat_number="Z99")]
    response = _booking(client, seats=["E10"], passengers=passengers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SEAT"
    assert "E10" not in client.get("/seats/6").json()["reserved_seats"]

    passengers = [dict(PASSENGERS[0], seat_number="D10"), dict(PASSENGERS[1], seat_number="d10")]
    response = _booking(client, passengers=passengers)
    assert response.status_code == 400
    assert client.get("/seats/6").json()["available_seats"] == 22


def test_booking_keeps_named_passenger_seats(client):
    passengers = [PASSENGERS[0], dict(PASSENGERS[1], seat_number=" d10 ")]
    response = _booking(client, passengers=passengers)
    assert response.status_code == 201
    booking = response.json()
    assert booking["seats"] == ["D10", "E10"]
    assert [p["seat_number"] for p in booking["passengers"]] == ["E10", "D10"]


def test_payment_validation(client):
    booking_id = _booking(client).json()["booking_id"]
    response = client.post(f"/bookings/{booking_id}/payment", json={"method": "cash"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PAYMENT"

    response = client.post(f"/bookings/{booking_id}/payment", json={"method": "upi"})
    assert response.status_code == 400


def test_unknown_booking(client):
    response = client.get("/bookings/SYNOPE")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "BOOKING_NOT_FOUND"
    response = client.post("/bookings/SYNOPE/payment", json={"method": "wallet"})
    assert response.status_code == 404


# Assistant

def test_assistant(client):
    body = client.post("/assistant", json={"message": "Which buses go to JNNC?"}).json()
    assert "Veerabhadreshwara" in body["response"]
    assert client.post("/assistant", json={"message": ""}).status_code == 400


# Tracking

def test_tracking_preview(client):
    params = {"from": "Gvt Bus Stand", "to": "JNNC", "percent": 20, "duration": "10m"}
    body = client.get("/tracking/preview", params=params).json()
    assert body["percent_complete"] == 20
    assert body["eta"] == "8 mins"
    assert body["status"] == "in-progress"
    assert body["session_id"] is None
    assert [s["passed"] for s in body["stops"]] == [True, False, False, False]


def test_tracking_preview_clamps_percent(client):
    params = {"from": "Gvt Bus Stand", "to": "JNNC", "percent": 150}
    body = client.get("/tracking/preview", params=params).json()
    assert body["percent_complete"] == 100
    assert body["location_label"] == "JNNC"
    assert body["eta"] == "Arrived"
    assert body["position"]["lat"] == pytest.approx(13.9378)
    assert body["position"]["lng"] == pytest.approx(75.5715)


def test_tracking_session_lifecycle(client):
    response = client.post("/tracking/sessions", json={"from_stop": "Market", "to_stop": "JNNC", "bus_id": "3"})
    assert response.status_code == 201
    snapshot = response.json()
    assert snapshot["running"] is True
    assert snapshot["total_minutes"] == 10
    assert snapshot["path"] == ["Market", "Church", "Gurupura", "Vinoba Nagara", "JNNC"]
    assert snapshot["bus_id"] == "3"

    session_id = snapshot["session_id"]
    assert client.get(f"/tracking/sessions/{session_id}").status_code == 200

    closed = client.delete(f"/tracking/sessions/{session_id}").json()
    assert closed["running"] is False

    response = client.get(f"/tracking/sessions/{session_id}")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SESSION_NOT_FOUND"


def test_tracking_session_errors(client):
    response = client.post("/tracking/sessions", json={"from_stop": "Market", "to_stop": "JNNC", "profile": "fast"})
    assert response.status_code == 400

    response = client.post("/tracking/sessions", json={"from_stop": "Market", "to_stop": "JNNC", "bus_id": "99"})
    assert response.status_code == 404


def test_tracking_session_limit(client):
    body = {"from_stop": "Gopala", "to_stop": "APMC", "profile": "booking"}
    for _ in range(5):
        assert client.post("/tracking/sessions", json=body).status_code == 201
    response = client.post("/tracking/sessions", json=body)
    assert response.status_code == 429
    assert response.json()["error"]["code"] == "SESSION_LIMIT_EXCEEDED"


# System

def test_system_health(client):
    body = client.get("/system/health").json()
    assert body["status"] == "operational"
    assert body["buses"] == 6
    assert body["stops"] == 36
    assert body["routes"] == len(route_pairs())
    assert body["open_tracking_sessions"] == 0


def test_unknown_path_uses_standard_error_body(client):
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert "error" in response.json()

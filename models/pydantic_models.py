from typing import List, Optional
from pydantic import BaseModel, Field, validator
import re

from utils.validation import validate_phone

# Base Models
class RouteFeature(BaseModel):
    type: str = "Feature"
    properties: dict
    geometry: dict

class GeoJSONResponse(BaseModel):
    type: str = "FeatureCollection"
    features: List[RouteFeature]

# Stop Models
class StopCoordinates(BaseModel):
    """A named stop and its coordinates."""
    name: str = Field(..., description="Stop name")
    lat: float = Field(..., ge=-90, le=90, description="Latitude of the stop")
    lng: float = Field(..., ge=-180, le=180, description="Longitude of the stop")
    fallback: bool = Field(False, description="True when the name is unknown and the default point was used")

class NearestStop(StopCoordinates):
    """Stop model with distance information for nearest-stop lookups."""
    distance_km: float = Field(..., ge=0, description="Distance from the query point in kilometers")

# Route Models
class RoutePair(BaseModel):
    """A registered directed route entry."""
    from_stop: str = Field(..., description="Origin stop name")
    to_stop: str = Field(..., description="Destination stop name")
    stop_count: int = Field(..., ge=2, description="Number of stops including both endpoints")

class ResolvedRoute(BaseModel):
    """Best known path between two stops."""
    from_stop: str = Field(..., description="Origin stop name")
    to_stop: str = Field(..., description="Destination stop name")
    path: List[str] = Field(..., description="Ordered stop names including both endpoints")
    intermediate_stops: List[str] = Field(default_factory=list, description="Stops strictly between the endpoints")
    source: str = Field(..., description="How the path was found (forward, reverse, direct)")
    distance_km: float = Field(..., ge=0, description="Great circle length of the path in kilometers")

    @validator('source')
    def validate_source(cls, v):
        if v not in ['forward', 'reverse', 'direct']:
            raise ValueError('source must be one of: forward, reverse, direct')
        return v

# Bus Models
class Bus(BaseModel):
    """Bus listing with live status."""
    bus_id: str = Field(..., description="Unique identifier for the bus")
    operator: str = Field(..., description="Operator name")
    bus_type: str = Field(..., description="Type of bus")
    from_stop: str = Field(..., description="Origin stop name")
    to_stop: str = Field(..., description="Destination stop name")
    departure_time: str = Field(..., description="Departure time in HH:MM format")
    arrival_time: str = Field(..., description="Arrival time in HH:MM format")
    duration: str = Field(..., description="Trip duration estimate, e.g. 15m or 3h 30m")
    price: int = Field(..., ge=0, description="Fare in rupees")
    available_seats: int = Field(..., ge=0, description="Seats still free")
    total_seats: int = Field(..., ge=1, description="Seat capacity")
    rating: float = Field(..., ge=0, le=5, description="Average rider rating")
    amenities: List[str] = Field(default_factory=list, description="On-board amenities")
    current_location: str = Field(..., description="Last reported location label")
    delay_minutes: int = Field(0, ge=0, description="Current delay in minutes")
    status: str = Field("on-time", description="on-time or delayed")

    @validator('departure_time', 'arrival_time')
    def validate_time_format(cls, v):
        if not re.match(r'^\d{2}:\d{2}$', v):
            raise ValueError('Time must be in HH:MM format')
        return v

class BusLocationUpdate(BaseModel):
    """Manual location report for a bus."""
    location: str = Field(..., min_length=1, description="Location label to show riders")
    delay: int = Field(0, ge=0, le=240, description="Delay in minutes")
    status: Optional[str] = Field(None, description="on-time or delayed; derived from delay if omitted")

    @validator('status')
    def validate_status(cls, v):
        if v is not None and v not in ['on-time', 'delayed']:
            raise ValueError('status must be one of: on-time, delayed')
        return v

class CrowdReport(BaseModel):
    """Occupancy-based crowd level of a bus."""
    bus_id: str
    level: str = Field(..., description="Low, Medium or High")
    color: str = Field(..., description="Display color token")
    background: str = Field(..., description="Display background token")
    occupancy_percent: float = Field(..., ge=0, le=100)
    available_seats: int = Field(..., ge=0)
    total_seats: int = Field(..., ge=1)
    onboard_estimate: int = Field(..., ge=0, description="Passengers on board including walk-ins")

# Seat Models
class SeatAvailability(BaseModel):
    """Seat map for a bus."""
    bus_id: str
    total_seats: int = Field(..., ge=1)
    available_seats: int = Field(..., ge=0)
    reserved_seats: List[str] = Field(default_factory=list)
    layout: List[List[str]] = Field(..., description="Seat numbers by row, A-E")

class SeatReservationRequest(BaseModel):
    bus_id: str = Field(..., min_length=1)
    seats: List[str] = Field(..., min_length=1, description="Seat numbers to reserve")

class SeatReservationResponse(BaseModel):
    success: bool
    bus_id: str
    reserved_seats: List[str] = Field(..., description="All reserved seats on the bus")
    available_seats: int = Field(..., ge=0)

# Booking Models
class PassengerInfo(BaseModel):
    """Passenger details for one booked seat."""
    name: str = Field(..., min_length=1, description="Passenger name")
    age: int = Field(..., ge=1, le=120, description="Passenger age")
    gender: str = Field(..., description="Passenger gender")
    phone: str = Field(..., description="10-digit phone number")
    seat_number: Optional[str] = Field(None, description="Seat assigned to this passenger")

    @validator('name', 'gender')
    def validate_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError('field cannot be empty')
        return v.strip()

    @validator('phone')
    def validate_phone_number(cls, v):
        return validate_phone(v)

class BookingRequest(BaseModel):
    bus_id: str = Field(..., min_length=1)
    from_stop: str = Field(..., min_length=1)
    to_stop: str = Field(..., min_length=1)
    travel_date: str = Field(..., description="Travel date in YYYY-MM-DD format")
    seats: List[str] = Field(..., min_length=1)
    passengers: List[PassengerInfo] = Field(..., min_length=1)

    @validator('travel_date')
    def validate_travel_date(cls, v):
        if not re.match(r'^\d{4}-\d{2}-\d{2}$', v):
            raise ValueError('travel_date must be in YYYY-MM-DD format')
        return v

class Booking(BaseModel):
    """Stored booking."""
    booking_id: str
    bus_id: str
    operator: Optional[str] = None
    from_stop: str
    to_stop: str
    travel_date: str
    seats: List[str]
    passengers: List[PassengerInfo]
    total_amount: int = Field(..., ge=0)
    status: str = Field(..., description="pending_payment or confirmed")
    payment_method: Optional[str] = None
    created_at: str

class PaymentRequest(BaseModel):
    method: str = Field(..., description="upi, qr, card, netbanking or wallet")
    upi_id: Optional[str] = Field(None, description="Required for UPI payments")

class PaymentResult(BaseModel):
    booking_id: str
    status: str
    method: str
    amount_paid: int = Field(..., ge=0)
    message: str

# Assistant Models
class AssistantRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=500)

class AssistantResponse(BaseModel):
    response: str

# Tracking Models
class StopProgress(BaseModel):
    """Intermediate stop with the progress at which the bus reaches it."""
    name: str
    threshold_percent: int = Field(..., ge=0, le=100)
    passed: bool

class Position(BaseModel):
    lat: float
    lng: float

class TrackingSnapshot(BaseModel):
    """Current state of a simulated trip."""
    session_id: Optional[str] = Field(None, description="Set for live sessions, empty for previews")
    bus_id: Optional[str] = None
    from_stop: str
    to_stop: str
    path: List[str]
    stops: List[StopProgress] = Field(default_factory=list)
    percent_complete: int = Field(..., ge=0, le=100)
    location_label: str
    eta: str
    status: str = Field(..., description="idle, in-progress or arrived")
    position: Position
    total_minutes: int = Field(..., ge=0)
    ticks: int = Field(0, ge=0)
    running: bool = False

class TrackingSessionRequest(BaseModel):
    from_stop: str = Field(..., min_length=1)
    to_stop: str = Field(..., min_length=1)
    bus_id: Optional[str] = Field(None, description="Bus whose duration estimate drives the ETA")
    duration: Optional[str] = Field(None, description="Duration estimate used when no bus is given")
    profile: Optional[str] = Field(None, description="Tick profile: map or booking")

    @validator('profile')
    def validate_profile(cls, v):
        if v is not None and v not in ['map', 'booking']:
            raise ValueError('profile must be one of: map, booking')
        return v

# System Models
class SystemHealth(BaseModel):
    """Overall service health information."""
    status: str = Field(..., description="Service status (operational, degraded)")
    timestamp: str
    buses: int = Field(..., ge=0)
    stops: int = Field(..., ge=0)
    routes: int = Field(..., ge=0)
    open_tracking_sessions: int = Field(..., ge=0)
    cache: dict = Field(default_factory=dict)

# Error Models
class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: dict = Field(..., description="Error information")

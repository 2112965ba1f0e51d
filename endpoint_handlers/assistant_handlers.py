"""
Keyword-driven travel assistant.
Answers free-text questions about the city fleet by matching lowercase
keywords in a fixed order; the first matching rule wins.
"""

import logging
import re
from typing import List, Optional

from database_connector import DatabaseConnector
from endpoint_handlers.bus_handlers import search_buses_handler
from models.pydantic_models import AssistantResponse, Bus
from utils.progress_simulator import crowd_level

logger = logging.getLogger(__name__)

# Areas the assistant recognises by name, checked in this order
KNOWN_AREAS = [
    'gvt bus stand', 'circuit house', 'market', 'shivamurthy circle',
    'gandhi bazzar', 'kamala nursing home', 'usha nursing home',
    'vinoba nagara', 'gopala', 'gopi circle', 'jnnc', 'navle',
    'sheshadri puram', 'apmc', 'nehru stadium', 'church'
]

GREETING = (
    "Namaste! 🙏 Welcome to SUKHA YATRA - Shivamogga City Bus Service!\n\n"
    "I can help you with:\n"
    "🚌 Finding intra-city buses\n"
    "⏰ Real-time bus schedules\n"
    "💰 Fare information\n"
    "📍 Live bus tracking\n"
    "👥 Crowd reports\n"
    "🗺️ Route information\n\n"
    "Try asking: \"Buses from Gvt Bus Stand to Circuit House\" or \"Show available buses\""
)

HELP_TEXT = (
    "I'm your SUKHA YATRA assistant for Shivamogga city buses! 🚌\n\n"
    "I can help you with:\n"
    "• Bus availability between areas\n"
    "• Timings and schedules\n"
    "• Seat availability and crowd reports\n"
    "• Fare information\n"
    "• Live tracking\n"
    "• Route details with stops\n\n"
    "Try asking: \"Which buses go to JNNC?\" or \"Show bus timings\""
)

TRACKING_TEXT = (
    "🗺️ Live Bus Tracking:\n\n"
    "Every bus can be tracked live. You can:\n"
    "📍 See the bus on the map\n"
    "⏰ Get ETA updates\n"
    "🛣️ View the route with intermediate stops\n"
    "👥 Check crowd levels\n\n"
    "Select any bus and click 'Track' to start!"
)


def _contains_word(message: str, *words: str) -> bool:
    return any(re.search(rf'\b{re.escape(w)}', message) for w in words)


def _area_reply(area: str, buses: List[Bus]) -> Optional[str]:
    area_buses = [b for b in buses if area in b.from_stop.lower() or area in b.to_stop.lower()]
    if not area_buses:
        return None
    info = "\n".join(
        f"\n🚌 {b.operator}\n"
        f"   {b.from_stop} → {b.to_stop}\n"
        f"   Time: {b.departure_time} | Duration: {b.duration}\n"
        f"   Fare: ₹{b.price} | Seats: {b.available_seats}"
        for b in area_buses
    )
    return (
        f"Buses for {area.upper()}:{info}\n\n"
        "All buses run within Shivamogga city. Would you like to track any of these buses?"
    )


def _between_reply(message: str, buses: List[Bus]) -> Optional[str]:
    words = message.split()
    if 'from' not in words or 'to' not in words:
        return None
    from_idx = words.index('from')
    to_idx = words.index('to')
    if to_idx <= from_idx:
        return None

    from_area = " ".join(words[from_idx + 1:to_idx]).strip()
    to_area = " ".join(words[to_idx + 1:]).split('?')[0].strip()
    if not from_area or not to_area:
        return None

    matching = [
        b for b in buses
        if from_area in b.from_stop.lower() and to_area in b.to_stop.lower()
    ]
    if not matching:
        return (
            f"No direct buses found from {from_area} to {to_area}. "
            "Try searching for buses from nearby areas like Gvt Bus Stand or Market."
        )

    info = "\n".join(
        f"\n🚌 {b.operator}\n"
        f"   Time: {b.departure_time} ({b.duration})\n"
        f"   Fare: ₹{b.price} | {b.available_seats} seats available"
        for b in matching
    )
    return f"Buses from {from_area.upper()} to {to_area.upper()}:{info}\n\nClick 'Track' to see live location!"


def _fleet_reply(buses: List[Bus]) -> str:
    info = "\n".join(
        f"\n🚌 {b.operator}: {b.from_stop} → {b.to_stop}\n"
        f"   {b.departure_time} | ₹{b.price} | {b.available_seats} seats"
        for b in buses
    )
    return f"Currently available buses in Shivamogga:{info}\n\nAll buses have live tracking! 📍"


def _timings_reply(buses: List[Bus]) -> str:
    info = "\n".join(
        f"{b.departure_time} - {b.operator} ({b.from_stop} to {b.to_stop})" for b in buses
    )
    return (
        f"Today's bus schedule:\n\n{info}\n\n"
        "All timings are in 24-hour format. Buses run throughout the day in Shivamogga city."
    )


def _fares_reply(buses: List[Bus]) -> str:
    if not buses:
        return HELP_TEXT
    low = min(b.price for b in buses)
    high = max(b.price for b in buses)
    operators = len({b.operator for b in buses})
    return (
        "Shivamogga city bus fares:\n\n"
        f"💰 ₹{low}-{high} for intra-city travel\n"
        f"🚌 {operators} operators available\n"
        "📍 Live tracking included\n\n"
        "Which route would you like?"
    )


def _crowd_reply(buses: List[Bus]) -> str:
    lines = []
    for b in sorted(buses, key=lambda b: b.available_seats, reverse=True):
        crowd = crowd_level(b.available_seats, b.total_seats)
        icon = "✅" if crowd.level == "Low" else "⚠️"
        lines.append(f"{icon} {b.operator}: {b.available_seats} seats ({crowd.level} crowd)")
    return "Seat availability:\n\n" + "\n".join(lines) + "\n\nTrack any bus to see live crowd reports! 🚌"


def assistant_reply(message: str, buses: List[Bus]) -> str:
    """
    Pick the reply for a message.

    Rules, first match wins: a known area name, "from X to Y", bus listing,
    timings, fares, crowd or seats, tracking, greetings, then help text.

    Args:
        message: Free text from the rider
        buses: Current fleet

    Returns:
        Reply text
    """
    lower = message.lower().strip()

    area = next((a for a in KNOWN_AREAS if a in lower), None)
    if area:
        reply = _area_reply(area, buses)
        if reply:
            return reply

    reply = _between_reply(lower, buses)
    if reply:
        return reply

    if 'bus' in lower and ('available' in lower or 'list' in lower):
        return _fleet_reply(buses)

    if 'timing' in lower or 'schedule' in lower or 'time' in lower:
        return _timings_reply(buses)

    if 'price' in lower or 'cost' in lower or 'fare' in lower:
        return _fares_reply(buses)

    if 'crowd' in lower or 'seat' in lower or 'available' in lower:
        return _crowd_reply(buses)

    if 'track' in lower or 'location' in lower or 'where' in lower:
        return TRACKING_TEXT

    if _contains_word(lower, 'hello', 'hi', 'hey', 'namaste'):
        return GREETING

    return HELP_TEXT


def assistant_handler(db: DatabaseConnector, message: str) -> AssistantResponse:
    buses = search_buses_handler(db)
    logger.debug(f"Assistant query: {message!r}")
    return AssistantResponse(response=assistant_reply(message, buses))

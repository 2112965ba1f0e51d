import logging
import random
from typing import List, Optional

import pandas as pd
from fastapi import HTTPException

from database_connector import DatabaseConnector, DatabaseError
from models.pydantic_models import Bus, BusLocationUpdate, CrowdReport
from utils.error_handling import error_handler
from utils.progress_simulator import crowd_level, onboard_estimate

logger = logging.getLogger(__name__)

BUS_COLUMNS = """
    bus_id, operator, bus_type, from_stop, to_stop, departure_time, arrival_time,
    duration, price, available_seats, total_seats, rating, amenities,
    current_location, delay_minutes, status
"""


def row_to_bus(row: pd.Series) -> Bus:
    """Convert one row of the buses table into the API model."""
    amenities = row['amenities'] if isinstance(row['amenities'], str) else ""
    return Bus(
        bus_id=str(row['bus_id']),
        operator=row['operator'],
        bus_type=row['bus_type'],
        from_stop=row['from_stop'],
        to_stop=row['to_stop'],
        departure_time=row['departure_time'],
        arrival_time=row['arrival_time'],
        duration=row['duration'],
        price=int(row['price']),
        available_seats=int(row['available_seats']),
        total_seats=int(row['total_seats']),
        rating=float(row['rating']),
        amenities=[a for a in amenities.split(",") if a],
        current_location=row['current_location'],
        delay_minutes=int(row['delay_minutes']),
        status=row['status']
    )


def fetch_bus(db: DatabaseConnector, bus_id: str) -> Bus:
    """
    Load a single bus or raise a standardized 404.

    Shared by the seat, booking and tracking handlers.
    """
    df = db.execute_df(f"SELECT {BUS_COLUMNS} FROM buses WHERE bus_id = ?", [bus_id])
    if df.empty:
        error_handler.handle_not_found("bus", bus_id)
    return row_to_bus(df.iloc[0])


def search_buses_handler(
    db: DatabaseConnector,
    from_stop: Optional[str] = None,
    to_stop: Optional[str] = None
) -> List[Bus]:
    """
    List buses, optionally filtered by origin and destination.

    Filters are case-insensitive substring matches, so "bus stand" finds
    every bus leaving "Gvt Bus Stand".

    Args:
        db: Database connector instance
        from_stop: Text the origin must contain
        to_stop: Text the destination must contain

    Returns:
        List of Bus objects ordered by departure time
    """
    try:
        query = f"SELECT {BUS_COLUMNS} FROM buses WHERE 1 = 1"
        params = []
        if from_stop:
            query += " AND lower(from_stop) LIKE ?"
            params.append(f"%{from_stop.strip().lower()}%")
        if to_stop:
            query += " AND lower(to_stop) LIKE ?"
            params.append(f"%{to_stop.strip().lower()}%")
        query += " ORDER BY departure_time, bus_id"

        df = db.execute_df(query, params)
        return [row_to_bus(row) for _, row in df.iterrows()]
    except DatabaseError as e:
        error_handler.handle_database_error("bus search", e)


def get_bus_handler(db: DatabaseConnector, bus_id: str) -> Bus:
    try:
        return fetch_bus(db, bus_id)
    except DatabaseError as e:
        error_handler.handle_database_error("bus lookup", e)


def update_bus_location_handler(db: DatabaseConnector, bus_id: str, update: BusLocationUpdate) -> Bus:
    """
    Record a manual location report for a bus.

    When no status is given it follows the delay: any delay means "delayed".
    """
    try:
        fetch_bus(db, bus_id)
        status = update.status or ("delayed" if update.delay > 0 else "on-time")
        db.execute(
            "UPDATE buses SET current_location = ?, delay_minutes = ?, status = ? WHERE bus_id = ?",
            [update.location.strip(), update.delay, status, bus_id]
        )
        logger.info(f"Bus {bus_id} reported at '{update.location}' ({status}, {update.delay} min)")
        return fetch_bus(db, bus_id)
    except HTTPException:
        raise
    except DatabaseError as e:
        error_handler.handle_database_error("bus location update", e)


def get_crowd_report_handler(
    db: DatabaseConnector,
    bus_id: str,
    rng: Optional[random.Random] = None
) -> CrowdReport:
    """
    Crowd level of a bus from its current seat availability.
    """
    try:
        bus = fetch_bus(db, bus_id)
    except DatabaseError as e:
        error_handler.handle_database_error("crowd report", e)

    crowd = crowd_level(bus.available_seats, bus.total_seats)
    return CrowdReport(
        bus_id=bus.bus_id,
        level=crowd.level,
        color=crowd.color,
        background=crowd.background,
        occupancy_percent=round(crowd.occupancy_percent, 1),
        available_seats=bus.available_seats,
        total_seats=bus.total_seats,
        onboard_estimate=onboard_estimate(bus.available_seats, bus.total_seats, rng)
    )


def simulate_fleet_tick(
    db: DatabaseConnector,
    rng: random.Random,
    delay_probability: float = 0.2
) -> int:
    """
    Move every bus to a new simulated position.

    Each bus has a delay_probability chance of a 0-14 minute delay, and its
    location is picked from near the origin, on route, approaching the
    destination, or at the destination.

    Args:
        db: Database connector instance
        rng: Random source, seeded in tests
        delay_probability: Chance that a bus is delayed on this tick

    Returns:
        Number of buses updated
    """
    df = db.execute_df("SELECT bus_id, from_stop, to_stop FROM buses ORDER BY bus_id")

    updated = 0
    with db.transaction():
        for _, row in df.iterrows():
            delay = rng.randint(0, 14) if rng.random() < delay_probability else 0
            locations = [
                f"Near {row['from_stop']}",
                "On Route",
                f"Approaching {row['to_stop']}",
                row['to_stop'],
            ]
            location = rng.choice(locations)
            status = "delayed" if delay > 0 else "on-time"
            db.execute(
                "UPDATE buses SET current_location = ?, delay_minutes = ?, status = ? WHERE bus_id = ?",
                [location, delay, status, row['bus_id']]
            )
            updated += 1

    logger.debug(f"Fleet tick updated {updated} buses")
    return updated

"""
Seed data for the city bus store.
Builds the fleet as a pandas DataFrame and loads it, with the matching seat
reservations, into a DuckDB connection.
"""

import logging

import duckdb
import pandas as pd

from utils.seat_layout import TOTAL_SEATS, seats_to_prebook

logger = logging.getLogger(__name__)


SHIVAMOGGA_FLEET = [
    {
        "bus_id": "1", "operator": "Shashi Kumar", "bus_type": "City Bus",
        "from_stop": "Gvt Bus Stand", "to_stop": "Circuit House",
        "departure_time": "06:00", "arrival_time": "06:15", "duration": "15m",
        "price": 15, "available_seats": 15, "rating": 4.5, "amenities": "wifi,charging,ac",
    },
    {
        "bus_id": "2", "operator": "Manjunatha", "bus_type": "City Bus",
        "from_stop": "Gvt Bus Stand", "to_stop": "Usha Nursing Home",
        "departure_time": "10:30", "arrival_time": "10:40", "duration": "10m",
        "price": 20, "available_seats": 20, "rating": 4.6, "amenities": "wifi,charging,ac",
    },
    {
        "bus_id": "3", "operator": "Veerabhadreshwara", "bus_type": "City Bus",
        "from_stop": "Market", "to_stop": "JNNC",
        "departure_time": "15:00", "arrival_time": "15:10", "duration": "10m",
        "price": 10, "available_seats": 12, "rating": 4.3, "amenities": "charging,ac",
    },
    {
        "bus_id": "4", "operator": "Ganesh Kripa", "bus_type": "City Bus",
        "from_stop": "Gandhi Bazzar", "to_stop": "Kamala Nursing Home",
        "departure_time": "20:00", "arrival_time": "20:05", "duration": "5m",
        "price": 10, "available_seats": 18, "rating": 4.7, "amenities": "wifi,charging,ac",
    },
    {
        "bus_id": "5", "operator": "SBM", "bus_type": "City Bus",
        "from_stop": "Gopala", "to_stop": "APMC",
        "departure_time": "23:30", "arrival_time": "23:45", "duration": "15m",
        "price": 15, "available_seats": 10, "rating": 4.4, "amenities": "charging,ac",
    },
    {
        "bus_id": "6", "operator": "Anjali", "bus_type": "City Bus",
        "from_stop": "Gvt Bus Stand", "to_stop": "Navle",
        "departure_time": "08:00", "arrival_time": "08:10", "duration": "10m",
        "price": 15, "available_seats": 22, "rating": 4.5, "amenities": "wifi,charging,ac",
    },
]


SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS buses (
        bus_id VARCHAR PRIMARY KEY,
        operator VARCHAR,
        bus_type VARCHAR,
        from_stop VARCHAR,
        to_stop VARCHAR,
        departure_time VARCHAR,
        arrival_time VARCHAR,
        duration VARCHAR,
        price INTEGER,
        available_seats INTEGER,
        total_seats INTEGER,
        rating DOUBLE,
        amenities VARCHAR,
        current_location VARCHAR,
        delay_minutes INTEGER,
        status VARCHAR
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS seat_reservations (
        bus_id VARCHAR,
        seat_number VARCHAR,
        booking_id VARCHAR
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS bookings (
        booking_id VARCHAR PRIMARY KEY,
        bus_id VARCHAR,
        from_stop VARCHAR,
        to_stop VARCHAR,
        travel_date VARCHAR,
        seats VARCHAR,
        passengers VARCHAR,
        total_amount INTEGER,
        status VARCHAR,
        payment_method VARCHAR,
        created_at VARCHAR
    )
    """,
]


def fleet_dataframe() -> pd.DataFrame:
    df = pd.DataFrame(SHIVAMOGGA_FLEET)
    df["total_seats"] = TOTAL_SEATS
    df["current_location"] = df["from_stop"]
    df["delay_minutes"] = 0
    df["status"] = "on-time"
    return df


def reservations_dataframe(fleet: pd.DataFrame) -> pd.DataFrame:
    rows = []
    for _, bus in fleet.iterrows():
        for seat in seats_to_prebook(int(bus["total_seats"]) - int(bus["available_seats"])):
            rows.append({"bus_id": bus["bus_id"], "seat_number": seat, "booking_id": None})
    return pd.DataFrame(rows, columns=["bus_id", "seat_number", "booking_id"])


def load_fleet(con: duckdb.DuckDBPyConnection) -> None:
    """Create the schema and load the fleet and its existing reservations."""
    for statement in SCHEMA:
        con.execute(statement)

    existing = con.execute("SELECT COUNT(*) FROM buses").fetchone()[0]
    if existing:
        logger.info(f"Fleet already loaded ({existing} buses), skipping seed")
        return

    fleet = fleet_dataframe()
    reservations = reservations_dataframe(fleet)

    columns = [
        "bus_id", "operator", "bus_type", "from_stop", "to_stop", "departure_time",
        "arrival_time", "duration", "price", "available_seats", "total_seats", "rating",
        "amenities", "current_location", "delay_minutes", "status",
    ]
    con.register("fleet_df", fleet[columns])
    con.execute(f"INSERT INTO buses ({', '.join(columns)}) SELECT {', '.join(columns)} FROM fleet_df")
    con.unregister("fleet_df")

    con.register("reservations_df", reservations)
    con.execute(
        "INSERT INTO seat_reservations (bus_id, seat_number, booking_id) "
        "SELECT bus_id, seat_number, CAST(booking_id AS VARCHAR) FROM reservations_df"
    )
    con.unregister("reservations_df")

    logger.info(f"Loaded {len(fleet)} buses and {len(reservations)} seat reservations")


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=logging.INFO)
    db_path = sys.argv[1] if len(sys.argv) > 1 else "sukha_yatra.duckdb"
    print(f"Connecting to database at {db_path}")
    con = duckdb.connect(db_path)
    load_fleet(con)
    print("Closing database connection")
    con.close()
    print("Done")

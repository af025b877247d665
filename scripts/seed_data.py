"""
Seed a local database with users, sensors and measures.

Goes through the same services as the API, so houseSize gets derived and
every document is validated exactly like a POST would.

Examples:
    # 3 users, 2 sensors each, 24 measures per sensor over the last day
    python scripts/seed_data.py

    # More data, reproducible, starting from an empty database
    python scripts/seed_data.py --users 10 --sensors-per-user 3 --measures 96 --seed 42 --wipe
"""

import argparse
import logging
import os
import random
from datetime import datetime, timedelta, timezone

from dotenv import load_dotenv

from iot_dashboard.client.geo import COUNTRY_COORDINATES
from iot_dashboard.models import MEASURE_UNITS, MeasureType
from iot_dashboard.services import MongoStore, build_services

SENSOR_MODELS = ["DHT22", "BME280", "SDS011", "PMS5003", "SHT31"]
ROOMS = ["kitchen", "bedroom", "living room", "bathroom", "garage"]

# Plausible value range per measure type
VALUE_RANGES = {
    MeasureType.TEMPERATURE: (16.0, 30.0),
    MeasureType.HUMIDITY: (30.0, 70.0),
    MeasureType.AIR_POLLUTION: (5.0, 80.0),
}


def sample_value(measure_type: MeasureType) -> float:
    lo, hi = VALUE_RANGES[measure_type]
    return round(random.uniform(lo, hi), 1)


def seed(services, users: int, sensors_per_user: int, measures: int, interval_minutes: int):
    now = datetime.now(timezone.utc)
    countries = sorted(COUNTRY_COORDINATES)
    total_sensors = 0
    total_measures = 0

    for _ in range(users):
        user = services.users.create({
            "location": random.choice(countries),
            "personsInHouse": random.randint(1, 6),
        })
        print(f"   * User {user['_id']}  {user['location']:<15} {user['houseSize']}")

        for _ in range(sensors_per_user):
            measure_type = random.choice(list(MeasureType))
            sensor = services.sensors.create({
                "type": measure_type.value,
                "model": random.choice(SENSOR_MODELS),
                "location": random.choice(ROOMS),
                "userId": user["_id"],
            })
            total_sensors += 1
            print(f"     - Sensor {sensor['_id']}  {sensor['location']:<12} {measure_type.value} ({MEASURE_UNITS[measure_type]})")

            for step in range(measures):
                services.measures.create({
                    "type": measure_type.value,
                    "creationDate": now - timedelta(minutes=interval_minutes * step),
                    "sensorID": sensor["_id"],
                    "value": sample_value(measure_type),
                })
                total_measures += 1

    print(f"Done: {users} user(s), {total_sensors} sensor(s), {total_measures} measure(s)")


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Seed local data for the IoT dashboard")
    p.add_argument("--users", type=int, default=3, help="Number of users (default: 3)")
    p.add_argument("--sensors-per-user", type=int, default=2, help="Sensors per user (default: 2)")
    p.add_argument("--measures", type=int, default=24, help="Measures per sensor (default: 24)")
    p.add_argument("--interval", type=int, default=60, help="Minutes between measures (default: 60)")
    p.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    p.add_argument("--wipe", action="store_true", help="Drop users/sensors/measures before seeding")
    return p.parse_args()


def main():
    load_dotenv()
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper())
    args = parse_args()
    if args.seed is not None:
        random.seed(args.seed)

    store = MongoStore(
        os.getenv("DATABASE_URL", "mongodb://localhost:27017"),
        os.getenv("DATABASE_NAME", "iot_dashboard"),
    )
    try:
        if args.wipe:
            print("Wipe: dropping users, sensors and measures...")
            for name in ("users", "sensors", "measures"):
                store.database.drop_collection(name)

        print(f"Seeding {args.users} user(s) into {store.database_name}")
        seed(
            build_services(store.database),
            users=args.users,
            sensors_per_user=args.sensors_per_user,
            measures=args.measures,
            interval_minutes=args.interval,
        )
    finally:
        store.close()


if __name__ == "__main__":
    main()

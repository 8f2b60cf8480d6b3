#!/usr/bin/env python3
"""Seed a development database with rooms.

Populates the rooms table with a small catalog (nightly prices and per-night
options) so quotes and bookings work locally.

Usage:
    python scripts/seed_data.py --env dev
    python scripts/seed_data.py --env dev --clear-first
    python scripts/seed_data.py --env dev --region ap-northeast-2
"""

import argparse
import os
import sys

import boto3

# Global region setting (set by main() from args)
_AWS_REGION: str | None = None

# Amounts are integer KRW
ROOMS: list[dict] = [
    {
        "room_id": "room-101",
        "name": "Ocean View Double",
        "price_per_night": 100000,
        "capacity": 2,
        "status": "AVAILABLE",
        "options": [
            {"option_id": "breakfast", "name": "Breakfast", "price": 10000},
            {"option_id": "parking", "name": "Parking", "price": 5000},
        ],
    },
    {
        "room_id": "room-102",
        "name": "Garden Twin",
        "price_per_night": 85000,
        "capacity": 2,
        "status": "AVAILABLE",
        "options": [
            {"option_id": "breakfast", "name": "Breakfast", "price": 10000},
            {"option_id": "extra-bed", "name": "Extra bed", "price": 20000},
        ],
    },
    {
        "room_id": "room-201",
        "name": "Family Suite",
        "price_per_night": 180000,
        "capacity": 4,
        "status": "AVAILABLE",
        "options": [
            {"option_id": "breakfast", "name": "Breakfast", "price": 10000},
            {"option_id": "parking", "name": "Parking", "price": 5000},
            {"option_id": "bbq", "name": "BBQ set", "price": 30000},
        ],
    },
    {
        "room_id": "room-301",
        "name": "Attic Single",
        "price_per_night": 60000,
        "capacity": 1,
        # Closed for renovation
        "status": "UNAVAILABLE",
        "options": [],
    },
]


def get_dynamodb_resource():
    """Get DynamoDB resource with configured region."""
    if _AWS_REGION:
        return boto3.resource("dynamodb", region_name=_AWS_REGION)
    return boto3.resource("dynamodb")


def get_table_name(prefix: str, table: str) -> str:
    """Get full table name with environment prefix."""
    return f"{prefix}-{table}"


def seed_rooms(prefix: str, rooms: list[dict] = ROOMS) -> int:
    """Write the room catalog.

    Returns:
        Number of rooms written
    """
    table = get_dynamodb_resource().Table(get_table_name(prefix, "rooms"))

    print(f"Seeding rooms table: {table.name}")

    with table.batch_writer() as batch:
        for room in rooms:
            batch.put_item(Item=room)
            status = "✓" if room["status"] == "AVAILABLE" else "○"
            print(f"  {status} {room['room_id']} {room['name']} ({room['price_per_night']}/night)")

    return len(rooms)


def clear_table(prefix: str, table_name: str) -> int:
    """Clear all items from a table.

    Returns:
        Number of items deleted
    """
    table = get_dynamodb_resource().Table(get_table_name(prefix, table_name))
    key_attrs = [k["AttributeName"] for k in table.key_schema]

    deleted = 0
    kwargs: dict = {}
    while True:
        response = table.scan(**kwargs)
        with table.batch_writer() as batch:
            for item in response.get("Items", []):
                batch.delete_item(Key={k: item[k] for k in key_attrs})
                deleted += 1
        if not response.get("LastEvaluatedKey"):
            return deleted
        kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]


def main(argv: list[str] | None = None) -> int:
    """Run the seed script."""
    global _AWS_REGION

    parser = argparse.ArgumentParser(description="Seed development database with rooms")
    parser.add_argument(
        "--env",
        choices=["dev", "staging", "prod"],
        default="dev",
        help="Target environment (default: dev)",
    )
    parser.add_argument(
        "--region",
        default=os.environ.get("AWS_DEFAULT_REGION", "ap-northeast-2"),
        help="AWS region (default: ap-northeast-2 or AWS_DEFAULT_REGION env var)",
    )
    parser.add_argument(
        "--table-prefix",
        default=None,
        help="Table prefix (default: DYNAMODB_TABLE_PREFIX or booking-{env})",
    )
    parser.add_argument(
        "--clear-first",
        action="store_true",
        help="Delete rooms, reservations, night locks and payments before seeding",
    )

    args = parser.parse_args(argv)

    # Set global region for boto3 calls
    _AWS_REGION = args.region
    prefix = args.table_prefix or os.environ.get("DYNAMODB_TABLE_PREFIX", f"booking-{args.env}")

    # Safety check for production
    if args.env == "prod":
        confirm = input("⚠️  WARNING: You are about to modify PRODUCTION data. Type 'yes' to continue: ")
        if confirm.lower() != "yes":
            print("Aborted.")
            return 1

    print(f"\n🌱 Seeding {prefix} (region: {args.region})\n")

    if args.clear_first:
        print("Clearing existing data...")
        for table in ["rooms", "reservations", "room-nights", "payments"]:
            count = clear_table(prefix, table)
            print(f"  Cleared {count} items from {table}")
        print()

    seed_rooms(prefix)

    print("\n✅ Seed completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line entry point for the salon availability engine.

Loads schedule, overrides, services and bookings from a JSON file (or a
built-in demo salon) and prints availability as JSON, using the same
camelCase names the booking site receives.

Usage:
    python main.py slots 2025-03-18 --duration 60
    python main.py open-dates --duration 45 --start 2025-03-17 --days 14
    python main.py week 2025-03-17 --data salon.json
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from salon_booking.config import settings
from salon_booking.exceptions import BookingEngineError
from salon_booking.repository import InMemoryRepository
from salon_booking.schemas.booking_schema import Service
from salon_booking.schemas.schedule_schema import RecurringRule
from salon_booking.services.availability import AvailabilityService

logger = logging.getLogger(__name__)

DEMO_SERVICES = [
    Service(id=1, name="Coupe femme", duration_minutes=45, price_cents=4500),
    Service(id=2, name="Coloration", duration_minutes=90, price_cents=8000),
    Service(id=3, name="Brushing", duration_minutes=30, price_cents=2500, is_addon=True),
]


def demo_repository() -> InMemoryRepository:
    """Tuesday to Saturday, split shift 09:00-12:00 / 13:30-18:00."""
    rules = []
    for weekday in range(2, 7):
        rules.append(RecurringRule(day_of_week=weekday, start_time="09:00", end_time="12:00"))
        rules.append(RecurringRule(day_of_week=weekday, start_time="13:30", end_time="18:00"))
    return InMemoryRepository(recurring_rules=rules, services=DEMO_SERVICES)


def load_repository(path: Optional[Path]) -> InMemoryRepository:
    if path is None:
        return demo_repository()
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    return InMemoryRepository.from_dict(data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{settings.salon.name} availability")
    parser.add_argument(
        "--data",
        type=Path,
        default=None,
        help="JSON file with recurringRules, overrides, services and bookings",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    slots = commands.add_parser("slots", help="Slots of one date with availability flags")
    slots.add_argument("date", help="YYYY-MM-DD")
    slots.add_argument("--duration", type=int, required=True, help="Service length in minutes")

    open_dates = commands.add_parser("open-dates", help="Open dates over a window")
    open_dates.add_argument("--duration", type=int, required=True)
    open_dates.add_argument("--start", default=None, help="First date (default: tomorrow)")
    open_dates.add_argument("--days", type=int, default=None, help="Number of dates scanned")

    week = commands.add_parser("week", help="Seven-day admin calendar")
    week.add_argument("start", help="YYYY-MM-DD")
    return parser


async def run(args: argparse.Namespace) -> list[dict[str, Any]]:
    service = AvailabilityService(load_repository(args.data))
    if args.command == "slots":
        result = await service.get_slots_for_date(args.date, args.duration)
    elif args.command == "open-dates":
        result = await service.get_open_dates(args.duration, args.start, args.days)
    else:
        result = await service.get_calendar_week(args.start)
    return [item.model_dump(mode="json", by_alias=True) for item in result]


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        output = asyncio.run(run(args))
    except BookingEngineError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Ledger Record Data Contract

Raw positional records exactly as the ledger gateway returns them: integers
as decimal strings or ints, money in 10^6 minor units, timestamps in epoch
seconds. Field order follows the contract read calls.

Usage:
    factory = LedgerRecordFactory()
    record = factory.make_product_record(price_per_unit="5.50")
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import uuid4

TOKEN_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
GP_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
ROUTES_ADDRESS = "0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0"

BASE_TIME = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _fixed(amount: Any) -> str:
    return str(int(Decimal(str(amount)) * 10 ** 6))


def _epoch(value: datetime) -> int:
    return int(value.timestamp())


class LedgerRecordFactory:
    """Factory for raw ledger tuples used by decoding and coordinator tests"""

    @staticmethod
    def make_address() -> str:
        return "0x" + uuid4().hex + uuid4().hex[:8]

    @staticmethod
    def make_product_record(
        creator: str = "0xAbC0000000000000000000000000000000000001",
        name: str = "Arabica Beans",
        description: str = "Green coffee, 60kg sacks",
        min_quantity: int = 100,
        current_quantity: int = 0,
        price_per_unit: Any = "5.50",
        unit: str = "sack",
        target_amount: Any = "550",
        current_amount: Any = "0",
        deadline: Optional[datetime] = None,
        status: int = 0,
        created_at: Optional[datetime] = None,
        participant_count: int = 0,
        direction: int = 0,
    ) -> List[Any]:
        return [
            creator,
            0,
            direction,
            name,
            description,
            str(min_quantity),
            str(current_quantity),
            _fixed(price_per_unit),
            unit,
            _fixed(target_amount),
            _fixed(current_amount),
            str(_epoch(deadline or BASE_TIME + timedelta(days=30))),
            status,
            str(_epoch(created_at or BASE_TIME)),
            str(participant_count),
            "",
            "",
        ]

    @staticmethod
    def make_container_record(
        creator: str = "0xAbC0000000000000000000000000000000000002",
        name: str = "Shared reefer to Rotterdam",
        description: str = "Frozen fish, -18C",
        origin_port: str = "Walvis Bay",
        destination_port: str = "Rotterdam",
        target_amount: Any = "15000",
        current_amount: Any = "0",
        deadline: Optional[datetime] = None,
        status: int = 0,
        created_at: Optional[datetime] = None,
        participant_count: int = 0,
        direction: int = 1,
    ) -> List[Any]:
        return [
            creator,
            1,
            direction,
            name,
            description,
            "0",
            "0",
            "0",
            "",
            _fixed(target_amount),
            _fixed(current_amount),
            str(_epoch(deadline or BASE_TIME + timedelta(days=45))),
            status,
            str(_epoch(created_at or BASE_TIME)),
            str(participant_count),
            origin_port,
            destination_port,
        ]

    @staticmethod
    def make_requirements_record(
        container_type: int = 5,
        min_temp_celsius: int = -25,
        max_temp_celsius: int = -18,
        max_weight_kg: int = 25000,
        current_weight_kg: int = 0,
        requires_ventilation: bool = False,
        requires_refrigeration: bool = True,
    ) -> List[Any]:
        return [
            container_type,
            str(min_temp_celsius),
            str(max_temp_celsius),
            str(max_weight_kg),
            str(current_weight_kg),
            requires_ventilation,
            requires_refrigeration,
        ]

    @staticmethod
    def make_route_record(
        ship_id: str = "IMO9321483",
        ship_name: str = "MSC Aurora",
        description: str = "West Africa loop",
        departure_port: str = "Walvis Bay",
        capacity: int = 40,
        refrigeration_type: int = 1,
        status: int = 0,
        current_location: str = "Walvis Bay",
    ) -> List[Any]:
        return [
            ship_id,
            ship_name,
            description,
            departure_port,
            str(capacity),
            refrigeration_type,
            status,
            current_location,
        ]

    @staticmethod
    def make_port_record(
        name: str,
        code: str,
        country: str,
        arrival_time: datetime,
        visited: bool = False,
    ) -> List[Any]:
        return [name, code, country, str(_epoch(arrival_time)), visited]

    @classmethod
    def make_itinerary(cls, count: int = 3) -> List[List[Any]]:
        stops = [
            ("Lagos", "NGLOS", "Nigeria"),
            ("Tema", "GHTEM", "Ghana"),
            ("Abidjan", "CIABJ", "Cote d'Ivoire"),
            ("Dakar", "SNDKR", "Senegal"),
        ]
        return [
            cls.make_port_record(name, code, country, BASE_TIME + timedelta(days=3 * (i + 1)))
            for i, (name, code, country) in enumerate(stops[:count])
        ]

    @staticmethod
    def make_port_input(
        name: str = "Lagos",
        code: str = "NGLOS",
        country: str = "Nigeria",
        arrival_time: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        return {
            "name": name,
            "code": code,
            "country": country,
            "arrival_time": (arrival_time or BASE_TIME + timedelta(days=3)).isoformat(),
        }

    @classmethod
    def make_route_create_request(cls, **overrides) -> Dict[str, Any]:
        request = {
            "ship_id": "IMO9321483",
            "ship_name": "MSC Aurora",
            "description": "West Africa loop",
            "departure_port": "Walvis Bay",
            "ports": [
                cls.make_port_input(),
                cls.make_port_input("Tema", "GHTEM", "Ghana", BASE_TIME + timedelta(days=6)),
            ],
            "capacity": 40,
            "refrigeration_type": 1,
        }
        request.update(overrides)
        return request

    @staticmethod
    def make_product_create_request(**overrides) -> Dict[str, Any]:
        request = {
            "name": "Arabica Beans",
            "description": "Green coffee, 60kg sacks",
            "min_quantity": 100,
            "price_per_unit": "5.50",
            "unit": "sack",
            "target_amount": "550",
            "deadline": (BASE_TIME + timedelta(days=30)).isoformat(),
        }
        request.update(overrides)
        return request

    @staticmethod
    def make_container_create_request(**overrides) -> Dict[str, Any]:
        request = {
            "name": "Shared reefer to Rotterdam",
            "description": "Frozen fish, -18C",
            "direction": 1,
            "origin_port": "Walvis Bay",
            "destination_port": "Rotterdam",
            "container_type": "REFRIGERATED_40",
            "min_temp_celsius": -25,
            "max_temp_celsius": -18,
            "max_weight_kg": 25000,
            "requires_ventilation": False,
            "requires_refrigeration": True,
            "target_amount": "15000",
            "deadline": (BASE_TIME + timedelta(days=45)).isoformat(),
        }
        request.update(overrides)
        return request


__all__ = [
    "TOKEN_ADDRESS",
    "GP_ADDRESS",
    "ROUTES_ADDRESS",
    "BASE_TIME",
    "LedgerRecordFactory",
]

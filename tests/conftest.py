"""Pytest configuration and fixtures for hotel-tenancy tests."""

import asyncio
from dataclasses import fields
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

import pytest

from hotel_tenancy.config.constants import BillStatus, StayStatus
from hotel_tenancy.config.settings import HotelTenancySettings
from hotel_tenancy.features.hotel.entities import Bill, Room, Stay
from hotel_tenancy.features.hotel.repositories.bill_repository import BillTotals
from hotel_tenancy.features.hotel.repositories.models import TenantModels
from hotel_tenancy.features.tenants.entities import BillingPolicy, TenantRecord


class FakePool:
    """Stands in for an asyncpg pool: only lifecycle is tracked."""

    def __init__(self, database: Optional[str]):
        self.database = database
        self.closed = False

    def is_closing(self) -> bool:
        return self.closed

    async def close(self) -> None:
        self.closed = True


class FakePoolFactory:
    """Records opens; can fail or block per database name."""

    def __init__(self):
        self.opened: List[FakePool] = []
        self.failing: set = set()
        self.gate: Optional[asyncio.Event] = None

    async def __call__(self, dsn: str, database: Optional[str] = None) -> FakePool:
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if database in self.failing:
            raise ConnectionRefusedError(f"cannot reach {database}")
        pool = FakePool(database)
        self.opened.append(pool)
        return pool

    def opens_for(self, database: Optional[str]) -> int:
        return sum(1 for pool in self.opened if pool.database == database)


class FakeRegistry:
    """In-memory hotel registry."""

    def __init__(self, tenants: Iterable[TenantRecord] = ()):
        self.tenants: Dict[str, TenantRecord] = {t.tenant_id: t for t in tenants}
        self.lookups: List[str] = []

    async def find_active_tenant(self, identifier: str) -> Optional[TenantRecord]:
        self.lookups.append(identifier)
        await asyncio.sleep(0)
        tenant = self.tenants.get(identifier)
        return tenant if tenant is not None and tenant.is_active else None

    async def list_active_tenants(self) -> List[TenantRecord]:
        return [t for t in self.tenants.values() if t.is_active]


class FakeRoomRepository:
    def __init__(self, rooms: Iterable[Room] = ()):
        self.rooms = {room.id: room for room in rooms}

    async def get(self, room_id):
        return self.rooms.get(room_id)


class FakeStayRepository:
    def __init__(self, stays: Iterable[Stay] = ()):
        self.stays = {stay.id: stay for stay in stays}

    async def get(self, stay_id):
        return self.stays.get(stay_id)

    async def list_checked_in(self) -> List[Stay]:
        return [s for s in self.stays.values() if s.status == StayStatus.CHECKED_IN]

    async def list_overdue(self, now: datetime) -> List[Stay]:
        return [s for s in self.stays.values() if s.is_overdue(now)]

    async def count_checked_in(self) -> int:
        return len(await self.list_checked_in())


class FakeBillRepository:
    """Bills keyed by stay; ``save`` merges like the SQL repository does."""

    def __init__(self, bills: Iterable[Bill] = ()):
        self.bills = {bill.stay_id: bill.copy() for bill in bills}
        self.saved: List[Bill] = []
        self.totals = BillTotals()

    async def find_open_for_stay(self, stay_id) -> Optional[Bill]:
        bill = self.bills.get(stay_id)
        return bill.copy() if bill is not None and bill.is_open else None

    async def save(self, bill: Bill) -> Bill:
        stored = self.bills[bill.stay_id].copy()
        stored.replace_reconciled_charges(item for item in bill.items if item.is_reconciled_charge)
        stored.recalculate_totals()
        for f in fields(Bill):
            setattr(bill, f.name, getattr(stored, f.name))
        bill.items = list(stored.items)
        self.bills[bill.stay_id] = stored
        self.saved.append(stored.copy())
        return bill

    async def summarize_created_between(self, start: datetime, end: datetime) -> BillTotals:
        return self.totals


def make_models(rooms=(), stays=(), bills=()) -> TenantModels:
    return TenantModels(
        rooms=FakeRoomRepository(rooms),
        stays=FakeStayRepository(stays),
        bills=FakeBillRepository(bills),
    )


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    """Settings isolated from the environment."""
    return HotelTenancySettings(
        _env_file=None,
        registry_database_url="postgresql://test@localhost/registry",
        tenant_database_url="postgresql://test@localhost/postgres",
        scheduler_enabled=False,
    )


@pytest.fixture
def pool_factory():
    return FakePoolFactory()


@pytest.fixture
def half_rate_policy():
    return BillingPolicy(
        standard_check_in_hour=14,
        standard_check_out_hour=12,
        early_check_in_policy="half_rate",
        late_check_out_policy="half_rate",
        timezone="UTC",
    )


@pytest.fixture
def sample_tenants(half_rate_policy):
    return [
        TenantRecord(tenant_id="alpha", name="Alpha Hotel", policy=half_rate_policy),
        TenantRecord(tenant_id="beta", name="Beta Hotel", policy=half_rate_policy),
        TenantRecord(tenant_id="gamma", name="Gamma Hotel", policy=half_rate_policy),
        TenantRecord(tenant_id="closed", name="Closed Hotel", status="inactive"),
    ]


@pytest.fixture
def registry(sample_tenants):
    return FakeRegistry(sample_tenants)


@pytest.fixture
def sample_room():
    return Room(id="room-1", number="101", price=Decimal("5000"), room_type="deluxe")


@pytest.fixture
def sample_stay():
    return Stay(
        id="stay-1",
        room_id="room-1",
        guest_name="Guest One",
        check_in_date=utc(2024, 3, 1, 10),
        check_out_date=utc(2024, 3, 2, 11),
        status=StayStatus.CHECKED_IN,
    )


@pytest.fixture
def sample_bill():
    return Bill(id="bill-1", stay_id="stay-1", status=BillStatus.ACTIVE)


@pytest.fixture
def models_factory():
    """Build in-memory TenantModels."""
    return make_models


@pytest.fixture
def registry_factory(registry):
    """Registry factory for ConnectionManager that serves the fake registry."""
    def factory(pool, default_timezone="UTC"):
        return registry
    return factory

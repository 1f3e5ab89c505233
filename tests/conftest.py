"""Pytest fixtures for workforce payroll tests."""

from __future__ import annotations

from decimal import Decimal
from typing import AsyncGenerator
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from workforce_payroll.calculators import PayrollSettingsSnapshot
from workforce_payroll.models import Base, Employee
from workforce_payroll.notifications import EventEmitter, build_notification_emitter
from workforce_payroll.services import (
    PayrollSettingsService,
    PayrollSettingsUpdate,
    PurchaseOrderInput,
    PurchaseOrderItemInput,
)

# In-memory SQLite shared across the connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingDispatcher:
    """Notification dispatcher that keeps every message it is given."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    def send(self, recipient: str, subject: str, body: str) -> None:
        self.sent.append((recipient, subject, body))


@pytest.fixture
async def engine():
    """Create test database engine with a fresh schema."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def tenant_id() -> UUID:
    return uuid4()


@pytest.fixture
async def employee(session: AsyncSession, tenant_id: UUID) -> Employee:
    """Create a test employee."""
    employee = Employee(
        employee_id=uuid4(),
        tenant_id=tenant_id,
        first_name="Jane",
        last_name="Doe",
        email="jane.doe@example.com",
        user_type="employee",
    )
    session.add(employee)
    await session.commit()
    return employee


@pytest.fixture
async def admin(session: AsyncSession, tenant_id: UUID) -> Employee:
    """Create a test administrator."""
    admin = Employee(
        employee_id=uuid4(),
        tenant_id=tenant_id,
        first_name="Alex",
        last_name="Admin",
        email="alex.admin@example.com",
        user_type="admin",
    )
    session.add(admin)
    await session.commit()
    return admin


@pytest.fixture
async def payroll_settings(session: AsyncSession, tenant_id: UUID) -> PayrollSettingsSnapshot:
    """Monthly settings: 5000 base, 2% task commission, 1% purchase order commission."""
    return await PayrollSettingsService(session, tenant_id).update_settings(
        PayrollSettingsUpdate(
            base_salary=Decimal("5000"),
            commission_rate=Decimal("2"),
            po_commission_rate=Decimal("1"),
            pay_period="1 month",
        )
    )


@pytest.fixture
def po_input() -> PurchaseOrderInput:
    """Purchase order totalling 10,000.00."""
    return PurchaseOrderInput(
        order_number="PO-1001",
        vendor="Acme Supply",
        items=[
            PurchaseOrderItemInput(description="Laptops", quantity=4, unit_price=Decimal("2000")),
            PurchaseOrderItemInput(description="Docks", quantity=10, unit_price=Decimal("200")),
        ],
    )


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def emitter(dispatcher: RecordingDispatcher) -> EventEmitter:
    return build_notification_emitter(dispatcher)

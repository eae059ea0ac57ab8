"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database shared by the test and the app (StaticPool)
- TestClient with get_db overridden
- A seeded catalog: houses, service codes, staff and a rate table
"""
import os
from decimal import Decimal
from types import SimpleNamespace

# Settings are read at import time; never point tests at a real database
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.api.deps import get_db
from app.core.database import Base
from app.models.house import House
from app.models.payout_rate import PayoutRate
from app.models.service_code import ServiceCode
from app.models.staff import Staff

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def catalog(db):
    """
    Two houses, two service codes, four staff (one inactive).

    Greater Faith / peer support: Ann 15, Ben 6, Cara 39.50, Dev 39.50 (= 100)
    Greater Faith / group:        Ann 33.33 (others unset)
    Story Lighthouse / peer support: no rates
    """
    greater_faith = House(name="Greater Faith", address="123 Recovery St")
    lighthouse = House(name="Story Lighthouse", address="456 Hope Ave")
    peer = ServiceCode(code="peer support", description="Peer Support Services")
    group = ServiceCode(code="group", description="Group Therapy")
    ann = Staff(name="Ann", role="owner")
    ben = Staff(name="Ben", role="peer")
    cara = Staff(name="Cara", role="peer")
    dev = Staff(name="Dev", role="peer", is_active=False)
    db.add_all([greater_faith, lighthouse, peer, group, ann, ben, cara, dev])
    db.flush()

    for member, pct in ((ann, "15.00"), (ben, "6.00"), (cara, "39.50"), (dev, "39.50")):
        db.add(
            PayoutRate(
                house_id=greater_faith.id,
                service_code_id=peer.id,
                staff_id=member.id,
                percentage=Decimal(pct),
            )
        )
    db.add(
        PayoutRate(
            house_id=greater_faith.id,
            service_code_id=group.id,
            staff_id=ann.id,
            percentage=Decimal("33.33"),
        )
    )
    db.commit()

    return SimpleNamespace(
        greater_faith=greater_faith.id,
        lighthouse=lighthouse.id,
        peer=peer.id,
        group=group.id,
        ann=ann.id,
        ben=ben.id,
        cara=cara.id,
        dev=dev.id,
    )

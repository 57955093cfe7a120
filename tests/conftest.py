"""
Shared fixtures: an in-memory Motor database, an ASGI test client and a
salon open Monday to Friday 09:00-17:00 with one 60 minute service.
"""

from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from jose import jwt
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import AutoReconnect

from main import app
from app.core.config import settings
from app.db.mongodb import db, create_indexes
from app.schemas.salon import SalonCreate, BusinessHours, DayHours
from app.schemas.service import ServiceCreate
from app.services.salon_service import create_salon
from app.services.catalog_service import create_service

# 2030-01-07 is a Monday, far enough ahead that no slot is in the past
MONDAY = "2030-01-07"
SUNDAY = "2030-01-06"

OWNER_ID = "owner-1"
OTHER_OWNER_ID = "owner-2"

def weekday_hours(open_time: str = "09:00", close_time: str = "17:00") -> BusinessHours:
    open_day = DayHours(isOpen=True, openTime=open_time, closeTime=close_time)
    return BusinessHours(
        monday=open_day,
        tuesday=open_day,
        wednesday=open_day,
        thursday=open_day,
        friday=open_day,
    )

def auth_headers(owner_id: str = OWNER_ID) -> dict:
    # Stands in for a token minted by the identity provider
    claims = {"sub": owner_id, "exp": datetime.utcnow() + timedelta(minutes=30)}
    token = jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return {"Authorization": f"Bearer {token}"}

class FailingCollection:
    """Collection whose named method raises instead of reaching the database."""

    def __init__(self, collection, method, error):
        self._collection = collection
        self._method = method
        self._error = error

    def __getattr__(self, name):
        if name == self._method:
            def fail(*args, **kwargs):
                raise self._error
            return fail
        return getattr(self._collection, name)

class FailingDatabase:
    def __init__(self, database, collection_name, method, error):
        self._database = database
        self._collection_name = collection_name
        self._method = method
        self._error = error

    def __getattr__(self, name):
        collection = getattr(self._database, name)
        if name == self._collection_name:
            return FailingCollection(collection, self._method, self._error)
        return collection

class StorageBreaker:
    def __init__(self, database, monkeypatch):
        self.database = database
        self.monkeypatch = monkeypatch

    def fail(self, collection_name: str, method: str, error: BaseException = None):
        error = error or AutoReconnect("connection reset by peer")
        self.monkeypatch.setattr(db, "db", FailingDatabase(self.database, collection_name, method, error))

    def restore(self):
        self.monkeypatch.setattr(db, "db", self.database)

@pytest_asyncio.fixture
async def mongo():
    db.client = AsyncMongoMockClient()
    db.db = db.client["salonbook_test"]
    await create_indexes()
    yield db.db
    db.client = None
    db.db = None

@pytest_asyncio.fixture
async def client(mongo):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

@pytest_asyncio.fixture
async def salon(mongo):
    salon_in = SalonCreate(
        name="Studio Uno",
        slug="studio-uno",
        timezone="America/New_York",
        businessHours=weekday_hours(),
    )
    return await create_salon(salon_in, OWNER_ID)

@pytest_asyncio.fixture
async def other_salon(mongo):
    salon_in = SalonCreate(
        name="Cut Above",
        slug="cut-above",
        timezone="Europe/Berlin",
        businessHours=weekday_hours(),
    )
    return await create_salon(salon_in, OTHER_OWNER_ID)

@pytest_asyncio.fixture
async def haircut(salon):
    return await create_service(salon["id"], ServiceCreate(name="Haircut", duration=60, price=45))

@pytest.fixture
def owner_headers():
    return auth_headers(OWNER_ID)

@pytest.fixture
def broken_storage(mongo, monkeypatch):
    return StorageBreaker(mongo, monkeypatch)

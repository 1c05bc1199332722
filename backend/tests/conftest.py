# shared fixtures for backend api tests
# provides mock db, test profiles, sample events, and httpx test clients

import re
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from unittest.mock import MagicMock
from bson import ObjectId
from jose import jwt

from httpx import AsyncClient, ASGITransport

from steadylog.config import settings
from steadylog.main import app
from steadylog.models.session import SessionContext
from steadylog.services.db import get_db
from steadylog.dependencies import get_session


# test ids: fixed so every import of this module agrees
FAMILY_ID = "family-0001"
FAMILY_2_ID = "family-0002"
PROFESSIONAL_ID = "professional-0001"
PROFESSIONAL_2_ID = "professional-0002"
FAMILY_CODE = "#AB12CD"
FAMILY_2_CODE = "#ZX98QW"

EVENT_1_OID = ObjectId("65a000000000000000000001")
EVENT_2_OID = ObjectId("65a000000000000000000002")
EVENT_3_OID = ObjectId("65a000000000000000000003")
EVENT_OTHER_OID = ObjectId("65a000000000000000000009")
MEDICATION_OID = ObjectId("65b000000000000000000001")


# profile documents (as they'd appear from mongodb)

FAMILY_DOC = {
    "_id": FAMILY_ID,
    "email": "lucas.family@email.com",
    "name": "Lucas Silva",
    "role": "family",
    "connection_code": FAMILY_CODE,
    "created_at": "2025-05-01T00:00:00+00:00",
}

FAMILY_2_DOC = {
    "_id": FAMILY_2_ID,
    "email": "sofia.family@email.com",
    "name": "Sofia Oliveira",
    "role": "family",
    "connection_code": FAMILY_2_CODE,
    "created_at": "2025-05-10T00:00:00+00:00",
}

PROFESSIONAL_DOC = {
    "_id": PROFESSIONAL_ID,
    "email": "dr.costa@clinic.com",
    "name": "Dr. Ana Costa",
    "role": "professional",
    "created_at": "2025-04-01T00:00:00+00:00",
}

LINK_DOC = {
    "_id": ObjectId("65c000000000000000000001"),
    "professional_id": PROFESSIONAL_ID,
    "patient_id": FAMILY_ID,
    "nickname": None,
    "created_at": "2025-05-02T00:00:00+00:00",
}


# sample events

SAMPLE_EVENT = {
    "_id": EVENT_1_OID,
    "owner_id": FAMILY_ID,
    "timestamp": "2025-06-10T08:30:00+00:00",
    "type": "crisis",
    "intensity": 8,
    "triggers": ["noise", "routine"],
    "notes": "Fire alarm drill at school.",
    "location": "School",
    "created_at": "2025-06-10T08:45:00+00:00",
}

SAMPLE_EVENT_2 = {
    "_id": EVENT_2_OID,
    "owner_id": FAMILY_ID,
    "timestamp": "2025-06-11T14:00:00+00:00",
    "type": "anxiety",
    "intensity": 4,
    "triggers": ["noise"],
    "notes": None,
    "location": "Home",
    "created_at": "2025-06-11T14:05:00+00:00",
}

SAMPLE_EVENT_3 = {
    "_id": EVENT_3_OID,
    "owner_id": FAMILY_ID,
    "timestamp": "2025-06-12T09:15:00+00:00",
    "type": "good_day",
    "intensity": 2,
    "triggers": [],
    "notes": "Calm morning.",
    "location": None,
    "created_at": "2025-06-12T09:20:00+00:00",
}

OTHER_FAMILY_EVENT = {
    "_id": EVENT_OTHER_OID,
    "owner_id": FAMILY_2_ID,
    "timestamp": "2025-06-11T20:00:00+00:00",
    "type": "meltdown",
    "intensity": 7,
    "triggers": ["transition"],
    "notes": None,
    "location": None,
    "created_at": "2025-06-11T20:10:00+00:00",
}

SAMPLE_MEDICATION = {
    "_id": MEDICATION_OID,
    "owner_id": FAMILY_ID,
    "name": "Melatonin",
    "dosage": "3mg",
    "schedule": "21:00",
    "created_at": "2025-06-01T00:00:00+00:00",
}


# async cursor mock

class AsyncCursorMock:
    """mock for motor's async cursor: supports async for and chained methods"""

    def __init__(self, data=None):
        self._data = list(data or [])
        self._index = 0

    def sort(self, key, direction=1):
        self._data = sorted(self._data, key=lambda d: str(d.get(key, "")), reverse=direction == -1)
        return self

    def skip(self, n):
        self._data = self._data[n:]
        return self

    def limit(self, n):
        if n:
            self._data = self._data[:n]
        return self

    def __aiter__(self):
        self._index = 0
        return self

    async def __anext__(self):
        if self._index >= len(self._data):
            raise StopAsyncIteration
        item = self._data[self._index]
        self._index += 1
        return item

    async def to_list(self, length=None):
        if length is not None:
            return self._data[:length]
        return self._data


class MockCollection:
    """mock for a motor collection with async methods"""

    def __init__(self, data=None):
        self._data = data or []
        self.inserted = []

    def find(self, query=None, projection=None):
        results = self._data
        if query:
            results = [d for d in results if self._matches(d, query)]
        return AsyncCursorMock(results)

    async def find_one(self, query=None, projection=None):
        if not query:
            return self._data[0] if self._data else None
        for doc in self._data:
            if self._matches(doc, query):
                return doc
        return None

    async def insert_one(self, doc):
        oid = doc.get("_id", ObjectId())
        doc["_id"] = oid
        self._data.append(doc)
        self.inserted.append(doc)
        result = MagicMock()
        result.inserted_id = oid
        return result

    async def insert_many(self, docs):
        ids = [(await self.insert_one(doc)).inserted_id for doc in docs]
        result = MagicMock()
        result.inserted_ids = ids
        return result

    async def count_documents(self, query=None):
        if not query:
            return len(self._data)
        return len([d for d in self._data if self._matches(d, query)])

    async def update_one(self, query, update, upsert=False):
        result = MagicMock()
        result.modified_count = 0
        for doc in self._data:
            if self._matches(doc, query):
                if "$set" in update:
                    doc.update(update["$set"])
                result.modified_count = 1
                break
        return result

    async def delete_one(self, query):
        result = MagicMock()
        result.deleted_count = 0
        for i, doc in enumerate(self._data):
            if self._matches(doc, query):
                del self._data[i]
                result.deleted_count = 1
                break
        return result

    async def create_index(self, *args, **kwargs):
        return "mock_index"

    def _matches(self, doc, query):
        """basic mongodb query matching for tests"""
        for key, value in query.items():
            doc_val = doc.get(key)
            if isinstance(value, dict):
                if "$in" in value:
                    if doc_val not in value["$in"]:
                        return False
                elif "$gte" in value:
                    if doc_val is None or doc_val < value["$gte"]:
                        return False
                elif "$regex" in value:
                    flags = re.IGNORECASE if value.get("$options") == "i" else 0
                    if doc_val is None or not re.search(value["$regex"], str(doc_val), flags):
                        return False
            elif doc_val != value:
                return False
        return True


class MockDatabase:
    """mock database that mimics the Database class"""

    def __init__(self):
        self.profiles = MockCollection([
            FAMILY_DOC.copy(),
            FAMILY_2_DOC.copy(),
            PROFESSIONAL_DOC.copy(),
        ])
        self.events = MockCollection([
            SAMPLE_EVENT.copy(),
            SAMPLE_EVENT_2.copy(),
            SAMPLE_EVENT_3.copy(),
            OTHER_FAMILY_EVENT.copy(),
        ])
        self.medications = MockCollection([SAMPLE_MEDICATION.copy()])
        self.patient_links = MockCollection([LINK_DOC.copy()])

    async def connect(self):
        pass

    async def close(self):
        pass


@pytest.fixture
def mock_db():
    """create a fresh mock database for each test"""
    return MockDatabase()


def make_token(sub=FAMILY_ID, secret=None, audience="authenticated", expires_in=timedelta(hours=1), **claims):
    """sign a token the way the identity provider would"""
    payload = {"sub": sub, "aud": audience, "exp": datetime.now(timezone.utc) + expires_in, **claims}
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def family_session():
    """session as get_session would resolve it for the test family"""
    return SessionContext(
        userId=FAMILY_ID,
        role="family",
        name=FAMILY_DOC["name"],
        email=FAMILY_DOC["email"],
        connectionCode=FAMILY_CODE,
    )


def professional_session():
    """session as get_session would resolve it for the test professional"""
    return SessionContext(
        userId=PROFESSIONAL_ID,
        role="professional",
        name=PROFESSIONAL_DOC["name"],
        email=PROFESSIONAL_DOC["email"],
    )


@pytest_asyncio.fixture
async def client(mock_db):
    """httpx async test client with only the database mocked"""

    async def override_get_db():
        return mock_db

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def family_client(mock_db):
    """client authenticated as a family account"""

    async def override_get_db():
        return mock_db

    async def override_get_session():
        return family_session()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def professional_client(mock_db):
    """client authenticated as a professional"""

    async def override_get_db():
        return mock_db

    async def override_get_session():
        return professional_session()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()

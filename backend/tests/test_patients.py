# tests for patients router: code redemption, linked patient list, nicknames
# professional-only endpoints

import pytest
from pymongo.errors import DuplicateKeyError
from tests.conftest import FAMILY_ID, FAMILY_2_ID, FAMILY_2_CODE, FAMILY_CODE


class TestListPatients:

    async def test_list_linked_patients(self, professional_client):
        resp = await professional_client.get("/patients")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 1
        patient = data[0]
        assert patient["id"] == FAMILY_ID
        assert patient["name"] == "Lucas Silva"
        assert patient["displayName"] == "Lucas Silva"
        assert patient["summary"]["totalEvents"] == 3
        assert patient["summary"]["lastEventType"] == "good_day"

    async def test_family_cannot_list(self, family_client):
        resp = await family_client.get("/patients")
        assert resp.status_code == 403

    async def test_dangling_link_is_skipped(self, professional_client, mock_db):
        await mock_db.patient_links.insert_one({
            "professional_id": "professional-0001",
            "patient_id": "deleted-family",
            "created_at": "2025-06-01T00:00:00+00:00",
        })
        resp = await professional_client.get("/patients")
        assert [p["id"] for p in resp.json()] == [FAMILY_ID]


class TestLinkPatient:

    async def test_redeem_code(self, professional_client, mock_db):
        resp = await professional_client.post("/patients/link", json={
            "connectionCode": FAMILY_2_CODE, "nickname": "Sofia (Tue/Thu)",
        })
        assert resp.status_code == 201
        data = resp.json()
        assert data["id"] == FAMILY_2_ID
        assert data["nickname"] == "Sofia (Tue/Thu)"
        assert data["displayName"] == "Sofia (Tue/Thu)"
        assert data["summary"]["lastEventType"] == "meltdown"
        assert await mock_db.patient_links.count_documents({"patient_id": FAMILY_2_ID}) == 1

    @pytest.mark.parametrize("typed", ["zx98qw", " #zx98qw ", "ZX98QW"])
    async def test_code_is_normalized(self, professional_client, typed):
        resp = await professional_client.post("/patients/link", json={"connectionCode": typed})
        assert resp.status_code == 201
        assert resp.json()["id"] == FAMILY_2_ID

    async def test_unknown_code(self, professional_client):
        resp = await professional_client.post("/patients/link", json={"connectionCode": "#NOPE00"})
        assert resp.status_code == 404

    async def test_already_linked(self, professional_client):
        resp = await professional_client.post("/patients/link", json={"connectionCode": FAMILY_CODE})
        assert resp.status_code == 409

    async def test_family_cannot_link(self, family_client):
        resp = await family_client.post("/patients/link", json={"connectionCode": FAMILY_2_CODE})
        assert resp.status_code == 403


class TestNickname:

    async def test_set_nickname(self, professional_client, mock_db):
        resp = await professional_client.patch(f"/patients/{FAMILY_ID}/nickname", json={"nickname": "Lu"})
        assert resp.status_code == 200
        assert resp.json()["displayName"] == "Lu"
        link = await mock_db.patient_links.find_one({"patient_id": FAMILY_ID})
        assert link["nickname"] == "Lu"

    async def test_clear_nickname(self, professional_client):
        await professional_client.patch(f"/patients/{FAMILY_ID}/nickname", json={"nickname": "Lu"})
        resp = await professional_client.patch(f"/patients/{FAMILY_ID}/nickname", json={"nickname": "  "})
        assert resp.status_code == 200
        assert resp.json()["nickname"] is None
        assert resp.json()["displayName"] == "Lucas Silva"

    async def test_unlinked_patient(self, professional_client):
        resp = await professional_client.patch(f"/patients/{FAMILY_2_ID}/nickname", json={"nickname": "S"})
        assert resp.status_code == 403


class TestConcurrentLink:

    async def test_duplicate_key_on_insert_is_conflict(self, professional_client, mock_db):
        async def insert_one(doc):
            raise DuplicateKeyError("E11000 duplicate key error")

        mock_db.patient_links.insert_one = insert_one
        resp = await professional_client.post("/patients/link", json={"connectionCode": FAMILY_2_CODE})
        assert resp.status_code == 409

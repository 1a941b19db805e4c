"""
Patient, clinical record and evolution API tests
"""
import pytest

pytestmark = [pytest.mark.asyncio, pytest.mark.integration]

API = "/api/v1"


async def test_patient_crud(client):
    response = await client.post(f"{API}/patients", json={
        "name": "Carlos Pereira",
        "cpf": "987.654.321-00",
        "birth_date": "1970-12-01",
        "payer_type": "individual",
    })
    assert response.status_code == 201
    patient = response.json()
    assert patient["id"] > 0
    assert patient["birth_date"] == "1970-12-01"

    response = await client.put(f"{API}/patients/{patient['id']}", json={"city": "Campinas", "state": "SP"})
    assert response.status_code == 200
    assert response.json()["city"] == "Campinas"
    assert response.json()["name"] == "Carlos Pereira"

    response = await client.get(f"{API}/patients/{patient['id']}")
    assert response.json()["state"] == "SP"

    response = await client.delete(f"{API}/patients/{patient['id']}")
    assert response.status_code == 204
    assert (await client.get(f"{API}/patients/{patient['id']}")).status_code == 404


async def test_patient_search(client, test_patient):
    await client.post(f"{API}/patients", json={"name": "Bruno Alves"})

    response = await client.get(f"{API}/patients")
    assert [p["name"] for p in response.json()] == ["Bruno Alves", "Maria Souza"]

    response = await client.get(f"{API}/patients", params={"search": "souza"})
    assert [p["name"] for p in response.json()] == ["Maria Souza"]

    response = await client.get(f"{API}/patients", params={"search": "123.456"})
    assert [p["name"] for p in response.json()] == ["Maria Souza"]


async def test_patient_requires_name(client):
    response = await client.post(f"{API}/patients", json={"name": ""})
    assert response.status_code == 422
    assert response.json()["error"]["type"] == "ValidationError"


async def test_clinical_record_crud(client, test_patient):
    response = await client.post(f"{API}/clinical-records", json={
        "patient_id": test_patient.id,
        "consultation_date": "2024-01-15",
        "chief_complaint": "Cefaleia",
        "diagnosis": "Cefaleia tensional",
    })
    assert response.status_code == 201
    record = response.json()
    assert record["patient_name"] == "Maria Souza"

    response = await client.put(f"{API}/clinical-records/{record['id']}", json={"treatment": "Analgésico"})
    assert response.json()["treatment"] == "Analgésico"
    assert response.json()["diagnosis"] == "Cefaleia tensional"

    response = await client.get(f"{API}/clinical-records", params={"patient_id": test_patient.id})
    assert len(response.json()) == 1

    assert (await client.delete(f"{API}/clinical-records/{record['id']}")).status_code == 204
    assert (await client.get(f"{API}/clinical-records/{record['id']}")).status_code == 404


async def test_clinical_record_for_unknown_patient(client):
    response = await client.post(f"{API}/clinical-records", json={"patient_id": 999, "consultation_date": "2024-01-15"})
    assert response.status_code == 404


async def test_evolutions_listed_newest_first(client, test_patient):
    for day, text in (("2024-01-10", "Melhora parcial"), ("2024-02-10", "Alta")):
        response = await client.post(f"{API}/evolutions", json={
            "patient_id": test_patient.id, "date": day, "description": text,
        })
        assert response.status_code == 201

    response = await client.get(f"{API}/evolutions", params={"patient_id": test_patient.id})
    assert [e["description"] for e in response.json()] == ["Alta", "Melhora parcial"]
    assert response.json()[0]["patient_name"] == "Maria Souza"


async def test_deleting_patient_removes_their_records(client, storage, test_patient, appointment_payload):
    await client.post(f"{API}/appointments", json=appointment_payload)
    await client.post(f"{API}/evolutions", json={
        "patient_id": test_patient.id, "date": "2024-01-10", "description": "Retorno",
    })

    response = await client.delete(f"{API}/patients/{test_patient.id}")
    assert response.status_code == 204
    assert await storage.count("appointments") == 0
    assert await storage.count("evolutions") == 0


async def test_patient_update_refreshes_dashboard(client, test_patient, monkeypatch):
    from app.api.endpoints import patients

    calls = []

    async def record_invalidation():
        calls.append(True)

    monkeypatch.setattr(patients, "invalidate_dashboard", record_invalidation)
    response = await client.put(f"{API}/patients/{test_patient.id}", json={"name": "Maria Souza Lima"})
    assert response.status_code == 200
    assert calls == [True]

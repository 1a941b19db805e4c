"""
Clinical records and evolution notes API endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_storage
from app.schemas.clinical import (
    ClinicalRecordCreate,
    ClinicalRecordUpdate,
    ClinicalRecordResponse,
    EvolutionCreate,
    EvolutionUpdate,
    EvolutionResponse,
)
from app.services.storage import StorageRepository, related_name

router = APIRouter(tags=["Clinical"])


def _with_patient(schema, row):
    response = schema.model_validate(row)
    response.patient_name = related_name(row.patient)
    return response


# ==================== Clinical Records ====================

@router.get("/clinical-records", response_model=List[ClinicalRecordResponse])
async def list_clinical_records(
    patient_id: Optional[int] = Query(None),
    storage: StorageRepository = Depends(get_storage),
):
    """
    Clinical records, most recent consultation first
    """
    filters = {"patient_id": patient_id} if patient_id else None
    records = await storage.select(
        "clinical_records", filters=filters, order_by="consultation_date", descending=True, load=["patient"]
    )
    return [_with_patient(ClinicalRecordResponse, r) for r in records]


@router.post("/clinical-records", response_model=ClinicalRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_clinical_record(
    record_in: ClinicalRecordCreate,
    storage: StorageRepository = Depends(get_storage),
):
    await storage.get("patients", record_in.patient_id)
    [record] = await storage.insert("clinical_records", [record_in.model_dump()])
    record = await storage.get("clinical_records", record.id, load=["patient"])
    return _with_patient(ClinicalRecordResponse, record)


@router.get("/clinical-records/{record_id}", response_model=ClinicalRecordResponse)
async def get_clinical_record(
    record_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    record = await storage.get("clinical_records", record_id, load=["patient"])
    return _with_patient(ClinicalRecordResponse, record)


@router.put("/clinical-records/{record_id}", response_model=ClinicalRecordResponse)
async def update_clinical_record(
    record_id: int,
    record_in: ClinicalRecordUpdate,
    storage: StorageRepository = Depends(get_storage),
):
    await storage.update("clinical_records", record_id, record_in.model_dump(exclude_unset=True))
    record = await storage.get("clinical_records", record_id, load=["patient"])
    return _with_patient(ClinicalRecordResponse, record)


@router.delete("/clinical-records/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_clinical_record(
    record_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    await storage.delete("clinical_records", record_id)
    return None


# ==================== Evolutions ====================

@router.get("/evolutions", response_model=List[EvolutionResponse])
async def list_evolutions(
    patient_id: Optional[int] = Query(None),
    storage: StorageRepository = Depends(get_storage),
):
    filters = {"patient_id": patient_id} if patient_id else None
    evolutions = await storage.select("evolutions", filters=filters, order_by="date", descending=True, load=["patient"])
    return [_with_patient(EvolutionResponse, e) for e in evolutions]


@router.post("/evolutions", response_model=EvolutionResponse, status_code=status.HTTP_201_CREATED)
async def create_evolution(
    evolution_in: EvolutionCreate,
    storage: StorageRepository = Depends(get_storage),
):
    await storage.get("patients", evolution_in.patient_id)
    [evolution] = await storage.insert("evolutions", [evolution_in.model_dump()])
    evolution = await storage.get("evolutions", evolution.id, load=["patient"])
    return _with_patient(EvolutionResponse, evolution)


@router.get("/evolutions/{evolution_id}", response_model=EvolutionResponse)
async def get_evolution(
    evolution_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    evolution = await storage.get("evolutions", evolution_id, load=["patient"])
    return _with_patient(EvolutionResponse, evolution)


@router.put("/evolutions/{evolution_id}", response_model=EvolutionResponse)
async def update_evolution(
    evolution_id: int,
    evolution_in: EvolutionUpdate,
    storage: StorageRepository = Depends(get_storage),
):
    await storage.update("evolutions", evolution_id, evolution_in.model_dump(exclude_unset=True))
    evolution = await storage.get("evolutions", evolution_id, load=["patient"])
    return _with_patient(EvolutionResponse, evolution)


@router.delete("/evolutions/{evolution_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_evolution(
    evolution_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    await storage.delete("evolutions", evolution_id)
    return None

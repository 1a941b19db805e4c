"""
Patient management API endpoints
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_

from app.api.deps import get_storage
from app.core.cache import invalidate_dashboard
from app.models import Patient
from app.schemas.patient import PatientCreate, PatientUpdate, PatientResponse
from app.services.storage import StorageRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["Patients"])


@router.get("", response_model=List[PatientResponse])
async def list_patients(
    search: Optional[str] = Query(None, description="Name or CPF"),
    storage: StorageRepository = Depends(get_storage),
):
    """
    List patients ordered by name
    """
    where = []
    if search and search.strip():
        term = f"%{search.strip()}%"
        where.append(or_(Patient.name.ilike(term), Patient.cpf.ilike(term)))
    return await storage.select("patients", where=where, order_by="name")


@router.post("", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient(
    patient_in: PatientCreate,
    storage: StorageRepository = Depends(get_storage),
):
    [patient] = await storage.insert("patients", [patient_in.model_dump()])
    await invalidate_dashboard()
    return patient


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    return await storage.get("patients", patient_id)


@router.put("/{patient_id}", response_model=PatientResponse)
async def update_patient(
    patient_id: int,
    patient_in: PatientUpdate,
    storage: StorageRepository = Depends(get_storage),
):
    patient = await storage.update("patients", patient_id, patient_in.model_dump(exclude_unset=True))
    # Today's agenda on the dashboard shows patient names
    await invalidate_dashboard()
    return patient


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_patient(
    patient_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    """
    Delete a patient along with their appointments, records, incomes and documents
    """
    await storage.delete("patients", patient_id)
    await invalidate_dashboard()
    return None

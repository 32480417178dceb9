from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Optional


class PatientCreate(BaseModel):
    cpf: str = Field(..., min_length=1, max_length=14)
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    insurance_provider: Optional[str] = None
    insurance_number: Optional[str] = None
    user_id: Optional[int] = None


class PatientAdminCreate(BaseModel):
    """Walk-in registration done at the front desk, queued right away."""
    name: str = Field(..., min_length=1)
    cpf: str = Field(..., min_length=1, max_length=14)
    email: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    is_priority: bool = False


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cpf: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    insurance_provider: Optional[str] = None
    insurance_number: Optional[str] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None


class PatientLookupResponse(BaseModel):
    exists: bool
    patient: Optional[PatientResponse] = None

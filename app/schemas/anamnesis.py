from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional


class AnamnesisBase(BaseModel):
    chief_complaint: str = Field(..., min_length=1)
    history_of_present_illness: Optional[str] = None
    medical_history: Optional[str] = None
    current_medications: Optional[str] = None
    allergies: Optional[str] = None
    family_history: Optional[str] = None
    lifestyle_habits: Optional[str] = None
    review_of_systems: Optional[str] = None
    other_information: Optional[str] = None


class AnamnesisResponse(AnamnesisBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AnamnesisCreated(BaseModel):
    message: str
    id: int

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class Anamnesis(Base):
    __tablename__ = "anamneses"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)

    # Clinical interview
    chief_complaint = Column(Text, nullable=False)
    history_of_present_illness = Column(Text, nullable=True)
    medical_history = Column(Text, nullable=True)
    current_medications = Column(Text, nullable=True)
    allergies = Column(Text, nullable=True)
    family_history = Column(Text, nullable=True)
    lifestyle_habits = Column(Text, nullable=True)
    review_of_systems = Column(Text, nullable=True)
    other_information = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="anamneses")

    def __repr__(self):
        return f"<Anamnesis(id={self.id}, patient_id={self.patient_id})>"

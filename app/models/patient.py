from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=True)

    # Personal information
    name = Column(String(200), nullable=True)
    cpf = Column(String(14), unique=True, index=True, nullable=False)
    birth_date = Column(Date, nullable=True)
    gender = Column(String(20), nullable=True)

    # Contact information
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)

    # Insurance
    insurance_provider = Column(String(100), nullable=True)
    insurance_number = Column(String(50), nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="patient")
    queue_entries = relationship("QueueEntry", back_populates="patient")
    anamneses = relationship("Anamnesis", back_populates="patient")

    def __repr__(self):
        return f"<Patient(id={self.id}, name='{self.name}', cpf='{self.cpf}')>"

"""
Clinic Queue Service

A FastAPI-based patient queue for a clinic: registration, age and
clinical triage, and calling patients to the consulting room, with a
cached waiting line that pollers revalidate through ETags.
"""

__version__ = "1.0.0"

"""
MediCare Booking API

A FastAPI service for booking healthcare appointments: patient and doctor
registration, a doctor directory, and an appointment status lifecycle.
"""

__version__ = "1.0.0"

"""
Repository layer for users, doctors and appointments.

``Storage`` holds the record-shaping rules shared by every backend: id and
timestamp assignment, the defaults applied to new doctors, forcing new
appointments to ``pending`` and the "with details" joins. Backends only
implement the primitive reads and writes.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from functools import lru_cache
from typing import Dict, List, Optional
import logging
import uuid

from ..core.config import settings
from ..core.security import UserRole, get_password_hash
from ..models.appointment import AppointmentStatus
from ..schemas.appointment import Appointment, AppointmentCreate, AppointmentWithDetails
from ..schemas.doctor import DEFAULT_RATING, Doctor, DoctorCreate, DoctorWithUser
from ..schemas.user import User, UserCreate, UserResponse

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_DOCTORS = [
    {
        "email": "sarah.johnson@medicare.com",
        "first_name": "Sarah",
        "last_name": "Johnson",
        "phone": "555-0101",
        "specialization": "Cardiologist",
        "experience": 15,
        "rating": "4.9",
        "review_count": 127,
    },
    {
        "email": "michael.chen@medicare.com",
        "first_name": "Michael",
        "last_name": "Chen",
        "phone": "555-0102",
        "specialization": "Pediatrician",
        "experience": 12,
        "rating": "4.8",
        "review_count": 95,
    },
    {
        "email": "emily.rodriguez@medicare.com",
        "first_name": "Emily",
        "last_name": "Rodriguez",
        "phone": "555-0103",
        "specialization": "Dermatologist",
        "experience": 8,
        "rating": "4.9",
        "review_count": 203,
    },
]

@lru_cache(maxsize=1)
def _demo_password_hash() -> str:
    return get_password_hash(DEMO_PASSWORD)

def new_id() -> str:
    return str(uuid.uuid4())

class Storage(ABC):
    """Abstract repository. Lookups return ``None`` instead of raising."""

    # Users
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def delete_user(self, user_id: str) -> bool:
        ...

    @abstractmethod
    def _add_user(self, user: User) -> User:
        ...

    # Doctors
    @abstractmethod
    def get_doctor(self, doctor_id: str) -> Optional[Doctor]:
        ...

    @abstractmethod
    def get_doctor_by_user_id(self, user_id: str) -> Optional[Doctor]:
        ...

    @abstractmethod
    def _add_doctor(self, doctor: Doctor) -> Doctor:
        ...

    @abstractmethod
    def _list_doctors(self) -> List[Doctor]:
        ...

    # Appointments
    @abstractmethod
    def get_appointment(self, appointment_id: str) -> Optional[Appointment]:
        ...

    @abstractmethod
    def _add_appointment(self, appointment: Appointment) -> Appointment:
        ...

    @abstractmethod
    def _find_appointments(
        self,
        patient_id: Optional[str] = None,
        doctor_id: Optional[str] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> List[Appointment]:
        ...

    @abstractmethod
    def _set_appointment_status(
        self, appointment_id: str, status: AppointmentStatus
    ) -> Optional[Appointment]:
        ...

    def create_user(self, user_data: UserCreate) -> User:
        """Store a new user. Email uniqueness is the caller's concern."""
        user = User(
            **user_data.model_dump(),
            id=new_id(),
            created_at=datetime.utcnow(),
        )
        return self._add_user(user)

    def create_doctor(self, doctor_data: DoctorCreate) -> Doctor:
        """Store a doctor profile with the default rating, no reviews and open availability."""
        doctor = Doctor(
            **doctor_data.model_dump(),
            id=new_id(),
            rating=DEFAULT_RATING,
            review_count=0,
            available=True,
        )
        return self._add_doctor(doctor)

    def get_all_doctors(self) -> List[DoctorWithUser]:
        """Every doctor joined with its user; doctors without a user are skipped."""
        doctors_with_users = []
        for doctor in self._list_doctors():
            user = self.get_user(doctor.user_id)
            if user:
                doctors_with_users.append(self._doctor_with_user(doctor, user))
        return doctors_with_users

    def get_doctor_with_user(self, doctor_id: str) -> Optional[DoctorWithUser]:
        doctor = self.get_doctor(doctor_id)
        if not doctor:
            return None
        user = self.get_user(doctor.user_id)
        if not user:
            return None
        return self._doctor_with_user(doctor, user)

    def create_appointment(self, appointment_data: AppointmentCreate) -> Appointment:
        """Store a booking. The status always starts as pending."""
        appointment = Appointment(
            **appointment_data.model_dump(),
            id=new_id(),
            status=AppointmentStatus.PENDING,
            created_at=datetime.utcnow(),
        )
        return self._add_appointment(appointment)

    def get_appointments_by_patient(
        self, patient_id: str, status: Optional[AppointmentStatus] = None
    ) -> List[AppointmentWithDetails]:
        appointments = self._find_appointments(patient_id=patient_id, status=status)
        return self._with_details(appointments)

    def get_appointments_by_doctor(
        self, doctor_id: str, status: Optional[AppointmentStatus] = None
    ) -> List[AppointmentWithDetails]:
        appointments = self._find_appointments(doctor_id=doctor_id, status=status)
        return self._with_details(appointments)

    def update_appointment_status(
        self, appointment_id: str, status: AppointmentStatus
    ) -> Optional[Appointment]:
        """Overwrite the status. Any value is accepted; lifecycle rules live in the service layer."""
        return self._set_appointment_status(appointment_id, AppointmentStatus(status))

    def seed(self) -> None:
        """Insert the demo doctors."""
        password_hash = _demo_password_hash()
        for entry in DEMO_DOCTORS:
            user = self._add_user(User(
                id=new_id(),
                email=entry["email"],
                password=password_hash,
                first_name=entry["first_name"],
                last_name=entry["last_name"],
                phone=entry["phone"],
                role=UserRole.DOCTOR,
                created_at=datetime.utcnow(),
            ))
            self._add_doctor(Doctor(
                id=new_id(),
                user_id=user.id,
                specialization=entry["specialization"],
                experience=entry["experience"],
                rating=entry["rating"],
                review_count=entry["review_count"],
                available=True,
            ))
        logger.info(f"Seeded {len(DEMO_DOCTORS)} demo doctors")

    def _doctor_with_user(self, doctor: Doctor, user: User) -> DoctorWithUser:
        return DoctorWithUser(
            **doctor.model_dump(),
            user=UserResponse.model_validate(user),
        )

    def _with_details(self, appointments: List[Appointment]) -> List[AppointmentWithDetails]:
        """Join doctor, doctor's user and patient; drop entries missing any of them."""
        appointments_with_details = []
        for appointment in appointments:
            doctor = self.get_doctor_with_user(appointment.doctor_id)
            patient = self.get_user(appointment.patient_id)
            if doctor and patient:
                appointments_with_details.append(AppointmentWithDetails(
                    **appointment.model_dump(),
                    doctor=doctor,
                    patient=UserResponse.model_validate(patient),
                ))
        return appointments_with_details

class MemStorage(Storage):
    """Dict-backed storage. Everything is lost when the process exits."""

    def __init__(self, seed: bool = True):
        self.users: Dict[str, User] = {}
        self.doctors: Dict[str, Doctor] = {}
        self.appointments: Dict[str, Appointment] = {}
        if seed:
            self.seed()

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def delete_user(self, user_id: str) -> bool:
        return self.users.pop(user_id, None) is not None

    def _add_user(self, user: User) -> User:
        self.users[user.id] = user
        return user

    def get_doctor(self, doctor_id: str) -> Optional[Doctor]:
        return self.doctors.get(doctor_id)

    def get_doctor_by_user_id(self, user_id: str) -> Optional[Doctor]:
        return next((d for d in self.doctors.values() if d.user_id == user_id), None)

    def _add_doctor(self, doctor: Doctor) -> Doctor:
        self.doctors[doctor.id] = doctor
        return doctor

    def _list_doctors(self) -> List[Doctor]:
        return list(self.doctors.values())

    def get_appointment(self, appointment_id: str) -> Optional[Appointment]:
        return self.appointments.get(appointment_id)

    def _add_appointment(self, appointment: Appointment) -> Appointment:
        self.appointments[appointment.id] = appointment
        return appointment

    def _find_appointments(self, patient_id=None, doctor_id=None, status=None) -> List[Appointment]:
        return [
            apt for apt in self.appointments.values()
            if (patient_id is None or apt.patient_id == patient_id)
            and (doctor_id is None or apt.doctor_id == doctor_id)
            and (status is None or apt.status == status)
        ]

    def _set_appointment_status(self, appointment_id, status) -> Optional[Appointment]:
        appointment = self.appointments.get(appointment_id)
        if not appointment:
            return None
        updated = appointment.model_copy(update={"status": status})
        self.appointments[appointment_id] = updated
        return updated

_default_storage: Optional[Storage] = None

def get_default_storage() -> Storage:
    """Process-wide in-memory store, created and seeded on first use."""
    global _default_storage
    if _default_storage is None:
        _default_storage = MemStorage(seed=settings.SEED_DEMO_DATA)
    return _default_storage

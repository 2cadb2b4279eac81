from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Staff-driven lifecycle; any value may replace any other
APPOINTMENT_STATUSES = ("pending", "checked-in", "in_consultation", "complete", "cancelled")

PAYMENT_STATUS_PENDING = "pending"
PAYMENT_STATUS_SUCCEEDED = "succeeded"


class BasicInfo(Base):
    """Patient profile captured with each appointment request"""

    __tablename__ = "basic_info"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), index=True, nullable=False)
    contact_no = Column(String(50), nullable=True)
    sex = Column(String(20), nullable=True)
    age = Column(Integer, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    appointments = relationship("Appointment", back_populates="basic_info")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    procedures = relationship("Procedure", back_populates="service")


class Procedure(Base):
    __tablename__ = "procedures"

    id = Column(Integer, primary_key=True, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # Major currency units (e.g. 300.00 PHP)

    service = relationship("Service", back_populates="procedures")
    appointments = relationship("Appointment", back_populates="procedure")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    basic_info_id = Column(Integer, ForeignKey("basic_info.id"), nullable=False, index=True)
    procedure_id = Column(Integer, ForeignKey("procedures.id"), nullable=False, index=True)
    appointment_date = Column(Date, nullable=False, index=True)
    appointment_time = Column(String(50), nullable=True)  # e.g. "8:00 AM - 9:00 AM"
    reason = Column(Text, nullable=True)
    status = Column(String(20), default="pending", nullable=False)  # See APPOINTMENT_STATUSES
    email_verified = Column(Boolean, default=False, nullable=False)
    # PayMongo link tracking
    payment_id = Column(String(255), nullable=True, index=True)  # PayMongo link ID (link_...)
    payment_url = Column(String(500), nullable=True)
    payment_status = Column(String(20), nullable=True)  # None, pending, succeeded
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    basic_info = relationship("BasicInfo", back_populates="appointments")
    procedure = relationship("Procedure", back_populates="appointments")


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(String(50), default="admin", nullable=False)  # admin, superadmin
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate a UUID4 primary key"""
    return str(uuid.uuid4())


DAYS_OF_WEEK = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")
NOTIFICATION_TYPES = (
    "APPOINTMENT_CONFIRMATION",
    "APPOINTMENT_REMINDER",
    "APPOINTMENT_CANCELLATION",
    "PROMOTIONAL",
    "SYSTEM",
)


class Role(Base):
    __tablename__ = "roles"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(20), unique=True, nullable=False)  # ADMIN, CLIENT, STYLIST
    description = Column(String(200), nullable=True)

    users = relationship("User", back_populates="role")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    role_id = Column(String(36), ForeignKey("roles.id"), nullable=False)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    is_active = Column(Boolean, default=True, nullable=False)
    profile_picture = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    role = relationship("Role", back_populates="users")
    client = relationship("Client", back_populates="user", uselist=False)
    stylist = relationship("Stylist", back_populates="user", uselist=False)
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    preferences = Column(Text, nullable=True)

    user = relationship("User", back_populates="client")


class Stylist(Base):
    __tablename__ = "stylists"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    user = relationship("User", back_populates="stylist")
    services = relationship("StylistService", back_populates="stylist", cascade="all, delete-orphan")


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    services = relationship("Service", back_populates="category")


class Service(Base):
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=generate_id)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    description = Column(String(1000), nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    duration_variation = Column(Integer, default=0, nullable=False)
    price = Column(Integer, nullable=False)  # cents
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    category = relationship("Category", back_populates="services")
    stylists = relationship("StylistService", back_populates="service", cascade="all, delete-orphan")


class StylistService(Base):
    __tablename__ = "stylist_services"

    stylist_id = Column(String(36), ForeignKey("stylists.id", ondelete="CASCADE"), primary_key=True)
    service_id = Column(String(36), ForeignKey("services.id", ondelete="CASCADE"), primary_key=True)
    custom_price = Column(Integer, nullable=True)  # cents
    is_offering = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    stylist = relationship("Stylist", back_populates="services")
    service = relationship("Service", back_populates="stylists")


class AppointmentStatus(Base):
    __tablename__ = "appointment_statuses"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(50), nullable=False)  # not unique at storage level
    description = Column(String(200), nullable=True)


class Holiday(Base):
    __tablename__ = "holidays"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    date = Column(DateTime, nullable=False)


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(String(36), primary_key=True, default=generate_id)
    day_of_week = Column(Enum(*DAYS_OF_WEEK, name="day_of_week"), nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM
    holiday_id = Column(String(36), ForeignKey("holidays.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class AppointmentService(Base):
    """Ordered link between an appointment and the services booked on it"""

    __tablename__ = "appointment_services"

    appointment_id = Column(
        String(36), ForeignKey("appointments.id", ondelete="CASCADE"), primary_key=True
    )
    service_id = Column(String(36), ForeignKey("services.id"), primary_key=True)
    position = Column(Integer, nullable=False, default=0)


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_id)
    date_time = Column(DateTime, nullable=False, index=True)  # naive UTC
    duration = Column(Integer, nullable=False)  # minutes
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    stylist_id = Column(String(36), ForeignKey("stylists.id"), nullable=True, index=True)
    schedule_id = Column(String(36), ForeignKey("schedules.id"), nullable=False)
    status_id = Column(String(36), ForeignKey("appointment_statuses.id"), nullable=False)
    notes = Column(Text, nullable=True)
    confirmed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    status = relationship("AppointmentStatus")
    services = relationship(
        "AppointmentService",
        order_by="AppointmentService.position",
        cascade="all, delete-orphan",
    )


class NotificationStatus(Base):
    __tablename__ = "notification_statuses"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(20), unique=True, nullable=False)  # PENDING, SENT, READ, FAILED
    description = Column(String(200), nullable=True)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_id)
    type = Column(Enum(*NOTIFICATION_TYPES, name="notification_type"), nullable=False)
    message = Column(String(1000), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status_id = Column(String(36), ForeignKey("notification_statuses.id"), nullable=False)
    sent_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="notifications")
    status = relationship("NotificationStatus")

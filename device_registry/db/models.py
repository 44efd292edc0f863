"""SQLAlchemy ORM models."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, TypeDecorator
from sqlalchemy.orm import relationship

from device_registry.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator):
    """Stores naive UTC values and hands back timezone-aware datetimes."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Computer(Base):
    __tablename__ = "computers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    brand = Column(String(100), nullable=False, index=True)
    model = Column(String(100), nullable=False)
    color = Column(String(50))
    owner_name = Column(String(150), nullable=False)
    owner_id = Column(String(100), nullable=False, index=True)
    photo_url = Column(String(500))
    checkin_at = Column(UTCDateTime)
    checkout_at = Column(UTCDateTime)
    updated_at = Column(UTCDateTime, nullable=False)

    frequent = relationship("FrequentComputer", back_populates="computer", uselist=False)


class FrequentComputer(Base):
    __tablename__ = "frequent_computers"

    id = Column(String(36), ForeignKey("computers.id"), primary_key=True)
    checkin_url = Column(String(500))
    checkout_url = Column(String(500))

    computer = relationship("Computer", back_populates="frequent", lazy="joined")


class MedicalDevice(Base):
    __tablename__ = "medical_devices"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    brand = Column(String(100), nullable=False, index=True)
    model = Column(String(100), nullable=False)
    serial = Column(String(100), nullable=False, index=True)
    owner_name = Column(String(150), nullable=False)
    owner_id = Column(String(100), nullable=False, index=True)
    photo_url = Column(String(500), nullable=False)
    checkin_at = Column(UTCDateTime)
    checkout_at = Column(UTCDateTime)
    updated_at = Column(UTCDateTime, nullable=False)


class DeviceIndex(Base):
    """Maps every device id to the variant table that owns it."""

    __tablename__ = "device_index"

    id = Column(String(36), primary_key=True)
    device_type = Column(String(20), nullable=False)


class DeviceHistory(Base):
    __tablename__ = "device_history"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    device_id = Column(String(36), nullable=False, index=True)
    device_type = Column(String(20), nullable=False, index=True)
    brand = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    owner_name = Column(String(150), nullable=False)
    owner_id = Column(String(100), nullable=False, index=True)
    event = Column(String(10), nullable=False)
    event_date = Column(UTCDateTime, nullable=False, index=True)
    serial = Column(String(100))
    color = Column(String(50))

"""
User Model
"""
import enum
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Text, Uuid
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.core.timezone import now_utc


class UserRole(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(String(20), nullable=False, default=UserRole.STUDENT.value)  # student | teacher | admin
    first_name = Column(String(255))
    last_name = Column(String(255))
    profile_image_url = Column(Text, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=now_utc, nullable=False)
    updated_at = Column(DateTime, default=now_utc, onupdate=now_utc, nullable=False)

    # Relationships
    doctor_profile = relationship("Doctor", back_populates="teacher_user", uselist=False)
    reviews = relationship("Review", back_populates="reviewer")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"

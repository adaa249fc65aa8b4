"""
Doctor Model - the rated entity (a professor)
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.core.timezone import now_utc


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    department = Column(String(255), nullable=False, index=True)
    title = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    profile_image_url = Column(Text, nullable=True)
    # Teacher account that owns this profile
    teacher_user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), unique=True, nullable=True)
    created_at = Column(DateTime, default=now_utc, nullable=False)
    updated_at = Column(DateTime, default=now_utc, onupdate=now_utc, nullable=False)

    # Relationships
    teacher_user = relationship("User", back_populates="doctor_profile")
    reviews = relationship("Review", back_populates="doctor", order_by="Review.created_at.desc()")

    def __repr__(self):
        return f"<Doctor {self.name}>"

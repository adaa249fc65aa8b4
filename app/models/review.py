"""
Review Model
Insert-only: a review is never updated or deleted once submitted.
"""
from sqlalchemy import Column, Integer, Float, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.core.timezone import now_utc


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    # Never serialized; reviews are anonymous to readers
    reviewer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Factor scores, 0.0 - 5.0 in 0.5 steps
    teaching_quality = Column(Float, nullable=False)
    availability = Column(Float, nullable=False)
    communication = Column(Float, nullable=False)
    knowledge = Column(Float, nullable=False)
    fairness = Column(Float, nullable=False)

    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, default=now_utc, nullable=False)

    # Relationships
    doctor = relationship("Doctor", back_populates="reviews")
    reviewer = relationship("User", back_populates="reviews")

    def __repr__(self):
        return f"<Review {self.id} doctor={self.doctor_id}>"

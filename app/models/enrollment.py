"""Enrollment Model"""

from sqlalchemy import Column, Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.models.base import BaseModel
from app.models.enums import EnrollmentStatus


class Enrollment(BaseModel):
    """A user's enrollment on a course"""
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollments_user_course"),
    )

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    course_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    status = Column(
        Enum(EnrollmentStatus, name="enrollment_status", native_enum=False, length=32),
        default=EnrollmentStatus.ACTIVE,
        nullable=False,
        index=True,
    )

    user = relationship("User", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")

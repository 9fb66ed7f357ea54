"""Course Catalog Model"""

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class Course(BaseModel):
    """A course in the catalog. Disabled courses stay in the catalog but are hidden from learners."""
    __tablename__ = "courses"

    slug = Column(String(255), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(String(2000), nullable=True)
    enabled = Column(Boolean, default=True, nullable=False, index=True)

    enrollments = relationship("Enrollment", back_populates="course", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Course {self.slug}>"

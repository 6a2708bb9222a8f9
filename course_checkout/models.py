import uuid

from sqlalchemy import Column, String, Float, DateTime, JSON, func
from sqlalchemy.ext.mutable import MutableList

from course_checkout.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Course(Base):
    __tablename__ = "courses"
    id = Column(String(64), primary_key=True, default=_new_id)
    course_name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False, default=0)
    students_enrolled = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class User(Base):
    __tablename__ = "users"
    id = Column(String(64), primary_key=True, default=_new_id)
    email = Column(String(255), nullable=False, index=True)
    first_name = Column(String(128), nullable=False)
    courses = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
    course_progress = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class CourseProgress(Base):
    __tablename__ = "course_progress"
    id = Column(String(64), primary_key=True, default=_new_id)
    course_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    completed_videos = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Payment(Base):
    """Client-asserted payment, written alongside the enrollment it unlocked."""
    __tablename__ = "payments"
    id = Column(String(64), primary_key=True, default=_new_id)
    student_id = Column(String(64), nullable=False, index=True)
    course_id = Column(String(64), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    method = Column(String(64), nullable=False)
    status = Column(String(20), nullable=False, default="SUCCESS")
    transaction_ref = Column(String(128), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

#!/usr/bin/env python3
"""
Seed a development database with demo users, courses, enrollments and
audit entries so the admin dashboard has something to show.

Usage:
  python scripts/seed_demo_data.py
  # Requires DATABASE_URL and SECRET_KEY in .env (or export)

Safe to re-run: existing rows (matched by email / slug) are left alone.
"""
import asyncio
import os
import sys
from datetime import timedelta

from dotenv import load_dotenv

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(_root, ".env"))

# Add project root to path
sys.path.insert(0, _root)

from sqlalchemy import select

from app.database import AsyncSessionLocal, close_db, init_db
from app.models import Course, Enrollment, EnrollmentStatus, User, UserRole
from app.services.audit_service import AuditService
from app.utils.time import get_utc_now

DEMO_USERS = [
    ("admin@example.com", "Super Admin", UserRole.SUPER_ADMIN, True),
    ("manager@example.com", "Site Admin", UserRole.ADMIN, True),
    ("instructor@example.com", "Demo Instructor", UserRole.INSTRUCTOR, True),
    ("student1@example.com", "Student One", UserRole.STUDENT, True),
    ("student2@example.com", "Student Two", UserRole.STUDENT, True),
    ("student3@example.com", "Student Three", UserRole.STUDENT, False),
]

DEMO_COURSES = [
    ("intro-to-woodwork", "Introduction to Woodwork", True),
    ("health-and-safety", "Health and Safety Essentials", True),
    ("advanced-joinery", "Advanced Joinery", False),
]


async def seed() -> None:
    now = get_utc_now()
    async with AsyncSessionLocal() as db:
        users = {}
        for index, (email, name, role, is_active) in enumerate(DEMO_USERS):
            user = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
            if user is None:
                user = User(
                    email=email,
                    name=name,
                    role=role,
                    is_active=is_active,
                    created_at=now - timedelta(days=index * 3),
                    last_login_at=now - timedelta(hours=index * 12) if is_active else None,
                )
                db.add(user)
            users[email] = user

        courses = {}
        for slug, title, enabled in DEMO_COURSES:
            course = (await db.execute(select(Course).where(Course.slug == slug))).scalar_one_or_none()
            if course is None:
                course = Course(slug=slug, title=title, enabled=enabled)
                db.add(course)
            courses[slug] = course

        await db.flush()

        existing = (await db.execute(select(Enrollment.user_id, Enrollment.course_id))).all()
        enrolled = {(row.user_id, row.course_id) for row in existing}
        plan = [
            ("student1@example.com", "intro-to-woodwork", EnrollmentStatus.ACTIVE),
            ("student1@example.com", "health-and-safety", EnrollmentStatus.COMPLETED),
            ("student2@example.com", "intro-to-woodwork", EnrollmentStatus.ACTIVE),
            ("student3@example.com", "health-and-safety", EnrollmentStatus.CANCELLED),
        ]
        for email, slug, enrollment_status in plan:
            key = (users[email].id, courses[slug].id)
            if key not in enrolled:
                db.add(Enrollment(user_id=key[0], course_id=key[1], status=enrollment_status))

        admin = users["admin@example.com"]
        AuditService.record(
            db,
            admin,
            action="SEED_DEMO_DATA",
            entity="SYSTEM",
            details={"users": len(DEMO_USERS), "courses": len(DEMO_COURSES)},
        )

        await db.commit()


async def main() -> None:
    try:
        await init_db()
        await seed()
    finally:
        await close_db()
    print("Demo data seeded")


if __name__ == "__main__":
    asyncio.run(main())

#!/usr/bin/env python3
"""
Database Setup Script
Drops the existing database, creates a new one, and seeds demo data.

Usage:
    python setup_database.py

WARNING: This will DELETE all existing data!
"""

import os
import sys
import random
from datetime import timedelta

# Add app to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv
load_dotenv()

import psycopg2
from psycopg2 import sql
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from sqlalchemy.engine import make_url

from app.core.config import settings

DEMO_PASSWORD = "Password123"

DEMO_USERS = [
    {"username": "student1", "email": "student1@example.com", "first_name": "Student", "last_name": "One", "role": "student"},
    {"username": "student2", "email": "student2@example.com", "first_name": "Student", "last_name": "Two", "role": "student"},
    {"username": "teacher1", "email": "teacher1@example.com", "first_name": "Sarah", "last_name": "Johnson", "role": "teacher"},
    {"username": "admin1", "email": "admin1@example.com", "first_name": "Admin", "last_name": "One", "role": "admin"},
]

DEMO_DOCTORS = [
    {"name": "Dr. Sarah Johnson", "department": "Computer Science", "title": "Associate Professor", "bio": "Distributed systems and databases.", "teacher": "teacher1"},
    {"name": "Dr. Michael Chen", "department": "Mathematics", "title": "Professor", "bio": "Number theory and cryptography."},
    {"name": "Dr. Emily Rodriguez", "department": "Physics", "title": "Assistant Professor", "bio": "Condensed matter physics."},
    {"name": "Dr. James Wilson", "department": "Computer Science", "title": "Lecturer", "bio": "Introductory programming."},
    {"name": "Dr. Amira Haddad", "department": "Chemistry", "title": "Professor", "bio": "Organic synthesis."},
]

COMMENTS = [
    "Explains hard topics clearly.",
    "Tough grader but fair.",
    "Always available in office hours.",
    "Lectures could be better organised.",
    None,
]


def drop_and_create_database():
    """Drop existing database and create new one"""
    print("=" * 60)
    print("🗄️  Database Setup Script")
    print("=" * 60)

    if settings.is_sqlite:
        sqlite_path = make_url(settings.database_url).database
        if sqlite_path and os.path.exists(sqlite_path):
            print(f"🗑️  Removing SQLite file '{sqlite_path}'...")
            os.remove(sqlite_path)
        print("✅ Using a fresh SQLite database")
        return

    url = make_url(settings.database_url)
    db_name = url.database

    # Connect to PostgreSQL server (not specific database)
    conn = psycopg2.connect(
        host=url.host,
        port=url.port or 5432,
        user=url.username,
        password=url.password,
        database="postgres"
    )
    conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
    cursor = conn.cursor()

    print(f"\n🔌 Terminating connections to '{db_name}'...")
    cursor.execute(
        """
        SELECT pg_terminate_backend(pg_stat_activity.pid)
        FROM pg_stat_activity
        WHERE pg_stat_activity.datname = %s
        AND pid <> pg_backend_pid();
        """,
        (db_name,)
    )

    print(f"🗑️  Dropping database '{db_name}' if exists...")
    cursor.execute(sql.SQL("DROP DATABASE IF EXISTS {}").format(sql.Identifier(db_name)))

    print(f"✨ Creating database '{db_name}'...")
    cursor.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(db_name)))

    cursor.close()
    conn.close()
    print(f"✅ Database '{db_name}' created successfully!")


def seed_data(db, reviews_per_doctor=(3, 12)):
    """Seed database with demo users, doctors and reviews"""
    from app.models.user import User
    from app.models.doctor import Doctor
    from app.models.review import Review
    from app.core.security import get_password_hash
    from app.core.timezone import now_utc
    from app.db.init_db import create_initial_admin
    from app.services.profiles import link_teacher

    print("\n🌱 Seeding demo data...")

    # ==================== USERS ====================
    print("   👤 Creating users...")
    create_initial_admin(db)
    users = {}
    for data in DEMO_USERS:
        user = User(password_hash=get_password_hash(DEMO_PASSWORD), is_active=True, **data)
        db.add(user)
        users[data["username"]] = user
    db.flush()
    print(f"   ✅ Created {len(DEMO_USERS)} demo users")

    # ==================== DOCTORS ====================
    print("   🎓 Creating doctors...")
    doctors = []
    for data in DEMO_DOCTORS:
        data = dict(data)
        teacher_username = data.pop("teacher", None)
        doctor = Doctor(**data)
        db.add(doctor)
        db.flush()
        if teacher_username:
            link_teacher(db, doctor, users[teacher_username])
        doctors.append(doctor)
    print(f"   ✅ Created {len(doctors)} doctors")

    # ==================== REVIEWS ====================
    print("   ⭐ Creating reviews...")
    students = [u for u in users.values() if u.role == "student"]
    reviews_created = 0
    for doctor in doctors:
        baseline = random.choice([2.5, 3.0, 3.5, 4.0, 4.5])
        for _ in range(random.randint(*reviews_per_doctor)):
            def score():
                return min(5.0, max(0.5, baseline + random.choice([-1.0, -0.5, 0.0, 0.5, 1.0])))

            db.add(Review(
                doctor_id=doctor.id,
                reviewer_id=random.choice(students).id,
                teaching_quality=score(),
                availability=score(),
                communication=score(),
                knowledge=score(),
                fairness=score(),
                comment=random.choice(COMMENTS),
                created_at=now_utc() - timedelta(days=random.randint(0, 180)),
            ))
            reviews_created += 1

    db.commit()
    print(f"   ✅ Created {reviews_created} reviews")


def main():
    drop_and_create_database()

    # Import after the database exists so the engine points at it
    from app.db.init_db import create_tables
    from app.db.session import SessionLocal

    print("\n📋 Creating tables...")
    create_tables()

    db = SessionLocal()
    try:
        seed_data(db)
    finally:
        db.close()

    print("\n" + "=" * 60)
    print("✅ Setup complete! Login credentials:")
    print("   admin / admin123")
    for data in DEMO_USERS:
        print(f"   {data['role']}: {data['username']} / {DEMO_PASSWORD}")
    print("=" * 60)


if __name__ == "__main__":
    main()

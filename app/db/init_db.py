"""
Database initialization script
Creates tables and the initial admin account
"""
import os
from sqlalchemy.orm import Session
from app.db.session import SessionLocal, engine, Base
from app.models.user import User, UserRole
from app.core.security import get_password_hash


def create_tables(bind=None):
    """Create all database tables"""
    from app.models import user, doctor, review  # noqa: F401 - registers the models
    Base.metadata.create_all(bind=engine if bind is None else bind)
    print("✅ Database tables created successfully!")


def create_initial_admin(db: Session, password: str = None):
    """Create initial admin user if not exists"""
    admin = db.query(User).filter(User.username == "admin").first()
    if not admin:
        password = password or os.getenv("ADMIN_PASSWORD", "admin123")
        admin = User(
            username="admin",
            email="admin@campusratings.local",
            password_hash=get_password_hash(password),
            role=UserRole.ADMIN.value,
            first_name="Admin",
            last_name="User",
            is_active=True
        )
        db.add(admin)
        db.commit()
        print("✅ Admin user created: admin")
    else:
        if admin.role != UserRole.ADMIN.value:
            admin.role = UserRole.ADMIN.value
            db.commit()
            print("✅ Updated existing 'admin' user to admin role")
        else:
            print("ℹ️ Admin user already exists")
    return admin


def init_database():
    """Initialize database with tables and initial data"""
    print("🔄 Initializing database...")
    create_tables()

    db = SessionLocal()
    try:
        create_initial_admin(db)
    finally:
        db.close()

    print("✅ Database initialization complete!")


if __name__ == "__main__":
    init_database()

#!/usr/bin/env python3
"""
Reset the password of the 'admin' account
Run: python scripts/reset_admin_password.py [new-password]
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func

from app.db.session import SessionLocal
from app.models import user, doctor, review  # noqa: F401 - registers the models
from app.models.user import User
from app.core.security import get_password_hash

DEFAULT_PASSWORD = "AdminPassword123!"


def reset_admin_password(new_password: str = DEFAULT_PASSWORD) -> bool:
    """
    Set a new password for the user named 'admin' (case-insensitive)

    Returns:
        False when there is no such user
    """
    db = SessionLocal()
    try:
        admin = db.query(User).filter(func.lower(User.username) == "admin").first()
        if not admin:
            print("❌ Admin user not found.")
            return False

        admin.password_hash = get_password_hash(new_password)
        db.commit()
        print(f"✅ Password for user \"{admin.username}\" has been reset to: {new_password}")
        return True
    except Exception as e:
        print(f"❌ Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    password = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_PASSWORD
    ok = reset_admin_password(password)
    sys.exit(0 if ok else 1)

#!/usr/bin/env python3
"""
Copy each linked teacher's profile image onto their doctor profile
Run: python scripts/sync_profiles.py
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.db.session import SessionLocal
from app.models import user, doctor, review  # noqa: F401 - registers the models
from app.services.profiles import sync_all_profiles


def main():
    print("🔄 Syncing teacher profile images to doctor profiles...")
    db = SessionLocal()
    try:
        updated = sync_all_profiles(db)
        for d in updated:
            print(f"   ✅ {d.name} (doctor {d.id})")
        print(f"✅ Sync complete: {len(updated)} doctor(s) updated")
    except Exception as e:
        print(f"❌ Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()

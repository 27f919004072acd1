# migrations/create_admin.py
"""
Back-office account setup
Creates the storefront tables if needed and adds an admin profile.
Admin accounts cannot be created through the public signup endpoint.

Usage: python -m migrations.create_admin
"""

import getpass
from datetime import datetime

from dotenv import load_dotenv

load_dotenv()

from app.core.exceptions import DuplicateEmail
from app.crud import user as crud_user
from app.db.session import Base, SessionLocal, engine
from app.models import models, order, product  # noqa: F401  register tables
from app.schemas.schemas import UserSignup


def create_admin(name: str, email: str, phone: str, password: str) -> bool:
    """Create the tables and one admin profile"""
    print(f"📅 Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    Base.metadata.create_all(bind=engine)
    print("✅ Tables ready")

    db = SessionLocal()
    try:
        data = UserSignup(name=name, email=email, phone=phone, password=password, confirm_password=password)
        admin = crud_user.create_user(db, data, role="admin")
        print(f"✅ Admin account created: {admin.email} ({admin.id})")
        return True
    except DuplicateEmail:
        print(f"❌ {email} is already registered")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    print("🔧 ELECTROMART ADMIN SETUP")
    print("=" * 40)

    name = input("Name: ").strip()
    email = input("Email: ").strip()
    phone = input("Phone: ").strip()
    password = getpass.getpass("Password: ")

    if not (name and email and password):
        print("❌ Name, email and password are required")
    elif password != getpass.getpass("Confirm password: "):
        print("❌ Passwords do not match")
    else:
        confirm = input(f"\n❓ Create admin account for {email}? (yes/no): ").lower()
        if confirm == "yes":
            if not create_admin(name, email, phone, password):
                print("\n❌ Setup failed - check errors above")
        else:
            print("❌ Setup cancelled")

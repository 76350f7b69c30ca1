"""
Create an admin account, or promote an existing account to admin.
Run: python -m scripts.create_admin --email admin@college.edu --password '...'
"""
import argparse
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.init_db import init_db
from app.db.session import SessionLocal
from app.db.models.user import User, UserRole
from app.core.security import hash_password

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_admin(email: str, password: str = None, name: str = "Placement Admin") -> bool:
    """Create the admin, or promote and approve an existing user with this email."""
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email.lower()).first()

        if not user:
            if not password:
                logger.error(f"User {email} not found and no password provided. Cannot create admin.")
                return False

            logger.info(f"Creating new admin: {email}")
            user = User(
                email=email.lower(),
                name=name,
                password_hash=hash_password(password),
                role=UserRole.ADMIN.value,
                is_approved=True,
                is_active=True,
            )
            db.add(user)
        else:
            logger.info(f"Promoting existing user: {email} (ID: {user.id})")
            user.role = UserRole.ADMIN.value
            user.is_approved = True
            user.is_active = True
            if password:
                user.password_hash = hash_password(password)

        db.commit()
        db.refresh(user)
        logger.info(f"Admin ready: user_id={user.id}")
        return True

    except Exception as e:
        db.rollback()
        logger.error(f"Error creating admin: {e}", exc_info=True)
        return False
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or promote an admin account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password")
    parser.add_argument("--name", default="Placement Admin")
    args = parser.parse_args()

    init_db()
    if create_admin(args.email, args.password, args.name):
        print(f"\n[SUCCESS] {args.email} is an admin")
    else:
        print(f"\n[ERROR] Failed to set up admin {args.email}")
        sys.exit(1)

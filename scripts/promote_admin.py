"""
Grants (or revokes) administrator rights to a user by e-mail.

Usage: python scripts/promote_admin.py user@domain.com [--revoke]
"""
import sys
import os

# Add project root to sys.path
sys.path.append(os.getcwd())

from simulafin.auth.models import User  # noqa: E402
from simulafin.core.database import SessionLocal, init_db  # noqa: E402


def set_admin(email: str, is_admin: bool) -> bool:
    init_db()
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email.lower()).first()
        if not user:
            print(f"User '{email}' not found.")
            return False
        user.is_admin = is_admin
        db.commit()
        print(f"User '{email}' is_admin={is_admin}")
        return True
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    ok = set_admin(sys.argv[1], "--revoke" not in sys.argv[2:])
    sys.exit(0 if ok else 1)

import os
import re
import sys
from typing import Optional

from teamup import models
from teamup.database import SessionLocal
from teamup.utils.security import get_password_hash


CONFIRM_PHRASE = "CREATE-FIRST-ADMIN"
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "y", "on"}


def _required_env(key: str) -> str:
    value = os.getenv(key, "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {key}")
    return value


def _validate_password(password: str) -> None:
    if len(password) < 8:
        raise ValueError("ADMIN_PASSWORD must be at least 8 characters.")
    if len(password.encode("utf-8")) > 72:
        raise ValueError("ADMIN_PASSWORD must be <= 72 bytes (bcrypt limit).")
    if not re.search(r"\d", password):
        raise ValueError("ADMIN_PASSWORD must contain at least one digit.")


def bootstrap_admin() -> int:
    """
    Create the first admin, or promote an existing account.

    Requires ENABLE_ADMIN_BOOTSTRAP=true and ADMIN_BOOTSTRAP_CONFIRM set to
    the confirmation phrase.
    """
    try:
        if not _is_truthy(os.getenv("ENABLE_ADMIN_BOOTSTRAP")):
            raise ValueError(
                "Bootstrap disabled. Set ENABLE_ADMIN_BOOTSTRAP=true to run."
            )
        confirm = _required_env("ADMIN_BOOTSTRAP_CONFIRM")
        if confirm != CONFIRM_PHRASE:
            raise ValueError(
                f"Invalid ADMIN_BOOTSTRAP_CONFIRM. Expected exact phrase: {CONFIRM_PHRASE}"
            )

        email = _required_env("ADMIN_EMAIL").lower()
        if not EMAIL_RE.match(email):
            raise ValueError("ADMIN_EMAIL is not a valid email format.")

        db = SessionLocal()
        try:
            existing = db.query(models.User).filter(models.User.email == email).first()
            if existing:
                existing.role = "admin"
                existing.is_verified = True
                db.commit()
                print(f"Promoted existing user to admin: {email}")
                return 0

            password = _required_env("ADMIN_PASSWORD")
            _validate_password(password)
            name = os.getenv("ADMIN_NAME", "").strip() or email.split("@", 1)[0]

            user = models.User(
                email=email,
                password_hash=get_password_hash(password),
                role="admin",
                is_verified=True,
                is_blocked=False,
                college_domain=email.rsplit("@", 1)[-1],
            )
            db.add(user)
            db.flush()

            db.add(models.Profile(user_id=user.id, display_name=name, open_for=[]))

            db.commit()
            print(f"Admin created successfully: {email}")
            return 0
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
    except Exception as exc:
        print(f"Admin bootstrap failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(bootstrap_admin())

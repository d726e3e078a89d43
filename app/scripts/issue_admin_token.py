from __future__ import annotations

import argparse
from datetime import timedelta

from app.core.config import settings
from app.core.security import create_jwt


def issue_admin_token(email: str, *, role: str = "ADMIN", ttl_minutes: int | None = None) -> str:
    ttl = ttl_minutes if ttl_minutes is not None else settings.ADMIN_JWT_TTL_MINUTES
    return create_jwt(
        {"sub": email, "email": email, "role": role.upper()},
        settings.ADMIN_JWT_SECRET,
        timedelta(minutes=ttl),
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Print a bearer token for the grid admin API.")
    parser.add_argument("email")
    parser.add_argument("--ttl-minutes", type=int, default=None)
    args = parser.parse_args()
    print(issue_admin_token(args.email, ttl_minutes=args.ttl_minutes))


if __name__ == "__main__":
    main()

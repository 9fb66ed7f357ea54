#!/usr/bin/env python3
"""
Mint an access token for an existing user, e.g. to call the admin API
from curl or a dashboard in development.

Usage:
  python scripts/create_token.py admin@example.com
  python scripts/create_token.py admin@example.com --minutes 30
  # Requires DATABASE_URL and SECRET_KEY in .env (or export)
"""
import argparse
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

from app.core.security import create_access_token
from app.database import AsyncSessionLocal, close_db
from app.models.user import User


async def _find_user(email: str):
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()


async def main(email: str, minutes: int) -> int:
    try:
        user = await _find_user(email)
    finally:
        await close_db()

    if user is None:
        print(f"No user with email {email}", file=sys.stderr)
        return 1
    if not user.is_active:
        print(f"User {email} is suspended; the API will reject the token", file=sys.stderr)

    token = create_access_token(
        {"sub": str(user.id), "role": user.role.value},
        expires_delta=timedelta(minutes=minutes),
    )
    print(token)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("email")
    parser.add_argument("--minutes", type=int, default=60, help="Token lifetime (default: 60)")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.email, args.minutes)))

"""
Shared test utilities: user creation, auth headers and upload file builders.
"""
import io
import json
from typing import Any, Dict, List, Optional

import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import create_user_token, get_password_hash
from app.models import User, UserRole


# ============================================================================
# USER HELPERS
# ============================================================================

async def create_test_user(
    db_session: AsyncSession,
    email: str = "test@test.com",
    phone: str = "9000000099",
    full_name: str = "Test User",
    password: str = "Passw0rd!",
    role: UserRole = UserRole.member,
    is_verified: bool = True,
) -> User:
    user = User(
        full_name=full_name,
        email=email,
        phone=phone,
        password_hash=get_password_hash(password),
        role=role,
        is_verified=is_verified
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def auth_headers(user: User) -> Dict[str, str]:
    token = create_user_token(user)
    return {"Authorization": f"Bearer {token}"}


# ============================================================================
# FILE HELPERS
# ============================================================================

def rows_to_file(rows: List[Dict[str, Any]], fmt: str, columns: Optional[List[str]] = None) -> bytes:
    """Serialize the same logical rows as csv, xlsx or json bytes."""
    if fmt == "json":
        return json.dumps(rows).encode("utf-8")
    df = pd.DataFrame(rows, columns=columns)
    if fmt == "xlsx":
        buffer = io.BytesIO()
        df.to_excel(buffer, index=False, engine="openpyxl")
        return buffer.getvalue()
    return df.to_csv(index=False).encode("utf-8")

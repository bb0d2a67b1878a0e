"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gains_api.core.database import get_db, get_optional_db

# Session that must exist; resolves to 500 "Database not available" otherwise
DbSession = Annotated[AsyncSession, Depends(get_db)]

# Session that may be None when the ledger is not configured
OptionalDbSession = Annotated[AsyncSession | None, Depends(get_optional_db)]

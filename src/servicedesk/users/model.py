from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """Identity record. Holds credentials only; everything else lives on Profile."""

    user_id: int
    email: str
    password_hash: str
    created_at: Optional[datetime] = None

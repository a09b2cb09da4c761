"""
In-memory user store.

Stands in for the persistence layer: it only keeps what the auth service
hands it and never sees a plaintext password.
"""

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from .models import User


class DuplicateUserError(Exception):
    pass


@dataclass
class UserRecord:
    id: str
    email: str
    password_hash: str
    created_at: datetime
    last_login: Optional[datetime] = None

    def to_public(self) -> User:
        return User(
            id=self.id,
            email=self.email,
            created_at=self.created_at,
            last_login=self.last_login,
        )


class UserRepository:
    def __init__(self):
        self._by_id: Dict[str, UserRecord] = {}
        self._id_by_email: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    async def add(self, email: str, password_hash: str) -> UserRecord:
        async with self._lock:
            key = self._key(email)
            if key in self._id_by_email:
                raise DuplicateUserError(email)
            record = UserRecord(
                id=str(uuid.uuid4()),
                email=email,
                password_hash=password_hash,
                created_at=datetime.now(timezone.utc),
            )
            self._by_id[record.id] = record
            self._id_by_email[key] = record.id
            return record

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        user_id = self._id_by_email.get(self._key(email))
        return self._by_id.get(user_id) if user_id else None

    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        return self._by_id.get(user_id)

    async def touch_login(self, user_id: str) -> None:
        async with self._lock:
            record = self._by_id.get(user_id)
            if record:
                record.last_login = datetime.now(timezone.utc)

    async def update_password_hash(self, user_id: str, password_hash: str) -> None:
        async with self._lock:
            record = self._by_id.get(user_id)
            if record:
                record.password_hash = password_hash

    def count(self) -> int:
        return len(self._by_id)

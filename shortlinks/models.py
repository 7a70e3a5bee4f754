"""SQLAlchemy ORM models for the short link service.

Data Model Layout
=================
::
    links table
    ├─ id (SERIAL PRIMARY KEY)
    ├─ code (VARCHAR(50) UNIQUE, INDEXED)
    ├─ destination_url (VARCHAR(2048) NOT NULL)
    ├─ access_count (INTEGER NOT NULL DEFAULT 0)
    └─ created_at (TIMESTAMPTZ NOT NULL, DEFAULT NOW())

How to Use
===========
**Step 1 — Import**::
    from shortlinks.models import Link

**Step 2 — Query links**::
    result = await session.execute(select(Link).where(Link.code == "abc123"))
    link = result.scalar_one_or_none()

Key Behaviours
===============
- ``code`` carries the uniqueness constraint; inserts that violate it fail at
  the database, which is how conflicts are detected.
- ``created_at`` is stamped by the application with microsecond precision so
  listing order is stable even for links created within the same second.
- ``access_count`` starts at 0 and is only changed by ``count = count + 1``
  updates issued from the store.

Classes:
    Link:  A short code mapped to its destination URL, with an access counter.
"""

import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from shortlinks.database import Base

__all__ = ["Link", "CODE_MAX_LENGTH", "URL_MAX_LENGTH"]

CODE_MAX_LENGTH = 50
URL_MAX_LENGTH = 2048


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


class Link(Base):
    __tablename__ = "links"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(CODE_MAX_LENGTH), unique=True, index=True, nullable=False)
    destination_url: Mapped[str] = mapped_column(String(URL_MAX_LENGTH), nullable=False)
    access_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Link(id={self.id}, code='{self.code}', access_count={self.access_count})>"

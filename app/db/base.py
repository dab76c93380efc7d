from __future__ import annotations

from sqlalchemy import JSON, String
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import DeclarativeBase

# text[] on Postgres; JSON elsewhere so the schema also builds on SQLite.
StringList = JSON().with_variant(postgresql.ARRAY(String), "postgresql")


class Base(DeclarativeBase):
    pass

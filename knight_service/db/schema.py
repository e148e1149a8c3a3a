# knight_service/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, String, DateTime, Boolean, JSON, false
)

metadata = MetaData()

knights = Table(
    "knights",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String, nullable=False),
    Column("nickname", String, nullable=False, unique=True),
    Column("birthday", DateTime(timezone=True), nullable=False),
    Column("attributes", JSON, nullable=False),
    Column("weapons", JSON, nullable=False),
    Column("key_attribute", String, nullable=False),
    Column("is_hero", Boolean, nullable=False, default=False, server_default=false()),
)

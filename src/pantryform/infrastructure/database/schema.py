"""SQLAlchemy Core table definitions for the pantryform state database.

The only persistent state pantryform owns is the form ID counter; rows
and generated files live in the response workbook and output folder.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, Table, Text

metadata = MetaData()

FORM_ID_COUNTER = "form_id"

id_counters = Table(
    "id_counters",
    metadata,
    Column("name", Text, primary_key=True),
    Column("next_value", Integer, nullable=False),
)

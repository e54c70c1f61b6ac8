"""Read-only view of the scraper-owned ``unconfirmed_persons`` table.

The table lives in its own metadata: migrations never create or alter it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import Column, Integer, MetaData, String, Table, Text

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

scraper_metadata = MetaData()

unconfirmed_person_table = Table(
    "unconfirmed_persons",
    scraper_metadata,
    Column("lead_id", Integer, primary_key=True, autoincrement=True),
    Column("full_name", String(500), nullable=True),
    Column("person_type", String(50), nullable=True),
    Column("gender", String(20), nullable=True),
    Column("birth_year", Integer, nullable=True),
    Column("locations", Text, nullable=True),
    Column("source_url", Text, nullable=True),
    Column("source_type", String(50), nullable=True),
)


def create_scraper_tables(engine: Engine) -> None:
    """Create the scraper-owned tables (development databases and tests)."""

    log.info("Creating scraper-owned tables")
    scraper_metadata.create_all(engine, checkfirst=True)

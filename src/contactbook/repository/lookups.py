from __future__ import annotations

from typing import List

from psycopg.rows import dict_row

from ..db import Database
from ..models import Country, Region


class LookupRepository:
    """Read-only access to the country and region reference tables."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def countries(self) -> List[Country]:
        with self.db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("SELECT iso_code_2, country_name FROM Country ORDER BY country_name")
                return [Country(**row) for row in cur.fetchall()]

    def regions(self) -> List[Region]:
        with self.db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT country_iso_code, region_code, name, type
                    FROM Region
                    ORDER BY country_iso_code, name
                    """
                )
                return [Region(**row) for row in cur.fetchall()]

    def regions_for_country(self, country_code: str) -> List[Region]:
        with self.db.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT country_iso_code, region_code, name, type
                    FROM Region
                    WHERE country_iso_code = %s
                    ORDER BY name
                    """,
                    (country_code.upper(),),
                )
                return [Region(**row) for row in cur.fetchall()]


__all__ = ["LookupRepository"]

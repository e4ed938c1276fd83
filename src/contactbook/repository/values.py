from __future__ import annotations

from typing import Any, Mapping

from ..logging import get_logger
from ..models import ValueKind
from .tables import VALUE_TABLES, ValueTable

logger = get_logger("contactbook.values")


def _insert_sql(spec: ValueTable) -> str:
    columns = ", ".join(spec.columns)
    placeholders = ", ".join(["%s"] * len(spec.columns))
    sql = f"INSERT INTO {spec.table} ({columns}) VALUES ({placeholders})"
    if spec.natural_key:
        # The no-op update makes RETURNING yield the id of the row already holding the key.
        sql += f" ON CONFLICT ({spec.natural_key}) DO UPDATE SET {spec.natural_key} = EXCLUDED.{spec.natural_key}"
    return sql + f" RETURNING {spec.id_column}"


class ValueStore:
    """Get-or-create for shared contact values.

    Every call runs on the cursor of the caller's transaction so a resolve and
    the link that follows commit or roll back together.
    """

    def resolve(self, cur, kind: ValueKind, fields: Mapping[str, Any]) -> int:
        """Return the identity of the value row described by ``fields``.

        Emails and phones reuse the row that already carries the natural key;
        addresses always get a fresh row.
        """
        spec = VALUE_TABLES[kind]
        params = tuple(_db_value(fields.get(column)) for column in spec.columns)
        cur.execute(_insert_sql(spec), params)
        row = cur.fetchone()
        value_id = row[spec.id_column]
        logger.debug(
            "contact_value_resolved",
            value_kind=kind.value,
            value_id=value_id,
            natural_key=fields.get(spec.natural_key) if spec.natural_key else None,
        )
        return value_id


def _db_value(value: Any) -> Any:
    # enum members go to postgres as their literal
    return getattr(value, "value", value)


__all__ = ["ValueStore"]

"""In-process document store.

Used for local development and the test suite. Every read returns a deep
copy so callers can never mutate stored state by accident.
"""

import copy
import re
from typing import Any, Optional

from grove.db.store import ConditionFailedError, Item, StoreError

_CLAUSE = re.compile(r"^\s*#?(\w+)\s*=\s*(:\w+)\s*$")


def parse_expression(expression: str) -> list[tuple[str, str]]:
    """Split "a = :a AND b = :b" into [("a", ":a"), ("b", ":b")]."""
    clauses = []
    for part in re.split(r"\s+AND\s+", expression.strip(), flags=re.IGNORECASE):
        match = _CLAUSE.match(part)
        if not match:
            raise StoreError(f"Unsupported key condition: {part!r}")
        clauses.append((match.group(1), match.group(2)))
    return clauses


class MemoryDocumentStore:
    backend = "memory"

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, Item]] = {}

    async def get(self, table: str, key: Item) -> Optional[Item]:
        item = self._tables.get(table, {}).get(key["id"])
        return copy.deepcopy(item) if item is not None else None

    async def put(
        self, table: str, item: Item, *, if_not_exists: Optional[str] = None
    ) -> Item:
        rows = self._tables.setdefault(table, {})
        if if_not_exists and item["id"] in rows:
            raise ConditionFailedError(
                f"Item with {if_not_exists}={item['id']!r} already exists in {table}"
            )
        rows[item["id"]] = copy.deepcopy(item)
        return item

    async def query(
        self,
        table: str,
        expression: str,
        values: dict[str, Any],
        *,
        index: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Item]:
        clauses = parse_expression(expression)
        try:
            wanted = [(attr, values[placeholder]) for attr, placeholder in clauses]
        except KeyError as e:
            raise StoreError(f"Missing expression value {e.args[0]}") from e

        matches = []
        for item in self._tables.get(table, {}).values():
            if all(item.get(attr) == value for attr, value in wanted):
                matches.append(copy.deepcopy(item))
                if limit is not None and len(matches) >= limit:
                    break
        return matches

import copy
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .core import new_record_id
from .errors import NotFound

# In-memory record stores seeded from the bundled JSON fixture.

logger = logging.getLogger(__name__)

FIXTURE_PATH = Path(__file__).with_name("db.json")

RecordDict = Dict[str, Any]


def load_fixture(path: Optional[Path] = None) -> Dict[str, List[RecordDict]]:
    with open(path or FIXTURE_PATH, encoding="utf-8") as fh:
        return json.load(fh)


class ResourceStore:
    """Mutable collection of one resource's records, in insertion order.

    Seeded from a deep copy of ``seed`` so mutations never reach the
    fixture. Every record handed out is a copy; the canonical list is only
    changed through insert/update/remove.
    """

    def __init__(
        self,
        resource: str,
        seed: Iterable[Mapping[str, Any]] = (),
        defaults: Optional[Callable[[Mapping[str, Any]], RecordDict]] = None,
    ):
        self.resource = resource
        self._seed = [copy.deepcopy(dict(r)) for r in seed]
        self._defaults = defaults
        self._records: List[RecordDict] = []
        self.reset()

    def __len__(self) -> int:
        return len(self._records)

    def reset(self) -> None:
        self._records = copy.deepcopy(self._seed)

    def list(self) -> List[RecordDict]:
        return [copy.deepcopy(r) for r in self._records]

    def get_by_id(self, record_id: str) -> RecordDict:
        return copy.deepcopy(self._records[self._index_of(record_id)])

    def insert(self, partial: Mapping[str, Any]) -> RecordDict:
        record = copy.deepcopy(self._defaults(partial) if self._defaults else dict(partial))
        record["id"] = self._next_id()
        self._records.append(record)
        logger.info("%s: inserted %s", self.resource, record["id"])
        return copy.deepcopy(record)

    def update(self, record_id: str, partial: Mapping[str, Any]) -> RecordDict:
        index = self._index_of(record_id)
        changes = {k: v for k, v in partial.items() if k != "id"}
        merged = {**self._records[index], **copy.deepcopy(changes)}
        self._records[index] = merged
        logger.info("%s: updated %s (%s)", self.resource, record_id, ", ".join(sorted(changes)) or "no fields")
        return copy.deepcopy(merged)

    def remove(self, record_id: str) -> None:
        index = self._index_of(record_id)
        del self._records[index]
        logger.info("%s: removed %s", self.resource, record_id)

    def _index_of(self, record_id: str) -> int:
        for index, record in enumerate(self._records):
            if record.get("id") == record_id:
                return index
        raise NotFound.for_record(self.resource, record_id)

    def _next_id(self) -> str:
        taken = {r.get("id") for r in self._records}
        candidate = new_record_id()
        while candidate in taken:
            candidate = new_record_id()
        return candidate

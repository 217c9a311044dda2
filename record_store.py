import copy
import logging
import threading
import time
from typing import Any, Dict, List, Optional

Record = Dict[str, Any]

# Fields every new row starts with, in display order
RECORD_FIELDS = (
    'id',
    'Username',
    'adno',
    'Name',
    'Guardian',
    'address',
    'dateofbirth',
    'bloodgroup',
    'phone',
    'Password',
    'Photo',
)


class RecordStore:
    """
    Ordered in-memory list of records for the loaded document.
    Rows are addressed by display position.
    """

    def __init__(self, records: Optional[List[Record]] = None):
        self.logger = logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._records: List[Record] = []
        self._last_id = 0
        if records:
            self.load(records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> List[Record]:
        """Snapshot of the current rows, safe to serialize or mutate."""
        with self._lock:
            return copy.deepcopy(self._records)

    def load(self, records: List[Record]):
        with self._lock:
            self._records = copy.deepcopy(list(records))

    def clear(self):
        self.load([])

    def _next_id(self) -> int:
        existing = {r.get('id') for r in self._records if isinstance(r.get('id'), (int, str))}
        candidate = max(int(time.time() * 1000), self._last_id + 1)
        while candidate in existing or str(candidate) in existing:
            candidate += 1
        self._last_id = candidate
        return candidate

    def add_record(self) -> int:
        """
        Append an empty row and return its position.
        """
        with self._lock:
            record = {field: '' for field in RECORD_FIELDS}
            record['id'] = self._next_id()
            self._records.append(record)
            self.logger.debug(f"Added record {record['id']} at position {len(self._records) - 1}")
            return len(self._records) - 1

    def _valid(self, position: int) -> bool:
        return isinstance(position, int) and 0 <= position < len(self._records)

    def delete_record(self, position: int) -> bool:
        """
        Remove the row at position. Out-of-range positions are ignored.
        """
        with self._lock:
            if not self._valid(position):
                self.logger.warning(f"Ignoring delete of position {position}, store has {len(self._records)} rows")
                return False
            removed = self._records.pop(position)
            self.logger.debug(f"Deleted record {removed.get('id')} from position {position}")
            return True

    def update_field(self, position: int, field: str, value: Any) -> bool:
        with self._lock:
            if not self._valid(position):
                self.logger.warning(f"Ignoring update of position {position}, store has {len(self._records)} rows")
                return False
            self._records[position][field] = value
            return True

    def get_value(self, position: int, field: str, default: Any = '') -> Any:
        with self._lock:
            if not self._valid(position):
                return default
            return self._records[position].get(field, default)

    def extra_fields(self, position: int) -> Record:
        """Fields of one row that are not part of RECORD_FIELDS."""
        with self._lock:
            if not self._valid(position):
                return {}
            return {k: v for k, v in self._records[position].items() if k not in RECORD_FIELDS}

    def columns(self) -> List[str]:
        """
        Schema fields followed by extra fields in first-seen order.
        """
        with self._lock:
            extras: List[str] = []
            for record in self._records:
                for key in record:
                    if key not in RECORD_FIELDS and key not in extras:
                        extras.append(key)
            return list(RECORD_FIELDS) + extras

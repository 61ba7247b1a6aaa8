"""In-memory record of executed transactions"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterator, List, Optional, Set

from operator_gateway.domain.models import OperatorType, TransactionResult, TransactionSpec
from operator_gateway.utils.references import generate_reference


@dataclass(frozen=True)
class HistoryEntry:
    key: str
    spec: TransactionSpec
    result: TransactionResult
    operator_type: OperatorType
    recorded_at: datetime


class TransactionHistory:
    """
    Append-only, lock-guarded list of executions.

    Entries are never updated or removed. Iteration works on a snapshot,
    so concurrent appends never invalidate a reader.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: List[HistoryEntry] = []
        self._keys: Set[str] = set()

    def append(self, spec: TransactionSpec, result: TransactionResult, operator_type: OperatorType) -> HistoryEntry:
        with self._lock:
            key = generate_reference("TXN")
            while key in self._keys:
                key = generate_reference("TXN")

            entry = HistoryEntry(
                key=key,
                spec=spec,
                result=result,
                operator_type=operator_type,
                recorded_at=datetime.now(timezone.utc),
            )
            self._entries.append(entry)
            self._keys.add(key)
        return entry

    def snapshot(self) -> List[HistoryEntry]:
        with self._lock:
            return list(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Optional[HistoryEntry]:
        for entry in self.snapshot():
            if entry.key == key:
                return entry
        return None

    def find_by_reference(self, reference: str) -> Optional[HistoryEntry]:
        """First entry whose spec carries the given business reference"""
        for entry in self.snapshot():
            if entry.spec.reference == reference:
                return entry
        return None

    def recent_amounts(
        self, n: int, source_account: Optional[str] = None, currency: Optional[str] = None
    ) -> List[Decimal]:
        """Amounts of the last n successful executions, oldest first, optionally for one source account and currency"""
        if n <= 0:
            return []
        amounts = [
            entry.spec.amount
            for entry in self.snapshot()
            if entry.result.success
            and (source_account is None or entry.spec.source_account == source_account)
            and (currency is None or entry.spec.currency == currency)
        ]
        return amounts[-n:]

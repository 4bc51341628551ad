"""
Ledger Module

Append-only, hash-chained record of an account's transactions and status
changes. Each entry carries a SHA-256 hash over its own content and the
previous entry's hash, so any edit or reordering is detectable.
"""

import hashlib
import json
import threading
from datetime import datetime
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Tuple
from enum import Enum
from decimal import Decimal

LEDGER_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class LedgerEventType(Enum):
    """Types of ledger events"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    MOBILE_UPDATED = "mobile_updated"
    ACCOUNT_LOCKED = "account_locked"
    ACCOUNT_UNLOCKED = "account_unlocked"


def _convert_value(value):
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, dict):
        return {k: _convert_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [_convert_value(v) for v in value]
    return value


@dataclass(frozen=True)
class LedgerEntry:
    """
    Immutable ledger entry with hash chaining for tamper detection
    """
    sequence: int
    timestamp: datetime
    event_type: LedgerEventType
    description: str
    previous_hash: str
    current_hash: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def calculate_hash(self) -> str:
        """
        Calculate SHA-256 hash of this entry
        Hash includes all fields except current_hash
        """
        hash_data = {
            'sequence': self.sequence,
            'timestamp': self.timestamp.isoformat(),
            'event_type': self.event_type.value,
            'description': self.description,
            'previous_hash': self.previous_hash,
            'metadata': _convert_value(self.metadata),
        }
        json_data = json.dumps(hash_data, sort_keys=True, separators=(',', ':'))
        return hashlib.sha256(json_data.encode('utf-8')).hexdigest()

    def verify_hash(self) -> bool:
        """Verify that the current hash is correct"""
        return self.current_hash == self.calculate_hash()

    def format(self) -> str:
        return f"[{self.timestamp.strftime(LEDGER_TIMESTAMP_FORMAT)}] {self.description}"

    def __str__(self) -> str:
        return self.format()


class Ledger:
    """
    Append-only transaction ledger. Entries are never reordered or pruned.
    """

    def __init__(self):
        self._entries: List[LedgerEntry] = []
        self._lock = threading.Lock()

    def append(
        self,
        event_type: LedgerEventType,
        description: str,
        timestamp: datetime,
        metadata: Optional[Dict[str, Any]] = None
    ) -> LedgerEntry:
        """
        Append an entry chained to the previous one

        Args:
            event_type: Kind of event being recorded
            description: Stable human-readable description
            timestamp: Capture time of the event
            metadata: Additional event-specific data

        Returns:
            The created LedgerEntry
        """
        with self._lock:
            previous_hash = self._entries[-1].current_hash if self._entries else ""
            entry = LedgerEntry(
                sequence=len(self._entries) + 1,
                timestamp=timestamp,
                event_type=event_type,
                description=description,
                previous_hash=previous_hash,
                metadata=dict(metadata or {}),
            )
            entry = replace(entry, current_hash=entry.calculate_hash())
            self._entries.append(entry)
            return entry

    @property
    def entries(self) -> Tuple[LedgerEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def lines(self) -> Tuple[str, ...]:
        """Formatted "[timestamp] description" lines in append order"""
        return tuple(entry.format() for entry in self.entries)

    def latest(self) -> Optional[LedgerEntry]:
        with self._lock:
            return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self.entries)

    def verify_integrity(self) -> Dict[str, Any]:
        """
        Verify every entry's hash and the continuity of the chain

        Returns:
            Dictionary with integrity check results
        """
        result = {
            'valid': True,
            'total_entries': 0,
            'hash_errors': [],
            'chain_breaks': [],
        }

        entries = self.entries
        result['total_entries'] = len(entries)

        previous_hash = ""
        for position, entry in enumerate(entries):
            if not entry.verify_hash():
                result['valid'] = False
                result['hash_errors'].append({
                    'sequence': entry.sequence,
                    'position': position,
                    'expected_hash': entry.calculate_hash(),
                    'actual_hash': entry.current_hash
                })
            if entry.previous_hash != previous_hash or entry.sequence != position + 1:
                result['valid'] = False
                result['chain_breaks'].append({
                    'sequence': entry.sequence,
                    'position': position,
                    'expected_previous_hash': previous_hash,
                    'actual_previous_hash': entry.previous_hash
                })
            previous_hash = entry.current_hash

        return result

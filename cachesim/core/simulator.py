"""CacheSimulator coordinates cache accesses and statistics.
Feeds trace records into the core Cache one at a time, in order.
"""
import logging
from typing import Callable, Iterable, List, Optional

from .cache import AccessOutcome, Cache
from .trace import AccessRecord, read_trace
from ..data.stats_export import Statistics

logger = logging.getLogger(__name__)


class CacheSimulator:
    def __init__(self, cache: Cache):
        self.cache = cache
        self.sequence: List[AccessRecord] = []
        self.index = 0
        self.skipped = 0

    @property
    def stats(self) -> Statistics:
        return self.cache.stats

    def reset(self):
        # clear counters and cache contents, rewind the sequence pointer
        self.index = 0
        self.skipped = 0
        self.cache.reset()

    def load_sequence(self, records: Iterable[AccessRecord]):
        self.sequence = list(records)
        self.index = 0
        # sequence is a list of AccessRecord. We step
        # through it with `step()` which advances self.index.

    def has_next(self) -> bool:
        return self.index < len(self.sequence)

    def apply(self, record: AccessRecord) -> Optional[AccessOutcome]:
        """Apply a single record; instruction fetches leave the cache untouched."""
        if record.is_instruction:
            self.skipped += 1
            return None
        return self.cache.access(record.address, is_modify=record.is_modify)

    def step(self) -> Optional[AccessOutcome]:
        if not self.has_next():
            return None
        record = self.sequence[self.index]
        self.index += 1
        return self.apply(record)

    def run_all(self, callback: Optional[Callable[[AccessRecord, AccessOutcome], None]] = None):
        while self.has_next():
            record = self.sequence[self.index]
            outcome = self.step()
            if callback and outcome is not None:
                callback(record, outcome)
        return self.stats

    def run_records(
        self,
        records: Iterable[AccessRecord],
        callback: Optional[Callable[[AccessRecord, AccessOutcome], None]] = None,
    ) -> Statistics:
        """Apply records straight from an iterator, without buffering them."""
        for record in records:
            outcome = self.apply(record)
            if callback and outcome is not None:
                callback(record, outcome)
        return self.stats

    def run_trace(
        self,
        path: str,
        callback: Optional[Callable[[AccessRecord, AccessOutcome], None]] = None,
        skip_malformed: bool = False,
    ) -> Statistics:
        logger.info("simulation starting and reading from %s", path)
        stats = self.run_records(read_trace(path, skip_malformed=skip_malformed), callback)
        logger.info("simulation finished: %d accesses, %d instruction records skipped", stats.accesses, self.skipped)
        return stats

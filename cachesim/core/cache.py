"""Core cache implementation

This file provides the set-associative LRU cache model driven by the simulator.
Behavior:
- Cache is composed of S = 2^s sets; each set has E lines (ways).
  set_index = (address >> b) mod 2^s
  tag = address >> (b + s)
- Every non-instruction record advances a logical timer once; a line's
  `last_used` holds the timer value of its latest access.
- On a miss the first non-valid line is filled; if the set is full the line
  with the smallest `last_used` (lowest index on ties) is evicted.
- A Modify record performs a second lookup that always hits.
- access() returns an AccessOutcome describing what happened.
"""

import logging
from dataclasses import dataclass
from typing import Optional, List

from cachesim.core.address import CacheGeometry
from cachesim.data.stats_export import Statistics

logger = logging.getLogger(__name__)


@dataclass
class CacheLine:
    """container for one cache line (way).

    Fields:
    - valid: whether the line currently holds a block
    - tag: the tag stored in the line, meaningful only while valid
    - last_used: logical timestamp of the latest access (0 = never used)
    """

    valid: bool = False
    tag: int = 0
    last_used: int = 0


@dataclass
class AccessOutcome:
    """Result of applying one access to the cache."""

    hit: bool
    set_index: int
    way_index: int
    tag: int
    eviction: bool = False
    evicted_tag: Optional[int] = None
    # only set for Modify records: the second (store) lookup
    second_hit: bool = False

    def events(self) -> List[str]:
        """Words printed by verbose mode, e.g. ['miss', 'eviction', 'hit']."""
        words = ["hit" if self.hit else "miss"]
        if self.eviction:
            words.append("eviction")
        if self.second_hit:
            words.append("hit")
        return words


class Cache:
    """Set-associative cache with LRU replacement.

    Only presence, tag identity and recency are tracked; no data is stored.
    """

    def __init__(
        self,
        s: Optional[int] = None,
        b: Optional[int] = None,
        E: Optional[int] = None,
        geometry: Optional[CacheGeometry] = None,
    ):
        if geometry is not None:
            if (s, b, E) != (None, None, None):
                raise TypeError("pass either s/b/E or geometry, not both")
            self.geometry = geometry
        else:
            # CacheGeometry raises ConfigurationError on nonsense values
            self.geometry = CacheGeometry(
                s=1 if s is None else s,
                b=1 if b is None else b,
                E=1 if E is None else E,
            )
        self.stats = Statistics()
        self.timer = 0

        # allocate the sets matrix: num_sets x lines_per_set
        self.sets: List[List[CacheLine]] = [
            [CacheLine() for _ in range(self.geometry.E)] for _ in range(self.geometry.num_sets)
        ]

    @property
    def num_sets(self) -> int:
        return self.geometry.num_sets

    @property
    def associativity(self) -> int:
        return self.geometry.E

    @property
    def hits(self) -> int:
        return self.stats.hits

    @property
    def misses(self) -> int:
        return self.stats.misses

    @property
    def evictions(self) -> int:
        return self.stats.evictions

    def counters(self):
        """Return (hits, misses, evictions)."""
        return self.stats.hits, self.stats.misses, self.stats.evictions

    def _lookup(self, cache_set: List[CacheLine], tag: int) -> Optional[int]:
        # first valid line holding `tag`, scanning in slot order
        for wi, line in enumerate(cache_set):
            if line.valid and line.tag == tag:
                return wi
        return None

    def _victim(self, cache_set: List[CacheLine]) -> int:
        # strict minimum keeps the lowest index on ties
        victim_index = 0
        for wi in range(1, len(cache_set)):
            if cache_set[wi].last_used < cache_set[victim_index].last_used:
                victim_index = wi
        return victim_index

    def access(self, address: int, is_modify: bool = False) -> AccessOutcome:
        """Perform one Load/Store (or, with `is_modify`, Modify) access."""

        tag, set_index = self.geometry.decode(address)
        cache_set = self.sets[set_index]
        self.timer += 1

        wi = self._lookup(cache_set, tag)
        if wi is not None:
            cache_set[wi].last_used = self.timer
            self.stats.record_hit()
            outcome = AccessOutcome(hit=True, set_index=set_index, way_index=wi, tag=tag)
        else:
            outcome = self._fill(cache_set, set_index, tag)

        if is_modify:
            # the store half of a modify finds the block just loaded
            wi = self._lookup(cache_set, tag)
            cache_set[wi].last_used = self.timer
            self.stats.record_hit()
            outcome.second_hit = True

        return outcome

    def _fill(self, cache_set: List[CacheLine], set_index: int, tag: int) -> AccessOutcome:
        # try to find a free way
        for wi, line in enumerate(cache_set):
            if not line.valid:
                line.tag = tag
                line.valid = True
                line.last_used = self.timer
                self.stats.record_miss(evicted=False)
                return AccessOutcome(hit=False, set_index=set_index, way_index=wi, tag=tag)

        # set is full: replace the least recently used line
        wi = self._victim(cache_set)
        victim = cache_set[wi]
        evicted_tag = victim.tag
        logger.debug("set %d: evicting tag %#x from way %d for tag %#x", set_index, evicted_tag, wi, tag)
        victim.tag = tag
        victim.valid = True
        victim.last_used = self.timer
        self.stats.record_miss(evicted=True)
        return AccessOutcome(
            hit=False,
            set_index=set_index,
            way_index=wi,
            tag=tag,
            eviction=True,
            evicted_tag=evicted_tag,
        )

    def resident_tags(self, set_index: int) -> List[int]:
        """Tags of the valid lines of one set, in slot order."""
        return [line.tag for line in self.sets[set_index] if line.valid]

    def reset(self):
        """Clear cache contents, the timer and the counters.
        """

        for s in self.sets:
            for line in s:
                line.valid = False
                line.tag = 0
                line.last_used = 0
        self.timer = 0
        self.stats.reset()

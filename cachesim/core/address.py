"""Address decoding and cache geometry.

An address is split, from the low bits up, into:
  block offset : b bits (ignored by the simulator)
  set index    : s bits
  tag          : everything above (b + s)

CacheGeometry groups (s, b, E) and rejects combinations that cannot
describe a cache.
"""

from dataclasses import dataclass
from typing import Tuple

ADDRESS_BITS = 64
# every line is a Python object, so the S * E matrix is capped
MAX_LINES = 1 << 22


class ConfigurationError(ValueError):
    """Raised when the cache geometry is not usable."""


def decode(address: int, s: int, b: int) -> Tuple[int, int]:
    """Return (tag, set_index) for `address`."""
    set_index = (address >> b) & ((1 << s) - 1)
    tag = address >> (b + s)
    return tag, set_index


@dataclass(frozen=True)
class CacheGeometry:
    """Cache shape: set-index bits, block-offset bits and lines per set.

    s = 0 gives a single (fully associative) set and b = 0 one-byte blocks;
    negative values, E < 1, s + b wider than an address and more than
    MAX_LINES lines in total are rejected.
    """

    s: int
    b: int
    E: int

    def __post_init__(self):
        for name in ("s", "b", "E"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an int, got {type(value).__name__}")
        if self.s < 0:
            raise ConfigurationError("s (set index bits) must be >= 0")
        if self.b < 0:
            raise ConfigurationError("b (block offset bits) must be >= 0")
        if self.E < 1:
            raise ConfigurationError("E (lines per set) must be >= 1")
        if self.s + self.b > ADDRESS_BITS:
            raise ConfigurationError(
                f"s + b must not exceed {ADDRESS_BITS} address bits (got {self.s + self.b})"
            )
        if self.num_sets * self.E > MAX_LINES:
            raise ConfigurationError(
                f"S * E = {self.num_sets * self.E} lines exceeds the simulator limit of {MAX_LINES}"
            )

    @property
    def num_sets(self) -> int:
        # S = 2^s
        return 1 << self.s

    @property
    def block_size(self) -> int:
        # B = 2^b
        return 1 << self.b

    @property
    def lines_per_set(self) -> int:
        return self.E

    @property
    def capacity(self) -> int:
        """Total data bytes the cache could hold (S * E * B)."""
        return self.num_sets * self.E * self.block_size

    def decode(self, address: int) -> Tuple[int, int]:
        return decode(address, self.s, self.b)

    def block_address(self, tag: int, set_index: int) -> int:
        """Rebuild the base address of the block identified by (tag, set_index)."""
        return ((tag << self.s) | set_index) << self.b

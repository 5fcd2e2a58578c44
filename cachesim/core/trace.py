"""Memory trace reader.

Trace lines look like valgrind's lackey output:

    I 0400d7d4,8
     L 7ff0005b8,8
     S 7ff0005c8,8
     M 0421c7f0,4

Instruction lines usually start in column 0, data accesses with one space.
The address is hex (an optional 0x prefix is accepted), the size decimal.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

from cachesim.core.address import ADDRESS_BITS

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^\s*([A-Za-z])\s+(?:0[xX])?([0-9a-fA-F]+)\s*,\s*(\d+)\s*$")


class TraceFormatError(ValueError):
    """A trace line could not be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
        self.line = line


class AccessKind(Enum):
    INSTRUCTION = "I"
    LOAD = "L"
    STORE = "S"
    MODIFY = "M"


@dataclass(frozen=True)
class AccessRecord:
    kind: AccessKind
    address: int
    size: int = 1

    @property
    def is_instruction(self) -> bool:
        return self.kind is AccessKind.INSTRUCTION

    @property
    def is_modify(self) -> bool:
        return self.kind is AccessKind.MODIFY

    def format(self) -> str:
        """Render as in the trace, without the leading space: 'L 7ff0005b8,8'."""
        return f"{self.kind.value} {self.address:x},{self.size}"


def parse_line(line: str) -> Optional[AccessRecord]:
    """Parse one trace line. Blank lines give None; bad lines raise TraceFormatError."""
    if not line.strip():
        return None
    m = _LINE_RE.match(line)
    if m is None:
        raise TraceFormatError(f"malformed trace line {line.rstrip()!r}", line=line)
    kind_char, addr, size = m.groups()
    try:
        kind = AccessKind(kind_char.upper())
    except ValueError:
        raise TraceFormatError(f"unknown access kind {kind_char!r}", line=line) from None
    address = int(addr, 16)
    if address >> ADDRESS_BITS:
        raise TraceFormatError(f"address {addr} is wider than {ADDRESS_BITS} bits", line=line)
    return AccessRecord(kind=kind, address=address, size=int(size))


def parse_lines(lines: Iterable[str], skip_malformed: bool = False) -> Iterator[AccessRecord]:
    """Yield records from `lines` in order.

    With `skip_malformed`, unparsable lines are logged and dropped instead of
    aborting the read.
    """
    for lineno, line in enumerate(lines, start=1):
        try:
            record = parse_line(line)
        except TraceFormatError as e:
            if not skip_malformed:
                raise TraceFormatError(str(e), line_number=lineno, line=line) from None
            logger.warning("skipping line %d: %s", lineno, e)
            continue
        if record is not None:
            yield record


def read_trace(path: str, skip_malformed: bool = False) -> Iterator[AccessRecord]:
    """Yield the records of the trace file at `path`."""
    with open(path, "r", encoding="utf-8", errors="replace") as fh:
        yield from parse_lines(fh, skip_malformed=skip_malformed)

"""Reading item records from comma-delimited text.

Each line describes one item: `name,resource1,resource2,...`. Whitespace
around fields is stripped and empty resource fields are ignored.

Blank lines are always skipped. Lenient mode (default) also skips lines
without an item name or with bytes that are not valid UTF-8; strict mode
raises MalformedRecord for them.
"""

import sys
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union


Record = Tuple[str, FrozenSet[str]]


class MalformedRecord(ValueError):
    """Raised in strict mode when an input line is not a valid record.

    Attributes:
        line_no: 1-based line number
        line: Raw line content (bytes if it could not be decoded)
        reason: Short description of the problem
    """

    def __init__(self, line_no: int, line: Union[str, bytes], reason: str):
        self.line_no = line_no
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_no}: {reason}: {line!r}")


def parse_line(line: str) -> Optional[Record]:
    """Parse one `name,r1,...,rk` line.

    Returns:
        (name, frozenset of resources), or None if the line has no name
    """
    parts = [p.strip() for p in line.rstrip("\r\n").split(",")]
    name = parts[0]
    if not name:
        return None
    return name, frozenset(p for p in parts[1:] if p)


def read_records(lines: Iterable[Union[str, bytes]], strict: bool = False) -> List[Record]:
    """Parse records from an iterable of lines.

    Lines may be text or raw bytes; bytes are decoded as UTF-8 one line at a
    time, so an undecodable line only affects itself.

    Args:
        lines: Lines of text or bytes (trailing newlines allowed)
        strict: Raise MalformedRecord on unusable lines instead of skipping them

    Returns:
        List of (name, resources) records in input order

    Raises:
        MalformedRecord: In strict mode, for a line without an item name or
            a line that is not valid UTF-8
    """
    records = []
    for line_no, line in enumerate(lines, start=1):
        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError:
                if strict:
                    raise MalformedRecord(line_no, line, "invalid UTF-8")
                continue
        if not line.strip():
            continue
        record = parse_line(line)
        if record is None:
            if strict:
                raise MalformedRecord(line_no, line, "missing item name")
            continue
        records.append(record)
    return records


def load_records(path, strict: bool = False) -> List[Record]:
    """Read records from a file.

    Raises:
        FileNotFoundError: If path does not exist
        MalformedRecord: In strict mode, for an unusable line
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    with open(path, "rb") as f:
        return read_records(f, strict=strict)


def read_stdin(strict: bool = False) -> List[Record]:
    """Read records from standard input."""
    return read_records(sys.stdin.buffer, strict=strict)

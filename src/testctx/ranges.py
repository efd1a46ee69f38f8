"""Recover the full line span of a definition from its anchor point.

The point oracle only reports where a definition starts. The range oracle
lists every foldable region in the defining file; the widest region starting
on the anchor row is taken as the whole declaration.
"""

import logging
import threading

from testctx.errors import ParseError, RangeReconstructionError, ResolutionError
from testctx.models import FoldableRange, Position, Range

logger = logging.getLogger(__name__)


def _parse_point(text: str, label: str) -> Position:
    parts = text.split(":")
    if len(parts) != 2:
        raise ParseError(f"Invalid {label} point: {text!r}")
    try:
        return Position(int(parts[0]), int(parts[1]))
    except ValueError as e:
        raise ParseError(f"Invalid {label} point: {text!r}") from e


def parse_range(entry: str) -> Range:
    """Parse a 'rowStart:colStart-rowEnd:colEnd' entry.

    Raises:
        ParseError: If the entry is malformed or its rows are inverted
    """
    entry = entry.strip()
    if "-" not in entry:
        raise ParseError(f"Invalid range string: {entry!r}")

    start_text, end_text = entry.split("-", 1)
    start = _parse_point(start_text, "start")
    end = _parse_point(end_text, "end")
    try:
        return Range(start=start, end=end)
    except ValueError as e:
        raise ParseError(f"Invalid range string: {entry!r}") from e


def parse_folding_ranges(output: str) -> list[FoldableRange]:
    """Parse newline-delimited folding ranges, skipping malformed lines."""
    ranges = []
    for line in output.strip().splitlines():
        if not line.strip():
            continue
        try:
            ranges.append(FoldableRange(range=parse_range(line)))
        except ParseError as e:
            logger.warning(f"Could not parse range: {e}")
    return ranges


def select_enclosing_range(ranges: list[FoldableRange], anchor: Position) -> Range | None:
    """Pick the widest range starting on the anchor row.

    Ties on end row go to the last range encountered.

    Returns:
        The selected Range, or None if no range starts on the anchor row
    """
    selected = None
    for candidate in ranges:
        rng = candidate.range
        if rng.start.row != anchor.row:
            continue
        if selected is None or rng.end.row >= selected.end.row:
            selected = rng
    return selected


class RangeReconstructor:
    """Expands an anchor point to the span of its enclosing declaration."""

    def __init__(self, oracle, cache: bool = False):
        self.oracle = oracle
        self.cache = cache
        self._ranges_by_file: dict[str, list[FoldableRange]] = {}
        self._lock = threading.Lock()

    def folding_ranges(self, file_path: str) -> list[FoldableRange]:
        """Return the parsed folding ranges for a file.

        Raises:
            RangeReconstructionError: If the range oracle fails
        """
        if self.cache:
            with self._lock:
                cached = self._ranges_by_file.get(file_path)
            if cached is not None:
                return cached

        try:
            output = self.oracle.folding_ranges(file_path)
        except ResolutionError as e:
            raise RangeReconstructionError(
                f"Could not list folding ranges for {file_path}: {e}"
            ) from e
        ranges = parse_folding_ranges(output)

        if self.cache:
            with self._lock:
                self._ranges_by_file[file_path] = ranges
        return ranges

    def reconstruct(self, file_path: str, anchor: Position) -> Range:
        """Return the definition span that starts on the anchor row.

        Raises:
            RangeReconstructionError: If no range starts on the anchor row
        """
        selected = select_enclosing_range(self.folding_ranges(file_path), anchor)
        if selected is None or selected.is_empty:
            raise RangeReconstructionError(
                f"No foldable range starts on line {anchor.row} of {file_path}"
            )
        return selected

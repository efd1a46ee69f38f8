"""Slice reconstructed definitions out of their source files."""

from pathlib import Path

from testctx.errors import SourceReadError
from testctx.models import DeclarationMatch, Range


def read_source_lines(file_path: str | Path) -> list[str]:
    """Read a file and split it into lines.

    Lines are split on "\\n" only, the way the oracle and the syntax tree
    count rows; other Unicode line breaks stay inside their line.

    Raises:
        SourceReadError: If the file can't be read or decoded
    """
    try:
        text = Path(file_path).read_bytes().decode("utf8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Could not read {file_path}: {e}") from e

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def collect_leading_comments(lines: list[str], start_row: int, prefix: str) -> list[str]:
    """Collect the comment lines directly above a one-based start row.

    Args:
        lines: File contents split into lines
        start_row: One-based line number where the definition starts
        prefix: Comment-line prefix (e.g. "//")

    Returns:
        Contiguous comment lines in source order (empty if none)
    """
    comments = []
    index = start_row - 2
    while 0 <= index < len(lines) and lines[index].strip().startswith(prefix):
        comments.append(lines[index])
        index -= 1

    # Restore top-to-bottom order
    comments.reverse()
    return comments


def assemble_definition(
    name: str,
    lines: list[str],
    rng: Range,
    prefix: str,
) -> DeclarationMatch:
    """Build a DeclarationMatch from a one-based, end-inclusive line range.

    Raises:
        SourceReadError: If the range falls outside the file
    """
    if rng.start.row < 1 or rng.end.row > len(lines):
        raise SourceReadError(
            f"Range {rng.start.row}-{rng.end.row} is outside a file of {len(lines)} lines"
        )

    body = "\n".join(lines[rng.start.row - 1:rng.end.row])
    comments = collect_leading_comments(lines, rng.start.row, prefix)
    return DeclarationMatch(name=name, body_text=body, comment="\n".join(comments))

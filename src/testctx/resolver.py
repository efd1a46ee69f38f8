"""Resolve call sites to defining locations through the point oracle."""

import logging
import re

from testctx.errors import ParseError
from testctx.models import Position, ResolvedDefinition

logger = logging.getLogger(__name__)


def parse_definition_output(output: str) -> ResolvedDefinition:
    """Parse a point oracle response into a ResolvedDefinition.

    The response looks like
    "/a/b.go:8:6-14: defined here as func f() string"; only the location
    token before the first run of spaces is used.

    Args:
        output: Raw oracle stdout

    Returns:
        ResolvedDefinition with the oracle's one-based line and start column

    Raises:
        ParseError: If the location token does not have path, line and column fields
    """
    token = re.split(r" +", output.strip(), maxsplit=1)[0]
    token = token.rstrip(":")

    fields = token.split(":")
    if len(fields) != 3:
        raise ParseError(f"Invalid definition string: {output.strip()!r}")
    file_path, line, column_range = fields

    try:
        row = int(line)
    except ValueError as e:
        raise ParseError(f"Invalid line number: {line!r}") from e

    column_start = column_range.split("-")[0]
    try:
        column = int(column_start)
    except ValueError as e:
        raise ParseError(f"Invalid column number: {column_start!r}") from e

    return ResolvedDefinition(file_path=file_path, point=Position(row, column))


class DefinitionResolver:
    """Maps tree positions to definitions via the point oracle."""

    def __init__(self, oracle):
        self.oracle = oracle

    def resolve(self, file_path: str, position: Position) -> ResolvedDefinition:
        """Resolve a zero-based tree position in file_path to its definition.

        Raises:
            ResolutionError: If the oracle fails or times out
            ParseError: If the oracle output is malformed
        """
        line = position.row + 1
        column = position.column + 1
        output = self.oracle.definition(file_path, line, column)
        definition = parse_definition_output(output)
        logger.debug(
            f"{file_path}:{line}:{column} resolves to "
            f"{definition.file_path}:{definition.point.row}"
        )
        return definition

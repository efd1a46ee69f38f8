from dataclasses import dataclass, field


@dataclass(frozen=True)
class Position:
    """A row/column point.

    Zero-based while it refers to the syntax tree, one-based once it has been
    reported by (or handed to) the external oracle.
    """
    row: int
    column: int


@dataclass(frozen=True)
class Range:
    """A line span between two positions (end row inclusive)."""
    start: Position
    end: Position

    def __post_init__(self):
        if self.start.row > self.end.row:
            raise ValueError(
                f"Range start row {self.start.row} is after end row {self.end.row}"
            )

    @property
    def is_empty(self) -> bool:
        return self == EMPTY_RANGE


EMPTY_RANGE = Range(Position(0, 0), Position(0, 0))


@dataclass
class DeclarationMatch:
    """A located or reconstructed declaration."""
    name: str
    body_text: str
    comment: str = ""  # Empty when no comment is attached

    def render(self) -> str:
        """Return the declaration text with its comment block on top.

        An empty comment yields the body alone, with no leading newline.
        """
        if not self.comment.strip():
            return self.body_text
        return f"{self.comment}\n{self.body_text}"


@dataclass(frozen=True)
class CallSite:
    """An invoked symbol and the position the resolver should be pointed at."""
    name: str
    position: Position


@dataclass(frozen=True)
class ResolvedDefinition:
    """Where the point oracle says a symbol is defined (one-based)."""
    file_path: str
    point: Position


@dataclass(frozen=True)
class FoldableRange:
    """One block boundary reported by the range oracle."""
    range: Range


@dataclass
class Diagnostic:
    """Why a call site was left out of a bundle."""
    call_name: str
    error: str  # Exception class name, e.g. "ResolutionError"
    message: str


@dataclass
class ContextBundle:
    """The target declaration plus the text of everything it calls."""
    namespace: str
    target: DeclarationMatch
    dependencies: list[str] = field(default_factory=list)  # Discovery order
    diagnostics: list[Diagnostic] = field(default_factory=list)

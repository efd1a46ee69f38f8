"""Exceptions raised while building context bundles.

Errors on the target declaration (ParseError, NotFoundError) abort a build.
Errors on a single dependency (ResolutionError, RangeReconstructionError,
SourceReadError, and ParseError from oracle output) only drop that dependency.
"""


class ContextError(Exception):
    """Base class for all testctx errors."""


class ParseError(ContextError):
    """Source produced no syntax tree, or oracle output had an unexpected shape."""


class NotFoundError(ContextError):
    """The requested declaration exists in neither function nor method form."""


class ResolutionError(ContextError):
    """The point oracle could not resolve a call site."""


class RangeReconstructionError(ContextError):
    """No foldable range starts on the resolved anchor row."""


class SourceReadError(ContextError, OSError):
    """A defining file is unreadable or shorter than its reconstructed range."""


class BuildCancelled(ContextError):
    """The build was cancelled before all call sites were processed."""

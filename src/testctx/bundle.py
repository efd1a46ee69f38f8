"""Build context bundles for a target function.

A bundle holds the target declaration (with its leading comment), the
namespace of its file, and the text of every distinct symbol the target
calls. Dependencies that cannot be resolved are dropped and reported as
diagnostics; only problems with the target itself abort the build.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path

from testctx.assembler import assemble_definition, read_source_lines
from testctx.calls import extract_call_sites
from testctx.config import EngineConfig
from testctx.errors import (
    BuildCancelled,
    NotFoundError,
    ParseError,
    RangeReconstructionError,
    ResolutionError,
    SourceReadError,
)
from testctx.locator import find_declaration, find_namespace
from testctx.models import CallSite, ContextBundle, DeclarationMatch, Diagnostic
from testctx.oracle import GoplsOracle
from testctx.parsers.base import BaseParser
from testctx.parsers.go_parser import GoParser
from testctx.ranges import RangeReconstructor
from testctx.resolver import DefinitionResolver

logger = logging.getLogger(__name__)

# Errors that only drop the call site they occurred on
RECOVERABLE_ERRORS = (
    ParseError,
    ResolutionError,
    RangeReconstructionError,
    SourceReadError,
)


class BuildState(Enum):
    INIT = "init"
    PARSED = "parsed"
    DECLARATION_FOUND = "declaration_found"
    CALLS_EXTRACTED = "calls_extracted"
    RESOLVING = "resolving"
    ASSEMBLED = "assembled"
    FAILED = "failed"


class ContextBundleBuilder:
    """Orchestrates parsing, call extraction and definition resolution."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        parser: BaseParser | None = None,
        oracle=None,
    ):
        self.config = config or EngineConfig()
        self.parser = parser or GoParser()
        self.oracle = oracle or GoplsOracle(
            command=self.config.oracle_argv,
            timeout=self.config.oracle_timeout,
            cwd=self.config.project_dir,
        )
        self.resolver = DefinitionResolver(self.oracle)
        self.reconstructor = RangeReconstructor(
            self.oracle, cache=self.config.cache_folding_ranges
        )
        self.state = BuildState.INIT
        self._cancelled = threading.Event()

    @property
    def comment_prefix(self) -> str:
        return self.config.comment_prefix or self.parser.profile.comment_prefix

    def cancel(self) -> None:
        """Stop the build before the next call site and kill running oracle calls."""
        self._cancelled.set()
        terminate_all = getattr(self.oracle, "terminate_all", None)
        if terminate_all is not None:
            terminate_all()

    def build(
        self,
        file_path: str | Path,
        function_name: str,
        source: bytes | None = None,
    ) -> ContextBundle:
        """Build the context bundle for a function or method.

        Args:
            file_path: File containing the target declaration
            function_name: Name of the function or method
            source: Source bytes; read from file_path when None

        Returns:
            ContextBundle with dependencies in call discovery order

        Raises:
            SourceReadError: If the target file can't be read
            ParseError: If the target file can't be parsed
            NotFoundError: If no function or method has the name
            BuildCancelled: If cancel() was called during the build
        """
        self._set_state(BuildState.INIT)
        file_path = str(file_path)
        profile = self.parser.profile

        try:
            if source is None:
                source = self._read_source(file_path)
            tree = self.parser.parse(source)
        except (SourceReadError, ParseError):
            self._set_state(BuildState.FAILED)
            raise
        self._set_state(BuildState.PARSED)

        root = tree.root_node
        located = find_declaration(root, source, function_name, profile)
        if located is None:
            self._set_state(BuildState.FAILED)
            raise NotFoundError(f"Could not find function {function_name!r} in {file_path}")
        self._set_state(BuildState.DECLARATION_FOUND)

        namespace = find_namespace(root, source, profile)
        body = located.node.child_by_field_name(profile.body_field)
        sites = extract_call_sites(body, source, profile)
        for site in sites:
            logger.debug(
                f"Found function call {site.name!r} at "
                f"{site.position.row}:{site.position.column}"
            )
        self._set_state(BuildState.CALLS_EXTRACTED)

        self._set_state(BuildState.RESOLVING)
        try:
            results = self._resolve_all(file_path, sites)
            if self._cancelled.is_set():
                raise BuildCancelled(f"Build for {function_name!r} was cancelled")
        except BuildCancelled:
            self._set_state(BuildState.FAILED)
            raise

        dependencies = []
        diagnostics = []
        for text, diagnostic in results:
            if diagnostic is not None:
                diagnostics.append(diagnostic)
            else:
                dependencies.append(text)

        self._set_state(BuildState.ASSEMBLED)
        return ContextBundle(
            namespace=namespace,
            target=located.match,
            dependencies=dependencies,
            diagnostics=diagnostics,
        )

    def _set_state(self, state: BuildState) -> None:
        logger.debug(f"Build state {self.state.value} -> {state.value}")
        self.state = state

    def _read_source(self, file_path: str) -> bytes:
        try:
            return self._project_path(file_path).read_bytes()
        except OSError as e:
            raise SourceReadError(f"Could not read {file_path}: {e}") from e

    def _resolve_all(
        self,
        file_path: str,
        sites: list[CallSite],
    ) -> list[tuple[str | None, Diagnostic | None]]:
        """Resolve every call site, returning results in discovery order."""
        workers = min(self.config.workers, len(sites))
        if workers <= 1:
            return [self._resolve_site(file_path, site) for site in sites]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._resolve_site, file_path, site) for site in sites]
            return [future.result() for future in futures]

    def _resolve_site(
        self,
        file_path: str,
        site: CallSite,
    ) -> tuple[str | None, Diagnostic | None]:
        if self._cancelled.is_set():
            raise BuildCancelled(f"Cancelled before resolving {site.name!r}")

        try:
            match = self._definition_for(file_path, site)
        except RECOVERABLE_ERRORS as e:
            logger.warning(f"Skipping {site.name!r}: {e}")
            return None, Diagnostic(
                call_name=site.name,
                error=type(e).__name__,
                message=str(e),
            )
        return match.render(), None

    def _definition_for(self, file_path: str, site: CallSite) -> DeclarationMatch:
        definition = self.resolver.resolve(file_path, site.position)
        definition_path = definition.file_path

        try:
            rng = self.reconstructor.reconstruct(definition_path, definition.point)
        except RangeReconstructionError:
            if not self.config.locate_fallback:
                raise
            located = self._locate_by_name(definition_path, site, definition.point.row - 1)
            if located is None:
                raise
            logger.debug(f"Located {site.name!r} by name in {definition_path}")
            return located

        lines = read_source_lines(self._project_path(definition_path))
        return assemble_definition(site.name, lines, rng, self.comment_prefix)

    def _locate_by_name(self, file_path: str, site: CallSite, row: int) -> DeclarationMatch | None:
        """Find the callee's declaration on the resolved row of its defining file."""
        bare_name = site.name.rsplit(".", 1)[-1]
        source = self._read_source(file_path)
        tree = self.parser.parse(source)
        located = find_declaration(
            tree.root_node, source, bare_name, self.parser.profile, row=row
        )
        if located is None:
            return None
        return located.match

    def _project_path(self, file_path: str) -> Path:
        path = Path(file_path)
        if not path.is_absolute() and self.config.project_dir is not None:
            return Path(self.config.project_dir) / path
        return path

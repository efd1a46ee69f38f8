"""Configuration management for the context bundle engine."""

import shlex
from dataclasses import dataclass
from pathlib import Path

import yaml

CONFIG_FILE_NAME = ".testctx"


@dataclass
class EngineConfig:
    """Configuration for bundle building.

    Attributes:
        comment_prefix: Prefix that marks a comment line when collecting
            leading comments above a reconstructed definition.
        oracle_command: Command used to run the point/range oracle
            (split with shell rules, so extra flags are allowed).
        oracle_timeout: Seconds allowed per oracle call before it is killed.
        max_workers: Upper bound on concurrent call-site resolutions.
        cache_folding_ranges: Fetch folding ranges once per file instead of
            once per call site.
        locate_fallback: When no folding range matches, look the callee up by
            name in its defining file instead of dropping it.
        project_dir: Working directory for oracle processes.
    """
    comment_prefix: str = "//"
    oracle_command: str = "gopls"
    oracle_timeout: float = 5.0
    max_workers: int = 1
    cache_folding_ranges: bool = False
    locate_fallback: bool = True
    project_dir: Path | None = None

    @property
    def oracle_argv(self) -> list[str]:
        """Oracle command as an argument vector."""
        return shlex.split(self.oracle_command)

    @property
    def workers(self) -> int:
        """Effective worker count (never below one)."""
        return max(1, int(self.max_workers))


def load_engine_config(project_dir: Path | None = None) -> EngineConfig:
    """Load engine configuration from the .testctx file in the project directory.

    Args:
        project_dir: Path to the project directory. If None, uses current directory.

    Returns:
        EngineConfig object with loaded or default values.

    Notes:
        If .testctx doesn't exist or can't be parsed, returns default config.
        Expected YAML structure:

        ```yaml
        engine:
          comment_prefix: "//"
          oracle_command: gopls
          oracle_timeout: 5.0
          max_workers: 1
          cache_folding_ranges: false
          locate_fallback: true
        ```
    """
    if project_dir is None:
        project_dir = Path.cwd()

    config_path = project_dir / CONFIG_FILE_NAME

    if not config_path.exists():
        return EngineConfig(project_dir=project_dir)

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            return EngineConfig(project_dir=project_dir)

        engine_config = data.get("engine", {})
        if not isinstance(engine_config, dict):
            return EngineConfig(project_dir=project_dir)

        return EngineConfig(
            comment_prefix=str(engine_config.get(
                "comment_prefix",
                EngineConfig.comment_prefix
            )),
            oracle_command=str(engine_config.get(
                "oracle_command",
                EngineConfig.oracle_command
            )),
            oracle_timeout=float(engine_config.get(
                "oracle_timeout",
                EngineConfig.oracle_timeout
            )),
            max_workers=int(engine_config.get(
                "max_workers",
                EngineConfig.max_workers
            )),
            cache_folding_ranges=bool(engine_config.get(
                "cache_folding_ranges",
                EngineConfig.cache_folding_ranges
            )),
            locate_fallback=bool(engine_config.get(
                "locate_fallback",
                EngineConfig.locate_fallback
            )),
            project_dir=project_dir,
        )
    except (yaml.YAMLError, OSError, KeyError, TypeError, ValueError):
        # Return default config on any parsing errors
        return EngineConfig(project_dir=project_dir)

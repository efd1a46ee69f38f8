"""testctx - context bundles for test generation."""

try:
    from importlib.metadata import version

    __version__ = version("testctx")
except Exception:
    __version__ = "0.0.0.dev0+local"  # Fallback for development

"""Allow running as ``python -m docs_sync``."""

from .cli import run

run()

from __future__ import annotations

from storybeat.opcodes.engine import RewriteEngine
from storybeat.runtime import get_engine


def engine_dependency() -> RewriteEngine:
    return get_engine()

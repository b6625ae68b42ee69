"""
记忆模块 — 压缩后的上下文及其生命周期操作。
"""

from llm_streamliner.memory.module import (
    MemoryModule,
    construct,
    construct_async,
    content_checksum,
    expand,
    expand_async,
    expand_text,
)

__all__ = [
    "MemoryModule",
    "construct",
    "construct_async",
    "content_checksum",
    "expand",
    "expand_async",
    "expand_text",
]

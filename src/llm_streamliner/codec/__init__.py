"""
序列化模块 — 记忆模块与结构化文本文档之间的转换。
"""

from llm_streamliner.codec.document import (
    FORMAT_VERSION,
    MemoryDocument,
    detect_format,
    from_dict,
    from_document,
    to_dict,
    to_document,
)

__all__ = [
    "FORMAT_VERSION",
    "MemoryDocument",
    "detect_format",
    "from_dict",
    "from_document",
    "to_dict",
    "to_document",
]

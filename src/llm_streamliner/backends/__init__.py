"""
压缩后端模块。

提供 Compressor / Expander 能力协议、内置后端（zlib、gzip、可选的 lz4）
以及按算法标识选择后端的注册表。
"""

from llm_streamliner.backends.base import (
    DEFAULT_ALGORITHM,
    AlgorithmId,
    Backend,
    Compressor,
    Expander,
    coerce_algorithm,
)
from llm_streamliner.backends.gzip_backend import GzipBackend
from llm_streamliner.backends.registry import (
    BackendRegistry,
    available_algorithms,
    create_default_registry,
    default_registry,
    get_backend,
)
from llm_streamliner.backends.zlib_backend import ZlibBackend

__all__ = [
    "DEFAULT_ALGORITHM",
    "AlgorithmId",
    "Backend",
    "BackendRegistry",
    "Compressor",
    "Expander",
    "GzipBackend",
    "ZlibBackend",
    "available_algorithms",
    "coerce_algorithm",
    "create_default_registry",
    "default_registry",
    "get_backend",
]

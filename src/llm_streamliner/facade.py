"""
Streamliner — 顶层 Facade API。

把后端选择、记忆模块创建/展开和文档序列化串成一条链路，
覆盖最常见的用法。

最简用法::

    from llm_streamliner import Streamliner

    streamliner = Streamliner()
    module = streamliner.compress(conversation_history)
    document = streamliner.dumps(module)        # → 交给调用方存储

    restored = streamliner.loads(document)
    text = streamliner.expand_text(restored)    # == conversation_history

异步用法::

    module = await streamliner.compress_async(conversation_history)
    data = await streamliner.expand_async(module)

展开时总是根据模块记录的 algorithm 选择后端，与当前配置的默认算法无关。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from llm_streamliner.backends.base import AlgorithmId, Backend
from llm_streamliner.backends.registry import BackendRegistry, default_registry
from llm_streamliner.codec.document import DocumentFormat, detect_format, from_document, to_document
from llm_streamliner.config.loader import load_config
from llm_streamliner.config.schema import StreamlinerConfig
from llm_streamliner.memory.module import (
    MemoryModule,
    construct,
    construct_async,
    expand,
    expand_async,
    expand_text,
)

logger = logging.getLogger(__name__)


class Streamliner:
    """
    压缩/展开/序列化的统一入口。

    实例只持有只读的配置和注册表，可以在多个线程和协程之间共享。

    属性:
        config: 当前配置
        registry: 后端注册表
    """

    def __init__(
        self,
        config: StreamlinerConfig | None = None,
        registry: BackendRegistry | None = None,
        config_path: str | Path | None = None,
    ) -> None:
        """
        初始化 Streamliner。

        参数:
            config: 配置实例。None 时从 config_path 或默认搜索路径加载。
            registry: 后端注册表，默认使用进程内默认注册表
            config_path: YAML 配置文件路径（config 为 None 时生效）
        """
        self._config = config if config is not None else load_config(config_path)
        self._registry = registry if registry is not None else default_registry()
        # 默认算法必须在注册表中可用，否则尽早失败
        self._default_algorithm = self._registry.resolve(self._config.compression.default_algorithm)
        logger.debug(
            "Streamliner 初始化完成：默认算法 %s，可用算法 %s",
            self._default_algorithm.value,
            [a.value for a in self._registry.algorithms()],
        )

    @property
    def config(self) -> StreamlinerConfig:
        return self._config

    @property
    def registry(self) -> BackendRegistry:
        return self._registry

    @property
    def default_algorithm(self) -> AlgorithmId:
        return self._default_algorithm

    def backend(self, algorithm: AlgorithmId | str | None = None) -> Backend:
        """按配置中的压缩级别创建某个算法的后端，None 时为默认算法。"""
        algorithm_id = (
            self._default_algorithm if algorithm is None else self._registry.resolve(algorithm)
        )
        return self._registry.get(
            algorithm_id, level=self._config.compression.level_for(algorithm_id)
        )

    # === 压缩 / 展开 ===

    def compress(
        self, plaintext: bytes | str, algorithm: AlgorithmId | str | None = None
    ) -> MemoryModule:
        """压缩明文为记忆模块。"""
        return construct(
            plaintext,
            self.backend(algorithm),
            record_checksum=self._config.integrity.record_checksum,
        )

    def expand(self, module: MemoryModule) -> bytes:
        """展开记忆模块，后端由 module.algorithm 决定。"""
        return expand(
            module,
            self.backend(module.algorithm),
            verify_checksum=self._config.integrity.verify_checksum,
        )

    def expand_text(self, module: MemoryModule, encoding: str = "utf-8") -> str:
        """展开记忆模块并解码为文本。"""
        return expand_text(
            module,
            self.backend(module.algorithm),
            encoding=encoding,
            verify_checksum=self._config.integrity.verify_checksum,
        )

    async def compress_async(
        self, plaintext: bytes | str, algorithm: AlgorithmId | str | None = None
    ) -> MemoryModule:
        """compress() 的异步版本。"""
        return await construct_async(
            plaintext,
            self.backend(algorithm),
            record_checksum=self._config.integrity.record_checksum,
        )

    async def expand_async(self, module: MemoryModule) -> bytes:
        """expand() 的异步版本。"""
        return await expand_async(
            module,
            self.backend(module.algorithm),
            verify_checksum=self._config.integrity.verify_checksum,
        )

    # === 序列化 ===

    def dumps(self, module: MemoryModule, fmt: DocumentFormat | None = None) -> str:
        """把记忆模块序列化为文档，格式默认取自配置。"""
        return to_document(
            module,
            fmt=fmt or self._config.document.format,
            indent=self._config.document.indent,
        )

    def loads(self, text: str | bytes, fmt: DocumentFormat | None = None) -> MemoryModule:
        """
        从文档还原记忆模块。

        fmt 为 None 时根据内容自动判断 JSON / YAML。
        """
        if fmt is None:
            sample = text.decode("utf-8", errors="replace") if isinstance(text, bytes) else text
            fmt = detect_format(sample)
        return from_document(text, fmt=fmt, registry=self._registry)

    def stats(self, module: MemoryModule) -> dict[str, Any]:
        """记忆模块的统计信息（不解压）。"""
        return {
            "algorithm": module.algorithm.value,
            "original_length": module.original_length,
            "compressed_length": module.compressed_length,
            "compression_ratio": round(module.compression_ratio, 4),
            "bytes_saved": module.bytes_saved,
            "created_at": module.created_at.isoformat(),
            "checksum": module.checksum,
        }

    def __repr__(self) -> str:
        return (
            f"Streamliner(default_algorithm={self._default_algorithm.value!r}, "
            f"registry={self._registry!r})"
        )

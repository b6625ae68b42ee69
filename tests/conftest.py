"""
测试套件共享 Fixtures 和配置。
"""

from __future__ import annotations

import pytest

from llm_streamliner.backends import (
    AlgorithmId,
    BackendRegistry,
    GzipBackend,
    ZlibBackend,
)
from llm_streamliner.config.schema import StreamlinerConfig
from llm_streamliner.facade import Streamliner
from llm_streamliner.memory import MemoryModule, construct


# === 明文 Fixtures ===


@pytest.fixture
def conversation_text() -> str:
    """模拟的对话历史（中英混合，含重复内容）。"""
    turns = []
    for i in range(50):
        turns.append(f"user: 第 {i} 轮提问：请解释一下上下文压缩的原理。")
        turns.append(f"assistant: Turn {i}. Context compression keeps the exact bytes recoverable.")
    return "\n".join(turns)


@pytest.fixture
def binary_blob() -> bytes:
    """覆盖全部字节值的二进制数据。"""
    return bytes(range(256)) * 8


# === 后端 / 注册表 Fixtures ===


@pytest.fixture
def zlib_backend() -> ZlibBackend:
    return ZlibBackend()


@pytest.fixture
def gzip_backend() -> GzipBackend:
    return GzipBackend()


@pytest.fixture
def registry_without_lz4() -> BackendRegistry:
    """模拟未安装 lz4 的读取端。"""
    registry = BackendRegistry()
    registry.register(AlgorithmId.ZLIB, ZlibBackend)
    registry.register(AlgorithmId.GZIP, GzipBackend)
    return registry


# === 记忆模块 / Facade Fixtures ===


@pytest.fixture
def sample_module(conversation_text: str, zlib_backend: ZlibBackend) -> MemoryModule:
    return construct(conversation_text, zlib_backend)


@pytest.fixture
def streamliner() -> Streamliner:
    """使用默认配置的 Streamliner（不读取工作目录中的配置文件）。"""
    return Streamliner(config=StreamlinerConfig())

"""
记忆模块（MemoryModule）— 压缩载荷与还原所需元数据的持久化单元。

生命周期：
- 只能通过 construct() 从明文创建一次，之后只读
- 序列化副本是相互独立的快照
- 不支持原地修改或合并

展开时 Expander 的算法必须与模块记录的 algorithm 一致，
否则立即抛出 AlgorithmMismatchError，不尝试解压。

基本用法::

    backend = ZlibBackend()
    module = construct("很长的对话历史……", backend)
    text = expand(module, backend).decode("utf-8")

异步用法（压缩工作在线程池中执行，不阻塞事件循环）::

    module = await construct_async(history, backend)
    data = await expand_async(module, backend)
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from llm_streamliner.backends.base import AlgorithmId, Compressor, Expander, coerce_algorithm
from llm_streamliner.errors import (
    AlgorithmMismatchError,
    BackendFailureError,
    DataCorruptionError,
    LengthMismatchError,
    StreamlinerError,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def content_checksum(data: bytes) -> str:
    """明文的 SHA-256 十六进制摘要。"""
    return hashlib.sha256(data).hexdigest()


@dataclass(frozen=True)
class MemoryModule:
    """
    压缩后的上下文及其元数据。

    属性:
        payload: 压缩后的字节（不可变）
        original_length: 压缩前明文的字节长度
        algorithm: 产生 payload 的算法标识
        created_at: 创建时间（UTC，仅供参考，不影响行为）
        checksum: 明文的 SHA-256 摘要，None 表示未记录
    """

    payload: bytes
    original_length: int
    algorithm: AlgorithmId
    created_at: datetime = field(default_factory=_utcnow)
    checksum: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.payload, (bytearray, memoryview)):
            object.__setattr__(self, "payload", bytes(self.payload))
        if not isinstance(self.payload, bytes):
            raise TypeError(f"payload 必须是 bytes，实际为 {type(self.payload).__name__}")

        if isinstance(self.original_length, bool) or not isinstance(self.original_length, int):
            raise TypeError(
                f"original_length 必须是整数，实际为 {type(self.original_length).__name__}"
            )
        if self.original_length < 0:
            raise ValueError(f"original_length 不能为负数：{self.original_length}")

        object.__setattr__(self, "algorithm", coerce_algorithm(self.algorithm))

        # 无时区的时间按 UTC 处理
        if self.created_at.tzinfo is None:
            object.__setattr__(self, "created_at", self.created_at.replace(tzinfo=timezone.utc))

    @property
    def compressed_length(self) -> int:
        """载荷的字节长度。"""
        return len(self.payload)

    @property
    def compression_ratio(self) -> float:
        """
        压缩比例（压缩后/压缩前）。

        返回:
            值越小压缩效果越好；空明文返回 1.0
        """
        if self.original_length == 0:
            return 1.0
        return self.compressed_length / self.original_length

    @property
    def bytes_saved(self) -> int:
        """节省的字节数（压缩后变大时为 0）。"""
        return max(0, self.original_length - self.compressed_length)

    def expand(self, expander: Expander, verify_checksum: bool = True) -> bytes:
        """等价于 expand(self, expander)。"""
        return expand(self, expander, verify_checksum=verify_checksum)

    def expand_text(
        self, expander: Expander, encoding: str = "utf-8", verify_checksum: bool = True
    ) -> str:
        """展开并按指定编码解码为文本。"""
        return expand_text(self, expander, encoding=encoding, verify_checksum=verify_checksum)

    def summary(self) -> str:
        """一行摘要，用于日志和 CLI。"""
        return (
            f"MemoryModule({self.algorithm.value}, "
            f"{self.original_length} → {self.compressed_length} bytes, "
            f"ratio={self.compression_ratio:.3f})"
        )


def construct(
    plaintext: bytes | str,
    compressor: Compressor,
    record_checksum: bool = True,
) -> MemoryModule:
    """
    从明文创建记忆模块。

    参数:
        plaintext: 明文字节；str 按 UTF-8 编码
        compressor: 压缩能力，其 algorithm 会被记录到模块中
        record_checksum: 是否记录明文的 SHA-256 摘要

    返回:
        MemoryModule 实例

    抛出:
        BackendFailureError: 后端压缩失败（不重试）
        UnknownAlgorithmError: compressor 声明的 algorithm 不是已定义的算法
    """
    data = plaintext.encode("utf-8") if isinstance(plaintext, str) else bytes(plaintext)
    algorithm = coerce_algorithm(compressor.algorithm)

    try:
        payload = compressor.compress(data)
    except StreamlinerError:
        raise
    except Exception as e:
        raise BackendFailureError(
            what=f"'{algorithm.value}' 后端压缩失败，无法创建记忆模块。",
            why=f"{type(e).__name__}: {e}",
            how="检查自定义后端的实现，或换用内置算法。",
            algorithm=algorithm.value,
        ) from e

    module = MemoryModule(
        payload=payload,
        original_length=len(data),
        algorithm=algorithm,
        checksum=content_checksum(data) if record_checksum else None,
    )
    logger.debug("已创建记忆模块：%s", module.summary())
    return module


def expand(module: MemoryModule, expander: Expander, verify_checksum: bool = True) -> bytes:
    """
    展开记忆模块，返回原始字节。

    参数:
        module: 记忆模块
        expander: 展开能力，其 algorithm 必须与 module.algorithm 一致
        verify_checksum: 模块记录了 checksum 时是否校验

    返回:
        与压缩前逐字节相同的明文

    抛出:
        UnknownAlgorithmError: expander 声明的 algorithm 不是已定义的算法
        AlgorithmMismatchError: Expander 算法与模块不一致（不尝试解压）
        DataCorruptionError: 载荷损坏或内容校验和不匹配
        LengthMismatchError: 解压长度与 original_length 不一致
        BackendFailureError: 后端因其他原因失败
    """
    algorithm = coerce_algorithm(expander.algorithm)
    if algorithm is not module.algorithm:
        raise AlgorithmMismatchError(
            what=f"无法用 '{algorithm.value}' 展开由 '{module.algorithm.value}' 生成的记忆模块。",
            why="Expander 的算法与模块记录的 algorithm 字段不一致。",
            how="根据 module.algorithm 选择 Expander，例如 get_backend(module.algorithm)。",
            expected=module.algorithm.value,
            actual=algorithm.value,
        )

    try:
        data = expander.decompress(module.payload)
    except StreamlinerError:
        raise
    except Exception as e:
        raise BackendFailureError(
            what=f"'{algorithm.value}' 后端解压失败。",
            why=f"{type(e).__name__}: {e}",
            how="检查自定义后端的实现，或从原始文本重新生成记忆模块。",
            algorithm=algorithm.value,
        ) from e

    if len(data) != module.original_length:
        raise LengthMismatchError(
            what="展开结果的长度与记录的原始长度不一致。",
            why=f"记录 {module.original_length} 字节，实际解压得到 {len(data)} 字节。",
            how="载荷或元数据已被篡改，请从原始文本重新生成记忆模块。",
            expected_length=module.original_length,
            actual_length=len(data),
        )

    if verify_checksum and module.checksum is not None:
        actual = content_checksum(data)
        if actual != module.checksum:
            raise DataCorruptionError(
                what="展开结果的内容校验和不匹配。",
                why=f"记录的 SHA-256 为 {module.checksum[:16]}…，实际为 {actual[:16]}…。",
                how="载荷已损坏，请从原始文本重新生成记忆模块。",
                algorithm=algorithm.value,
                expected_checksum=module.checksum,
                actual_checksum=actual,
            )

    logger.debug("已展开记忆模块：%s", module.summary())
    return data


def expand_text(
    module: MemoryModule,
    expander: Expander,
    encoding: str = "utf-8",
    verify_checksum: bool = True,
) -> str:
    """
    展开记忆模块并解码为文本。

    抛出:
        DataCorruptionError: 展开结果不是合法的 encoding 编码文本
    """
    data = expand(module, expander, verify_checksum=verify_checksum)
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        raise DataCorruptionError(
            what=f"展开结果不是合法的 {encoding} 文本。",
            why=str(e),
            how="如果原始内容是二进制数据，请改用 expand() 获取字节。",
            algorithm=module.algorithm.value,
        ) from e


async def construct_async(
    plaintext: bytes | str,
    compressor: Compressor,
    record_checksum: bool = True,
) -> MemoryModule:
    """construct() 的异步入口，压缩在工作线程中执行。"""
    return await asyncio.to_thread(construct, plaintext, compressor, record_checksum)


async def expand_async(
    module: MemoryModule,
    expander: Expander,
    verify_checksum: bool = True,
) -> bytes:
    """expand() 的异步入口，解压在工作线程中执行。"""
    return await asyncio.to_thread(expand, module, expander, verify_checksum)

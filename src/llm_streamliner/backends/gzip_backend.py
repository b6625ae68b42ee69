"""
基于 gzip 的后端。

gzip 成员自带魔数和 CRC32 尾，后端本身即可发现大部分损坏。
压缩时固定 mtime=0，同样的输入总是得到同样的载荷。
"""

from __future__ import annotations

import gzip
import zlib

from llm_streamliner.backends.base import AlgorithmId
from llm_streamliner.errors import BackendFailureError, DataCorruptionError


class GzipBackend:
    """
    gzip 压缩后端。

    属性:
        level: 压缩级别 0-9（默认 9，与 gzip 模块一致）
    """

    algorithm = AlgorithmId.GZIP

    def __init__(self, level: int = 9) -> None:
        if not 0 <= level <= 9:
            raise ValueError(f"gzip 压缩级别必须在 0-9 之间，实际为 {level}")
        self.level = level

    def compress(self, data: bytes) -> bytes:
        try:
            return gzip.compress(data, compresslevel=self.level, mtime=0)
        except (zlib.error, MemoryError) as e:
            raise BackendFailureError(
                what="gzip 压缩失败。",
                why=str(e) or type(e).__name__,
                how="检查输入大小与可用内存，或换用其他算法。",
                algorithm=self.algorithm.value,
            ) from e

    def decompress(self, data: bytes) -> bytes:
        if not data:
            raise DataCorruptionError(
                what="gzip 数据流为空。",
                why="载荷长度为 0，连 gzip 头都不存在。",
                how="载荷不完整，请检查传输或存储过程是否丢失了数据。",
                algorithm=self.algorithm.value,
            )
        try:
            return gzip.decompress(data)
        except gzip.BadGzipFile as e:
            raise DataCorruptionError(
                what="gzip 数据流格式错误。",
                why=str(e),
                how="载荷的魔数或 CRC32 校验失败，请从原始文本重新生成记忆模块。",
                algorithm=self.algorithm.value,
            ) from e
        except EOFError as e:
            raise DataCorruptionError(
                what="gzip 数据流被截断。",
                why=str(e),
                how="载荷不完整，请检查传输或存储过程是否丢失了数据。",
                algorithm=self.algorithm.value,
            ) from e
        except zlib.error as e:
            raise DataCorruptionError(
                what="gzip 数据流无法解压。",
                why=str(e),
                how="载荷中的 DEFLATE 块已损坏，请从原始文本重新生成记忆模块。",
                algorithm=self.algorithm.value,
            ) from e
        except MemoryError as e:
            raise BackendFailureError(
                what="gzip 解压时内存不足。",
                why=type(e).__name__,
                how="释放内存后重试，或检查载荷是否异常。",
                algorithm=self.algorithm.value,
            ) from e

    def __repr__(self) -> str:
        return f"GzipBackend(level={self.level})"

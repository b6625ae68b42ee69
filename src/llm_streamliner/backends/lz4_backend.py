"""
基于 lz4 frame 格式的后端（可选）。

需要安装 lz4：pip install 'llm-streamliner[lz4]'。
未安装时注册表不会登记该算法，读取 algorithm 为 "lz4" 的文档会得到
UnknownAlgorithmError。

frame 格式带魔数，压缩时开启内容校验和，后端本身即可发现损坏。
"""

from __future__ import annotations

import lz4.frame

from llm_streamliner.backends.base import AlgorithmId
from llm_streamliner.errors import BackendFailureError, DataCorruptionError


class Lz4Backend:
    """
    lz4 frame 压缩后端，速度优先。

    属性:
        level: 压缩级别 0-16（0 为快速模式，>=3 为高压缩模式）
    """

    algorithm = AlgorithmId.LZ4

    def __init__(self, level: int = 0) -> None:
        if not 0 <= level <= 16:
            raise ValueError(f"lz4 压缩级别必须在 0-16 之间，实际为 {level}")
        self.level = level

    def compress(self, data: bytes) -> bytes:
        try:
            return lz4.frame.compress(
                data,
                compression_level=self.level,
                content_checksum=True,
                store_size=True,
            )
        except (RuntimeError, MemoryError) as e:
            raise BackendFailureError(
                what="lz4 压缩失败。",
                why=str(e) or type(e).__name__,
                how="检查输入大小与可用内存，或换用其他算法。",
                algorithm=self.algorithm.value,
            ) from e

    def decompress(self, data: bytes) -> bytes:
        if not data:
            raise DataCorruptionError(
                what="lz4 数据流为空。",
                why="载荷长度为 0，连 frame 头都不存在。",
                how="载荷不完整，请检查传输或存储过程是否丢失了数据。",
                algorithm=self.algorithm.value,
            )
        decompressor = lz4.frame.LZ4FrameDecompressor()
        try:
            output = decompressor.decompress(data)
        except RuntimeError as e:
            raise DataCorruptionError(
                what="lz4 数据流无法解压。",
                why=str(e),
                how="载荷的魔数或内容校验和不正确，请从原始文本重新生成记忆模块。",
                algorithm=self.algorithm.value,
            ) from e
        except MemoryError as e:
            raise BackendFailureError(
                what="lz4 解压时内存不足。",
                why=type(e).__name__,
                how="释放内存后重试，或检查载荷是否异常。",
                algorithm=self.algorithm.value,
            ) from e

        if not decompressor.eof:
            raise DataCorruptionError(
                what="lz4 数据流被截断。",
                why=f"读完 {len(data)} 字节后 frame 仍未结束。",
                how="载荷不完整，请检查传输或存储过程是否丢失了数据。",
                algorithm=self.algorithm.value,
            )
        if decompressor.unused_data:
            raise DataCorruptionError(
                what="lz4 数据流后存在多余数据。",
                why=f"frame 结束后还有 {len(decompressor.unused_data)} 字节。",
                how="载荷可能被拼接或篡改，请从原始文本重新生成记忆模块。",
                algorithm=self.algorithm.value,
            )
        return output

    def __repr__(self) -> str:
        return f"Lz4Backend(level={self.level})"

"""
基于 zlib 的 DEFLATE 后端（默认后端）。

载荷格式::

    原始 DEFLATE 数据流（wbits=-15） + 明文 CRC-32（4 字节，大端）

省掉 zlib 容器的 2 字节头，短文本也能压得比原文小，例如 10 个 "A"
只需 9 字节。CRC-32 尾保证载荷本身可校验，与记忆模块是否记录
SHA-256 无关。

解压时也接受标准 zlib 容器（RFC 1950，带 Adler-32），
用于读取其他实现按 zlib 格式写出的载荷。
"""

from __future__ import annotations

import struct
import zlib

from llm_streamliner.backends.base import AlgorithmId
from llm_streamliner.errors import BackendFailureError, DataCorruptionError

_RAW_DEFLATE_WBITS = -zlib.MAX_WBITS
_CRC_TRAILER = struct.Struct(">I")


def _is_zlib_container(data: bytes) -> bool:
    """判断是否以合法的 RFC 1950 头开始（CM=8，窗口 ≤ 32K，FCHECK 校验通过）。"""
    if len(data) < 2:
        return False
    cmf, flg = data[0], data[1]
    return cmf & 0x0F == 8 and cmf >> 4 <= 7 and (cmf << 8 | flg) % 31 == 0


class ZlibBackend:
    """
    zlib DEFLATE 压缩后端。

    用法::

        backend = ZlibBackend(level=9)
        payload = backend.compress(b"hello" * 100)
        assert backend.decompress(payload) == b"hello" * 100

    属性:
        level: 压缩级别，-1（库默认）或 0-9
    """

    algorithm = AlgorithmId.ZLIB

    def __init__(self, level: int = -1) -> None:
        if level != -1 and not 0 <= level <= 9:
            raise ValueError(f"zlib 压缩级别必须是 -1 或 0-9，实际为 {level}")
        self.level = level

    def compress(self, data: bytes) -> bytes:
        try:
            compressor = zlib.compressobj(self.level, zlib.DEFLATED, _RAW_DEFLATE_WBITS)
            stream = compressor.compress(data) + compressor.flush()
        except (zlib.error, MemoryError) as e:
            raise BackendFailureError(
                what="zlib 压缩失败。",
                why=str(e) or type(e).__name__,
                how="检查输入大小与可用内存，或换用其他算法。",
                algorithm=self.algorithm.value,
            ) from e
        return stream + _CRC_TRAILER.pack(zlib.crc32(data))

    def decompress(self, data: bytes) -> bytes:
        # 我们写出的原始流首字节低 4 位不可能是 8，两种格式不会混淆
        if _is_zlib_container(data):
            output, rest = self._inflate(data, zlib.MAX_WBITS)
            if rest:
                raise self._trailing_data_error(len(rest))
            return output

        output, trailer = self._inflate(data, _RAW_DEFLATE_WBITS)
        if len(trailer) < _CRC_TRAILER.size:
            raise DataCorruptionError(
                what="zlib 载荷缺少 CRC-32 校验尾。",
                why=f"数据流结束后只有 {len(trailer)} 字节，需要 {_CRC_TRAILER.size} 字节。",
                how="载荷不完整，请检查传输或存储过程是否丢失了数据。",
                algorithm=self.algorithm.value,
            )
        if len(trailer) > _CRC_TRAILER.size:
            raise self._trailing_data_error(len(trailer) - _CRC_TRAILER.size)

        (expected,) = _CRC_TRAILER.unpack(trailer)
        actual = zlib.crc32(output)
        if actual != expected:
            raise DataCorruptionError(
                what="zlib 载荷的 CRC-32 校验失败。",
                why=f"记录的 CRC-32 为 {expected:08x}，解压结果为 {actual:08x}。",
                how="载荷已损坏，请从原始文本重新生成记忆模块。",
                algorithm=self.algorithm.value,
                expected_crc32=f"{expected:08x}",
                actual_crc32=f"{actual:08x}",
            )
        return output

    def _inflate(self, data: bytes, wbits: int) -> tuple[bytes, bytes]:
        """解压一个完整的 DEFLATE 数据流，返回（明文，流结束后的剩余字节）。"""
        decompressor = zlib.decompressobj(wbits)
        try:
            output = decompressor.decompress(data) + decompressor.flush()
        except zlib.error as e:
            raise DataCorruptionError(
                what="zlib 数据流无法解压。",
                why=str(e),
                how="该载荷不是合法的 DEFLATE 数据流，请从原始文本重新生成记忆模块。",
                algorithm=self.algorithm.value,
            ) from e
        except MemoryError as e:
            raise BackendFailureError(
                what="zlib 解压时内存不足。",
                why=type(e).__name__,
                how="释放内存后重试，或检查载荷是否异常。",
                algorithm=self.algorithm.value,
            ) from e

        if not decompressor.eof:
            raise DataCorruptionError(
                what="zlib 数据流被截断。",
                why=f"读完 {len(data)} 字节后数据流仍未结束。",
                how="载荷不完整，请检查传输或存储过程是否丢失了数据。",
                algorithm=self.algorithm.value,
            )
        return output, decompressor.unused_data

    def _trailing_data_error(self, extra: int) -> DataCorruptionError:
        return DataCorruptionError(
            what="zlib 数据流后存在多余数据。",
            why=f"数据流结束后还有 {extra} 字节。",
            how="载荷可能被拼接或篡改，请从原始文本重新生成记忆模块。",
            algorithm=self.algorithm.value,
        )

    def __repr__(self) -> str:
        return f"ZlibBackend(level={self.level})"

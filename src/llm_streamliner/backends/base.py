"""
压缩后端协议与算法标识。

后端把一个现成的压缩库包装成两个能力：
- Compressor：compress(bytes) -> bytes
- Expander：decompress(bytes) -> bytes，非法数据流抛出 DataCorruptionError

调用方只依赖能力协议，不依赖具体后端。新增算法只需要新增一个实现了协议的类，
并注册到 BackendRegistry，已有后端无需改动。

# [Design Decision] 使用 Protocol 而非抽象基类，
# 任何带有 algorithm 属性和 compress()/decompress() 方法的对象都可以直接使用。
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from llm_streamliner.errors import UnknownAlgorithmError


class AlgorithmId(str, Enum):
    """
    压缩算法标识。

    记录在每个记忆模块和序列化文档中，展开时据此选择 Expander。
    """

    ZLIB = "zlib"
    GZIP = "gzip"
    LZ4 = "lz4"

    def __str__(self) -> str:
        return self.value


DEFAULT_ALGORITHM = AlgorithmId.ZLIB


def coerce_algorithm(
    algorithm: AlgorithmId | str,
    available: list[AlgorithmId] | None = None,
) -> AlgorithmId:
    """
    把字符串转换为 AlgorithmId（忽略大小写和首尾空白）。

    参数:
        algorithm: 算法标识或名称
        available: 错误信息中列出的可用算法，默认列出全部已定义算法

    抛出:
        UnknownAlgorithmError: 名称不是已定义的算法标识
    """
    if isinstance(algorithm, AlgorithmId):
        return algorithm
    try:
        return AlgorithmId(str(algorithm).strip().lower())
    except ValueError:
        known = available if available is not None else list(AlgorithmId)
        raise UnknownAlgorithmError(
            what=f"不支持的压缩算法 '{algorithm}'。",
            why="该名称不是已知的算法标识，可能由更新版本的写入端生成。",
            how=f"可用算法：{', '.join(a.value for a in known)}。"
                "如果文档来自更新的版本，请升级 llm-streamliner。",
            algorithm=str(algorithm),
            available=[a.value for a in known],
        ) from None


@runtime_checkable
class Compressor(Protocol):
    """
    压缩能力协议。

    对格式正确的字节输入，compress() 除资源耗尽外不应失败，
    且不修改任何共享状态。

    最小实现示例::

        class IdentityCompressor:
            algorithm = AlgorithmId.ZLIB

            def compress(self, data: bytes) -> bytes:
                return data
    """

    @property
    def algorithm(self) -> AlgorithmId:
        """产生载荷的算法标识。"""
        ...

    def compress(self, data: bytes) -> bytes:
        """
        压缩字节序列。

        参数:
            data: 原始字节

        返回:
            压缩后的字节

        抛出:
            BackendFailureError: 底层库拒绝输入或资源耗尽
        """
        ...


@runtime_checkable
class Expander(Protocol):
    """
    展开能力协议。

    必须是同一算法 Compressor 的精确逆操作：
    对任意字节序列 X，decompress(compress(X)) == X。
    """

    @property
    def algorithm(self) -> AlgorithmId:
        """能够解压的算法标识。"""
        ...

    def decompress(self, data: bytes) -> bytes:
        """
        解压字节序列。

        参数:
            data: 压缩后的字节

        返回:
            原始字节

        抛出:
            DataCorruptionError: 输入不是该算法的合法数据流
        """
        ...


@runtime_checkable
class Backend(Compressor, Expander, Protocol):
    """同时提供压缩与展开能力的后端（同一算法的一对能力）。"""

    ...

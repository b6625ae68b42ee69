"""
后端注册表 — 根据算法标识选择压缩后端。

记忆模块是自描述的：展开时根据模块记录的 algorithm 从注册表取出 Expander，
而不是由调用方假定。注册表在导入时填充，运行期间只读，可以在多个线程/协程
之间共享。

查找失败（算法未实现，或可选依赖未安装）一律抛出 UnknownAlgorithmError。
"""

from __future__ import annotations

import logging
from typing import Callable

from llm_streamliner.backends.base import AlgorithmId, Backend, coerce_algorithm
from llm_streamliner.backends.gzip_backend import GzipBackend
from llm_streamliner.backends.zlib_backend import ZlibBackend
from llm_streamliner.errors import UnknownAlgorithmError

logger = logging.getLogger(__name__)

BackendFactory = Callable[..., Backend]


class BackendRegistry:
    """
    算法标识到后端工厂的映射。

    用法::

        registry = BackendRegistry()
        registry.register(AlgorithmId.ZLIB, ZlibBackend)

        backend = registry.get("zlib", level=9)
        registry.is_supported("lz4")  # False

    工厂接受可选的 level 关键字参数，返回新的后端实例。
    """

    def __init__(self) -> None:
        self._factories: dict[AlgorithmId, BackendFactory] = {}

    def register(self, algorithm: AlgorithmId | str, factory: BackendFactory) -> None:
        """
        注册（或替换）某个算法的后端工厂。

        参数:
            algorithm: 算法标识
            factory: 后端类或返回后端实例的可调用对象

        抛出:
            UnknownAlgorithmError: algorithm 不是已定义的算法标识
            TypeError: factory 不可调用
        """
        algorithm_id = coerce_algorithm(algorithm)
        if not callable(factory):
            raise TypeError(
                f"factory 必须是可调用对象，但收到了 {type(factory).__name__}。"
                f"需要返回实现了 compress()/decompress() 的后端实例。"
            )
        self._factories[algorithm_id] = factory
        logger.debug("已注册压缩后端：%s", algorithm_id.value)

    def unregister(self, algorithm: AlgorithmId | str) -> None:
        """移除某个算法的后端工厂（未注册时静默返回）。"""
        self._factories.pop(coerce_algorithm(algorithm), None)

    def get(self, algorithm: AlgorithmId | str, level: int | None = None) -> Backend:
        """
        获取某个算法的后端实例。

        参数:
            algorithm: 算法标识（枚举或字符串）
            level: 压缩级别，None 时使用后端默认值

        返回:
            后端实例

        抛出:
            UnknownAlgorithmError: 算法未定义或未注册
        """
        algorithm_id = self.resolve(algorithm)
        factory = self._factories[algorithm_id]
        backend = factory() if level is None else factory(level=level)
        if not isinstance(backend, Backend):
            raise TypeError(
                f"'{algorithm_id.value}' 的工厂返回了 {type(backend).__name__}，"
                f"它没有实现 algorithm / compress() / decompress()。"
            )
        return backend

    def resolve(self, algorithm: AlgorithmId | str) -> AlgorithmId:
        """
        把算法名解析为已注册的 AlgorithmId。

        抛出:
            UnknownAlgorithmError: 算法未定义或未注册
        """
        algorithm_id = coerce_algorithm(algorithm, self.algorithms())
        if algorithm_id not in self._factories:
            raise UnknownAlgorithmError(
                what=f"不支持的压缩算法 '{algorithm_id.value}'。",
                why="当前读取端没有注册该算法的后端。",
                how=_install_hint(algorithm_id),
                algorithm=algorithm_id.value,
                available=[a.value for a in self.algorithms()],
            )
        return algorithm_id

    def is_supported(self, algorithm: AlgorithmId | str) -> bool:
        """算法是否已注册。未定义的算法名返回 False。"""
        try:
            return coerce_algorithm(algorithm) in self._factories
        except UnknownAlgorithmError:
            return False

    def algorithms(self) -> list[AlgorithmId]:
        """已注册的算法列表（按 AlgorithmId 定义顺序）。"""
        return [a for a in AlgorithmId if a in self._factories]

    def __contains__(self, algorithm: object) -> bool:
        if not isinstance(algorithm, (AlgorithmId, str)):
            return False
        return self.is_supported(algorithm)

    def __repr__(self) -> str:
        names = ", ".join(a.value for a in self.algorithms())
        return f"BackendRegistry([{names}])"


def _install_hint(algorithm: AlgorithmId) -> str:
    if algorithm is AlgorithmId.LZ4:
        return "执行 pip install 'llm-streamliner[lz4]' 安装 lz4 后端后重试。"
    return "使用 BackendRegistry.register() 注册该算法的后端。"


def create_default_registry() -> BackendRegistry:
    """
    创建带有内置后端的注册表。

    zlib 和 gzip 总是可用；lz4 仅在安装了 lz4 包时注册。
    """
    registry = BackendRegistry()
    registry.register(AlgorithmId.ZLIB, ZlibBackend)
    registry.register(AlgorithmId.GZIP, GzipBackend)

    try:
        from llm_streamliner.backends.lz4_backend import Lz4Backend
    except ImportError:
        logger.info("未安装 lz4，lz4 后端不可用。")
    else:
        registry.register(AlgorithmId.LZ4, Lz4Backend)

    return registry


_default_registry = create_default_registry()


def default_registry() -> BackendRegistry:
    """进程内共享的默认注册表。"""
    return _default_registry


def get_backend(algorithm: AlgorithmId | str, level: int | None = None) -> Backend:
    """
    从默认注册表获取后端实例。

    示例::

        backend = get_backend("gzip")
        payload = backend.compress(b"hello")
    """
    return _default_registry.get(algorithm, level=level)


def available_algorithms() -> list[str]:
    """默认注册表中可用的算法名称。"""
    return [a.value for a in _default_registry.algorithms()]

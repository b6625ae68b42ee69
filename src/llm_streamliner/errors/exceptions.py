"""
结构化异常体系 — 错误信息即文档。

每条异常遵循"三段式"规范：
1. What went wrong（发生了什么）
2. Why it happened（为什么发生）
3. How to fix it（怎么修）

压缩/展开过程中的所有失败都以类型化异常的形式交给调用方，
内部不重试、不吞掉、不返回部分结果。

示例::

    AlgorithmMismatchError(
        what="无法用 'gzip' 展开由 'zlib' 生成的记忆模块。",
        why="Expander 的算法与模块记录的 algorithm 字段不一致。",
        how="使用 get_backend(module.algorithm) 选择匹配的 Expander。",
        expected="zlib",
        actual="gzip",
    )
"""

from __future__ import annotations

from typing import Any


class StreamlinerError(Exception):
    """
    LLM Streamliner 异常基类。

    所有异常都继承自此类，支持三段式错误消息。

    属性:
        what: 发生了什么
        why: 为什么发生
        how: 怎么修复
        details: 额外的上下文信息（用于调试）
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.what = what
        self.why = why
        self.how = how
        self.details = details or {}

        parts = [what]
        if why:
            parts.append(f"→ 原因：{why}")
        if how:
            parts.append(f"→ 修复建议：{how}")

        self.full_message = "\n".join(parts)
        super().__init__(self.full_message)

    def __str__(self) -> str:
        return self.full_message

    def to_dict(self) -> dict[str, Any]:
        """转换为字典格式，用于 JSON 输出。"""
        result: dict[str, Any] = {
            "error_type": type(self).__name__,
            "what": self.what,
        }
        if self.why:
            result["why"] = self.why
        if self.how:
            result["how"] = self.how
        if self.details:
            result["details"] = self.details
        return result


# === 后端相关异常 ===


class BackendFailureError(StreamlinerError):
    """
    后端执行失败。

    底层压缩库拒绝输入或在压缩/解压过程中耗尽资源时抛出。
    这类失败通常是确定性的，用同样的后端重试会得到同样的结果。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        algorithm: str = "",
        **kwargs: Any,
    ) -> None:
        details = {"algorithm": algorithm}
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.algorithm = algorithm


class DataCorruptionError(StreamlinerError):
    """
    数据损坏。

    解压输入不是所声明算法的合法数据流（被截断、魔数错误、校验和不匹配），
    或展开结果与记录的内容校验和不一致时抛出。

    示例::

        raise DataCorruptionError(
            what="'gzip' 数据流无法解压。",
            why="CRC32 校验失败。",
            how="该载荷已损坏，请从原始文档重新生成记忆模块。",
            algorithm="gzip",
        )
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        algorithm: str = "",
        **kwargs: Any,
    ) -> None:
        details = {"algorithm": algorithm}
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.algorithm = algorithm


# === 记忆模块相关异常 ===


class AlgorithmMismatchError(StreamlinerError):
    """
    算法不匹配。

    Expander 的算法与记忆模块记录的 algorithm 不一致时抛出，
    此时不会尝试解压。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        expected: str = "",
        actual: str = "",
        **kwargs: Any,
    ) -> None:
        details = {"expected": expected, "actual": actual}
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.expected = expected
        self.actual = actual


class LengthMismatchError(StreamlinerError):
    """
    长度不匹配。

    解压结果的字节长度与记录的 original_length 不一致时抛出。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        expected_length: int = 0,
        actual_length: int = 0,
        **kwargs: Any,
    ) -> None:
        details = {
            "expected_length": expected_length,
            "actual_length": actual_length,
        }
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.expected_length = expected_length
        self.actual_length = actual_length


# === 序列化相关异常 ===


class FormatError(StreamlinerError):
    """
    文档格式错误。

    文档无法解析、字段缺失或字段值不合法时抛出。
    """

    pass


class UnknownAlgorithmError(StreamlinerError):
    """
    未知算法。

    文档或调用方指定了当前读取端没有实现的算法时抛出
    （例如读取端未安装 lz4 却收到 algorithm 为 "lz4" 的文档）。

    示例::

        raise UnknownAlgorithmError(
            what="不支持的压缩算法 'lz4'。",
            why="当前环境未安装 lz4 后端。",
            how="执行 pip install 'llm-streamliner[lz4]' 后重试。",
            algorithm="lz4",
            available=["zlib", "gzip"],
        )
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        algorithm: str = "",
        available: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        details: dict[str, Any] = {"algorithm": algorithm}
        if available:
            details["available"] = available
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.algorithm = algorithm


# === 配置相关异常 ===


class ConfigValidationError(StreamlinerError):
    """
    配置校验异常。

    当 YAML 配置文件字段不合法时抛出。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        config_path: str = "",
        **kwargs: Any,
    ) -> None:
        details = {"config_path": config_path}
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.config_path = config_path


class ConfigLoadError(StreamlinerError):
    """
    配置加载异常。

    当配置文件不存在、无法读取或不是合法 YAML 时抛出。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        file_path: str = "",
        **kwargs: Any,
    ) -> None:
        details = {"file_path": file_path}
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.file_path = file_path

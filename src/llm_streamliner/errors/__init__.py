"""
LLM Streamliner 结构化异常体系。

所有异常遵循"三段式"规范：What / Why / How to fix。
"""

from llm_streamliner.errors.exceptions import (
    AlgorithmMismatchError,
    BackendFailureError,
    ConfigLoadError,
    ConfigValidationError,
    DataCorruptionError,
    FormatError,
    LengthMismatchError,
    StreamlinerError,
    UnknownAlgorithmError,
)

__all__ = [
    "AlgorithmMismatchError",
    "BackendFailureError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DataCorruptionError",
    "FormatError",
    "LengthMismatchError",
    "StreamlinerError",
    "UnknownAlgorithmError",
]

"""
LLM Streamliner 配置模块。

提供 YAML 配置加载与 Pydantic Schema 校验。
"""

from llm_streamliner.config.loader import load_config, validate_config_file
from llm_streamliner.config.schema import (
    CompressionConfig,
    DocumentConfig,
    IntegrityConfig,
    StreamlinerConfig,
)

__all__ = [
    "CompressionConfig",
    "DocumentConfig",
    "IntegrityConfig",
    "StreamlinerConfig",
    "load_config",
    "validate_config_file",
]

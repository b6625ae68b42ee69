"""
配置的 Schema 定义与校验。

所有配置通过 YAML 文件或运行时覆盖提供，本模块定义 Schema 并负责校验。
每个字段都有默认值，不提供配置文件也能直接使用。
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from llm_streamliner.backends.base import DEFAULT_ALGORITHM, AlgorithmId


class CompressionConfig(BaseModel):
    """压缩配置。"""

    default_algorithm: str = Field(
        default=DEFAULT_ALGORITHM.value,
        description="默认压缩算法：zlib / gzip / lz4",
    )
    zlib_level: int = Field(default=-1, ge=-1, le=9, description="zlib 压缩级别（-1 为库默认）")
    gzip_level: int = Field(default=9, ge=0, le=9, description="gzip 压缩级别")
    lz4_level: int = Field(default=0, ge=0, le=16, description="lz4 压缩级别")

    @field_validator("default_algorithm")
    @classmethod
    def _validate_algorithm(cls, value: str) -> str:
        normalized = value.strip().lower()
        known = [a.value for a in AlgorithmId]
        if normalized not in known:
            raise ValueError(f"未知的压缩算法 '{value}'，可选值：{', '.join(known)}")
        return normalized

    def level_for(self, algorithm: AlgorithmId | str) -> int:
        """返回某个算法的压缩级别。"""
        return getattr(self, f"{AlgorithmId(algorithm).value}_level")


class IntegrityConfig(BaseModel):
    """完整性校验配置。"""

    record_checksum: bool = Field(default=True, description="创建模块时是否记录明文 SHA-256")
    verify_checksum: bool = Field(default=True, description="展开时是否校验已记录的 SHA-256")


class DocumentConfig(BaseModel):
    """文档序列化配置。"""

    format: Literal["json", "yaml"] = Field(default="json", description="文档格式")
    indent: int | None = Field(default=2, ge=0, description="JSON 缩进，null 为单行输出")


class StreamlinerConfig(BaseModel):
    """
    完整配置 — 对应 YAML 配置文件的根结构。

    YAML 文件示例::

        version: "1.0"
        compression:
          default_algorithm: gzip
          gzip_level: 6
        integrity:
          verify_checksum: true
        document:
          format: yaml
    """

    version: str = Field(default="1.0", description="配置版本")
    compression: CompressionConfig = Field(default_factory=CompressionConfig)
    integrity: IntegrityConfig = Field(default_factory=IntegrityConfig)
    document: DocumentConfig = Field(default_factory=DocumentConfig)

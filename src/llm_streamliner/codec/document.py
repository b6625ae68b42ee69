"""
记忆模块的文档序列化。

把 MemoryModule 转换为结构化文本文档（JSON 或 YAML），反之亦然。
序列化与反序列化都不解压载荷。

文档示例（JSON）::

    {
      "format_version": 1,
      "algorithm": "zlib",
      "original_length": 10,
      "created_at": "2026-10-19T08:30:00.123456+00:00",
      "checksum": "b0a4…",
      "payload": "c3SEAQA="
    }

读取规则：
- 无法解析、字段缺失或字段值不合法 → FormatError
- algorithm 不是读取端实现的算法 → UnknownAlgorithmError（不会退回默认算法）
- format_version 高于读取端支持的版本 → FormatError
- 未知的额外字段被忽略
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from datetime import datetime, timezone
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from llm_streamliner.backends.registry import BackendRegistry, default_registry
from llm_streamliner.errors import FormatError
from llm_streamliner.memory.module import MemoryModule

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

DocumentFormat = Literal["json", "yaml"]


class MemoryDocument(BaseModel):
    """
    文档的 Schema。

    algorithm 以字符串接收，由注册表判断是否支持，
    这样未知算法能报 UnknownAlgorithmError 而不是普通的校验错误。
    """

    model_config = ConfigDict(extra="ignore")

    format_version: int = Field(default=FORMAT_VERSION, ge=1, strict=True)
    algorithm: str = Field(..., min_length=1)
    original_length: int = Field(..., ge=0, strict=True)
    created_at: datetime
    payload: str
    checksum: str | None = Field(default=None, pattern=r"^[0-9a-f]{64}$")


def to_dict(module: MemoryModule) -> dict[str, Any]:
    """
    把记忆模块转换为可 JSON 化的字典。

    适合嵌入到调用方自己的更大文档中。
    """
    doc: dict[str, Any] = {
        "format_version": FORMAT_VERSION,
        "algorithm": module.algorithm.value,
        "original_length": module.original_length,
        "created_at": module.created_at.isoformat(),
    }
    if module.checksum is not None:
        doc["checksum"] = module.checksum
    doc["payload"] = base64.b64encode(module.payload).decode("ascii")
    return doc


def from_dict(data: Any, registry: BackendRegistry | None = None) -> MemoryModule:
    """
    从字典还原记忆模块。

    参数:
        data: to_dict() 产生的字典
        registry: 判断算法是否受支持的注册表，默认使用进程内默认注册表

    抛出:
        FormatError: 结构或字段不合法
        UnknownAlgorithmError: 算法不受支持
    """
    if not isinstance(data, dict):
        raise FormatError(
            what="记忆模块文档的根元素必须是对象（mapping）。",
            why=f"实际类型为 {type(data).__name__}。",
            how="文档应包含 algorithm / original_length / created_at / payload 字段。",
        )

    try:
        doc = MemoryDocument.model_validate(data)
    except ValidationError as e:
        error_details = []
        for err in e.errors():
            field_path = " → ".join(str(loc) for loc in err["loc"])
            error_details.append(f"  字段 '{field_path}': {err['msg']}")
        raise FormatError(
            what=f"记忆模块文档校验失败（{len(e.errors())} 个错误）。",
            why="\n".join(error_details),
            how="检查文档是否完整，必需字段：algorithm、original_length、created_at、payload。",
        ) from e

    if doc.format_version > FORMAT_VERSION:
        raise FormatError(
            what=f"不支持的文档版本 {doc.format_version}。",
            why=f"当前读取端最高支持版本 {FORMAT_VERSION}。",
            how="升级 llm-streamliner 后重试。",
        )

    algorithm = (registry or default_registry()).resolve(doc.algorithm)

    try:
        payload = base64.b64decode(doc.payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FormatError(
            what="payload 字段不是合法的 Base64 文本。",
            why=str(e),
            how="文档可能被截断或篡改，请使用原始文档。",
        ) from e

    created_at = doc.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    else:
        created_at = created_at.astimezone(timezone.utc)

    return MemoryModule(
        payload=payload,
        original_length=doc.original_length,
        algorithm=algorithm,
        created_at=created_at,
        checksum=doc.checksum,
    )


def to_document(module: MemoryModule, fmt: DocumentFormat = "json", indent: int | None = 2) -> str:
    """
    把记忆模块序列化为文本文档。

    参数:
        module: 记忆模块
        fmt: "json" 或 "yaml"
        indent: JSON 缩进，None 时输出单行

    返回:
        文档文本
    """
    doc = to_dict(module)
    if fmt == "json":
        return json.dumps(doc, indent=indent, ensure_ascii=False)
    if fmt == "yaml":
        return yaml.safe_dump(doc, sort_keys=False, allow_unicode=True)
    raise ValueError(f"不支持的文档格式 '{fmt}'，可选值：json / yaml")


def from_document(
    text: str | bytes,
    fmt: DocumentFormat = "json",
    registry: BackendRegistry | None = None,
) -> MemoryModule:
    """
    从文本文档还原记忆模块（不解压载荷）。

    参数:
        text: 文档文本
        fmt: "json" 或 "yaml"
        registry: 判断算法是否受支持的注册表

    返回:
        MemoryModule 实例

    抛出:
        FormatError: 文档无法解析、不完整或字段不合法
        UnknownAlgorithmError: 文档中的 algorithm 不受支持
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError(
                what="记忆模块文档不是合法的 UTF-8 文本。",
                why=str(e),
                how="文档必须以 UTF-8 编码保存。",
            ) from e

    if fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise FormatError(
                what="记忆模块文档不是合法的 JSON。",
                why=f"第 {e.lineno} 行第 {e.colno} 列：{e.msg}",
                how="文档可能被截断，请使用完整的原始文档。",
            ) from e
    elif fmt == "yaml":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise FormatError(
                what="记忆模块文档不是合法的 YAML。",
                why=str(e),
                how="文档可能被截断，请使用完整的原始文档。",
            ) from e
    else:
        raise ValueError(f"不支持的文档格式 '{fmt}'，可选值：json / yaml")

    module = from_dict(data, registry=registry)
    logger.debug("已从 %s 文档还原：%s", fmt, module.summary())
    return module


def detect_format(text: str) -> DocumentFormat:
    """根据首个非空白字符猜测文档格式（'{' 为 JSON，其余为 YAML）。"""
    return "json" if text.lstrip().startswith("{") else "yaml"

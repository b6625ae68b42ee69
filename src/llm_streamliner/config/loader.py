"""
YAML 配置加载。

优先级：内置默认值 < 配置文件 < 运行时覆盖。
未指定路径时依次查找 _SEARCH_PATHS，找不到则只用默认值。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from llm_streamliner.config.schema import StreamlinerConfig
from llm_streamliner.errors import ConfigLoadError, ConfigValidationError

logger = logging.getLogger(__name__)

_SEARCH_PATHS = (
    Path("llm_streamliner.yaml"),
    Path("llm_streamliner.yml"),
    Path(".llm_streamliner/config.yaml"),
)


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> StreamlinerConfig:
    """
    加载并校验配置。

    参数:
        path: YAML 文件路径，None 时在当前目录搜索
        overrides: 合并到文件内容之上的配置项

    抛出:
        ConfigLoadError: 文件不存在、不可读或不是 YAML 映射
        ConfigValidationError: 字段校验失败
    """
    source = Path(path) if path is not None else _find_config_file()
    raw = _read_mapping(source) if source is not None else {}
    if overrides:
        raw = _deep_merge(raw, overrides)

    try:
        return StreamlinerConfig(**raw)
    except ValidationError as e:
        name = str(path) if path is not None else str(source or "<default>")
        lines = [
            f"  字段 '{' → '.join(str(loc) for loc in err['loc'])}': {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigValidationError(
            what=f"配置 '{name}' 校验失败（{len(lines)} 个错误）。",
            why="\n".join(lines),
            how="修正上述字段后重试，可先用 'llm-streamliner validate <path>' 检查。",
            config_path=name,
        ) from e


def validate_config_file(path: str | Path) -> list[str]:
    """校验配置文件，返回错误信息列表（空列表表示通过）。"""
    try:
        load_config(path)
    except (ConfigLoadError, ConfigValidationError) as e:
        return [e.full_message]
    return []


def _find_config_file() -> Path | None:
    found = next((p for p in _SEARCH_PATHS if p.is_file()), None)
    if found is None:
        logger.info("未找到配置文件，使用默认配置。")
    else:
        logger.info("自动发现配置文件：%s", found)
    return found


def _read_mapping(path: Path) -> dict[str, Any]:
    """读取 YAML 文件，根元素必须是映射；空文件视为空映射。"""

    def fail(what: str, why: str, how: str) -> ConfigLoadError:
        return ConfigLoadError(what=what, why=why, how=how, file_path=str(path))

    if not path.is_file():
        raise fail(
            f"配置文件 '{path}' 不存在。",
            f"在 '{path.absolute()}' 下未找到该文件。",
            "检查文件路径是否正确。",
        )
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise fail(f"无法读取配置文件 '{path}'。", str(e), "检查文件权限和编码（需要 UTF-8）。") from e
    except yaml.YAMLError as e:
        raise fail(f"配置文件 '{path}' 不是合法的 YAML。", str(e), "检查缩进和括号是否配对。") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise fail(
            f"配置文件 '{path}' 的根元素必须是映射。",
            f"实际类型为 {type(data).__name__}。",
            "例如：\n  compression:\n    default_algorithm: zlib",
        )
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """递归合并两个字典，override 优先，不修改入参。"""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged

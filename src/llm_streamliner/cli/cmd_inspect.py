"""
inspect 命令 — 查看记忆模块文档的元数据（不解压）。
"""

from __future__ import annotations

import json

from llm_streamliner.cli.utils import (
    create_console,
    create_stats_panel,
    create_streamliner,
    handle_streamliner_error,
    print_error,
    read_input,
)
from llm_streamliner.errors import StreamlinerError

console = create_console()


def inspect_command(
    document_file: str,
    format: str = "rich",
    verify: bool = False,
    config_path: str | None = None,
) -> None:
    """
    显示记忆模块文档的统计信息。

    参数:
        document_file: 记忆模块文档路径
        format: 输出格式：rich（Rich 面板）/ json（结构化）
        verify: 是否实际展开一次以校验载荷完整性
        config_path: 配置文件路径
    """
    if format not in ("rich", "json"):
        print_error(f"不支持的输出格式：{format}（可选：rich / json）")

    streamliner = create_streamliner(config_path)
    raw = read_input(document_file)

    try:
        module = streamliner.loads(raw)
        stats = streamliner.stats(module)
        if verify:
            streamliner.expand(module)
            stats["verified"] = True
    except StreamlinerError as e:
        handle_streamliner_error(e)

    if format == "json":
        console.print_json(json.dumps(stats, ensure_ascii=False))
        return

    console.print(create_stats_panel(f"记忆模块：{document_file}", stats))

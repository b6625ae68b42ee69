"""
CLI 工具函数 — Rich 美化、文件读写、通用辅助。

提供 CLI 各子命令共用的实用函数，包括：
- Rich Console 美化输出
- 错误/成功信息统一格式
- 字节数格式化
- Streamliner 实例创建
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from llm_streamliner.errors import StreamlinerError
from llm_streamliner.facade import Streamliner

_console: Console | None = None


def create_console() -> Console:
    """创建或获取全局 Rich Console 实例。"""
    global _console
    if _console is None:
        _console = Console()
    return _console


def configure_logging(verbose: bool = False) -> None:
    """配置根日志，verbose 时输出 DEBUG 级别。"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def print_error(message: str, exit_code: int = 1) -> NoReturn:
    """
    打印错误信息并退出程序。

    参数:
        message: 错误信息
        exit_code: 退出码（默认 1）
    """
    console = create_console()
    console.print(f"[bold red]X 错误：[/bold red]{message}")
    sys.exit(exit_code)


def print_success(message: str) -> None:
    """打印成功信息。"""
    create_console().print(f"[bold green]OK[/bold green] {message}")


def handle_streamliner_error(error: StreamlinerError) -> NoReturn:
    """统一处理 StreamlinerError：直接显示三段式 full_message。"""
    console = create_console()
    console.print(f"\n[bold red]X {type(error).__name__}[/bold red]\n")
    console.print(error.full_message, markup=False)
    sys.exit(1)


def format_bytes(count: int) -> str:
    """
    格式化字节数。

    示例::

        >>> format_bytes(512)
        '512 B'
        >>> format_bytes(2048)
        '2.0 KiB'
    """
    if count < 1024:
        return f"{count} B"
    if count < 1024 * 1024:
        return f"{count / 1024:.1f} KiB"
    return f"{count / (1024 * 1024):.1f} MiB"


def read_input(file_path: str) -> bytes:
    """读取输入文件的原始字节，文件不存在时退出。"""
    path = Path(file_path)
    if not path.is_file():
        print_error(f"文件不存在：{path}")
    try:
        return path.read_bytes()
    except OSError as e:
        print_error(f"无法读取文件 {path}：{e}")


def write_output(file_path: str, data: bytes | str) -> None:
    """写入输出文件，str 按 UTF-8 编码。"""
    path = Path(file_path)
    try:
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_bytes(data)
    except OSError as e:
        print_error(f"无法写入文件 {path}：{e}")


def create_streamliner(config_path: str | None = None) -> Streamliner:
    """
    根据 CLI 参数创建 Streamliner 实例。

    配置错误以三段式信息输出后退出。
    """
    try:
        return Streamliner(config_path=config_path)
    except StreamlinerError as e:
        handle_streamliner_error(e)


def create_stats_panel(title: str, stats: dict[str, Any], border_style: str = "blue") -> Panel:
    """
    创建记忆模块统计面板。

    参数:
        title: 面板标题
        stats: Streamliner.stats() 返回的字典
        border_style: 边框样式
    """
    lines = []
    for key, value in stats.items():
        if isinstance(value, int) and key.endswith(("_length", "_saved")):
            value = f"{value:,} ({format_bytes(value)})"
        elif value is None:
            value = "[dim]-[/dim]"
        lines.append(f"[bold]{key}:[/bold] {value}")

    return Panel("\n".join(lines), title=title, border_style=border_style, expand=False)

"""
validate 命令 — 校验 YAML 配置文件。
"""

from __future__ import annotations

from pathlib import Path

from rich.panel import Panel
from rich.text import Text

from llm_streamliner.cli.utils import create_console, print_error, print_success
from llm_streamliner.config.loader import validate_config_file

console = create_console()


def validate_command(path: str) -> None:
    """
    校验配置文件的语法和字段。

    参数:
        path: YAML 配置文件路径
    """
    if not Path(path).exists():
        print_error(f"文件不存在：{path}")

    console.print(f"[bold]校验配置文件：[/bold] {path}\n")
    errors = validate_config_file(path)

    if errors:
        for error in errors:
            console.print(Panel(Text(error), title="[red]错误[/red]", border_style="red"))
        print_error(f"配置文件校验失败（{len(errors)} 个错误）")

    print_success("配置文件校验通过")

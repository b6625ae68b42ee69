"""
LLM Streamliner CLI — 命令行工具入口。

提供 compress / expand / inspect / algorithms / validate / version 子命令。

用法::

    llm-streamliner --help
    llm-streamliner compress history.txt -o history.mm.json
    llm-streamliner compress history.txt -a gzip --format yaml
    llm-streamliner expand history.mm.json -o history.txt
    llm-streamliner inspect history.mm.json --verify
    llm-streamliner algorithms
    llm-streamliner validate llm_streamliner.yaml
"""

from __future__ import annotations

import typer
from rich.table import Table

from llm_streamliner.cli.utils import configure_logging, create_console

app = typer.Typer(
    name="llm-streamliner",
    help="LLM Streamliner — LLM 上下文压缩与记忆模块 CLI",
    add_completion=False,
    no_args_is_help=True,
)

console = create_console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="详细输出（显示调试日志）",
    ),
) -> None:
    """LLM Streamliner — LLM 上下文压缩与记忆模块 CLI"""
    configure_logging(verbose)


# ============================================================
# 子命令注册
# ============================================================

@app.command(name="compress")
def compress(
    input_file: str = typer.Argument(..., help="待压缩的明文文件"),
    algorithm: str | None = typer.Option(
        None,
        "--algorithm",
        "-a",
        help="压缩算法：zlib / gzip / lz4（默认取自配置）",
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="文档输出路径（不指定则输出到终端）",
    ),
    fmt: str | None = typer.Option(
        None,
        "--format",
        "-f",
        help="文档格式：json / yaml（默认取自配置）",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径（默认自动搜索）",
    ),
) -> None:
    """压缩文件内容，生成记忆模块文档。"""
    from llm_streamliner.cli.cmd_compress import compress_command
    compress_command(
        input_file=input_file,
        algorithm=algorithm,
        output=output,
        fmt=fmt,
        config_path=config,
    )


@app.command(name="expand")
def expand(
    document_file: str = typer.Argument(..., help="记忆模块文档（JSON 或 YAML）"),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="明文输出路径（不指定则按 UTF-8 输出到终端）",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径（默认自动搜索）",
    ),
) -> None:
    """展开记忆模块文档，还原原始内容。"""
    from llm_streamliner.cli.cmd_compress import expand_command
    expand_command(document_file=document_file, output=output, config_path=config)


@app.command(name="inspect")
def inspect(
    document_file: str = typer.Argument(..., help="记忆模块文档（JSON 或 YAML）"),
    format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="输出格式：rich（Rich 面板）/ json（结构化）",
    ),
    verify: bool = typer.Option(
        False,
        "--verify",
        help="实际展开一次以校验载荷完整性",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径（默认自动搜索）",
    ),
) -> None:
    """查看记忆模块文档的元数据（默认不解压）。"""
    from llm_streamliner.cli.cmd_inspect import inspect_command
    inspect_command(document_file=document_file, format=format, verify=verify, config_path=config)


@app.command(name="algorithms")
def algorithms() -> None:
    """列出所有压缩算法及其在当前环境中是否可用。"""
    from llm_streamliner.backends import DEFAULT_ALGORITHM, AlgorithmId, default_registry

    registry = default_registry()
    table = Table(title="压缩算法", show_header=True, header_style="bold magenta")
    table.add_column("算法", style="cyan")
    table.add_column("可用", justify="center")
    table.add_column("备注", style="dim")

    for algorithm in AlgorithmId:
        supported = registry.is_supported(algorithm)
        note = "默认" if algorithm is DEFAULT_ALGORITHM else ""
        if not supported and algorithm is AlgorithmId.LZ4:
            note = "pip install 'llm-streamliner[lz4]'"
        table.add_row(
            algorithm.value,
            "[green]yes[/green]" if supported else "[red]no[/red]",
            note,
        )

    console.print(table)


@app.command(name="validate")
def validate(
    path: str = typer.Argument(
        "llm_streamliner.yaml",
        help="YAML 配置文件路径",
    ),
) -> None:
    """校验 YAML 配置文件。"""
    from llm_streamliner.cli.cmd_validate import validate_command
    validate_command(path=path)


@app.command(name="version")
def version() -> None:
    """显示版本信息。"""
    from llm_streamliner import __version__
    console.print(f"LLM Streamliner v{__version__}")


# ============================================================
# CLI 入口点
# ============================================================

def main() -> None:
    """CLI 入口点。"""
    app()


if __name__ == "__main__":
    main()

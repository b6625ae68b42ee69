"""
compress / expand 命令 — 文件与记忆模块文档之间的转换。
"""

from __future__ import annotations

import typer

from llm_streamliner.cli.utils import (
    create_streamliner,
    format_bytes,
    handle_streamliner_error,
    print_error,
    print_success,
    read_input,
    write_output,
)
from llm_streamliner.errors import StreamlinerError


def compress_command(
    input_file: str,
    algorithm: str | None = None,
    output: str | None = None,
    fmt: str | None = None,
    config_path: str | None = None,
) -> None:
    """
    压缩文件内容并输出记忆模块文档。

    参数:
        input_file: 明文文件路径
        algorithm: 压缩算法，None 时使用配置中的默认算法
        output: 文档输出路径，None 时输出到标准输出
        fmt: 文档格式 json / yaml，None 时取自配置
        config_path: 配置文件路径
    """
    if fmt is not None and fmt not in ("json", "yaml"):
        print_error(f"不支持的文档格式：{fmt}（可选：json / yaml）")

    streamliner = create_streamliner(config_path)
    plaintext = read_input(input_file)

    try:
        module = streamliner.compress(plaintext, algorithm=algorithm)
        document = streamliner.dumps(module, fmt=fmt)  # type: ignore[arg-type]
    except StreamlinerError as e:
        handle_streamliner_error(e)

    if output is None:
        typer.echo(document)
        return

    write_output(output, document)
    print_success(
        f"已压缩 {input_file}（{module.algorithm.value}）："
        f"{format_bytes(module.original_length)} → {format_bytes(module.compressed_length)}，"
        f"文档写入 {output}"
    )


def expand_command(
    document_file: str,
    output: str | None = None,
    config_path: str | None = None,
) -> None:
    """
    展开记忆模块文档，还原原始内容。

    参数:
        document_file: 记忆模块文档路径（JSON 或 YAML，自动识别）
        output: 明文输出路径，None 时按 UTF-8 输出到标准输出
        config_path: 配置文件路径
    """
    streamliner = create_streamliner(config_path)
    raw = read_input(document_file)

    try:
        module = streamliner.loads(raw)
        if output is None:
            typer.echo(streamliner.expand_text(module), nl=False)
            return
        data = streamliner.expand(module)
    except StreamlinerError as e:
        handle_streamliner_error(e)

    write_output(output, data)
    print_success(f"已展开 {document_file}：{format_bytes(len(data))} 写入 {output}")

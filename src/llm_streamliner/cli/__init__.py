"""
LLM Streamliner CLI — 命令行工具。

提供以下子命令：
- compress: 压缩文件，生成记忆模块文档
- expand: 展开记忆模块文档
- inspect: 查看记忆模块元数据
- algorithms: 列出可用算法
- validate: 校验配置文件
"""

from llm_streamliner.cli.app import app, main

__all__ = ["app", "main"]

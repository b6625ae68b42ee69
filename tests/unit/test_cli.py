"""
CLI 命令单元测试。

测试所有 CLI 子命令：compress, expand, inspect, algorithms, validate, version。
使用 typer.testing.CliRunner 进行测试。

覆盖场景：
- 正常流程（文件 → 文档 → 文件）
- JSON / YAML 文档格式
- 错误处理（文件不存在、文档损坏、未知算法）
"""

from __future__ import annotations

import base64
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from llm_streamliner import __version__
from llm_streamliner.cli.app import app

runner = CliRunner()


# ============================================================
# 辅助函数
# ============================================================


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """在临时目录中运行，避免读取仓库中的配置文件。"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def history_file(workdir: Path, conversation_text: str) -> Path:
    path = workdir / "history.txt"
    path.write_text(conversation_text, encoding="utf-8")
    return path


def compress_to(history_file: Path, *extra: str) -> Path:
    document = history_file.with_suffix(".mm")
    result = runner.invoke(app, ["compress", str(history_file), "-o", str(document), *extra])
    assert result.exit_code == 0, result.output
    return document


# ============================================================
# compress / expand
# ============================================================


class TestCompressExpand:
    """compress 与 expand 命令测试。"""

    def test_round_trip_through_files(self, history_file: Path, conversation_text: str) -> None:
        document = compress_to(history_file)
        restored = history_file.with_name("restored.txt")

        result = runner.invoke(app, ["expand", str(document), "-o", str(restored)])

        assert result.exit_code == 0, result.output
        assert restored.read_text(encoding="utf-8") == conversation_text

    def test_compress_to_stdout(self, history_file: Path) -> None:
        result = runner.invoke(app, ["compress", str(history_file)])

        assert result.exit_code == 0
        doc = json.loads(result.output)
        assert doc["algorithm"] == "zlib"
        assert doc["original_length"] == len(history_file.read_bytes())

    def test_expand_to_stdout(self, history_file: Path, conversation_text: str) -> None:
        document = compress_to(history_file)

        result = runner.invoke(app, ["expand", str(document)])

        assert result.exit_code == 0
        assert result.output == conversation_text

    @pytest.mark.parametrize("algorithm", ["zlib", "gzip"])
    def test_algorithm_option(self, history_file: Path, algorithm: str) -> None:
        document = compress_to(history_file, "--algorithm", algorithm)
        assert json.loads(document.read_text(encoding="utf-8"))["algorithm"] == algorithm

    def test_yaml_document(self, history_file: Path, conversation_text: str) -> None:
        document = compress_to(history_file, "--format", "yaml")
        assert not document.read_text(encoding="utf-8").startswith("{")

        result = runner.invoke(app, ["expand", str(document)])
        assert result.exit_code == 0
        assert result.output == conversation_text

    def test_config_file_sets_default_algorithm(self, history_file: Path, workdir: Path) -> None:
        config = workdir / "custom.yaml"
        config.write_text("compression:\n  default_algorithm: gzip\n", encoding="utf-8")

        document = compress_to(history_file, "--config", str(config))
        assert json.loads(document.read_text(encoding="utf-8"))["algorithm"] == "gzip"

    def test_binary_input(self, workdir: Path, binary_blob: bytes) -> None:
        source = workdir / "blob.bin"
        source.write_bytes(binary_blob)
        document = compress_to(source)
        restored = workdir / "restored.bin"

        result = runner.invoke(app, ["expand", str(document), "-o", str(restored)])

        assert result.exit_code == 0
        assert restored.read_bytes() == binary_blob

    def test_missing_input(self, workdir: Path) -> None:
        result = runner.invoke(app, ["compress", str(workdir / "nope.txt")])
        assert result.exit_code == 1
        assert "文件不存在" in result.output

    def test_unknown_algorithm(self, history_file: Path) -> None:
        result = runner.invoke(app, ["compress", str(history_file), "-a", "brotli"])
        assert result.exit_code == 1
        assert "UnknownAlgorithmError" in result.output

    def test_unsupported_document_format(self, history_file: Path) -> None:
        result = runner.invoke(app, ["compress", str(history_file), "--format", "xml"])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "不支持的文档格式" in result.output

    def test_corrupted_document(self, history_file: Path) -> None:
        document = compress_to(history_file)
        doc = json.loads(document.read_text(encoding="utf-8"))
        payload = bytearray(base64.b64decode(doc["payload"]))
        payload[len(payload) // 2] ^= 0xFF
        doc["payload"] = base64.b64encode(bytes(payload)).decode("ascii")
        document.write_text(json.dumps(doc), encoding="utf-8")

        result = runner.invoke(app, ["expand", str(document)])

        assert result.exit_code == 1

    def test_malformed_document(self, workdir: Path) -> None:
        document = workdir / "broken.json"
        document.write_text('{"algorithm": "zlib"', encoding="utf-8")

        result = runner.invoke(app, ["expand", str(document)])

        assert result.exit_code == 1
        assert "FormatError" in result.output


# ============================================================
# inspect
# ============================================================


class TestInspect:
    """inspect 命令测试。"""

    def test_rich_output(self, history_file: Path) -> None:
        document = compress_to(history_file)
        result = runner.invoke(app, ["inspect", str(document)])

        assert result.exit_code == 0
        assert "original_length" in result.output
        assert "zlib" in result.output

    def test_json_output(self, history_file: Path) -> None:
        document = compress_to(history_file)
        result = runner.invoke(app, ["inspect", str(document), "--format", "json"])

        assert result.exit_code == 0
        stats = json.loads(result.output)
        assert stats["algorithm"] == "zlib"
        assert stats["original_length"] == len(history_file.read_bytes())
        assert "verified" not in stats

    def test_verify(self, history_file: Path) -> None:
        document = compress_to(history_file)
        result = runner.invoke(app, ["inspect", str(document), "-f", "json", "--verify"])

        assert result.exit_code == 0
        assert json.loads(result.output)["verified"] is True

    def test_verify_detects_tampered_length(self, history_file: Path) -> None:
        document = compress_to(history_file)
        doc = json.loads(document.read_text(encoding="utf-8"))
        doc["original_length"] += 1
        document.write_text(json.dumps(doc), encoding="utf-8")

        assert runner.invoke(app, ["inspect", str(document)]).exit_code == 0
        result = runner.invoke(app, ["inspect", str(document), "--verify"])
        assert result.exit_code == 1
        assert "LengthMismatchError" in result.output

    def test_unsupported_output_format(self, history_file: Path) -> None:
        document = compress_to(history_file)
        result = runner.invoke(app, ["inspect", str(document), "--format", "xml"])
        assert result.exit_code == 1


# ============================================================
# algorithms / validate / version
# ============================================================


def test_algorithms() -> None:
    result = runner.invoke(app, ["algorithms"])

    assert result.exit_code == 0
    for name in ("zlib", "gzip", "lz4"):
        assert name in result.output


class TestValidate:
    """validate 命令测试。"""

    def test_valid_config(self, workdir: Path) -> None:
        config = workdir / "llm_streamliner.yaml"
        config.write_text("document:\n  format: yaml\n", encoding="utf-8")

        result = runner.invoke(app, ["validate"])

        assert result.exit_code == 0
        assert "校验通过" in result.output

    def test_invalid_config(self, workdir: Path) -> None:
        config = workdir / "bad.yaml"
        config.write_text("compression:\n  gzip_level: 99\n", encoding="utf-8")

        result = runner.invoke(app, ["validate", str(config)])

        assert result.exit_code == 1
        assert "gzip_level" in result.output

    def test_missing_config(self, workdir: Path) -> None:
        result = runner.invoke(app, ["validate", "missing.yaml"])
        assert result.exit_code == 1


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_no_args_shows_help() -> None:
    result = runner.invoke(app, [])
    assert "compress" in result.output

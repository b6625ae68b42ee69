"""
Streamliner Facade 单元测试。
"""

from __future__ import annotations

import asyncio

import pytest

from llm_streamliner import Streamliner
from llm_streamliner.backends import AlgorithmId, GzipBackend, ZlibBackend
from llm_streamliner.config import StreamlinerConfig
from llm_streamliner.config.loader import load_config
from llm_streamliner.errors import DataCorruptionError, UnknownAlgorithmError


class TestStreamliner:
    """Streamliner 同步 API 测试。"""

    def test_default_algorithm(self, streamliner) -> None:
        assert streamliner.default_algorithm is AlgorithmId.ZLIB
        assert isinstance(streamliner.backend(), ZlibBackend)

    def test_compress_expand(self, streamliner, conversation_text) -> None:
        module = streamliner.compress(conversation_text)

        assert module.algorithm is AlgorithmId.ZLIB
        assert streamliner.expand_text(module) == conversation_text
        assert streamliner.expand(module) == conversation_text.encode("utf-8")

    def test_explicit_algorithm(self, streamliner, conversation_text) -> None:
        module = streamliner.compress(conversation_text, algorithm="gzip")
        assert module.algorithm is AlgorithmId.GZIP
        assert streamliner.expand_text(module) == conversation_text

    def test_expander_chosen_from_module(self, conversation_text) -> None:
        writer = Streamliner(config=load_config(overrides={"compression": {"default_algorithm": "gzip"}}))
        reader = Streamliner(config=StreamlinerConfig())

        module = writer.compress(conversation_text)
        assert module.algorithm is AlgorithmId.GZIP
        assert reader.expand_text(reader.loads(writer.dumps(module))) == conversation_text

    def test_configured_level_is_used(self) -> None:
        config = StreamlinerConfig(compression={"gzip_level": 1})
        backend = Streamliner(config=config).backend("gzip")

        assert isinstance(backend, GzipBackend)
        assert backend.level == 1

    def test_record_checksum_disabled(self, conversation_text) -> None:
        config = StreamlinerConfig(integrity={"record_checksum": False})
        module = Streamliner(config=config).compress(conversation_text)
        assert module.checksum is None

    def test_verify_checksum_disabled(self, streamliner) -> None:
        import dataclasses

        module = streamliner.compress(b"original")
        other = streamliner.compress(b"tampered")
        swapped = dataclasses.replace(module, payload=other.payload)

        with pytest.raises(DataCorruptionError):
            streamliner.expand(swapped)

        lenient = Streamliner(config=StreamlinerConfig(integrity={"verify_checksum": False}))
        assert lenient.expand(swapped) == b"tampered"
        assert lenient.expand_text(swapped) == "tampered"

    def test_default_algorithm_must_be_registered(self, registry_without_lz4) -> None:
        config = StreamlinerConfig(compression={"default_algorithm": "lz4"})
        with pytest.raises(UnknownAlgorithmError):
            Streamliner(config=config, registry=registry_without_lz4)

    def test_loads_rejects_unsupported_algorithm(self, streamliner, registry_without_lz4) -> None:
        reader = Streamliner(config=StreamlinerConfig(), registry=registry_without_lz4)
        document = streamliner.dumps(streamliner.compress(b"x")).replace('"zlib"', '"lz4"')

        with pytest.raises(UnknownAlgorithmError):
            reader.loads(document)

    def test_dumps_uses_configured_format(self, conversation_text) -> None:
        config = StreamlinerConfig(document={"format": "yaml"})
        streamliner = Streamliner(config=config)
        module = streamliner.compress(conversation_text)
        document = streamliner.dumps(module)

        assert not document.lstrip().startswith("{")
        assert streamliner.loads(document) == module

    def test_loads_detects_format(self, streamliner, sample_module) -> None:
        assert streamliner.loads(streamliner.dumps(sample_module, fmt="yaml")) == sample_module
        assert streamliner.loads(streamliner.dumps(sample_module, fmt="json")) == sample_module
        assert streamliner.loads(streamliner.dumps(sample_module).encode("utf-8")) == sample_module

    def test_stats(self, streamliner) -> None:
        module = streamliner.compress("A" * 1000)
        stats = streamliner.stats(module)

        assert stats["algorithm"] == "zlib"
        assert stats["original_length"] == 1000
        assert stats["compressed_length"] == len(module.payload)
        assert stats["bytes_saved"] == 1000 - len(module.payload)
        assert 0 < stats["compression_ratio"] < 1

    def test_repr(self, streamliner) -> None:
        assert "zlib" in repr(streamliner)


class TestStreamlinerAsync:
    """Streamliner 异步 API 测试。"""

    @pytest.mark.asyncio
    async def test_async_round_trip(self, streamliner, conversation_text) -> None:
        module = await streamliner.compress_async(conversation_text)
        data = await streamliner.expand_async(module)
        assert data.decode("utf-8") == conversation_text

    @pytest.mark.asyncio
    async def test_many_contexts_in_parallel(self, streamliner) -> None:
        contexts = [f"context {i}: " + "lorem ipsum " * (i + 1) for i in range(20)]

        modules = await asyncio.gather(*(streamliner.compress_async(c) for c in contexts))
        expanded = await asyncio.gather(*(streamliner.expand_async(m) for m in modules))

        assert [e.decode("utf-8") for e in expanded] == contexts

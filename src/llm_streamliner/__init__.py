"""
LLM Streamliner — 把 LLM 上下文压缩为可序列化的记忆模块，并按需精确还原。

快速上手::

    from llm_streamliner import Streamliner

    streamliner = Streamliner()
    module = streamliner.compress(conversation_history)
    document = streamliner.dumps(module)

    text = streamliner.expand_text(streamliner.loads(document))
    assert text == conversation_history

底层 API::

    from llm_streamliner import ZlibBackend, construct, expand

    backend = ZlibBackend()
    module = construct(b"AAAAAAAAAA", backend)
    assert expand(module, backend) == b"AAAAAAAAAA"
"""

from llm_streamliner.backends import (
    DEFAULT_ALGORITHM,
    AlgorithmId,
    Backend,
    BackendRegistry,
    Compressor,
    Expander,
    GzipBackend,
    ZlibBackend,
    available_algorithms,
    create_default_registry,
    default_registry,
    get_backend,
)
from llm_streamliner.codec import from_dict, from_document, to_dict, to_document
from llm_streamliner.config import StreamlinerConfig, load_config
from llm_streamliner.errors import (
    AlgorithmMismatchError,
    BackendFailureError,
    ConfigLoadError,
    ConfigValidationError,
    DataCorruptionError,
    FormatError,
    LengthMismatchError,
    StreamlinerError,
    UnknownAlgorithmError,
)
from llm_streamliner.facade import Streamliner
from llm_streamliner.memory import (
    MemoryModule,
    construct,
    construct_async,
    expand,
    expand_async,
    expand_text,
)

__version__ = "0.1.0"

__all__ = [
    # 顶层入口
    "Streamliner",
    # 记忆模块
    "MemoryModule",
    "construct",
    "construct_async",
    "expand",
    "expand_async",
    "expand_text",
    # 后端
    "DEFAULT_ALGORITHM",
    "AlgorithmId",
    "Backend",
    "BackendRegistry",
    "Compressor",
    "Expander",
    "GzipBackend",
    "ZlibBackend",
    "available_algorithms",
    "create_default_registry",
    "default_registry",
    "get_backend",
    # 序列化
    "from_dict",
    "from_document",
    "to_dict",
    "to_document",
    # 配置
    "StreamlinerConfig",
    "load_config",
    # 异常
    "AlgorithmMismatchError",
    "BackendFailureError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DataCorruptionError",
    "FormatError",
    "LengthMismatchError",
    "StreamlinerError",
    "UnknownAlgorithmError",
    # 版本
    "__version__",
]

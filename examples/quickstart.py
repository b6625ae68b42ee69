"""
LLM Streamliner 快速上手示例。

演示最基本的用法：压缩对话历史、序列化为文档、再精确还原。

运行方式：
    python examples/quickstart.py

无需任何配置文件。
"""

import asyncio


def build_history(turns: int = 200) -> str:
    lines = []
    for i in range(turns):
        lines.append(f"user: 第 {i} 轮：帮我总结一下上一轮的讨论。")
        lines.append(f"assistant: Summary of turn {i}: nothing was lost.")
    return "\n".join(lines)


async def main() -> None:
    from llm_streamliner import Streamliner, available_algorithms

    history = build_history()
    streamliner = Streamliner()

    # ===== 场景 1：最简用法 =====
    print("=" * 60)
    print("场景 1：压缩 → 文档 → 还原")
    print("=" * 60)

    module = streamliner.compress(history)
    document = streamliner.dumps(module)
    restored = streamliner.expand_text(streamliner.loads(document))

    print(f"\n{module.summary()}")
    print(f"  文档大小：{len(document):,} 字符")
    print(f"  还原一致：{restored == history}")

    # ===== 场景 2：比较可用算法 =====
    print("\n" + "=" * 60)
    print("场景 2：比较可用算法")
    print("=" * 60)

    for algorithm in available_algorithms():
        stats = streamliner.stats(streamliner.compress(history, algorithm=algorithm))
        print(
            f"  {algorithm:<5} {stats['original_length']:>8,} B → "
            f"{stats['compressed_length']:>7,} B（压缩比 {stats['compression_ratio']:.2%}）"
        )

    # ===== 场景 3：异步并发 =====
    print("\n" + "=" * 60)
    print("场景 3：多个会话并发压缩")
    print("=" * 60)

    sessions = [build_history(50 + i * 10) for i in range(5)]
    modules = await asyncio.gather(*(streamliner.compress_async(s) for s in sessions))
    expanded = await asyncio.gather(*(streamliner.expand_async(m) for m in modules))

    for i, (module, data) in enumerate(zip(modules, expanded)):
        ok = data.decode("utf-8") == sessions[i]
        print(f"  会话 {i}：{module.compressed_length:>6,} B，还原一致：{ok}")


if __name__ == "__main__":
    asyncio.run(main())

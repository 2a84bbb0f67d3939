from __future__ import annotations

"""
随机数来源的抽象。

搜索引擎只依赖一个 `sample()` 接口（返回 [0, 1) 上的均匀分布浮点数），
整数下标由引擎自己推导。调用方可以注入任意实现（例如测试中的固定序列）。
"""

import random
from typing import Optional, Protocol


class RandomSource(Protocol):
    def sample(self) -> float:
        ...


class UniformDistribution:
    """基于 `random.Random` 的 [0, 1) 均匀分布，可通过 seed 复现。"""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def sample(self) -> float:
        return self._rng.random()

    def __repr__(self) -> str:
        return f"UniformDistribution(seed={self.seed!r})"

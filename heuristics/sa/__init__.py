from __future__ import annotations

"""
模拟退火（Simulated Annealing, SA）策略。

只负责 SA 的数学细节：接受概率、降温与终止条件，
迭代本身由 heuristics.base.Heuristic 驱动。
"""

from .core import SimulatedAnnealing

__all__ = ["SimulatedAnnealing"]

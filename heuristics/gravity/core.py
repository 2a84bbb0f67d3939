from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Dict

from heuristics.base import SearchStrategy
from heuristics.errors import InvalidConfiguration
from heuristics.solution import MappingSolution


logger = logging.getLogger("vm_placement.heuristics.gravity")


class Gravity(SearchStrategy):
    """
    爬山（Hill Climbing / Gravity）策略。

    接受概率恒为 0：更差或代价相同的邻域解都不会被接受，
    只有严格更优的邻域解才会推进搜索。迭代 max_iterations 轮后停止。
    """

    name = "gravity"

    def __init__(self, max_iterations: int) -> None:
        if (
            isinstance(max_iterations, bool)
            or not isinstance(max_iterations, numbers.Real)
            or not math.isfinite(max_iterations)
            or int(max_iterations) != max_iterations
            or max_iterations < 1
        ):
            raise InvalidConfiguration(
                f"max_iterations 必须是 >= 1 的整数，但实际为 {max_iterations!r}。"
            )
        self.max_iterations = int(max_iterations)
        self.current_iteration = 0

    def acceptance_probability(
        self, current: MappingSolution, neighbor: MappingSolution
    ) -> float:
        return 0.0

    def is_to_stop_search(self) -> bool:
        return self.current_iteration >= self.max_iterations

    def update_system_state(self) -> None:
        self.current_iteration += 1
        logger.debug("迭代计数：%d/%d", self.current_iteration, self.max_iterations)

    def state(self) -> Dict[str, Any]:
        return {
            "current_iteration": self.current_iteration,
            "max_iterations": self.max_iterations,
        }

from __future__ import annotations

import logging
import math
from typing import Any, Dict

from heuristics.base import SearchStrategy
from heuristics.errors import InvalidConfiguration
from heuristics.solution import MappingSolution


logger = logging.getLogger("vm_placement.heuristics.sa")


class SimulatedAnnealing(SearchStrategy):
    """
    模拟退火策略。

    - 接受准则：邻域解不更差时概率为 1，否则为 exp(-Δ / T)，Δ = 邻域代价 - 当前代价；
    - 降温：每轮 T *= cooling_rate（几何降温，不做下限裁剪）；
    - 终止：T <= cold_temperature。
    """

    name = "sa"

    def __init__(
        self,
        initial_temperature: float,
        cold_temperature: float,
        cooling_rate: float,
    ) -> None:
        initial_temperature = float(initial_temperature)
        cold_temperature = float(cold_temperature)
        cooling_rate = float(cooling_rate)

        if not all(map(math.isfinite, (initial_temperature, cold_temperature, cooling_rate))):
            raise InvalidConfiguration(
                "initial_temperature / cold_temperature / cooling_rate 必须为有限数，"
                f"但实际为 {initial_temperature!r} / {cold_temperature!r} / {cooling_rate!r}。"
            )
        if not 0.0 < cooling_rate < 1.0:
            raise InvalidConfiguration(
                f"cooling_rate 必须位于 (0, 1) 区间，但实际为 {cooling_rate!r}。"
            )
        if initial_temperature <= 0 or cold_temperature <= 0:
            raise InvalidConfiguration(
                "initial_temperature 与 cold_temperature 必须为正数，"
                f"但实际为 {initial_temperature!r} / {cold_temperature!r}。"
            )
        if cold_temperature >= initial_temperature:
            raise InvalidConfiguration(
                f"cold_temperature ({cold_temperature!r}) 必须小于 "
                f"initial_temperature ({initial_temperature!r})，否则搜索会立即结束。"
            )

        self.initial_temperature = initial_temperature
        self.current_temperature = initial_temperature
        self.cold_temperature = cold_temperature
        self.cooling_rate = cooling_rate

    def acceptance_probability(
        self, current: MappingSolution, neighbor: MappingSolution
    ) -> float:
        delta = neighbor.cost() - current.cost()
        if delta <= 0:
            return 1.0
        # T 为 0 时 exp(-Δ/T) 无定义，按“总是拒绝”处理
        if self.current_temperature <= 0:
            return 0.0
        return math.exp(-delta / self.current_temperature)

    def is_to_stop_search(self) -> bool:
        return self.current_temperature <= self.cold_temperature

    def update_system_state(self) -> None:
        self.current_temperature *= self.cooling_rate
        logger.debug("降温：T=%.6g (cold=%.6g)", self.current_temperature, self.cold_temperature)

    def state(self) -> Dict[str, Any]:
        return {
            "T": self.current_temperature,
            "T_min": self.cold_temperature,
            "alpha": self.cooling_rate,
        }

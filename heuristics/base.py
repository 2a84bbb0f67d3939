from __future__ import annotations

"""
局部搜索引擎的通用状态机。

一次迭代：
1. 基于当前解产生邻域解；
2. 邻域解更优（代价更低，差值超出 MIN_DIFF）则必然接受，
   否则按策略给出的接受概率做一次随机抽样；
3. 邻域解严格优于历史最优时更新历史最优；
4. 无论是否接受都推进策略状态（降温 / 迭代计数）；
5. 询问策略是否停止。

具体的接受概率、停止条件、每轮状态更新由注入的 SearchStrategy 决定，
引擎本身只有一个实现。
"""

import logging
import math
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from .errors import HeuristicError, InvalidConfiguration
from .random_source import RandomSource, UniformDistribution
from .solution import MappingSolution

if TYPE_CHECKING:
    from .history import SearchHistory


logger = logging.getLogger("vm_placement.heuristics")


class SearchState(str, Enum):
    UNINITIALIZED = "uninitialized"
    SEARCHING = "searching"
    TERMINATED = "terminated"


@dataclass
class StepOutcome:
    """单步迭代的结果摘要，供日志 / 历史记录 / 上层接口使用。"""

    iteration: int
    accepted: bool
    reason: str
    current_cost_in: float
    candidate_cost: float
    current_cost: float
    best_cost: float
    done: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SearchStrategy(ABC):
    """搜索策略：接受概率、停止条件与每轮状态更新。"""

    name: str = "abstract"

    @abstractmethod
    def acceptance_probability(
        self, current: MappingSolution, neighbor: MappingSolution
    ) -> float:
        """返回 [0, 1] 内的概率，决定是否接受一个不更优的邻域解。"""

    @abstractmethod
    def is_to_stop_search(self) -> bool:
        ...

    @abstractmethod
    def update_system_state(self) -> None:
        """每完成一轮迭代调用一次，无论邻域解是否被接受。"""

    def state(self) -> Dict[str, Any]:
        """策略内部的标量状态，用于日志与状态查询。"""
        return {}


class Heuristic(ABC):
    """
    单线程局部搜索引擎。

    子类只需要提供 `initial_solution()`；邻域生成默认是
    “克隆 + 随机交换两个条目”。
    """

    def __init__(
        self,
        strategy: SearchStrategy,
        random_source: Optional[RandomSource] = None,
        neighborhood_searches: int = 1,
        history: Optional["SearchHistory"] = None,
    ) -> None:
        if int(neighborhood_searches) < 1:
            raise InvalidConfiguration(
                f"neighborhood_searches 必须 >= 1，但实际为 {neighborhood_searches!r}。"
            )

        self.strategy = strategy
        self.random_source: RandomSource = random_source or UniformDistribution()
        self.neighborhood_searches = int(neighborhood_searches)
        self.history = history

        self.state = SearchState.UNINITIALIZED
        self.current_solution: Optional[MappingSolution] = None
        self.best_solution_so_far: Optional[MappingSolution] = None
        self.search_steps = 0
        self.solve_time = 0.0

    # ------------------------- 由子类 / 策略提供 ------------------------- #
    @abstractmethod
    def initial_solution(self) -> MappingSolution:
        ...

    def create_neighbor(self, source: MappingSolution) -> MappingSolution:
        """返回 source 的一个邻域解；source 本身不会被修改。"""
        neighbor = source.clone()
        neighbor.swap_two_random_entries(self.random_index)
        return neighbor

    def acceptance_probability(
        self, current: MappingSolution, neighbor: MappingSolution
    ) -> float:
        return self.strategy.acceptance_probability(current, neighbor)

    def is_to_stop_search(self) -> bool:
        return self.strategy.is_to_stop_search()

    def update_system_state(self) -> None:
        self.strategy.update_system_state()

    # ------------------------- 随机数 ------------------------- #
    def random_index(self, bound: int) -> int:
        """floor(sample() * bound)，在 [0, bound) 上均匀分布。"""
        if bound <= 0:
            raise ValueError(f"bound 必须为正整数，但实际为 {bound!r}。")
        idx = int(math.floor(self.random_source.sample() * bound))
        return min(idx, bound - 1)

    # ------------------------- 状态机 ------------------------- #
    def start(self) -> None:
        """Uninitialized -> Searching：以初始解作为当前解与历史最优。"""
        if self.state is not SearchState.UNINITIALIZED:
            return

        initial = self.initial_solution()
        self.current_solution = initial
        self.best_solution_so_far = initial
        self.state = SearchState.SEARCHING
        logger.info(
            "搜索开始：strategy=%s, entries=%d, initial_cost=%s",
            self.strategy.name,
            len(initial),
            initial.cost(),
        )

        if self.is_to_stop_search():
            self._terminate()

    def _assess(
        self, current: MappingSolution, neighbor: MappingSolution
    ) -> Tuple[bool, str]:
        if neighbor.is_better_than(current):
            return True, "candidate_better"

        prob = self.acceptance_probability(current, neighbor)
        if prob <= 0:
            return False, "probability_zero"

        r = self.random_source.sample()
        if r <= prob:
            return True, f"candidate_worse_prob_accept (p={prob:.3g}, r={r:.3g})"
        return False, f"candidate_rejected (p={prob:.3g}, r={r:.3g})"

    def step(self) -> StepOutcome:
        """执行一轮 Searching -> Searching 迭代。"""
        if self.state is SearchState.UNINITIALIZED:
            self.start()
        if self.state is SearchState.TERMINATED:
            raise HeuristicError("搜索已经结束，不能继续迭代。")
        started = time.monotonic()

        assert self.current_solution is not None
        assert self.best_solution_so_far is not None

        cost_in = self.current_solution.cost()
        accepted = False
        reason = ""
        candidate_cost = cost_in

        for _ in range(self.neighborhood_searches):
            neighbor = self.create_neighbor(self.current_solution)
            candidate_cost = neighbor.cost()
            move, reason = self._assess(self.current_solution, neighbor)
            if not move:
                continue

            accepted = True
            self.current_solution = neighbor
            if neighbor.is_better_than(self.best_solution_so_far):
                self.best_solution_so_far = neighbor

        self.search_steps += 1
        self.update_system_state()
        done = self.is_to_stop_search()

        outcome = StepOutcome(
            iteration=self.search_steps,
            accepted=accepted,
            reason=reason,
            current_cost_in=cost_in,
            candidate_cost=candidate_cost,
            current_cost=self.current_solution.cost(),
            best_cost=self.best_solution_so_far.cost(),
            done=done,
        )

        if self.history is not None:
            self.history.record_step(self, outcome)

        logger.debug(
            "step：iter=%d, accept=%s, reason=%s, candidate_cost=%s, best_cost=%s, state=%s",
            outcome.iteration,
            accepted,
            reason,
            candidate_cost,
            outcome.best_cost,
            self.strategy.state(),
        )

        # solve_time 累计所有迭代的耗时，包括逐步驱动的部分
        self.solve_time += time.monotonic() - started
        if done:
            self._terminate()
        return outcome

    def _terminate(self) -> None:
        self.state = SearchState.TERMINATED
        if self.history is not None:
            self.history.record_best(self)
        logger.info(
            "搜索结束：strategy=%s, steps=%d, best_cost=%s",
            self.strategy.name,
            self.search_steps,
            self.best_cost,
        )

    def solve(self) -> MappingSolution:
        """运行到策略的停止条件成立，返回历史最优解。"""
        self.start()
        while self.state is SearchState.SEARCHING:
            self.step()

        assert self.best_solution_so_far is not None
        return self.best_solution_so_far

    # ------------------------- 查询 ------------------------- #
    @property
    def best_cost(self) -> Optional[float]:
        if self.best_solution_so_far is None:
            return None
        return self.best_solution_so_far.cost()

    def snapshot(self) -> Dict[str, Any]:
        """当前搜索状态的可序列化摘要。"""
        current = self.current_solution
        best = self.best_solution_so_far
        return {
            "strategy": self.strategy.name,
            "state": self.state.value,
            "search_steps": self.search_steps,
            "solve_time": self.solve_time,
            "neighborhood_searches": self.neighborhood_searches,
            "current_cost": current.cost() if current is not None else None,
            "best_cost": best.cost() if best is not None else None,
            **self.strategy.state(),
        }

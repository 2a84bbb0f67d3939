from collections import namedtuple
from typing import Iterable, List, Optional, Sequence

import pytest

from heuristics.base import Heuristic, SearchStrategy
from heuristics.solution import MappingSolution
from heuristics.vm_host import Host, Vm


Task = namedtuple("Task", ["name", "demand"])
Resource = namedtuple("Resource", ["name", "capacity"])


class ScriptedRandom:
    """按顺序循环返回给定的 [0, 1) 值。"""

    def __init__(self, values: Sequence[float]) -> None:
        self.values = list(values)
        self.calls = 0

    def sample(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


class FixedCostSolution(MappingSolution):
    """代价固定的解，用来精确控制接受 / 拒绝的场景。"""

    def __init__(self, fixed_cost: float) -> None:
        super().__init__()
        self.fixed_cost = fixed_cost

    def compute_cost(self) -> float:
        return self.fixed_cost


class ScriptedHeuristic(Heuristic):
    """初始解与每个邻域解的代价都来自给定序列。"""

    def __init__(
        self,
        strategy: SearchStrategy,
        costs: Iterable[float],
        random_source=None,
    ) -> None:
        super().__init__(strategy, random_source=random_source or ScriptedRandom([0.5]))
        self._costs = list(costs)
        self._initial = FixedCostSolution(self._costs.pop(0))
        self.generated: List[FixedCostSolution] = []

    def initial_solution(self) -> FixedCostSolution:
        return self._initial

    def create_neighbor(self, source: MappingSolution) -> FixedCostSolution:
        neighbor = FixedCostSolution(self._costs.pop(0))
        self.generated.append(neighbor)
        return neighbor


class SquaredSlackSolution(MappingSolution):
    """代价与具体摆放相关：每个资源 (capacity - Σdemand)^2 之和。"""

    def resource_cost(self, resource, tasks) -> float:
        return super().resource_cost(resource, tasks) ** 2


class BalancingHeuristic(Heuristic):
    """在 Task / Resource 上使用 SquaredSlackSolution 的通用搜索器。"""

    def __init__(
        self,
        strategy: SearchStrategy,
        tasks: Sequence[Task],
        resources: Sequence[Resource],
        random_source=None,
        neighborhood_searches: int = 1,
    ) -> None:
        super().__init__(
            strategy,
            random_source=random_source,
            neighborhood_searches=neighborhood_searches,
        )
        self.tasks = list(tasks)
        self.resources = list(resources)
        self._initial: Optional[SquaredSlackSolution] = None

    def initial_solution(self) -> SquaredSlackSolution:
        if self._initial is None:
            solution = SquaredSlackSolution()
            for i, task in enumerate(self.tasks):
                solution.bind(task, self.resources[i % len(self.resources)])
            self._initial = solution
        return self._initial


@pytest.fixture
def tasks():
    return [Task("t0", 4), Task("t1", 4), Task("t2", 1), Task("t3", 1), Task("t4", 2), Task("t5", 2)]


@pytest.fixture
def resources():
    return [Resource("r0", 5), Resource("r1", 5), Resource("r2", 4)]


@pytest.fixture
def hosts():
    return [Host(0, 8), Host(1, 8), Host(2, 4)]


@pytest.fixture
def vms():
    return [Vm(0, 4), Vm(1, 2), Vm(2, 2), Vm(3, 1), Vm(4, 1), Vm(5, 4)]

from __future__ import annotations

"""
VM -> Host 映射问题的具体绑定。

- task = Vm，resource = Host；
- 单个 Host 的代价 = host.pe_count - Σ vm.pe_count（越低越好）；
- 初始解：每个 VM 随机放到一个均匀选取的 Host 上；
- 邻域解：随机交换两个 VM 的 Host。
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from .base import Heuristic, SearchStrategy
from .gravity import Gravity
from .random_source import RandomSource
from .sa import SimulatedAnnealing
from .solution import MappingSolution

if TYPE_CHECKING:
    from .history import SearchHistory


@dataclass(frozen=True)
class Vm:
    id: int
    pe_count: int = 1

    def __str__(self) -> str:
        return f"Vm{self.id}"


@dataclass(frozen=True)
class Host:
    id: int
    pe_count: int

    def __str__(self) -> str:
        return f"Host{self.id}"


class VmToHostMappingSolution(MappingSolution):
    """VM -> Host 的一个候选映射，代价按 PE 数计算。"""

    def task_demand(self, task: Any) -> float:
        return float(task.pe_count)

    def resource_capacity(self, resource: Any) -> float:
        return float(resource.pe_count)

    def bind_vm_to_host(self, vm: Vm, host: Host) -> None:
        self.bind(vm, host)


class VmToHostMappingHeuristic(Heuristic):
    """
    在给定的 VM 列表与 Host 列表之间搜索映射。

    VM 或 Host 列表为空时不生成初始解，所有解都是空映射（不报错）。
    """

    def __init__(
        self,
        strategy: SearchStrategy,
        vm_list: Optional[Iterable[Vm]] = None,
        host_list: Optional[Iterable[Host]] = None,
        random_source: Optional[RandomSource] = None,
        neighborhood_searches: int = 1,
        history: Optional["SearchHistory"] = None,
    ) -> None:
        super().__init__(
            strategy,
            random_source=random_source,
            neighborhood_searches=neighborhood_searches,
            history=history,
        )
        self.vm_list: List[Vm] = list(vm_list or [])
        self.host_list: List[Host] = list(host_list or [])
        self._initial_solution = VmToHostMappingSolution()

    def _is_ready_to_generate_initial_solution(self) -> bool:
        return bool(self.vm_list) and bool(self.host_list)

    def initial_solution(self) -> VmToHostMappingSolution:
        """第一次调用时随机生成，之后一直返回同一个解。"""
        if self._initial_solution.is_empty() and self._is_ready_to_generate_initial_solution():
            self._initial_solution = self._generate_random_solution()
        return self._initial_solution

    def random_host(self) -> Host:
        return self.host_list[self.random_index(len(self.host_list))]

    def _generate_random_solution(self) -> VmToHostMappingSolution:
        solution = VmToHostMappingSolution()
        for vm in self.vm_list:
            solution.bind_vm_to_host(vm, self.random_host())
        return solution


class VmToHostMappingSimulatedAnnealing(VmToHostMappingHeuristic):
    """用模拟退火搜索 VM -> Host 映射。"""

    def __init__(
        self,
        initial_temperature: float,
        cold_temperature: float,
        cooling_rate: float,
        random_source: Optional[RandomSource] = None,
        vm_list: Optional[Iterable[Vm]] = None,
        host_list: Optional[Iterable[Host]] = None,
        neighborhood_searches: int = 1,
        history: Optional["SearchHistory"] = None,
    ) -> None:
        super().__init__(
            SimulatedAnnealing(initial_temperature, cold_temperature, cooling_rate),
            vm_list=vm_list,
            host_list=host_list,
            random_source=random_source,
            neighborhood_searches=neighborhood_searches,
            history=history,
        )

    @property
    def current_temperature(self) -> float:
        return self.strategy.current_temperature


class VmToHostMappingGravity(VmToHostMappingHeuristic):
    """用爬山（Gravity）搜索 VM -> Host 映射。"""

    def __init__(
        self,
        max_iterations: int,
        random_source: Optional[RandomSource] = None,
        vm_list: Optional[Iterable[Vm]] = None,
        host_list: Optional[Iterable[Host]] = None,
        neighborhood_searches: int = 1,
        history: Optional["SearchHistory"] = None,
    ) -> None:
        super().__init__(
            Gravity(max_iterations),
            vm_list=vm_list,
            host_list=host_list,
            random_source=random_source,
            neighborhood_searches=neighborhood_searches,
            history=history,
        )

    @property
    def current_iteration(self) -> int:
        return self.strategy.current_iteration

from __future__ import annotations

"""
VM -> Host 映射的局部搜索启发式。

约定：
- heuristics/base.py      搜索引擎状态机（当前解 / 历史最优 / 迭代）；
- heuristics/solution.py  候选解与代价缓存；
- heuristics/sa/          模拟退火策略；
- heuristics/gravity/     爬山（Gravity）策略；
- heuristics/vm_host.py   VM / Host 领域绑定。
本包不依赖任何仿真引擎，只在映射空间中工作。
"""

from .base import Heuristic, SearchState, SearchStrategy, StepOutcome
from .errors import HeuristicError, InvalidConfiguration
from .gravity import Gravity
from .random_source import RandomSource, UniformDistribution
from .sa import SimulatedAnnealing
from .solution import MIN_DIFF, CachedCost, MappingSolution
from .vm_host import (
    Host,
    Vm,
    VmToHostMappingGravity,
    VmToHostMappingHeuristic,
    VmToHostMappingSimulatedAnnealing,
    VmToHostMappingSolution,
)

__all__ = [
    "CachedCost",
    "Gravity",
    "Heuristic",
    "HeuristicError",
    "Host",
    "InvalidConfiguration",
    "MIN_DIFF",
    "MappingSolution",
    "RandomSource",
    "SearchState",
    "SearchStrategy",
    "SimulatedAnnealing",
    "StepOutcome",
    "UniformDistribution",
    "Vm",
    "VmToHostMappingGravity",
    "VmToHostMappingHeuristic",
    "VmToHostMappingSimulatedAnnealing",
    "VmToHostMappingSolution",
]

from __future__ import annotations

"""
候选解（Solution）的通用表示：task -> resource 的映射 + 代价缓存。

说明：
- 代价是最小化目标：越低越好；
- 所有修改映射的操作（bind / swap）都必须同时让代价缓存失效；
- 随机性不由解自身持有，而是在产生邻域解时由调用方注入 `random_index`。
"""

import copy
from collections import defaultdict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional


# 两个解代价差的绝对值不超过该值时视为相等，避免浮点噪声产生伪排序
MIN_DIFF = 1e-4

RandomIndex = Callable[[int], int]


@dataclass
class CachedCost:
    """代价缓存：只有 valid 为 True 时 value 才可信。"""

    value: float = 0.0
    valid: bool = False

    def invalidate(self) -> None:
        self.valid = False

    def store(self, value: float) -> float:
        self.value = float(value)
        self.valid = True
        return self.value


class MappingSolution:
    """
    一个完整的 task -> resource 分配方案。

    默认代价模型读取 `resource.capacity` 与 `task.demand`，
    具体领域（例如 VM -> Host）通过覆盖 `resource_capacity` / `task_demand` 来适配。
    """

    def __init__(self, mapping: Optional[Dict[Any, Any]] = None) -> None:
        self._mapping: Dict[Any, Any] = dict(mapping) if mapping else {}
        self._cache = CachedCost()

    # ------------------------- 修改操作 ------------------------- #
    def bind(self, task: Any, resource: Any) -> None:
        """把 task 绑定到 resource（已存在则覆盖）。"""
        self._mapping[task] = resource
        self._cache.invalidate()

    def pick_two_random_tasks(self, random_index: RandomIndex) -> List[Any]:
        """
        无放回地均匀选出两个不同的 task。

        映射本身没有位置下标，因此先抽取两个下标，再单次遍历映射、
        找到对应位置后立即停止，不构造完整的辅助列表。
        映射少于 2 个条目时返回空列表。
        """
        size = len(self._mapping)
        if size < 2:
            return []

        first = random_index(size)
        second = random_index(size - 1)
        if second >= first:
            second += 1
        wanted = {first, second}

        selected: List[Any] = []
        for i, task in enumerate(self._mapping):
            if i in wanted:
                selected.append(task)
                if len(selected) == 2:
                    break
        return selected

    def swap_two_random_entries(self, random_index: RandomIndex) -> bool:
        """交换两个随机条目的 resource；没有两个不同条目可交换时返回 False 且不做修改。"""
        tasks = self.pick_two_random_tasks(random_index)
        if len(tasks) != 2:
            return False

        a, b = tasks
        self._mapping[a], self._mapping[b] = self._mapping[b], self._mapping[a]
        self._cache.invalidate()
        return True

    # ------------------------- 代价计算 ------------------------- #
    def task_demand(self, task: Any) -> float:
        return float(task.demand)

    def resource_capacity(self, resource: Any) -> float:
        return float(resource.capacity)

    def resource_cost(self, resource: Any, tasks: Iterable[Any]) -> float:
        """单个 resource 的代价：capacity - Σ demand。"""
        return self.resource_capacity(resource) - sum(self.task_demand(t) for t in tasks)

    def group_tasks_by_resource(self) -> Dict[Any, List[Any]]:
        # 没有任何 task 的 resource 不会出现在分组里
        groups: Dict[Any, List[Any]] = defaultdict(list)
        for task, resource in self._mapping.items():
            groups[resource].append(task)
        return dict(groups)

    def compute_cost(self) -> float:
        return sum(
            self.resource_cost(resource, tasks)
            for resource, tasks in self.group_tasks_by_resource().items()
        )

    def cost(self, force_recompute: bool = False) -> float:
        """返回缓存的代价；缓存失效（或 force_recompute）时先重新计算。"""
        if force_recompute:
            self._cache.invalidate()
        if not self._cache.valid:
            self._cache.store(self.compute_cost())
        return self._cache.value

    @property
    def is_cost_stale(self) -> bool:
        return not self._cache.valid

    # ------------------------- 比较 / 输出 ------------------------- #
    def compare_to(self, other: "MappingSolution") -> int:
        """
        按代价比较两个解：
        - 代价差在 MIN_DIFF 以内返回 0；
        - self 代价更低（更优）返回 1；
        - self 代价更高返回 -1。
        """
        diff = self.cost() - other.cost()
        if abs(diff) <= MIN_DIFF:
            return 0
        return -1 if diff > 0 else 1

    def is_better_than(self, other: "MappingSolution") -> bool:
        return self.compare_to(other) > 0

    def result(self) -> Mapping[Any, Any]:
        """只读视图；修改只能通过 bind / swap_two_random_entries。"""
        return MappingProxyType(self._mapping)

    def clone(self) -> "MappingSolution":
        """复制映射本身，并原样带上代价缓存（值与有效位）。"""
        twin = copy.copy(self)
        twin._mapping = dict(self._mapping)
        twin._cache = CachedCost(self._cache.value, self._cache.valid)
        return twin

    def is_empty(self) -> bool:
        return not self._mapping

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        cost = "stale" if self.is_cost_stale else f"{self._cache.value:g}"
        return f"{type(self).__name__}(entries={len(self._mapping)}, cost={cost})"

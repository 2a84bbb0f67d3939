from __future__ import annotations

"""
使用 Pydantic 定义场景文件（hosts / vms / 算法参数）的结构约束。

注意：
- 字段级约束（正数、(0,1) 区间等）由 Pydantic 完成；
- 跨字段约束（ID 唯一、cold < initial）与有限数检查（拒绝 inf / nan）在 validate_scenario 中补充，
  最终统一以 InvalidConfiguration 抛出，便于上层处理。
"""

import logging
import math
from collections import Counter
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from heuristics.errors import InvalidConfiguration


logger = logging.getLogger("vm_placement.schema")


class HostSpec(BaseModel):
    id: int
    pe_count: int = Field(gt=0)


class VmSpec(BaseModel):
    id: int
    pe_count: int = Field(default=1, gt=0)


class AnnealingParams(BaseModel):
    """模拟退火参数；为 None 的字段使用 SearchConfig 中的默认值。"""

    initial_temperature: Optional[float] = Field(default=None, gt=0)
    cold_temperature: Optional[float] = Field(default=None, gt=0)
    cooling_rate: Optional[float] = Field(default=None, gt=0, lt=1)


class GravityParams(BaseModel):
    max_iterations: Optional[int] = Field(default=None, ge=1)


class ScenarioConfig(BaseModel):
    """一次 VM -> Host 映射搜索的完整输入。"""

    name: Optional[str] = None
    algo: Literal["sa", "gravity"] = "sa"
    hosts: List[HostSpec] = Field(default_factory=list)
    vms: List[VmSpec] = Field(default_factory=list)
    annealing: AnnealingParams = Field(default_factory=AnnealingParams)
    gravity: GravityParams = Field(default_factory=GravityParams)
    neighborhood_searches: Optional[int] = Field(default=None, ge=1)
    seed: Optional[int] = None


def _check_unique_ids(kind: str, ids: List[int]) -> None:
    duplicated = sorted(i for i, n in Counter(ids).items() if n > 1)
    if duplicated:
        raise InvalidConfiguration(f"{kind} 的 id 必须唯一，重复的 id：{duplicated}")


def validate_scenario(config: Dict[str, Any]) -> ScenarioConfig:
    """
    使用 ScenarioConfig 对原始 dict 做格式 / 类型校验。

    返回解析后的 ScenarioConfig；不符合要求时抛出 InvalidConfiguration。
    """
    if not isinstance(config, dict):
        raise InvalidConfiguration(
            f"场景配置的顶层结构必须是映射(dict)，但实际为: {type(config)!r}"
        )

    try:
        scenario = ScenarioConfig(**config)
    except ValidationError as exc:
        logger.error("场景配置不符合要求：%s", exc)
        raise InvalidConfiguration(f"场景配置不符合要求，请根据错误提示修改：{exc}") from exc

    _check_unique_ids("hosts", [h.id for h in scenario.hosts])
    _check_unique_ids("vms", [v.id for v in scenario.vms])

    sa = scenario.annealing
    for field in ("initial_temperature", "cold_temperature", "cooling_rate"):
        value = getattr(sa, field)
        if value is not None and not math.isfinite(value):
            raise InvalidConfiguration(f"annealing.{field} 必须为有限数，但实际为 {value!r}。")

    if (
        sa.initial_temperature is not None
        and sa.cold_temperature is not None
        and sa.cold_temperature >= sa.initial_temperature
    ):
        raise InvalidConfiguration(
            "annealing.cold_temperature 必须小于 annealing.initial_temperature。"
        )

    return scenario

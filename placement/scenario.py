from __future__ import annotations

"""
场景文件的加载与搜索器的组装。

场景文件可以是 YAML 或 JSON（JSON 是 YAML 的子集，统一用 yaml.safe_load 解析），
例如：

    algo: sa
    seed: 42
    hosts:
      - {id: 0, pe_count: 8}
      - {id: 1, pe_count: 4}
    vms:
      - {id: 0, pe_count: 2}
      - {id: 1, pe_count: 4}
    annealing:
      initial_temperature: 100
      cold_temperature: 0.1
      cooling_rate: 0.9
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from heuristics.errors import InvalidConfiguration
from heuristics.history import SearchHistory
from heuristics.random_source import RandomSource, UniformDistribution
from heuristics.vm_host import (
    Host,
    Vm,
    VmToHostMappingGravity,
    VmToHostMappingHeuristic,
    VmToHostMappingSimulatedAnnealing,
)

from .config import SearchConfig, get_search_config
from .schema import ScenarioConfig, validate_scenario


logger = logging.getLogger("vm_placement.scenario")


def _load_yaml_text(text: str, source: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InvalidConfiguration(f"无法解析场景配置 {source}: {exc}") from exc

    if not isinstance(data, dict):
        raise InvalidConfiguration(
            f"场景配置 {source} 的顶层结构必须是映射(dict)，但实际为: {type(data)!r}"
        )
    return data


def parse_scenario(config: Union[str, Dict[str, Any]]) -> ScenarioConfig:
    """接受 YAML/JSON 文本或 dict，返回校验后的 ScenarioConfig。"""
    if isinstance(config, str):
        raw = _load_yaml_text(config, "<text>")
    elif isinstance(config, dict):
        raw = config
    else:
        raise TypeError(f"scenario 类型必须是 str 或 dict，但实际得到: {type(config)!r}")
    return validate_scenario(raw)


def load_scenario_file(path: Union[str, Path]) -> ScenarioConfig:
    path = Path(path)
    if not path.exists():
        logger.error("场景文件不存在：%s", path)
        raise FileNotFoundError(f"未找到场景文件: {path}")

    raw = _load_yaml_text(path.read_text(encoding="utf-8"), str(path))
    scenario = validate_scenario(raw)
    logger.info(
        "成功加载场景：path=%s, algo=%s, hosts=%d, vms=%d",
        path,
        scenario.algo,
        len(scenario.hosts),
        len(scenario.vms),
    )
    return scenario


def build_hosts(scenario: ScenarioConfig) -> List[Host]:
    return [Host(id=h.id, pe_count=h.pe_count) for h in scenario.hosts]


def build_vms(scenario: ScenarioConfig) -> List[Vm]:
    return [Vm(id=v.id, pe_count=v.pe_count) for v in scenario.vms]


def build_heuristic(
    scenario: ScenarioConfig,
    search_config: Optional[SearchConfig] = None,
    random_source: Optional[RandomSource] = None,
    history: Optional[SearchHistory] = None,
) -> VmToHostMappingHeuristic:
    """
    根据场景组装搜索器。

    参数优先级：场景文件 > SearchConfig（环境变量 / .env）。
    """
    cfg = search_config or get_search_config()
    seed = scenario.seed if scenario.seed is not None else cfg.seed
    source = random_source or UniformDistribution(seed)
    neighborhood_searches = scenario.neighborhood_searches or cfg.neighborhood_searches

    common: Dict[str, Any] = {
        "random_source": source,
        "vm_list": build_vms(scenario),
        "host_list": build_hosts(scenario),
        "neighborhood_searches": neighborhood_searches,
        "history": history,
    }

    if scenario.algo == "gravity":
        max_iterations = scenario.gravity.max_iterations or cfg.max_iterations
        return VmToHostMappingGravity(max_iterations, **common)

    sa = scenario.annealing
    return VmToHostMappingSimulatedAnnealing(
        initial_temperature=(
            sa.initial_temperature
            if sa.initial_temperature is not None
            else cfg.initial_temperature
        ),
        cold_temperature=(
            sa.cold_temperature if sa.cold_temperature is not None else cfg.cold_temperature
        ),
        cooling_rate=sa.cooling_rate if sa.cooling_rate is not None else cfg.cooling_rate,
        **common,
    )

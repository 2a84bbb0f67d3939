import json
from pathlib import Path

import pytest

from heuristics.errors import InvalidConfiguration
from heuristics.vm_host import Host, Vm, VmToHostMappingGravity, VmToHostMappingSimulatedAnnealing
from placement.config import SearchConfig
from placement.scenario import (
    build_heuristic,
    build_hosts,
    build_vms,
    load_scenario_file,
    parse_scenario,
)

SCENARIO_YAML = """
algo: gravity
seed: 3
hosts:
  - {id: 0, pe_count: 8}
  - {id: 1, pe_count: 4}
vms:
  - {id: 0, pe_count: 2}
  - {id: 1, pe_count: 4}
  - {id: 2, pe_count: 1}
gravity:
  max_iterations: 20
"""

SHIPPED_SCENARIO = Path(__file__).resolve().parents[1] / "data" / "scenarios" / "small.yaml"


def _config(**overrides):
    values = dict(
        initial_temperature=50.0,
        cold_temperature=1.0,
        cooling_rate=0.5,
        max_iterations=7,
        neighborhood_searches=1,
        seed=None,
        history_dir="",
        log_dir="",
    )
    values.update(overrides)
    return SearchConfig(**values)


def test_load_yaml_file(tmp_path):
    path = tmp_path / "scenario.yaml"
    path.write_text(SCENARIO_YAML, encoding="utf-8")

    scenario = load_scenario_file(path)
    assert scenario.algo == "gravity"
    assert build_hosts(scenario) == [Host(0, 8), Host(1, 4)]
    assert build_vms(scenario) == [Vm(0, 2), Vm(1, 4), Vm(2, 1)]


def test_load_json_file(tmp_path):
    path = tmp_path / "scenario.json"
    path.write_text(
        json.dumps({"hosts": [{"id": 1, "pe_count": 2}], "vms": [{"id": 5, "pe_count": 1}]}),
        encoding="utf-8",
    )

    scenario = load_scenario_file(path)
    assert scenario.algo == "sa"
    assert build_vms(scenario) == [Vm(5, 1)]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_scenario_file(tmp_path / "nope.yaml")


@pytest.mark.parametrize("text", ["hosts: [unclosed", "- just\n- a list\n", "42"])
def test_malformed_text_is_invalid(text):
    with pytest.raises(InvalidConfiguration):
        parse_scenario(text)


def test_parse_scenario_rejects_other_types():
    with pytest.raises(TypeError):
        parse_scenario(3.14)


def test_shipped_scenario_loads():
    scenario = load_scenario_file(SHIPPED_SCENARIO)
    assert scenario.hosts and scenario.vms


def test_build_gravity_heuristic():
    heuristic = build_heuristic(parse_scenario(SCENARIO_YAML), search_config=_config())

    assert isinstance(heuristic, VmToHostMappingGravity)
    assert heuristic.strategy.max_iterations == 20
    assert heuristic.random_source.seed == 3
    assert len(heuristic.vm_list) == 3


def test_build_annealing_heuristic_falls_back_to_config():
    scenario = parse_scenario(
        {
            "hosts": [{"id": 0, "pe_count": 4}],
            "vms": [{"id": 0}],
            "annealing": {"cooling_rate": 0.75},
        }
    )
    heuristic = build_heuristic(scenario, search_config=_config(seed=11, neighborhood_searches=2))

    assert isinstance(heuristic, VmToHostMappingSimulatedAnnealing)
    assert heuristic.strategy.current_temperature == 50.0
    assert heuristic.strategy.cold_temperature == 1.0
    assert heuristic.strategy.cooling_rate == 0.75
    assert heuristic.random_source.seed == 11
    assert heuristic.neighborhood_searches == 2


def test_gravity_falls_back_to_config_iterations():
    scenario = parse_scenario({"algo": "gravity", "hosts": [], "vms": []})
    heuristic = build_heuristic(scenario, search_config=_config())
    assert heuristic.strategy.max_iterations == 7


def test_inconsistent_merged_parameters_are_rejected():
    # 场景只给了 initial_temperature，与默认的 cold_temperature 组合后非法
    scenario = parse_scenario({"annealing": {"initial_temperature": 0.5}})
    with pytest.raises(InvalidConfiguration):
        build_heuristic(scenario, search_config=_config(cold_temperature=1.0))


def test_same_seed_gives_same_result():
    scenario = parse_scenario(SCENARIO_YAML)
    first = build_heuristic(scenario, search_config=_config()).solve()
    second = build_heuristic(scenario, search_config=_config()).solve()

    assert dict(first.result()) == dict(second.result())

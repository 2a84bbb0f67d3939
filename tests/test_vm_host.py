from collections import Counter

import pytest

from heuristics.base import SearchState
from heuristics.random_source import UniformDistribution
from heuristics.vm_host import (
    Host,
    Vm,
    VmToHostMappingGravity,
    VmToHostMappingHeuristic,
    VmToHostMappingSimulatedAnnealing,
    VmToHostMappingSolution,
)
from heuristics.gravity import Gravity

from conftest import ScriptedRandom


def test_host_cost_is_free_pes():
    host = Host(0, 8)
    solution = VmToHostMappingSolution()
    solution.bind_vm_to_host(Vm(0, 2), host)
    solution.bind_vm_to_host(Vm(1, 4), host)

    assert solution.resource_cost(host, [Vm(0, 2), Vm(1, 4)]) == 2
    assert solution.cost() == 2


def test_oversubscribed_host_lowers_the_cost():
    host = Host(0, 4)
    solution = VmToHostMappingSolution()
    solution.bind_vm_to_host(Vm(0, 4), host)
    solution.bind_vm_to_host(Vm(1, 2), host)

    assert solution.cost() == -2


def test_two_vms_on_two_hosts_fixture():
    h0, h1 = Host(0, 4), Host(1, 4)
    v0, v1 = Vm(0, 2), Vm(1, 2)

    spread = VmToHostMappingSolution()
    spread.bind_vm_to_host(v0, h0)
    spread.bind_vm_to_host(v1, h1)
    assert spread.cost() == (4 - 2) + (4 - 2)

    # 空闲 Host 不计入代价
    packed = VmToHostMappingSolution()
    packed.bind_vm_to_host(v0, h0)
    packed.bind_vm_to_host(v1, h0)
    assert packed.cost() == 0


def test_initial_solution_binds_every_vm(vms, hosts):
    heuristic = VmToHostMappingGravity(
        10, random_source=UniformDistribution(3), vm_list=vms, host_list=hosts
    )
    initial = heuristic.initial_solution()

    assert set(initial.result()) == set(vms)
    assert set(initial.result().values()) <= set(hosts)


def test_initial_solution_is_generated_once(vms, hosts):
    heuristic = VmToHostMappingGravity(
        10, random_source=UniformDistribution(3), vm_list=vms, host_list=hosts
    )
    assert heuristic.initial_solution() is heuristic.initial_solution()


def test_initial_solution_uses_uniform_host_draws():
    h0, h1 = Host(0, 4), Host(1, 4)
    heuristic = VmToHostMappingGravity(
        5,
        random_source=ScriptedRandom([0.0, 0.6, 0.99]),
        vm_list=[Vm(0, 1), Vm(1, 1), Vm(2, 1)],
        host_list=[h0, h1],
    )
    result = heuristic.initial_solution().result()

    assert [result[Vm(i, 1)] for i in range(3)] == [h0, h1, h1]


@pytest.mark.parametrize("vm_list, host_list", [([], [Host(0, 4)]), ([Vm(0, 1)], []), ([], [])])
def test_initial_solution_is_empty_until_lists_are_populated(vm_list, host_list):
    heuristic = VmToHostMappingGravity(3, vm_list=vm_list, host_list=host_list)
    assert heuristic.initial_solution().is_empty()

    heuristic.vm_list = [Vm(0, 1)]
    heuristic.host_list = [Host(0, 4)]
    assert len(heuristic.initial_solution()) == 1


def test_null_heuristic_runs_on_empty_lists():
    heuristic = VmToHostMappingHeuristic(Gravity(3))
    best = heuristic.solve()

    assert best.is_empty()
    assert best.cost() == 0
    assert heuristic.state is SearchState.TERMINATED


def test_neighbor_swaps_hosts_of_two_vms(vms, hosts):
    heuristic = VmToHostMappingGravity(
        10, random_source=UniformDistribution(8), vm_list=vms, host_list=hosts
    )
    source = heuristic.initial_solution()
    neighbor = heuristic.create_neighbor(source)

    changed = [vm for vm in vms if neighbor.result()[vm] != source.result()[vm]]
    assert len(changed) in (0, 2)
    assert Counter(neighbor.result().values()) == Counter(source.result().values())
    if changed:
        a, b = changed
        assert neighbor.result()[a] == source.result()[b]
        assert neighbor.result()[b] == source.result()[a]


def test_simulated_annealing_binding_exposes_temperature(vms, hosts):
    heuristic = VmToHostMappingSimulatedAnnealing(
        100.0, 0.5, 0.5, random_source=UniformDistribution(1), vm_list=vms, host_list=hosts
    )
    assert heuristic.current_temperature == 100.0
    heuristic.step()
    assert heuristic.current_temperature == 50.0


def test_gravity_binding_exposes_iteration(vms, hosts):
    heuristic = VmToHostMappingGravity(
        4, random_source=UniformDistribution(1), vm_list=vms, host_list=hosts
    )
    heuristic.solve()
    assert heuristic.current_iteration == 4


@pytest.mark.parametrize("seed", [1, 7, 2024])
def test_end_to_end_two_vms_two_hosts(seed):
    heuristic = VmToHostMappingSimulatedAnnealing(
        100.0,
        0.1,
        0.9,
        random_source=UniformDistribution(seed),
        vm_list=[Vm(0, 2), Vm(1, 2)],
        host_list=[Host(0, 4), Host(1, 4)],
    )
    heuristic.start()
    initial_cost = heuristic.initial_solution().cost()

    best_costs = []
    while heuristic.state is SearchState.SEARCHING:
        best_costs.append(heuristic.step().best_cost)

    assert heuristic.best_cost <= initial_cost
    assert all(later <= earlier for earlier, later in zip(best_costs, best_costs[1:]))
    assert set(heuristic.best_solution_so_far.result()) == {Vm(0, 2), Vm(1, 2)}


def test_end_to_end_result_is_read_only(vms, hosts):
    heuristic = VmToHostMappingSimulatedAnnealing(
        10.0, 0.1, 0.8, random_source=UniformDistribution(5), vm_list=vms, host_list=hosts
    )
    best = heuristic.solve()

    with pytest.raises(TypeError):
        best.result()[vms[0]] = hosts[0]

from __future__ import annotations

"""
对上层（CLI / 服务 / 脚本）友好的搜索接口。

所有函数都返回 {"success": bool, ...} 形式的 dict，不向外抛异常：
- create_search_session_safe：根据场景创建一个可单步推进的搜索会话；
- search_step_safe：推进一轮迭代；
- get_search_state_safe：查询会话当前状态；
- run_search_safe：一次性跑完整个搜索并返回最优映射；
- close_search_session_safe：释放会话。
"""

import logging
from typing import Any, Dict, Optional, Union

from heuristics.base import SearchState
from heuristics.history import SearchHistory
from heuristics.session import create_session, get_session, new_session_id, remove_session
from heuristics.solution import MappingSolution

from .config import SearchConfig, get_search_config
from .scenario import build_heuristic, parse_scenario


logger = logging.getLogger("vm_placement.tools")

ScenarioInput = Union[str, Dict[str, Any]]


def mapping_to_dict(solution: Optional[MappingSolution]) -> Dict[str, str]:
    """把解转换为 {"Vm0": "Host1", ...}，便于 JSON 输出。"""
    if solution is None:
        return {}
    return {str(task): str(resource) for task, resource in solution.result().items()}


def _missing_session(session_id: str) -> Dict[str, Any]:
    return {
        "success": False,
        "error": f"未找到 session_id={session_id} 对应的搜索会话。",
    }


def create_search_session_safe(
    scenario: ScenarioInput,
    history_dir: Optional[str] = None,
    search_config: Optional[SearchConfig] = None,
) -> Dict[str, Any]:
    try:
        cfg = search_config or get_search_config()
        parsed = parse_scenario(scenario)
        session_id = new_session_id()

        directory = history_dir if history_dir is not None else cfg.history_dir
        history = SearchHistory(directory, session_id) if directory else None

        heuristic = build_heuristic(parsed, search_config=cfg, history=history)
        sess = create_session(
            parsed.algo,
            heuristic,
            session_id=session_id,
            metadata={"name": parsed.name},
        )
        heuristic.start()

        logger.info(
            "搜索会话创建成功：session_id=%s, algo=%s, vms=%d, hosts=%d",
            sess.session_id,
            sess.algo,
            len(heuristic.vm_list),
            len(heuristic.host_list),
        )
        return {
            "success": True,
            "session_id": sess.session_id,
            "algo": sess.algo,
            "state": heuristic.snapshot(),
            "initial_mapping": mapping_to_dict(heuristic.current_solution),
        }
    except Exception as exc:  # noqa: BLE001
        logger.exception("搜索会话创建失败：%s", exc)
        return {
            "success": False,
            "error": f"搜索会话创建失败: {exc}",
        }


def get_search_state_safe(session_id: str) -> Dict[str, Any]:
    """安全查询搜索会话当前状态。"""
    sess = get_session(session_id)
    if sess is None:
        return _missing_session(session_id)

    heuristic = sess.heuristic
    return {
        "success": True,
        "session_id": sess.session_id,
        "algo": sess.algo,
        "state": heuristic.snapshot(),
        "best_mapping": mapping_to_dict(heuristic.best_solution_so_far),
    }


def search_step_safe(session_id: str) -> Dict[str, Any]:
    """推进一轮迭代；会话已结束时返回 success=False。"""
    sess = get_session(session_id)
    if sess is None:
        return _missing_session(session_id)

    heuristic = sess.heuristic
    if heuristic.state is SearchState.TERMINATED:
        return {
            "success": False,
            "session_id": session_id,
            "error": f"会话 {session_id} 的搜索已经结束。",
            "state": heuristic.snapshot(),
        }

    try:
        outcome = heuristic.step()
    except Exception as exc:  # noqa: BLE001
        logger.exception("搜索迭代失败：session_id=%s", session_id)
        return {
            "success": False,
            "session_id": session_id,
            "error": f"搜索迭代失败: {exc}",
        }

    return {
        "success": True,
        "session_id": session_id,
        **outcome.to_dict(),
        "state": heuristic.snapshot(),
    }


def run_search_safe(
    scenario: ScenarioInput,
    history_dir: Optional[str] = None,
    search_config: Optional[SearchConfig] = None,
) -> Dict[str, Any]:
    """跑完整个搜索，返回最优映射与代价；会话在结束后自动释放。"""
    created = create_search_session_safe(
        scenario, history_dir=history_dir, search_config=search_config
    )
    if not created["success"]:
        return created

    session_id = created["session_id"]
    sess = get_session(session_id)
    assert sess is not None
    heuristic = sess.heuristic

    try:
        best = heuristic.solve()
    except Exception as exc:  # noqa: BLE001
        logger.exception("搜索失败：session_id=%s", session_id)
        return {
            "success": False,
            "session_id": session_id,
            "error": f"搜索失败: {exc}",
        }
    finally:
        remove_session(session_id)

    return {
        "success": True,
        "session_id": session_id,
        "algo": sess.algo,
        "best_cost": best.cost(),
        "best_mapping": mapping_to_dict(best),
        "initial_mapping": created["initial_mapping"],
        "state": heuristic.snapshot(),
    }


def close_search_session_safe(session_id: str) -> Dict[str, Any]:
    if get_session(session_id) is None:
        return _missing_session(session_id)
    remove_session(session_id)
    return {"success": True, "session_id": session_id}

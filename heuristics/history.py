from __future__ import annotations

"""
搜索历史持久化：每轮迭代追加一行 CSV，搜索结束时写入最优结果 JSON。

写入失败只记录日志，不打断搜索主流程。
"""

import csv
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Union

if TYPE_CHECKING:
    from .base import Heuristic, StepOutcome


logger = logging.getLogger("vm_placement.heuristics.history")

HISTORY_HEADER = [
    "iter",
    "accepted",
    "reason",
    "current_cost_in",
    "candidate_cost",
    "current_cost_out",
    "best_cost",
    "strategy_state",
    "done",
]


class SearchHistory:
    """把一次搜索会话的迭代过程写入 `<directory>/<session_id>_history.csv`。"""

    def __init__(self, directory: Union[str, Path], session_id: str) -> None:
        self.directory = Path(directory)
        self.session_id = session_id

    @property
    def history_path(self) -> Path:
        return self.directory / f"{self.session_id}_history.csv"

    @property
    def best_path(self) -> Path:
        return self.directory / f"{self.session_id}_best.json"

    def _ensure_dir(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def record_step(self, heuristic: "Heuristic", outcome: "StepOutcome") -> None:
        try:
            self._ensure_dir()
            path = self.history_path
            write_header = not path.exists() or path.stat().st_size == 0
            with path.open("a", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                if write_header:
                    writer.writerow(HISTORY_HEADER)
                writer.writerow(
                    [
                        outcome.iteration,
                        int(outcome.accepted),
                        outcome.reason,
                        float(outcome.current_cost_in),
                        float(outcome.candidate_cost),
                        float(outcome.current_cost),
                        float(outcome.best_cost),
                        json.dumps(heuristic.strategy.state(), ensure_ascii=False),
                        int(outcome.done),
                    ]
                )
        except OSError:
            logger.exception("写入搜索迭代历史 CSV 时出错（已忽略）。")

    def record_best(self, heuristic: "Heuristic") -> None:
        try:
            self._ensure_dir()
            best = heuristic.best_solution_so_far
            payload: Dict[str, Any] = {
                "session_id": self.session_id,
                **heuristic.snapshot(),
                "best_mapping": (
                    {str(task): str(resource) for task, resource in best.result().items()}
                    if best is not None
                    else {}
                ),
            }
            self.best_path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            logger.info("已写入搜索最优结果：%s", self.best_path)
        except OSError:
            logger.exception("写入搜索最优结果 JSON 时出错（已忽略）。")

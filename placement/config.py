import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# 加载 .env 文件中的环境变量
load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


def _env_seed() -> Optional[int]:
    raw = os.getenv("VMPLACE_SEED", "").strip()
    return int(raw) if raw else None


@dataclass
class SearchConfig:
    """搜索参数的默认值。

    说明：
    - 所有字段都可以通过 VMPLACE_* 环境变量或项目根目录的 .env 覆盖；
    - 场景文件中显式给出的参数优先于这里的默认值。
    """

    initial_temperature: float = field(
        default_factory=lambda: _env_float("VMPLACE_INITIAL_TEMPERATURE", 100.0)
    )
    cold_temperature: float = field(
        default_factory=lambda: _env_float("VMPLACE_COLD_TEMPERATURE", 0.1)
    )
    cooling_rate: float = field(default_factory=lambda: _env_float("VMPLACE_COOLING_RATE", 0.9))
    max_iterations: int = field(default_factory=lambda: _env_int("VMPLACE_MAX_ITERATIONS", 1000))
    neighborhood_searches: int = field(
        default_factory=lambda: _env_int("VMPLACE_NEIGHBORHOOD_SEARCHES", 1)
    )
    seed: Optional[int] = field(default_factory=_env_seed)

    # 历史记录与日志目录；history_dir 为空表示不落盘
    history_dir: str = field(default_factory=lambda: os.getenv("VMPLACE_HISTORY_DIR", ""))
    log_dir: str = field(
        default_factory=lambda: os.getenv("VMPLACE_LOG_DIR") or str(PROJECT_ROOT / "logs")
    )


def get_search_config() -> SearchConfig:
    return SearchConfig()

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from heuristics.errors import InvalidConfiguration

from .config import get_search_config
from .scenario import load_scenario_file
from .tools import run_search_safe


logger = logging.getLogger("vm_placement.cli")

# 只保留最近若干次运行的日志文件
MAX_LOG_FILES = 10


def setup_logging(log_dir: Path, level: int = logging.INFO) -> Path:
    """为每次运行生成带时间戳的日志文件，并清理旧日志。"""
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"vmplace_{timestamp}.log"

    old_logs = sorted(log_dir.glob("vmplace_*.log"), key=lambda p: p.stat().st_mtime, reverse=True)
    for old_log in old_logs[MAX_LOG_FILES - 1 :]:
        try:
            old_log.unlink()
        except OSError:
            logger.warning("删除旧日志失败：%s", old_log)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.FileHandler(log_file, encoding="utf-8", mode="w")],
        force=True,
    )
    return log_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vmplace",
        description="用模拟退火 / 爬山启发式搜索 VM -> Host 映射。",
    )
    parser.add_argument("scenario", type=Path, help="场景文件（YAML 或 JSON）")
    parser.add_argument("--algo", choices=["sa", "gravity"], help="覆盖场景文件中的算法")
    parser.add_argument("--seed", type=int, help="覆盖场景文件中的随机种子")
    parser.add_argument("--history-dir", help="迭代历史 CSV / 最优结果 JSON 的输出目录")
    parser.add_argument("--log-dir", type=Path, help="日志目录")
    parser.add_argument("--json", action="store_true", help="以 JSON 输出结果")
    parser.add_argument("-v", "--verbose", action="store_true", help="记录每轮迭代（DEBUG）")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = get_search_config()
    except ValueError as exc:
        # 日志尚未初始化，只能直接输出到 stderr
        print(f"[错误] 环境变量配置不合法：{exc}", file=sys.stderr)
        return 2

    log_dir = args.log_dir or Path(cfg.log_dir)
    log_file = setup_logging(log_dir, logging.DEBUG if args.verbose else logging.INFO)
    logger.info("=== 新运行启动，日志文件：%s ===", log_file.name)

    try:
        scenario = load_scenario_file(args.scenario)
    except (FileNotFoundError, InvalidConfiguration) as exc:
        logger.error("加载场景失败：%s", exc)
        print(f"[错误] {exc}", file=sys.stderr)
        return 2

    raw = scenario.model_dump() if hasattr(scenario, "model_dump") else scenario.dict()
    if args.algo:
        raw["algo"] = args.algo
    if args.seed is not None:
        raw["seed"] = args.seed

    result = run_search_safe(raw, history_dir=args.history_dir, search_config=cfg)
    if not result["success"]:
        print(f"[错误] {result['error']}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result, ensure_ascii=False, indent=2))
        return 0

    state = result["state"]
    print(f"算法          : {result['algo']}")
    print(f"迭代次数      : {state['search_steps']}")
    print(f"耗时          : {state['solve_time']:.4f} 秒")
    print(f"最优代价      : {result['best_cost']:g}")
    print("最优映射      :")
    for vm, host in result["best_mapping"].items():
        print(f"  {vm} -> {host}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

class HeuristicError(Exception):
    """启发式搜索相关错误的基类。"""

    pass


class InvalidConfiguration(HeuristicError, ValueError):
    """策略参数或场景文件不合法（例如 cooling_rate >= 1）。"""

    pass

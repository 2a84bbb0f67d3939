"""
VM -> Host 映射搜索的应用层：配置、场景文件、会话接口与命令行入口。

当前项目中，主要暴露：
- `run_search_safe`：根据场景一次性完成搜索；
- `create_search_session_safe` / `search_step_safe` / `get_search_state_safe`：单步推进的会话接口。
"""

from .tools import (
    close_search_session_safe,
    create_search_session_safe,
    get_search_state_safe,
    run_search_safe,
    search_step_safe,
)

__all__ = [
    "close_search_session_safe",
    "create_search_session_safe",
    "get_search_state_safe",
    "run_search_safe",
    "search_step_safe",
]

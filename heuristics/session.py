from __future__ import annotations

"""
搜索会话注册表：让上层可以“创建 -> 单步推进 -> 查询”一个搜索过程。

每个会话只持有一个 Heuristic 实例，不同会话之间互不共享状态。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import uuid

from .base import Heuristic


@dataclass
class SearchSession:
    session_id: str
    algo: str
    heuristic: Heuristic
    metadata: Dict[str, Any] = field(default_factory=dict)


_SESSIONS: Dict[str, SearchSession] = {}


def new_session_id() -> str:
    """生成简短的会话 ID。"""
    return uuid.uuid4().hex[:8]


def register_session(session: SearchSession) -> SearchSession:
    _SESSIONS[session.session_id] = session
    return session


def create_session(
    algo: str,
    heuristic: Heuristic,
    session_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> SearchSession:
    sess = SearchSession(
        session_id=session_id or new_session_id(),
        algo=algo,
        heuristic=heuristic,
        metadata=dict(metadata or {}),
    )
    return register_session(sess)


def get_session(session_id: str) -> Optional[SearchSession]:
    """根据 session_id 获取会话，如果不存在则返回 None。"""
    return _SESSIONS.get(session_id)


def remove_session(session_id: str) -> None:
    _SESSIONS.pop(session_id, None)

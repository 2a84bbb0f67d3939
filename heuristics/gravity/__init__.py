from __future__ import annotations

"""爬山（Hill Climbing / Gravity）策略：只接受严格更优的邻域解。"""

from .core import Gravity

__all__ = ["Gravity"]

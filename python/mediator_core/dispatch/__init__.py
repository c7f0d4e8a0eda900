"""Plan building, caching and chain execution.

Resolution Contract:
1. build_plan() selects the strategy and the wrappers hooking an operation
2. ResolutionCache memoizes the plan and an entry point per operation
3. ChainExecutor runs before hooks, the strategy, then after hooks reversed
"""

from __future__ import annotations

from .cache import ResolutionCache
from .executor import ChainExecutor, execute_chain
from .plan import DispatchPlan, build_plan

__all__ = [
    "DispatchPlan",
    "build_plan",
    "ChainExecutor",
    "execute_chain",
    "ResolutionCache",
]

# src/dispatch/__init__.py
"""
Диспетчер: приём заявок, решение оператора, поток обновлений расстояния.
"""

from src.dispatch.decisions import ConsoleDecisionProvider, DecisionProvider, StaticDecisionProvider
from src.dispatch.server import DispatchServer, DispatchStats
from src.dispatch.session import DispatchConfig, DispatchOutcome, DispatchSession

__all__ = [
    "ConsoleDecisionProvider",
    "DecisionProvider",
    "StaticDecisionProvider",
    "DispatchServer",
    "DispatchStats",
    "DispatchConfig",
    "DispatchOutcome",
    "DispatchSession",
]

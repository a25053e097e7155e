"""AI system components.

This package contains the decision engine for autonomous fighters:
- ai_behaviors.py: Strategy interface, range-tier decision engine and factory
"""

from .ai_behaviors import (
    AIBehavior,
    AIDecision,
    AIType,
    InactiveAI,
    RangeTierAI,
    create_ai_behavior,
)

__all__ = [
    "AIBehavior",
    "AIDecision",
    "AIType",
    "InactiveAI",
    "RangeTierAI",
    "create_ai_behavior",
]

"""
Flows Module
============

Contract-enforced inference flows and the per-feature session machine.

Components:
    - FlowInvoker: Validate → call engine → enforce contract → gate relevance
    - AnalysisSession: Capture-and-invoke state machine for one feature
    - suggest_mood_boosters: Text-only suggestion flow
"""

from wellcam.flows.boosters import order_by_preference, suggest_mood_boosters
from wellcam.flows.invoker import FlowInvoker
from wellcam.flows.session import AnalysisSession

__all__ = [
    "FlowInvoker",
    "AnalysisSession",
    "suggest_mood_boosters",
    "order_by_preference",
]

"""Replay & position engine, display preferences, and the stateful session."""

from chart_trainer.replay.engine import EngineState, initial_state, reduce
from chart_trainer.replay.preferences import DisplayPreferences, default_preferences
from chart_trainer.replay.session import ReplaySession, DerivedSeries

__all__ = [
    "EngineState",
    "initial_state",
    "reduce",
    "DisplayPreferences",
    "default_preferences",
    "ReplaySession",
    "DerivedSeries",
]

from .base import ModuleController, Notice, Phase, RoundSession, Streaks

__all__ = ["ModuleController", "Notice", "Phase", "RoundSession", "Streaks"]

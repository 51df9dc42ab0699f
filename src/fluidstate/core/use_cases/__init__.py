from fluidstate.core.use_cases.replay import ReplayHead, ReplayResult, ReplayStats, replay_logs

__all__ = ["ReplayHead", "ReplayResult", "ReplayStats", "replay_logs"]

from millionaire.workers.tasks.game_timeouts import run_game_timeouts

__all__ = [
    "run_game_timeouts",
]

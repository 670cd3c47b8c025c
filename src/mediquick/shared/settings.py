"""Runtime knobs read from the environment."""

import os

DEFAULT_CHECKUP_REWARD_COINS = 50
DEFAULT_HISTORY_WINDOW_DAYS = 30


def checkup_reward_coins() -> int:
    """Coins credited to the salesperson for each completed checkup."""
    return int(os.environ.get("CHECKUP_REWARD_COINS", DEFAULT_CHECKUP_REWARD_COINS))


def history_window_days() -> int:
    return int(os.environ.get("HISTORY_WINDOW_DAYS", DEFAULT_HISTORY_WINDOW_DAYS))

"""Example: use the service layer directly (no Flask).

Prints this week's timecards for the active roster.
"""

import importlib

from config import get_settings_module

from src.driver_ops.driver_ops.common.datetime_utils import format_duration, now_local, week_window
from src.driver_ops.driver_ops.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    now = now_local()
    week_start, week_end = week_window(now.date(), starts_on=container.week_starts_on)
    for card in container.timecard_aggregator.summarize(None, week_start, week_end, now):
        print(f"{card.full_name}: {format_duration(card.total_seconds)}")


if __name__ == "__main__":
    main()

"""Fetch the current board stats once using the built-in DI container."""

from bounty_widget.core.config import WidgetConfig
from bounty_widget.core.container import DIContainer


def main() -> None:
    aggregator = DIContainer.create_aggregator(WidgetConfig.from_env())
    try:
        result = aggregator.get_stats_result()
    finally:
        aggregator.close()

    snapshot = result.snapshot
    print("Source:", result.source.value)
    print("Completed today/week/month:", snapshot.completed_today, snapshot.completed_week, snapshot.completed_month)
    print("Total USDC paid:", snapshot.total_usdc_paid)
    print("Success rate:", f"{snapshot.success_rate}%")


if __name__ == "__main__":
    main()

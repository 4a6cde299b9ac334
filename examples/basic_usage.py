"""Basic tracking example using the built-in DI container."""

from datetime import datetime, timedelta, timezone

from egg_tracker.core.config import TrackerConfig
from egg_tracker.core.container import DIContainer
from egg_tracker.domain.models import CreateChickenInput, CreateEggRecordInput


def main() -> None:
    tracker = DIContainer.create_tracker(config=TrackerConfig(db_path="demo.db"))

    henrietta = tracker.create_chicken(
        CreateChickenInput(name="Henrietta", breed="Rhode Island Red")
    )
    clucky = tracker.create_chicken(CreateChickenInput(name="Clucky", breed="Leghorn"))

    today = datetime.now(timezone.utc).date()
    for offset, chicken, quantity in [
        (0, henrietta, 2),
        (0, clucky, 1),
        (1, henrietta, 1),
    ]:
        tracker.create_egg_record(
            CreateEggRecordInput(
                chicken_id=chicken.id,
                date=today - timedelta(days=offset),
                quantity=quantity,
            )
        )

    print("Today:", tracker.get_daily_summary(today))
    for summary in tracker.get_recent_daily_summaries(7):
        print(summary.date, summary.total_eggs, summary.chickens_laid)


if __name__ == "__main__":
    main()

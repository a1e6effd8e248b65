"""Example: use the service layer directly (no Flask).

Controllers stay thin; the daily report workflow lives in the services.
"""

import importlib
from datetime import date, timedelta

from config import get_settings_module

from src.daily_report_system.daily_report_system.container import build_container
from src.daily_report_system.daily_report_system.core.ids import UserId


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    today = date.today()
    result = container.report_service.get_summary(
        requester_id=UserId("demo-manager"),
        target_user_id=UserId("demo-employee"),
        date_from=today - timedelta(days=30),
        date_to=today,
    )
    if result.is_ok():
        print(result.value.to_dict())
    else:
        print(result.error.to_dict())


if __name__ == "__main__":
    main()

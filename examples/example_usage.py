"""Example: use the service layer directly (no Flask).

Controllers stay thin; the recap below is the same call the /api/recap
endpoint makes.
"""

import importlib

from config import get_settings_module

from src.event_attendance.event_attendance.container import build_container
from src.event_attendance.event_attendance.recap.model import RecapFilter


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    report = container.recap_service.build_recap(
        tenant_id=settings.DEFAULT_TENANT_ID,
        recap_filter=RecapFilter(year=2026),
    )
    for row in report.results[:10]:
        print(f"{row.full_name:<30} {row.percentage:5.1f}%  {row.tier.value}")
    print(report.counts)


if __name__ == "__main__":
    main()

"""Example: drive the services directly, without Flask.

Controllers stay thin; the rules live in the services.
"""

import importlib
from datetime import datetime

from config import get_settings_module

from src.pointage_rh.pointage_rh.attendance.calculator import compute_attendance
from src.pointage_rh.pointage_rh.container import build_container


def main():
    # The calculator alone needs no database
    print(compute_attendance("08:45", "18:30"))

    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, time_window=getattr(settings, "TIME_WINDOW", None))
    result = container.attendance_service.scan("EMPLOYEE:EMP001", now=datetime.now())
    print(result.to_dict())

    stats = container.daily_report_service.stats_for(datetime.now().date())
    print(stats.to_dict())


if __name__ == "__main__":
    main()

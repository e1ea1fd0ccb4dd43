"""Using the service layer directly, without Flask.

Controllers stay thin; this script drives the same services they call.
"""

from config import load_settings

from generus_attendance.container import build_container


def main():
    settings = load_settings()
    container = build_container(db_config=settings.DB_CONFIG, barcode_prefix=settings.BARCODE_PREFIX)
    stats = container.statistics_service

    print(stats.dashboard_stats())
    for row in stats.monthly_attendance():
        print(f"{row.label}: generus {row.generus_attendance}% teachers {row.teacher_attendance}%")

    member = container.member_service.find_by_barcode("GEN-DEMO-1")
    if member:
        print(stats.member_stats(member.member_id))

    for activity in stats.recent_activities(limit=5):
        print(activity.occurred_at, activity.description)


if __name__ == "__main__":
    main()

# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "DAILYPLAN_APP_NAME": "App display name (default: DailyPlan).",
    "DAILYPLAN_LOG_LEVEL": "Console logging level (default: INFO).",
    # Connectors
    "DAILYPLAN_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Notifications
    "DAILYPLAN_NOTIFICATIONS_ENABLED": "Grant notification permission (true/false, default: true).",
    "DAILYPLAN_DISPATCH_INTERVAL_SECONDS": "How often due notifications are checked (default: 15).",
    # Paths (gitignored)
    "DAILYPLAN_DATA_DIR": "Local data directory (default: .local/daily_plan).",
    "DAILYPLAN_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    "DAILYPLAN_NOTIFICATIONS_DB_PATH": (
        "Pending notifications SQLite path (default: <data_dir>/notifications.sqlite3)."
    ),
}

"""
Notification subsystem.

Components:
- notification_models.py: requests, calendar triggers, presentation options
- coordinator.py: one pending notification per task id, kept in line with task mutations
- local_center.py: SQLite-backed local notification center (pending requests until due)
- dispatcher.py: polling loop that delivers due requests to a sink
"""

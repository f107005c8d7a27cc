"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskDraft form state)
- task_store.py: SQLite-backed storage + query helpers
- task_views.py: category-grouped views derived from query results
- task_controller.py: user intents (create/edit/archive/restore/delete) as ordered store + notification calls
- errors.py: ValidationError / PersistenceError / NotificationSchedulingError
"""

"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskDraft, TaskStatus, Priority) + validation
- task_store.py: JSON snapshot codec + file-backed state slot
"""

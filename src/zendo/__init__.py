"""
ZenDo planner core.

Components:
- planner/models.py: data structures (Task, ProjectList, TimeBlock, destinations)
- planner/views.py: week grid, morning/evening split, month calendar, past-due checks
- planner/scheduling.py: field changes for moving a task between buckets
- planner/controller.py: in-memory state with optimistic, fire-and-forget persistence
- storage/: Supabase stores and the local SQLite/JSON fallback
"""

__version__ = "0.1.0"

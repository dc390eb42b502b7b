"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Category, Priority) + record validation
- task_api.py: task creation and id generation
- task_filter.py / task_sort.py: the derived-view pipeline
- task_merge.py: id-keyed merge of imported batches
- task_io.py: JSON import/export files
- task_store.py: SQLite-backed blob store
- task_controller.py: owns the canonical task list
"""

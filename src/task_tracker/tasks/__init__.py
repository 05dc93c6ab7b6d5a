"""
Task subsystem.

Components:
- task_models.py: the Task record
- id_allocator.py: global id sequence with reuse of freed ids
- task_store.py: in-memory and JSON-file backends behind one contract
- errors.py: TaskNotFoundError / TaskPersistenceError
"""

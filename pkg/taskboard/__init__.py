# Task board: three-column task tracking mirrored from a live document store
#
# Components:
#   schema.py  - Data model (Task, TaskStatus, priorities)
#   store.py   - SQLite document store with live snapshot subscriptions
#   events.py  - Snapshot listener registry
#   form.py    - Task creation form (required-field gate)
#   board.py   - Task list controller (subscription lifecycle, CRUD calls)
#   render.py  - Column/row view models and priority badge colors
#   config.py  - YAML configuration

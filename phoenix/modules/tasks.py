"""
phoenix/modules/tasks.py

Future module for tasks within a project (see phoenix.models.Task):
assignee, due date, status board (To Do / In Progress / In Review / Done)
and ordered sub-task checklists.

Every /api/tasks route answers 501 behind the token guard.
"""

from phoenix.modules.stubs import stub_router

router = stub_router("/api/tasks", "Tasks")

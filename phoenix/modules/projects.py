"""
phoenix/modules/projects.py

Future module for project management.

Planned operations (see phoenix.models.Project):
- Create/list/update/delete projects with an owner and member set
- Status lifecycle: Not Started -> In Progress -> Completed / On Hold

Until then every /api/projects route answers 501 behind the token guard.
"""

from phoenix.modules.stubs import stub_router

router = stub_router("/api/projects", "Projects")

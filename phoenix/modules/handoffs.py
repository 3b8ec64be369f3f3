"""
phoenix/modules/handoffs.py

Future module for shift handoffs (see phoenix.models.Handoff): a summary passed
from one user to another, linked to the assets and tasks it concerns.

Every /api/handoffs route answers 501 behind the token guard.
"""

from phoenix.modules.stubs import stub_router

router = stub_router("/api/handoffs", "Handoffs")

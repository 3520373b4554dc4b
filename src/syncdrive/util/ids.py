from __future__ import annotations

import uuid


def new_uuid() -> str:
    """Generate a UUID4 string."""
    return str(uuid.uuid4())


def new_task_id() -> str:
    """Generate a new SyncTask identifier."""
    return new_uuid()

"""Random identifiers for processes and tasks."""

import uuid


def generate_guid():
    """Return a new random version-4 UUID in canonical string form."""
    return str(uuid.uuid4())
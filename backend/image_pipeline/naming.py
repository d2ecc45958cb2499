"""Random file base names shared by an original image and its derivative."""

import uuid


def new_base_name() -> str:
    """Return a 128-bit random identifier as 32 hex characters."""
    return uuid.uuid4().hex

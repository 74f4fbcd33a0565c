from typing import Optional

from catalog_api.outcomes import Conflict


def guard(
    resource: str,
    record_id: str,
    current_version: int,
    expected_version: Optional[int],
) -> Optional[Conflict]:
    """
    Compare the caller's expected version against the stored one.

    Returns None when the write may proceed. A caller that does not send a
    version gets last-write-wins.
    """
    if expected_version is None or expected_version == current_version:
        return None
    return Conflict(
        resource=resource,
        id=record_id,
        expected_version=expected_version,
        current_version=current_version,
    )

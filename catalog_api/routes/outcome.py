from typing import Optional

from fastapi import HTTPException, status

from catalog_api.outcomes import Conflict, Invalid, NotFound, Present


def unwrap(outcome):
    """Return the value of a Present outcome, or raise the matching HTTP error."""
    if isinstance(outcome, Present):
        return outcome.value
    if isinstance(outcome, NotFound):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{outcome.resource.capitalize()} with ID '{outcome.id}' not found",
        )
    if isinstance(outcome, Invalid):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=outcome.errors)
    if isinstance(outcome, Conflict):
        raise HTTPException(
            status_code=status.HTTP_412_PRECONDITION_FAILED,
            detail=(
                f"{outcome.resource.capitalize()} with ID '{outcome.id}' has been modified "
                f"since last retrieved (version {outcome.current_version}, "
                f"expected {outcome.expected_version})."
            ),
        )
    raise TypeError(f"Unexpected outcome {outcome!r}")


def parse_if_match(if_match: Optional[str]) -> Optional[int]:
    """
    Read an expected version from an If-Match header.

    Accepts 3, "3" and W/"3".
    """
    if if_match is None:
        return None
    value = if_match.strip()
    if value.startswith("W/"):
        value = value[2:]
    value = value.strip('"')
    try:
        return int(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"If-Match must carry a record version, got '{if_match}'",
        )


def etag(version: int) -> str:
    return f'"{version}"'

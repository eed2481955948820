# application/models.py

from dataclasses import dataclass


@dataclass(frozen=True)
class ApplicationInfo:
    """
    Allocation metadata for one client address.
    """

    client_address: str
    organization_name: str
    verifier: str
    # audit trail link of the original application, when known
    url: str | None = None
    issue_reference: str | None = None
    number_of_allocations: int = 0

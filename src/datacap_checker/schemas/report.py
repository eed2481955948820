# schemas/report.py

from pydantic import BaseModel, ConfigDict


class FindingOutput(BaseModel):
    """
    A single evaluated finding, flattened for serialisation.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    kind: str
    severity: str
    category: str
    subject: str | None
    value: float


class CheckReport(BaseModel):
    """
    Machine-readable envelope for one completed checker run.

    ``full`` and ``report_url`` are None when the run ended on a terminal
    error, in which case ``summary`` holds the error document.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    client_address: str | None
    generated_at: str
    summary: str
    full: str | None
    report_url: str | None
    early_allocation: bool
    findings: tuple[FindingOutput, ...]

    @property
    def succeeded(self) -> bool:
        return self.full is not None


class GeneratedReportRecord(BaseModel):
    """
    Pointer to a published full report for a client.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    id: int
    client_address_id: str
    file_path: str
    created_at: str


class AllocatorGeneratedReportRecord(BaseModel):
    """
    Pointer to a published report keyed by allocator-scoped identity.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    id: int
    address: str
    address_id: str
    name: str
    url: str
    created_at: str

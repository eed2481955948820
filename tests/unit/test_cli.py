# unit/test_cli.py

import pytest

from datacap_checker import cli
from datacap_checker.domain import ResolutionNotFound
from datacap_checker.schemas import CheckReport, GeneratedReportRecord

pytestmark = pytest.mark.unit


def _record(file_path: str) -> GeneratedReportRecord:
    return GeneratedReportRecord(
        id=1,
        client_address_id="f1client",
        file_path=file_path,
        created_at="2024-05-01 12:00:00",
    )


def test_reports_lists_records(monkeypatch, capsys) -> None:
    """
    ARRANGE: two stored report pointers
    ACT:     run the reports command
    ASSERT:  one line per pointer
    """

    async def fake_all(address: str):
        return [_record("https://view/new.md"), _record("https://view/old.md")]

    monkeypatch.setattr(cli, "get_all_client_generated_reports", fake_all)
    monkeypatch.setattr("sys.argv", ["datacap-checker", "reports", "f1client"])

    cli.main()

    lines = capsys.readouterr().out.splitlines()
    assert [line.split()[-1] for line in lines] == [
        "https://view/new.md",
        "https://view/old.md",
    ]


def test_reports_unknown_client_exits(monkeypatch) -> None:
    """
    ARRANGE: resolver without a record for the client
    ACT:     run the reports command with --latest
    ASSERT:  exits with the resolution message
    """

    async def fake_latest(address: str):
        raise ResolutionNotFound("No application info found")

    monkeypatch.setattr(cli, "get_latest_client_generated_report", fake_latest)
    monkeypatch.setattr(
        "sys.argv",
        ["datacap-checker", "reports", "f1client", "--latest"],
    )

    with pytest.raises(SystemExit) as exc_info:
        cli.main()

    assert exc_info.value.code == "No application info found"


def test_failed_check_exits_non_zero(monkeypatch, capsys) -> None:
    """
    ARRANGE: checker returning an error report
    ACT:     run the check command
    ASSERT:  error document printed and exit status 1
    """

    class _Checker:
        def __init__(self, **_: object) -> None:
            pass

        async def check(self, address, **_: object) -> CheckReport:
            return CheckReport(
                client_address=address,
                generated_at="2024-05-01T12:00:00+00:00",
                summary="No active deals found for this client.",
                full=None,
                report_url=None,
                early_allocation=False,
                findings=(),
            )

    monkeypatch.setattr(cli, "ClientChecker", _Checker)
    monkeypatch.setattr("sys.argv", ["datacap-checker", "check", "f1client"])

    with pytest.raises(SystemExit) as exc_info:
        cli.main()

    assert exc_info.value.code == 1
    assert "No active deals" in capsys.readouterr().out

# datacap_checker/cli.py

import argparse
import asyncio
import logging

from .adapters.github import GithubArtifactStore, GithubConfig, GithubTickets
from .domain import (
    ClientChecker,
    ResolutionNotFound,
    get_all_client_generated_reports,
    get_latest_client_generated_report,
)

logger = logging.getLogger(__name__)


def cmd_check(
    address: str,
    other_addresses: list[str],
    repository: str | None,
    issue_number: int | None,
    as_json: bool,
) -> None:
    collaborators = {}
    if repository:
        owner, _, repo = repository.partition("/")
        config = GithubConfig(owner=owner, repo=repo)
        collaborators["tickets"] = GithubTickets(config)
        if config.token:
            collaborators["store"] = GithubArtifactStore(config)

    checker = ClientChecker(**collaborators)
    report = asyncio.run(
        checker.check(
            address,
            other_addresses=other_addresses,
            issue_number=issue_number,
            repository=repository,
        ),
    )

    if as_json:
        print(report.model_dump_json(indent=2))
    else:
        print(report.summary)
    if not report.succeeded:
        raise SystemExit(1)


def cmd_reports(address: str, latest: bool) -> None:
    try:
        if latest:
            record = asyncio.run(get_latest_client_generated_report(address))
            records = [record] if record is not None else []
        else:
            records = asyncio.run(get_all_client_generated_reports(address))
    except ResolutionNotFound as error:
        raise SystemExit(str(error)) from error

    if not records:
        print(f"No reports recorded for {address}")
        return
    for record in records:
        print(f"{record.created_at}  {record.file_path}")


def main() -> None:
    parser = argparse.ArgumentParser(prog="datacap-checker")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    check_parser = sub.add_parser("check")
    check_parser.add_argument("address")
    check_parser.add_argument("--other", action="append", default=[])
    check_parser.add_argument("--repo", help="owner/repo of the application issue")
    check_parser.add_argument("--issue", type=int)
    check_parser.add_argument("--json", action="store_true")

    reports_parser = sub.add_parser("reports")
    reports_parser.add_argument("address")
    reports_parser.add_argument("--latest", action="store_true")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)-8s %(message)s",
    )

    if args.command == "check":
        cmd_check(args.address, args.other, args.repo, args.issue, args.json)
    elif args.command == "reports":
        cmd_reports(args.address, args.latest)
    else:
        raise SystemExit(2)


if __name__ == "__main__":
    main()

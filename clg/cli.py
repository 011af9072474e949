"""Command line interface for clg."""

import argparse
import asyncio
import logging
import sys

from clg.client import GitLabClient
from clg.config import Config, load_config
from clg.errors import GitLabError
from clg.utils.resolvers import apply_filters, parse_filters
from clg.workflow import push_and_create_merge_request

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clg", description="A GitLab command line utility")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="list projects or merge requests")
    list_parser.add_argument("-p", "--projects", action="store_true", help="list projects")
    list_parser.add_argument("-m", "--mr", dest="merge_requests", action="store_true", help="list merge requests")
    list_parser.add_argument(
        "-f",
        "--filters",
        action="append",
        default=[],
        help="key=value filters, comma separated or repeated (e.g. name=api,author.username=alice)",
    )

    mr_parser = subparsers.add_parser(
        "push-and-mr", help="push the current branch and create a merge request for it"
    )
    mr_parser.add_argument("-t", "--title", required=True, help="the title of the MR")
    mr_parser.add_argument("-d", "--description", default="", help="the description of the MR")
    mr_parser.add_argument("--target", default="main", help="the branch to merge into (default: main)")
    mr_parser.add_argument("--repo", default=None, help="path of the git repository (default: current directory)")
    return parser


async def run_list(config: Config, args: argparse.Namespace) -> int:
    raw_filters = [part for value in args.filters for part in value.split(",") if part]
    filters = parse_filters(raw_filters)
    client = GitLabClient(config)

    if args.projects:
        for project in apply_filters(await client.list_projects(), filters):
            print(f"{project.id}\t{project.name}\t{project.ssh_url_to_repo}")
        return 0
    if args.merge_requests:
        for mr in apply_filters(await client.list_merge_requests(), filters):
            print(f"!{mr.id}\t{mr.title}\t@{mr.author.username}")
        return 0

    print("You have to specify what to list", file=sys.stderr)
    return 2


async def run_push_and_mr(config: Config, args: argparse.Namespace) -> int:
    web_url = await push_and_create_merge_request(
        config,
        args.title,
        description=args.description,
        target_branch=args.target,
        repo_path=args.repo,
    )
    print(web_url)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the clg command line and return its exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config()
        if args.command == "list":
            return asyncio.run(run_list(config, args))
        return asyncio.run(run_push_and_mr(config, args))
    except (GitLabError, ValueError) as e:
        logger.debug(f"{args.command} failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

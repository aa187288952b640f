"""
Command-line entry point for monopack.
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import GlobalConfig
from .hooks import PackagingLifecycle
from .modules.cli_parser import create_main_parser, normalize_command_aliases
from .modules.utils import (
    print_error,
    print_header,
    print_info,
    print_success,
    print_warning,
)
from .workspace.errors import MonopackError


def configure_logging(verbose: bool) -> None:
    """Route library logging to stderr; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="monopack: %(message)s",
        stream=sys.stderr,
    )


def handle_cleanup(lifecycle: PackagingLifecycle, args: argparse.Namespace) -> None:
    reports = lifecycle.cleanup()
    for name, report in reports.items():
        if report.empty:
            continue
        print_info(f"{name}: removed {len(report.unlinked)} links, "
                   f"{len(report.removed)} copied workspaces", 2)
    print_success("Cleanup complete")


def handle_link(lifecycle: PackagingLifecycle, args: argparse.Namespace) -> None:
    visited = lifecycle.initialize()
    for name, identifiers in visited.items():
        print_info(f"{name}: walked {len(identifiers)} packages", 2)
    print_success("Linking complete")


def handle_materialize(lifecycle: PackagingLifecycle, args: argparse.Namespace) -> None:
    copied = lifecycle.copy_workspaces()
    for name, locals_ in copied.items():
        if locals_:
            print_info(f"{name}: copied {', '.join(locals_)}", 2)
    print_success("Materialization complete")


def handle_prepare(lifecycle: PackagingLifecycle, args: argparse.Namespace) -> None:
    print_header("PREPARING WORKSPACES")
    handle_cleanup(lifecycle, args)
    handle_link(lifecycle, args)
    handle_materialize(lifecycle, args)


def handle_list(lifecycle: PackagingLifecycle, args: argparse.Namespace) -> None:
    workspaces = lifecycle.get_workspaces()

    if args.format == "json":
        output = {name: {"location": ws.location} for name, ws in workspaces.items()}
        print(json.dumps(output, indent=2, sort_keys=True))
        return

    if not workspaces:
        print_warning("No workspaces found.")
        return

    print(f"{'Name':<40} {'Location':<38}")
    print(f"{'-' * 40} {'-' * 38}")
    for name in sorted(workspaces):
        print(f"{name:<40} {workspaces[name].location:<38}")


def handle_hook(lifecycle: PackagingLifecycle, args: argparse.Namespace) -> None:
    lifecycle.run_hook(args.name)
    print_success(f"Hook {args.name} complete")


COMMAND_HANDLERS = {
    'cleanup': handle_cleanup,
    'link': handle_link,
    'materialize': handle_materialize,
    'prepare': handle_prepare,
    'list': handle_list,
    'hook': handle_hook,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the monopack CLI."""
    parser = create_main_parser()
    args = normalize_command_aliases(parser.parse_args(argv))

    if not args.command or args.command == 'help':
        parser.print_help()
        return 0

    try:
        config = GlobalConfig.load(args.config, service_root=args.root)
        if args.verbose:
            config.verbose = True
        if args.jobs is not None:
            config.parallel_jobs = args.jobs
        config.validate()

        configure_logging(config.verbose)
        lifecycle = PackagingLifecycle(args.root, config=config)
        COMMAND_HANDLERS[args.command](lifecycle, args)
    except MonopackError as e:
        print_error(f"Error: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())

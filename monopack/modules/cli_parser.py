"""
CLI argument parsing for monopack.
"""
import argparse

import pyfiglet

from .dataclasses import Colors
from .utils import styled_print, print_subheader
from .. import __version__

COMMAND_ALIASES = {
    'initialize': 'link',
    'copy': 'materialize',
}


class StyledArgumentParser(argparse.ArgumentParser):
    """Custom ArgumentParser that provides styled help output."""

    def __init__(self, *args, show_banner=False, **kwargs):
        """Initialize with optional banner flag."""
        super().__init__(*args, **kwargs)
        self.show_banner = show_banner

    def print_help(self, file=None):
        """Override print_help to use our styled formatter."""
        # Only show banner for main parser
        if self.show_banner:
            ascii_art = pyfiglet.figlet_format("monopack", font="small")
            for line in ascii_art.split('\n'):
                if line.strip():
                    styled_print(line, Colors.BRIGHT_CYAN, Colors.BOLD, 0)
            print()
            print_subheader("COMMAND OPTIONS")

        for line in self.format_help().split('\n'):
            if not line.strip():
                continue
            elif line.startswith('usage:'):
                styled_print(line, Colors.BRIGHT_YELLOW, Colors.BOLD, 0)
            elif line.startswith('options:') or line.startswith('positional arguments:'):
                styled_print(line, Colors.BRIGHT_CYAN, Colors.BOLD, 0)
            elif line.startswith('  -') or line.startswith('    '):
                styled_print(line, Colors.BRIGHT_WHITE, None, 0)
            else:
                styled_print(line, Colors.BRIGHT_GREEN, None, 0)

        if self.show_banner:
            print()
            styled_print(f" monopack v{__version__} ", Colors.MAGENTA, None, 0)


def create_main_parser(show_banner: bool = True) -> argparse.ArgumentParser:
    """Create the main argument parser for monopack."""
    parser = StyledArgumentParser(
        prog="monopack",
        description="Materialize workspace dependencies for per-package packaging.\n\n"
                    "Typical run: 'monopack prepare', package each workspace, "
                    "then 'monopack cleanup'.",
        formatter_class=argparse.RawTextHelpFormatter,
        show_banner=show_banner,
        allow_abbrev=False
    )
    parser.add_argument('--version', action='version',
                        version=f'monopack {__version__}',
                        help='Show version information')
    parser.add_argument('-r', '--root', default='.',
                        help='Monorepo root directory (default: current directory)')
    parser.add_argument('-c', '--config',
                        help='Path to monopack.toml (default: <root>/monopack.toml)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log every link, copy and removal')
    parser.add_argument('-j', '--jobs', type=int,
                        help='Number of workspaces processed at once')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('cleanup', help='Remove links and copied workspaces')
    subparsers.add_parser('link', aliases=['initialize'],
                          help='Link hoisted dependencies into every workspace')
    subparsers.add_parser('materialize', aliases=['copy'],
                          help='Copy local workspace dependencies (run after link)')
    subparsers.add_parser('prepare', help='Run cleanup, link and materialize')

    list_parser = subparsers.add_parser('list', help='List discovered workspaces')
    list_parser.add_argument('--format', choices=['table', 'json'], default='table',
                             help='Output format (default: table)')

    hook_parser = subparsers.add_parser('hook', help='Run one packaging lifecycle hook')
    hook_parser.add_argument('name', help="Hook name, e.g. 'package:initialize'")

    subparsers.add_parser('help', aliases=['h'], help='Show help for all commands')

    return parser


def normalize_command_aliases(args: argparse.Namespace) -> argparse.Namespace:
    """Map command aliases to their canonical command names."""
    if getattr(args, 'command', None) in COMMAND_ALIASES:
        args.command = COMMAND_ALIASES[args.command]
    if getattr(args, 'command', None) == 'h':
        args.command = 'help'
    return args

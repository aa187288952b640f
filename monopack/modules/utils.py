"""
Utility functions for monopack console output.
"""
import sys

from .dataclasses import Colors


def styled_print(text, color=None, style=None, indent=0):
    """
    Print styled text with optional color, style, and indentation.

    Args:
        text (str): Text to print
        color (str): Color from Colors class
        style (str): Style from Colors class
        indent (int): Number of spaces to indent
    """
    indent_str = " " * indent
    color_code = color or ""
    style_code = style or ""
    reset_code = Colors.RESET

    # Only apply colors if we're in a terminal that supports them
    if not (hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()):
        color_code = style_code = reset_code = ""

    print(f"{indent_str}{color_code}{style_code}{text}{reset_code}")


def print_header(text):
    """Print a styled header with separator lines."""
    styled_print("\n" + "=" * 60, Colors.BRIGHT_CYAN, Colors.BOLD)
    styled_print(text.center(60), Colors.BRIGHT_CYAN, Colors.BOLD)
    styled_print("=" * 60, Colors.BRIGHT_CYAN, Colors.BOLD)


def print_subheader(text):
    """Print a styled subheader."""
    styled_print(f"\n{text}", Colors.CYAN, Colors.BOLD, 2)


def print_success(text, indent=0):
    """Print success message in green."""
    styled_print(text, Colors.GREEN, Colors.BOLD, indent)


def print_warning(text, indent=0):
    """Print warning message in yellow."""
    styled_print(text, Colors.YELLOW, Colors.BOLD, indent)


def print_error(text, indent=0):
    """Print error message in red."""
    styled_print(text, Colors.RED, Colors.BOLD, indent)


def print_info(text, indent=0):
    """Print info message in blue."""
    styled_print(text, Colors.BLUE, None, indent)

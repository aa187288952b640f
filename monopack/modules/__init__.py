"""
Console output and command-line parsing for monopack.
"""

"""Stdio setup for the JSON-RPC stream."""

import io
import sys


def configure_stdio() -> None:
    """Make stdin/stdout carry UTF-8 JSON lines regardless of the console.

    Tool results are glyph-prefixed, which a narrow console code page
    cannot encode. Undecodable input bytes become U+FFFD so the line still
    reaches the parser and earns an error reply instead of killing the
    loop. Output lines always end in a bare ``\\n``.
    """
    if isinstance(sys.stdin, io.TextIOWrapper):
        sys.stdin.reconfigure(encoding="utf-8", errors="replace")
    if isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(encoding="utf-8", errors="backslashreplace", newline="\n")

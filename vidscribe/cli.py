# vidscribe/cli.py
#!/usr/bin/env python3
"""Command line interface entry point for VidScribe."""

import io
import sys


# Fix stdout/stderr encoding for Windows BEFORE any imports
# so transcript text and progress bars never crash the console
def _fix_console_encoding():
    """Ensure stdout and stderr use UTF-8 encoding."""
    for name, fd in (("stdout", 1), ("stderr", 2)):
        stream = getattr(sys, name)
        if stream is None or (getattr(stream, 'encoding', '') or '').lower() in ('utf-8', 'utf8'):
            continue
        try:
            setattr(sys, name, io.TextIOWrapper(
                stream.buffer if hasattr(stream, 'buffer') else io.BufferedWriter(io.FileIO(fd, 'w')),
                encoding='utf-8',
                errors='replace',
                line_buffering=True
            ))
        except (AttributeError, OSError):
            pass


def main():
    """Console script entry point."""
    _fix_console_encoding()

    if sys.version_info < (3, 9):
        print("Error: VidScribe requires Python 3.9 or higher")
        sys.exit(1)

    from vidscribe.main import main as vidscribe_main
    vidscribe_main()


if __name__ == "__main__":
    main()

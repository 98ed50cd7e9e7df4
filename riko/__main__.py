"""riko CLI entry point.

Allows running via `python -m riko` and provides the console script
defined in `pyproject.toml`.

Usage:
    riko [--version] [--keytest] [--log-file PATH] [--config PATH] [FILE]
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .config import load_config
from .editor import Editor
from .version import get_version_string

USAGE = "usage: riko [--version] [--keytest] [--log-file PATH] [--config PATH] [FILE]"


def _escape_bytes(s: str) -> str:
    """Return a printable representation of raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def run_keyboard_test() -> None:
    """Print how each keypress is decoded. Quit with ESC."""
    from .terminal import TerminalInterface
    from .keyboard import KeyboardHandler, KeyType

    print("Keyboard test mode - press keys to see parsed events.")
    print("Quit with ESC.")

    with TerminalInterface() as term:
        kb = KeyboardHandler(term)
        while True:
            ev = kb.get_key_event()
            if ev is None:
                break
            if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                term.write(b"Exiting keyboard test.\r\n")
                break
            line = (f"type={ev.key_type.value} value={_escape_bytes(ev.value)} "
                    f"raw='{_escape_bytes(ev.raw)}' byte={kb.event_to_byte(ev)}\r\n")
            term.write(line.encode('ascii', 'replace'))


def configure_logging(log_file: Optional[str]) -> None:
    """Send log records to ``log_file``; stay silent without one.

    The terminal is in use by the editor, so nothing is logged there.
    """
    if log_file is None:
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_args(args: list[str]) -> dict:
    """Very small argument parser; exits with status 2 on bad usage."""
    options = {'version': False, 'keytest': False, 'log_file': None, 'config': None, 'filename': None}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ('--version', '-V'):
            options['version'] = True
        elif arg in ('--keytest', '--keyboard-test'):
            options['keytest'] = True
        elif arg in ('--log-file', '--config'):
            if i + 1 >= len(args):
                print(f"riko: {arg} needs a value\n{USAGE}", file=sys.stderr)
                sys.exit(2)
            options[arg[2:].replace('-', '_')] = args[i + 1]
            i += 1
        elif arg.startswith('-') and arg != '-':
            print(f"riko: unknown option {arg}\n{USAGE}", file=sys.stderr)
            sys.exit(2)
        elif options['filename'] is None:
            options['filename'] = arg
        else:
            print(f"riko: too many arguments\n{USAGE}", file=sys.stderr)
            sys.exit(2)
        i += 1
    return options


def main(argv: Optional[list[str]] = None) -> None:
    options = parse_args(sys.argv[1:] if argv is None else argv)
    if options['version']:
        print(get_version_string())
        return
    configure_logging(options['log_file'])
    if options['keytest']:
        run_keyboard_test()
        return

    editor = Editor(config=load_config(options['config']))
    if options['filename'] is not None:
        try:
            editor.open_file(options['filename'])
        except OSError as e:
            logging.getLogger(__name__).error(f"Cannot open {options['filename']}: {e}")
            print(f"riko: cannot open {options['filename']}: {e.strerror or e}", file=sys.stderr)
            sys.exit(1)
    else:
        editor.open_empty()
    editor.run()


if __name__ == "__main__":  # pragma: no cover
    main()

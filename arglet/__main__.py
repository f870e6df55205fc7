"""
Demo host: python -m arglet [--timeout N] [--debug] PAYLOAD
"""
import sys

from rich.console import Console
from rich.pretty import pprint

from . import ArgParser, __version__

HELPTEXT = """\
Usage: arglet [OPTIONS] PAYLOAD

Options:
  -t, --timeout <int>   Seconds to wait before giving up (default: -1, never).
  -d, --debug           Print the parser state after parsing.
  -h, --help            Print this help text and exit.
  -v, --version         Print the version number and exit."""


def main(argv=None):
    stdout = Console(highlight=False, markup=False, soft_wrap=True)
    stderr = Console(stderr=True, highlight=False, markup=False, soft_wrap=True)

    parser = ArgParser(HELPTEXT, __version__)
    parser.add_flag("help h ?")
    parser.add_flag("debug d")
    parser.add_integer_option("timeout t", -1)

    if not parser.parse(sys.argv if argv is None else argv):
        stderr.print("error: out of memory while parsing arguments")
        return 1

    if parser.found("help"):
        stdout.print(parser.helptext)
        return 0

    if parser.found("debug"):
        pprint(parser)
        stdout.print(parser.dump())

    if parser.positional_count() != 1:
        stderr.print("error: expected exactly one PAYLOAD argument")
        return 1

    stdout.print("payload=%s timeout=%d" % (parser.positional_at(0), parser.value("timeout")))
    return 0


if __name__ == "__main__":
    sys.exit(main())

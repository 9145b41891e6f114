"""Uses the monkey interpreter to run .monkey files or run in command-line mode. Also uses the error handling context
manager. Called from the monkey console script and from `python -m monkey`.

Logging is configured from the LOGLEVEL environment variable (default WARNING).
"""

import argparse
import logging
import os
import sys

from monkey.lang.error import ErrorHandler
from monkey.lang.session import Session
from monkey.lang.shell import Shell

RECURSION_LIMIT = 10 ** 4


def get_log_level():
    """Determine log level from LOGLEVEL environment variable. Defaults to WARNING if not set."""
    loglevel_env = os.getenv("LOGLEVEL", "").upper()
    if loglevel_env:
        level = getattr(logging, loglevel_env, None)
        if isinstance(level, int):
            return level
    return logging.WARNING


def build_parser():
    parser = argparse.ArgumentParser(prog="monkey", description="Monkey language interpreter.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")

    view = parser.add_mutually_exclusive_group()
    view.add_argument("-t", "--tokens", action="store_true", help="print the tokens of file instead of running it")
    view.add_argument("-a", "--ast", action="store_true", help="print the parsed form of file instead of running it")

    parser.add_argument("--recursion-limit", type=int, default=RECURSION_LIMIT, metavar="N",
                        help="maximum Python recursion depth (default: %(default)s), each monkey call uses about a dozen"
                             " frames")
    return parser


def main(argv=None):
    """Runs monkey interpreter."""
    logging.basicConfig(level=get_log_level(), format="%(name)s: %(message)s", stream=sys.stderr)

    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)

        sys.setrecursionlimit(args.recursion_limit)

        if args.file is None:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()
            return

        sess = Session(error_handler, args.file, cmd_line=False)

        if args.tokens:
            for token in sess.tokens(sess.source):
                print(repr(token))
        elif args.ast:
            print(sess.tree(sess.source))
        else:
            sess.add(sess.source, 1)
            sess.run()

            for result in sess.results:
                print(result)


if __name__ == "__main__":
    main()

"""Uses the meowlang pipeline to interpret .meow files/run in command-line mode. Also uses error handling context
manager. Called from the meowlang console script.
"""

import argparse

from meowlang.lang.error import ErrorHandler
from meowlang.lang.session import Session
from meowlang.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="meowlang", description="meowlang interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--strict", action="store_true",
                        help="treat evaluation errors (unknown names, bad operands, ...) as fatal instead of null")
    parser.add_argument("--warn", action="store_true", help="report evaluation errors as warnings")
    parser.add_argument("--debug", action="store_true", help="print tokens and parsed statements before running")
    return parser


def main(argv=None):
    """Runs meowlang interpreter. Called from meowlang executable script."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)
        options = dict(strict=args.strict, warn=args.warn, debug=args.debug)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, **options)
            sess.run()

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, **options)).cmdloop()


if __name__ == "__main__":
    main()

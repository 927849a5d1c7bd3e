import logging
import sys

from .commands.parser import build_parser
from ..fuzzy.core.types import FuzzyError

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    try:
        return args.func(args)
    except FuzzyError as e:
        raise SystemExit(f"error: {e}") from e

if __name__ == "__main__":
    main()

import argparse
import sys

import topk
import topk.exec.bench
import topk.exec.select


def main():
    parser = argparse.ArgumentParser(
        description="topk: Bounded top-K selection without sorting the whole input.",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="store_true",
        help="Print the topk version and exit.",
    )
    subparsers = parser.add_subparsers(title="Commands")
    topk.exec.select.register_command(subparsers)
    topk.exec.bench.register_command(subparsers)
    args = parser.parse_args()

    if args.version:
        print("topk", topk.__version__)
        return

    if "func" not in args:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()

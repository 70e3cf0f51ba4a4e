import argparse
import sys

from statement_ingestion.app import create_manager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statement-ingestion",
        description="Extract categorized transactions from the text of a German bank statement.",
    )
    parser.add_argument("path", nargs="?", default="-", help="Text file with the extracted statement text, '-' for stdin.")
    parser.add_argument("--bank", default=None, help="Bank name, e.g. 'Deutsche Bank' or 'Sparkasse Göttingen'.")
    parser.add_argument("--user", default=None, help="Flag duplicates against this user's stored transactions.")
    parser.add_argument("--list-banks", action="store_true", help="Print the supported banks and exit.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    manager = create_manager()

    if args.list_banks:
        print("\n".join(manager.supported_banks()))
        return 0

    if args.path == "-":
        text = sys.stdin.read()
    else:
        with open(args.path, encoding="utf-8") as handle:
            text = handle.read()

    result = manager.ingest(text, args.bank)
    if args.user:
        manager.mark_duplicates(args.user, result.transactions)
    print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

import argparse
import sys

from src.sanitization.clean import build_rule_store, clean_message, refresh_rules
from src.sanitization.domain.errors import RuleStoreError


# python -m src.sanitization "https://example.com/?utm_source=x" ...
def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m src.sanitization", description="Strip tracking from URLs.")
    parser.add_argument("links", nargs="*", help="URLs or free text containing URLs")
    parser.add_argument("--refresh", action="store_true", help="download the ruleset before cleaning")
    args = parser.parse_args(argv)

    try:
        if args.refresh:
            summary = refresh_rules()
            print(f"rules: {summary.provider_count} providers -> {summary.cache_path}")
        store = build_rule_store()
        results = clean_message("\n".join(args.links), rule_store=store)
    except RuleStoreError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for item in results:
        if item.error is not None:
            print(f"{item.original}\t[error] {item.error}")
        elif item.result is not None and item.result.blocked:
            print(f"{item.original}\t[blocked]")
        else:
            print(item.final_url)
    return 0


if __name__ == "__main__":
    sys.exit(main())

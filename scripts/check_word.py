#!/usr/bin/env python3
"""Check a single word against a category from the command line."""

import asyncio
import argparse
import logging
import sys
from dotenv import load_dotenv
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

load_dotenv(project_root / ".env")

from src.api.config import AppSettings, build_membership
from src.engine import InvalidInput, validate_word_strict


async def main():
    parser = argparse.ArgumentParser(
        description="Validate one word the way the game server would",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Built-in category table
  python check_word.py Elephant --category Animals --letters E F

  # Ask the LLM judge, with tags and words already claimed this round
  python check_word.py samosa --category "Snacks" --tags indian --letters S \\
      --used samosa --membership llm
        """
    )
    parser.add_argument("word", help="Word to check")
    parser.add_argument("--category", required=True, help="Category the word must fit")
    parser.add_argument("--tags", nargs="*", default=[], help="Category tags")
    parser.add_argument("--letters", nargs="+", required=True, help="Allowed starting letters")
    parser.add_argument("--used", nargs="*", default=[], help="Words already used this round")
    parser.add_argument("--membership", choices=["static", "llm", "chained"], default=None,
                        help="Category judge (default: WORDGAME_MEMBERSHIP or static)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show judge logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING, format="%(message)s")

    settings = AppSettings.from_env()
    if args.membership:
        settings = settings.model_copy(update={"membership": args.membership})
    membership = build_membership(settings)

    try:
        result = await validate_word_strict(
            args.word,
            args.category,
            args.tags,
            args.letters,
            args.used,
            membership=membership,
            timeout=settings.lookup_timeout,
        )
    except InvalidInput as e:
        print(f"Invalid request: {e}")
        sys.exit(2)

    status = "ACCEPTED" if result.accepted else "REJECTED"
    print(f"{result.normalized_word}: {status} ({result.reason.value})")
    if result.detail:
        print(f"  {result.detail}")
    sys.exit(0 if result.accepted else 1)


if __name__ == "__main__":
    asyncio.run(main())

import os
import sys
from dotenv import load_dotenv

load_dotenv()
sys.path.append(os.getcwd())

from main import DuplicateFinder, load_records  # noqa: E402


def print_result(result):
    print(f"\n  Query intent: '{result.query_intent}'")
    print(
        f"  Considered {result.total_considered} records, "
        f"duplicate found: {'YES' if result.has_duplicate else 'no'}"
    )
    if not result.ranked:
        print("  No records to compare against.")
        return

    print("\n----- TOP CANDIDATES -----")
    for item in result.ranked:
        marker = "!!" if item.is_duplicate else "  "
        print(
            f"{marker} [{item.identifier}] {item.record.raw_text[:60]}\n"
            f"     intent='{item.intent_text}' "
            f"intent_sim={item.intent_similarity:.2f} text_sim={item.lexical_similarity:.2f}"
        )
    print("--------------------------")


def interactive_mode(records_path: str):
    print("\n=== Interactive Duplicate Finder ===")
    print("Commands:")
    print("  - Type a feature description to search for duplicates")
    print("  - 'intent <text>' - Show the query-time intent of a text")
    print("  - 'structural <text>' - Show the backfill intent of a text")
    print("  - 'stats' - Corpus and lexicon statistics")
    print("  - 'exit' - Quit")
    print("\nExamples:")
    print("  - '打开全民K歌找一下山楂树之恋这首歌'")
    print("  - 'intent 进入微信'\n")

    finder = DuplicateFinder()
    records = load_records(records_path)
    print(f"Loaded {len(records)} records from {records_path}")

    while True:
        try:
            req = input("\n> ").strip()
            if req.lower() in ["exit", "quit"]:
                break

            if not req:
                continue

            if req.lower().startswith("intent "):
                print(f"  → '{finder.normalize_query(req[7:].strip())}'")
                continue

            if req.lower().startswith("structural "):
                print(f"  → '{finder.normalize_structural(req[11:].strip())}'")
                continue

            if req.lower() == "stats":
                missing = sum(1 for r in records if not r.has_intent)
                print(f"  Records: {len(records)} ({missing} without intent_text)")
                for table, size in finder.lexicon.stats().items():
                    print(f"  {table}: {size}")
                continue

            print_result(finder.search(req, records))

        except KeyboardInterrupt:
            print("\nExiting...")
            break
        except Exception as e:
            print(f"Error: {e}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python finder_cli.py <records.json>")
        sys.exit(1)
    interactive_mode(sys.argv[1])

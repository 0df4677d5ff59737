"""
Embedding worker process.

Reads one text from stdin (or the first positional argument), prints its
embedding as a JSON list on stdout. Failures are printed as `{"error": ...}`
on stderr with exit status 1.

    echo "I love dogs" | python -m text_vector_service.services.embed_worker
"""

import argparse
import json
import sys

from .embedder import LocalEmbedder


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Embed one text and print the vector as JSON.")
    parser.add_argument("text", nargs="?", help="text to embed (read from stdin when omitted)")
    parser.add_argument("--model", default="all-MiniLM-L6-v2")
    parser.add_argument("--device", default="cpu")
    parser.add_argument("--normalize", action="store_true")
    args = parser.parse_args(argv)

    text = args.text if args.text is not None else sys.stdin.read()

    try:
        embedder = LocalEmbedder(args.model, device=args.device, normalize=args.normalize)
        vector = embedder.embed(text)
    except Exception as e:
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        return 1

    print(json.dumps(vector))
    return 0


if __name__ == "__main__":
    sys.exit(main())

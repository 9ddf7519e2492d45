from __future__ import annotations

import sys

from compressed_commitment.commitment.test_vectors import conformance_vectors


def main() -> int:
    data = conformance_vectors.load_vectors()
    errors = conformance_vectors.validate_vectors(data)
    if errors:
        for error in errors:
            print(f"conformance_vectors.json: {error}")
        return 1
    print("conformance_vectors.json: OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

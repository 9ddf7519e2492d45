# -*- coding: utf-8 -*-
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..exceptions import CommitmentError
from ..group import get_group
from ..layout import WindowLayout
from ..pedersen.compressed import PedersenCompressedCommitment
from ..security import SeededRandomness

VECTOR_FILE = Path(__file__).with_name("conformance_vectors.json")

FORMAT_VERSION = "1.0"


def load_vectors(path: Path = VECTOR_FILE) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def save_vectors(data: Dict[str, Any], path: Path = VECTOR_FILE) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, indent=2)
        handle.write("\n")


def build_scheme(curve: str, vector: Dict[str, Any]) -> PedersenCompressedCommitment:
    seed = _require_hex(vector.get("seed_hex"), "seed_hex")
    layout = WindowLayout(
        num_windows=_require_int(vector.get("num_windows"), "num_windows"),
        window_size=_require_int(vector.get("window_size"), "window_size"),
    )
    return PedersenCompressedCommitment.setup(
        rng=SeededRandomness(seed), group=get_group(curve), layout=layout
    )


def compute_expected(curve: str, vector: Dict[str, Any]) -> str:
    """Recompute the x-coordinate hex for one vector."""
    scheme = build_scheme(curve, vector)
    message = bytes.fromhex(_require_string(vector.get("message_hex"), "message_hex"))
    randomness = _require_int(vector.get("randomness"), "randomness")
    return scheme.commit(message, randomness).hex()


def validate_vectors(data: Dict[str, Any]) -> List[str]:
    """Return one error string per malformed or mismatching vector."""
    errors: List[str] = []
    if data.get("version") != FORMAT_VERSION:
        errors.append(f"version must be {FORMAT_VERSION}")
    curve = data.get("curve")
    if not isinstance(curve, str):
        errors.append("curve must be a string")
        return errors

    vectors = data.get("vectors")
    if not isinstance(vectors, list):
        errors.append("vectors must be a list")
        return errors

    for index, vector in enumerate(vectors):
        name = vector.get("name", f"#{index}") if isinstance(vector, dict) else f"#{index}"
        try:
            actual = compute_expected(curve, vector)
        except (CommitmentError, AttributeError, KeyError, TypeError, ValueError) as exc:
            errors.append(f"{name}: {exc}")
            continue
        expected = vector.get("expected_x_hex")
        if expected is None:
            errors.append(f"{name}: expected_x_hex not recorded")
        elif expected != actual:
            errors.append(f"{name}: expected_x_hex mismatch")

    return errors


def unrecorded_vectors(data: Dict[str, Any]) -> List[str]:
    """Names of vectors whose expected value has not been recorded yet."""
    return [
        vector.get("name", f"#{index}")
        for index, vector in enumerate(data.get("vectors", []))
        if vector.get("expected_x_hex") is None
    ]


def record_vectors(data: Dict[str, Any], overwrite: bool = False) -> List[str]:
    """Fill in expected_x_hex in place; return the names recorded."""
    recorded: List[str] = []
    for index, vector in enumerate(data["vectors"]):
        if vector.get("expected_x_hex") is not None and not overwrite:
            continue
        vector["expected_x_hex"] = compute_expected(data["curve"], vector)
        recorded.append(vector.get("name", f"#{index}"))
    return recorded


def _require_hex(value: Any, field_name: str) -> bytes:
    text = _require_string(value, field_name)
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise ValueError(f"{field_name} must be valid hex") from exc


def _require_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string")
    return value


def _require_int(value: Optional[Any], field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field_name} must be an integer")
    return value

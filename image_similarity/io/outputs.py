"""Output helpers for persisting grouping results."""

from __future__ import annotations

import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Iterable, Sequence, Tuple

import pandas as pd

from ..features.perceptual import signature_to_hex
from .models import DuplicateGroup, GroupReport, ImageSignature

PAIRS_SAMPLE_LIMIT = 500


def write_groups(path: Path, groups: Sequence[DuplicateGroup]) -> Path:
    """Write *groups* to *path* as JSON and return the path."""
    serialised = [asdict(group) for group in groups]
    path.write_text(json.dumps(serialised, indent=2), encoding="utf-8")
    return path


def write_report(path: Path, report: GroupReport) -> Path:
    """Write the run metrics to *path* as JSON and return the path."""
    path.write_text(json.dumps(asdict(report), indent=2), encoding="utf-8")
    return path


def write_pairs(
    path: Path, edges: Iterable[Tuple[str, str, int]], limit: int = PAIRS_SAMPLE_LIMIT
) -> Path:
    """Write the strongest *limit* edges to *path* as CSV."""
    top_edges = sorted(edges, key=lambda item: (-item[2], item[0], item[1]))[:limit]
    with path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(["left", "right", "score"])
        for left, right, pair_score in top_edges:
            writer.writerow([left, right, pair_score])
    return path


def signature_frame(signatures: Iterable[ImageSignature]) -> pd.DataFrame:
    """Return one row per hashed image with its hex signature."""
    rows = [
        {
            "source": entry.source,
            "signature": signature_to_hex(entry.signature),
            "width": entry.width,
            "height": entry.height,
            "codec": entry.codec,
        }
        for entry in signatures
    ]
    return pd.DataFrame(rows, columns=["source", "signature", "width", "height", "codec"])


def write_signature_table(path: Path, signatures: Iterable[ImageSignature]) -> Path:
    """Write the signature table to *path* as Parquet and return the path."""
    signature_frame(signatures).to_parquet(path, index=False, engine="pyarrow")
    return path

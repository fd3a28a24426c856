"""Duplicate grouping and reporting over many image sources."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Sequence, Tuple

from PIL import Image
from tqdm import tqdm

from ..errors import ImageSimilarityError
from ..extract.decode import ImageSource, load_image
from ..features.luma import DEFAULT_LUMA, LumaStrategy
from ..features.perceptual import compute_signature
from ..io.models import DuplicateGroup, GroupReport, ImageSignature
from ..io.outputs import write_groups, write_pairs, write_report, write_signature_table
from .similarity import T_DUPLICATE as DEFAULT_T_DUPLICATE, pairwise_scores
from .unionfind import UnionFind

logger = logging.getLogger(__name__)

Edge = Tuple[str, str, int]
SignatureMap = Mapping[str, ImageSignature]


def hash_source(
    source: ImageSource,
    luma: str | LumaStrategy = DEFAULT_LUMA,
    name_hint: str | None = None,
) -> ImageSignature:
    """Decode and hash a single source into an :class:`ImageSignature` row."""
    decoded = load_image(source, name_hint)
    width, height = decoded.size
    return ImageSignature(
        source=decoded.label,
        signature=compute_signature(decoded.image, luma=luma),
        width=width,
        height=height,
        codec=decoded.codec,
    )


def source_label(source: ImageSource, index: int) -> str | None:
    """Return a stand-in label for sources that carry no path, else ``None``."""
    if isinstance(source, (bytes, bytearray)):
        return f"<bytes #{index}>"
    if isinstance(source, Image.Image) and not getattr(source, "filename", ""):
        return f"<image #{index}>"
    return None


def build_signature_table(
    sources: Iterable[ImageSource],
    luma: str | LumaStrategy = DEFAULT_LUMA,
    max_workers: int = 1,
) -> list[ImageSignature]:
    """Hash every source, skipping the ones that cannot be read or decoded.

    Bytes and in-memory images are labelled by their position in *sources*.
    """
    items = list(sources)
    if not items:
        return []

    def _hash_one(source: ImageSource, index: int) -> ImageSignature | None:
        label = source_label(source, index)
        try:
            return hash_source(source, luma, name_hint=label)
        except ImageSimilarityError as exc:
            print(f"[warn] {label or source}: {exc}")
            logger.debug("Skipping %s", label or source, exc_info=True)
            return None

    if max_workers <= 1:
        results = [
            _hash_one(source, index)
            for index, source in enumerate(
                tqdm(items, desc="Hashing images", unit="image", leave=False)
            )
        ]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(
                tqdm(
                    pool.map(_hash_one, items, range(len(items))),
                    total=len(items),
                    desc="Hashing images",
                    unit="image",
                    leave=False,
                )
            )
    return [row for row in results if row is not None]


def build_similarity_edges(
    signatures: SignatureMap, t_link: int = DEFAULT_T_DUPLICATE
) -> list[Edge]:
    """Return all pairwise similarity edges on or above *t_link*."""
    if not signatures:
        return []

    hashes = {source: entry.signature for source, entry in signatures.items()}
    edges: list[Edge] = []
    for left, right, pair_score in tqdm(
        pairwise_scores(hashes, t_link=t_link),
        desc="Scoring similarities",
        unit="pair",
        leave=False,
    ):
        edges.append((left, right, int(pair_score)))
    return edges


def group_signatures(
    signatures: SignatureMap, edges: Iterable[Edge]
) -> list[DuplicateGroup]:
    """Collapse *edges* into groups, largest first; singletons are kept."""
    uf = UnionFind(signatures.keys())
    for left, right, _ in edges:
        uf.union(left, right)

    ordered: Sequence[tuple[str, list[str]]] = sorted(
        uf.groups().items(), key=lambda item: (-len(item[1]), item[1][0])
    )
    return [DuplicateGroup(group_id=members[0], members=members) for _, members in ordered]


def group_and_report(
    signatures: Sequence[ImageSignature] | SignatureMap,
    total_sources: int,
    out_dir: str | Path,
    t_link: int = DEFAULT_T_DUPLICATE,
) -> Dict[str, Any]:
    """Compute duplicate groups, persist reports, and print a console summary.

    Every signature must carry a distinct source label; duplicates raise
    ``ValueError``.
    """
    if isinstance(signatures, Mapping):
        signature_map = dict(signatures)
    else:
        signature_map = {}
        for entry in signatures:
            if entry.source in signature_map:
                raise ValueError(f"Duplicate source label {entry.source!r} in signatures")
            signature_map[entry.source] = entry

    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)

    edges = build_similarity_edges(signature_map, t_link=t_link)
    groups = group_signatures(signature_map, edges)

    hashed = len(signature_map)
    coverage = (hashed / total_sources) if total_sources else 0.0
    largest_group = max((len(group.members) for group in groups), default=0)
    report = GroupReport(
        total=int(total_sources),
        hashed=int(hashed),
        coverage=coverage,
        pairs=len(edges),
        groups=len(groups),
        largest_group=int(largest_group),
        threshold=int(t_link),
    )

    outputs = (
        ("groups.json", lambda path: write_groups(path, groups)),
        ("pairs_sample.csv", lambda path: write_pairs(path, edges)),
        ("metrics.json", lambda path: write_report(path, report)),
        ("signatures.parquet", lambda path: write_signature_table(path, signature_map.values())),
    )
    for filename, writer in outputs:
        target = out_path / filename
        try:
            writer(target)
        except OSError as exc:
            print(f"[group] failed to write {target}: {exc}")

    print(f"Total images: {total_sources}")
    print(f"Hashed: {hashed} (coverage {coverage * 100.0:.1f}%)")
    print(f"Groups: {len(groups)}")
    print(f"Largest group: {largest_group} images")
    print(f"Threshold: {t_link}")

    return {"edges": edges, "groups": groups, "report": report}

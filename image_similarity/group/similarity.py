"""Similarity scoring between perceptual signatures."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from itertools import combinations
from typing import Iterator, Mapping, Tuple, Union

import imagehash

from ..errors import DimensionMismatch
from ..extract.decode import ImageSource, load_image
from ..features.luma import DEFAULT_LUMA, LumaStrategy
from ..features.perceptual import (
    SIGNATURE_BITS,
    compute_signature,
    normalise_hex,
    signature_bits,
    signature_from_hex,
)

SignatureLike = Union[imagehash.ImageHash, str]

T_DUPLICATE: int = 90


def hamming_distance(a: SignatureLike, b: SignatureLike) -> int:
    """Return the number of bit positions where *a* and *b* differ."""
    bits_a = _bit_length(a)
    bits_b = _bit_length(b)
    if bits_a != SIGNATURE_BITS or bits_b != SIGNATURE_BITS:
        raise DimensionMismatch(bits_a, bits_b, SIGNATURE_BITS)
    return int(_coerce(a) - _coerce(b))


def score(a: SignatureLike, b: SignatureLike) -> int:
    """Return the similarity of two 64-bit signatures as an integer in [0, 100]."""
    distance = hamming_distance(a, b)
    return ((SIGNATURE_BITS - distance) * 100) // SIGNATURE_BITS


def signature_for(
    source: ImageSource, luma: str | LumaStrategy = DEFAULT_LUMA
) -> imagehash.ImageHash:
    """Decode *source* and return its perceptual signature."""
    decoded = load_image(source)
    return compute_signature(decoded.image, luma=luma)


def image_similarity(
    source_a: ImageSource,
    source_b: ImageSource,
    *,
    luma: str | LumaStrategy = DEFAULT_LUMA,
    parallel: bool = False,
) -> int:
    """Return the similarity score of two image sources.

    Each source runs through its own decode and hash pipeline. The pipelines
    share no state, so ``parallel=True`` simply hands them to two worker
    threads. Decoder and comparison failures propagate as
    :class:`~image_similarity.errors.ImageSimilarityError` subclasses.
    """
    if parallel:
        with ThreadPoolExecutor(max_workers=2) as pool:
            future_a = pool.submit(signature_for, source_a, luma)
            future_b = pool.submit(signature_for, source_b, luma)
            sig_a = future_a.result()
            sig_b = future_b.result()
    else:
        sig_a = signature_for(source_a, luma)
        sig_b = signature_for(source_b, luma)
    return score(sig_a, sig_b)


def get_image_similarity(path_a: ImageSource, path_b: ImageSource) -> int:
    """Two-argument entry point: similarity of the images at *path_a* and *path_b*."""
    return image_similarity(path_a, path_b)


def pairwise_scores(
    signatures: Mapping[str, imagehash.ImageHash],
    t_link: int = T_DUPLICATE,
) -> Iterator[Tuple[str, str, int]]:
    """Yield ``(left, right, score)`` for every unordered pair scoring at least *t_link*."""
    for left, right in combinations(sorted(signatures), 2):
        pair_score = score(signatures[left], signatures[right])
        if pair_score >= t_link:
            yield (left, right, pair_score)


def _bit_length(value: SignatureLike) -> int:
    if isinstance(value, imagehash.ImageHash):
        return signature_bits(value)
    if isinstance(value, str):
        return len(normalise_hex(value)) * 4
    raise TypeError("Signatures must be imagehash.ImageHash instances or hex strings")


def _coerce(value: SignatureLike) -> imagehash.ImageHash:
    if isinstance(value, imagehash.ImageHash):
        return value
    return signature_from_hex(value)

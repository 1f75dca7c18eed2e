"""Normalized Compression Distance with short-text damping.

NCD(a, b) = (C(a||b) - min(C(a), C(b))) / max(C(a), C(b))

C is the Zstandard frame size at a pinned level. The window log is derived
from len(a) + len(b) and shared by all three compressions, so the
compressor always sees the whole of a||b. Frames carry neither a content
size nor a checksum, keeping sizes a function of the bytes alone.
"""

from __future__ import annotations

import logging
import math

import zstandard as zstd

from ._errors import LdsiCompressionError
from ._types import CompressionMeasurement, TextSample

logger = logging.getLogger(__name__)

COMPRESSION_LEVEL: int = 3
MIN_WINDOW_LOG: int = 10
MAX_WINDOW_LOG: int = 31

# Combined byte length at and above which no damping applies.
DAMPING_FULL_LENGTH: int = 1024


def optimal_window_log(size: int) -> int:
    """Bits needed to address size bytes, clamped to zstd's window range."""
    upper = min(MAX_WINDOW_LOG, zstd.WINDOWLOG_MAX)
    return max(MIN_WINDOW_LOG, min(upper, size.bit_length()))


def compressed_size(data: bytes, window_log: int) -> int:
    """Size in bytes of data compressed with the pinned parameters."""
    params = zstd.ZstdCompressionParameters.from_level(
        COMPRESSION_LEVEL,
        window_log=window_log,
        write_content_size=False,
        write_checksum=False,
        write_dict_id=False,
        threads=0,
    )
    try:
        return len(zstd.ZstdCompressor(compression_params=params).compress(data))
    except zstd.ZstdError as exc:
        raise LdsiCompressionError(
            f"zstd failed on {len(data)} bytes (window_log={window_log}): {exc}"
        ) from exc


def damping_factor(combined_len: int) -> float:
    """Short-text correction, 0 below 2 bytes and 1 from DAMPING_FULL_LENGTH on.

    ln(combined_len) / ln(1024) in between, which is non-decreasing in
    combined_len.
    """
    if combined_len < 2:
        return 0.0
    if combined_len >= DAMPING_FULL_LENGTH:
        return 1.0
    return math.log(combined_len) / math.log(DAMPING_FULL_LENGTH)


def compute_ncd(
    a: str | bytes | TextSample, b: str | bytes | TextSample,
) -> CompressionMeasurement:
    """Compute the damped NCD between two texts or byte strings.

    Identical inputs short-circuit to a distance of exactly 0; compressed
    sizes are still measured for the audit trail.

    Raises:
        LdsiInputError: If either input is not str or UTF-8 bytes.
        LdsiCompressionError: If zstd fails.
    """
    data_a = TextSample.coerce(a).data
    data_b = TextSample.coerce(b).data
    combined = data_a + data_b
    window_log = optimal_window_log(len(combined))

    size_a = compressed_size(data_a, window_log)
    size_b = compressed_size(data_b, window_log)
    size_combined = compressed_size(combined, window_log)

    if data_a == data_b:
        raw = 0.0
    else:
        min_c = min(size_a, size_b)
        max_c = max(size_a, size_b)
        raw = (size_combined - min_c) / max_c if max_c > 0 else 0.0

    factor = damping_factor(len(combined))
    corrected = min(max(raw * factor, 0.0), 1.0)

    logger.debug(
        "ncd sizes a=%d b=%d ab=%d raw=%.6f factor=%.6f corrected=%.6f",
        size_a, size_b, size_combined, raw, factor, corrected,
    )

    return CompressionMeasurement(
        size_a=size_a,
        size_b=size_b,
        size_combined=size_combined,
        raw_len_a=len(data_a),
        raw_len_b=len(data_b),
        window_log=window_log,
        raw=raw,
        damping_factor=factor,
        corrected=corrected,
    )

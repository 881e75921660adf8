"""
Symbol encoding pipeline.

    payload -> data codewords -> ECC + interleave + placement -> mask -> format info

``encode`` runs the whole pipeline. ``prepare`` and ``finalize`` expose the
two halves so the protection rotator can finalize one assembly several
ways.
"""

import logging
from typing import Iterable, Optional, Tuple, Union

from qrshield.assembler import AssembledMatrix, assemble
from qrshield.capacity import ECLevel, capacity, select_version
from qrshield.codewords import Payload, as_bytes, encode_codewords
from qrshield.config import DEFAULT_EC_LEVEL, MAX_VERSION
from qrshield.exceptions import AllocationFailed, PayloadTooLarge
from qrshield.format_info import write_format_info, write_version_info
from qrshield.masking import apply_mask, check_mask, select_best_mask
from qrshield.matrix import QrSymbol

logger = logging.getLogger(__name__)

Level = Union[ECLevel, str]


def prepare(payload: Payload, ec_level: Level = DEFAULT_EC_LEVEL,
            version: Optional[int] = None) -> AssembledMatrix:
    """
    Encode a payload into an unmasked, format-less matrix.

    Args:
        payload: Bytes to encode (text is UTF-8 encoded)
        ec_level: 'L', 'M', 'Q', 'H' or an ECLevel
        version: Symbol version, or None for the smallest that fits

    Raises:
        PayloadTooLarge: the payload does not fit
        AllocationFailed: the requested version is beyond the supported range
    """
    level = ECLevel.parse(ec_level)
    data = as_bytes(payload)

    if version is None:
        version = select_version(len(data), level)
    elif version < 1:
        raise ValueError(f"Version must be positive, got {version}")
    elif version > MAX_VERSION:
        raise AllocationFailed(f"Version {version} exceeds the supported maximum {MAX_VERSION}")
    elif len(data) > capacity(version, level):
        raise PayloadTooLarge(len(data), level.name, capacity(version, level))

    codewords = encode_codewords(data, version, level)
    return assemble(codewords, version, level)


def finalize(assembled: AssembledMatrix, mask_id: int,
             inverted: Iterable[Tuple[int, int]] = ()) -> QrSymbol:
    """
    Mask an assembled matrix, write format/version info and freeze it.

    Args:
        assembled: Output of ``prepare``
        mask_id: Mask pattern (0-7)
        inverted: Data modules to flip after masking

    Returns:
        The finished, immutable symbol
    """
    check_mask(mask_id)
    matrix = assembled.matrix.copy()
    apply_mask(matrix, mask_id)
    for row, col in inverted:
        matrix.flip(row, col)
    write_format_info(matrix, assembled.ec_level, mask_id)
    write_version_info(matrix)
    return matrix.freeze(assembled.ec_level, mask_id)


def encode(payload: Payload, ec_level: Level = DEFAULT_EC_LEVEL,
           mask: Optional[int] = None, version: Optional[int] = None) -> QrSymbol:
    """
    Generate a QR symbol for the given payload.

    Args:
        payload: Bytes or text to encode
        ec_level: 'L' (7%), 'M' (15%), 'Q' (25%), or 'H' (30%)
        mask: Mask pattern 0-7, or None to pick the lowest-penalty mask
        version: Symbol version (1-10), or None to auto-detect

    Returns:
        The finished symbol
    """
    # Reject bad configuration before doing any work
    level = ECLevel.parse(ec_level)
    if mask is not None:
        check_mask(mask)

    assembled = prepare(payload, level, version)
    if mask is None:
        mask, penalty = select_best_mask(assembled.matrix, level)
        logger.debug("Selected mask %d (penalty: %d)", mask, penalty)

    symbol = finalize(assembled, mask)
    logger.debug("Generated version %d-%s symbol with mask %d",
                 symbol.version, level.name, mask)
    return symbol

"""
qrshield: QR symbols for wallet addresses, with anti-photography rotation.

Includes:
- Galois Field GF(256) arithmetic and Reed-Solomon error correction
- Byte-mode data encoding for versions 1-10
- Function patterns, format and version information
- Data masking with penalty calculation
- Protected variation sets rotated on a display clock

Based on: ISO/IEC 18004 and Thonky's QR Code Tutorial
"""

from qrshield.capacity import ECLevel, select_version
from qrshield.encoder import encode, finalize, prepare
from qrshield.exceptions import (AllocationFailed, EncodingOverflow, InvalidEcLevel, InvalidMask,
                                 InvalidProtectionConfig, NoVariationsGenerated, PayloadTooLarge,
                                 QRError)
from qrshield.masking import select_best_mask
from qrshield.matrix import QrSymbol
from qrshield.protection import (ProtectionLevel, ProtectionParams, ProtectionRotator,
                                 ProtectionSchedule, RotatorState, VariationSet)
from qrshield.sources import PlainSource, ProtectedSource, SymbolSource

__version__ = "0.1.0"

__all__ = [
    "AllocationFailed",
    "ECLevel",
    "EncodingOverflow",
    "InvalidEcLevel",
    "InvalidMask",
    "InvalidProtectionConfig",
    "NoVariationsGenerated",
    "PayloadTooLarge",
    "PlainSource",
    "ProtectedSource",
    "ProtectionLevel",
    "ProtectionParams",
    "ProtectionRotator",
    "ProtectionSchedule",
    "QRError",
    "QrSymbol",
    "RotatorState",
    "SymbolSource",
    "VariationSet",
    "encode",
    "finalize",
    "prepare",
    "select_best_mask",
    "select_version",
]

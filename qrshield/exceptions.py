"""Errors raised by the encoder and the protection rotator."""


class QRError(Exception):
    """Base class for every error raised by qrshield."""


class PayloadTooLarge(QRError):
    """The payload does not fit any supported version at the requested level."""

    def __init__(self, length: int, level: str, capacity: int):
        self.length = length
        self.level = level
        self.capacity = capacity
        super().__init__(
            f"Payload of {length} bytes exceeds the {capacity}-byte capacity "
            f"available at level {level}"
        )


class AllocationFailed(QRError):
    """A matrix or scratch buffer could not be provided for this build."""


class EncodingOverflow(QRError):
    """Internal invariant breach: the codeword stream overran its version."""


class InvalidMask(QRError, ValueError):
    """Mask id outside 0..7."""


class InvalidEcLevel(QRError, ValueError):
    """Unknown error correction level."""


class InvalidProtectionConfig(QRError, ValueError):
    """Protection parameters outside their allowed ranges."""


class NoVariationsGenerated(QRError):
    """Every variation attempt for a payload failed."""

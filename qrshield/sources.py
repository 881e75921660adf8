"""
Symbol sources for display code.

A display loop holds one ``SymbolSource`` chosen at the call site: a
``PlainSource`` for an ordinary symbol or a ``ProtectedSource`` that rotates
variations. Both are driven the same way:

    source.show(address)
    every frame: source.tick(frame); draw(source.current())

Neither ever raises out of ``show`` or ``tick`` for encoding problems.
When nothing can be built, ``current()`` returns None and the display shows
its "cannot display" state.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

from qrshield.capacity import ECLevel
from qrshield.codewords import Payload, as_bytes
from qrshield.config import DEFAULT_EC_LEVEL
from qrshield.encoder import encode
from qrshield.exceptions import NoVariationsGenerated, QRError
from qrshield.matrix import QrSymbol
from qrshield.protection import ProtectionRotator

logger = logging.getLogger(__name__)


class SymbolSource(ABC):
    """Something that can hand a renderer the symbol to draw this frame."""

    @abstractmethod
    def show(self, payload: Payload) -> bool:
        """Switch to a new payload. Returns False if it cannot be displayed."""

    @abstractmethod
    def tick(self, now: int) -> bool:
        """Advance one display tick. Returns True if the symbol changed."""

    @abstractmethod
    def current(self) -> Optional[QrSymbol]:
        """Symbol to draw, or None when nothing can be displayed."""

    @property
    def can_display(self) -> bool:
        return self.current() is not None


class PlainSource(SymbolSource):
    """One standard symbol per payload."""

    def __init__(self, ec_level: Union[ECLevel, str] = DEFAULT_EC_LEVEL,
                 mask: Optional[int] = None):
        self.ec_level = ECLevel.parse(ec_level)
        self.mask = mask
        self._symbol: Optional[QrSymbol] = None

    def show(self, payload: Payload) -> bool:
        try:
            self._symbol = encode(payload, self.ec_level, self.mask)
        except QRError as exc:
            logger.error("Cannot display QR code: %s", exc)
            self._symbol = None
        return self._symbol is not None

    def tick(self, now: int) -> bool:
        return False

    def current(self) -> Optional[QrSymbol]:
        return self._symbol


class ProtectedSource(SymbolSource):
    """
    Rotating variations from a ``ProtectionRotator``.

    If no variation can be built, falls back to one standard symbol; if even
    that fails, nothing is displayed.

    Args:
        rotator: The display context's rotator
        ec_level: Requested error correction level
        incremental: Build one variation per tick instead of all in ``show``
    """

    def __init__(self, rotator: ProtectionRotator,
                 ec_level: Union[ECLevel, str] = DEFAULT_EC_LEVEL,
                 incremental: bool = False):
        self.rotator = rotator
        self.ec_level = ECLevel.parse(ec_level)
        self.incremental = incremental
        self._payload: Optional[bytes] = None
        self._fallback: Optional[QrSymbol] = None
        self._failed = False

    def show(self, payload: Payload) -> bool:
        self._payload = as_bytes(payload)
        self._fallback = None
        self._failed = False
        try:
            if self.incremental:
                self.rotator.begin(self._payload, self.ec_level)
                return True
            self.rotator.generate_variations(self._payload, self.ec_level)
        except NoVariationsGenerated as exc:
            logger.warning("Protection unavailable, showing a standard QR code: %s", exc)
            self._use_fallback()
        except QRError as exc:
            logger.error("Cannot display QR code: %s", exc)
            self._failed = True
        return self.can_display

    def _use_fallback(self) -> None:
        try:
            self._fallback = encode(self._payload, self.ec_level)
        except QRError as exc:
            logger.error("Cannot display QR code: %s", exc)
            self._failed = True

    def tick(self, now: int) -> bool:
        changed = self.rotator.tick(now)
        if (self.incremental and self._fallback is None and not self._failed
                and isinstance(self.rotator.last_error, NoVariationsGenerated)):
            logger.warning("Protection unavailable, showing a standard QR code: %s",
                           self.rotator.last_error)
            self._use_fallback()
            changed = True
        return changed

    def current(self) -> Optional[QrSymbol]:
        if self._failed or self._payload is None:
            return None
        if self._fallback is not None:
            return self._fallback
        variations = self.rotator.variations
        # Never show a symbol for a previous payload while a new one builds
        if variations is None or variations.payload != self._payload:
            return None
        return self.rotator.current()

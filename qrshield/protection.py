"""
Anti-photography protection.

Builds several valid symbols for the same payload, each visibly different
(different mask, optionally a lower EC level, a larger version, or a little
bounded module noise), and rotates between them on the display clock. A
scanner reading the live display decodes any of them; a single photograph
catches only one frame.

The rotator is single-threaded and tick driven. A full set can be built in
one call (``generate_variations``) or one variation per tick
(``begin`` + ``tick``/``step``); either way the new set replaces the old one
only once it is complete.
"""

import logging
import random
from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from qrshield.assembler import NO_BLOCK, AssembledMatrix
from qrshield.capacity import ECLevel, select_version
from qrshield.codewords import Payload, as_bytes
from qrshield.config import (DEFAULT_EC_LEVEL, DEFAULT_FRAME_RATE, MAX_INVERT_PERCENTAGE,
                             MAX_REFRESH_RATE, MAX_VARIATIONS, MAX_VERSION)
from qrshield.encoder import finalize, prepare
from qrshield.exceptions import (EncodingOverflow, InvalidProtectionConfig,
                                 NoVariationsGenerated, QRError)
from qrshield.masking import select_best_mask
from qrshield.matrix import QrSymbol
from qrshield.reed_solomon import max_correctable_errors

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]


#==============================================================================
# PARAMETERS AND PRESETS
#==============================================================================

class ProtectionLevel(IntEnum):
    OFF = 0      # Protection disabled, one standard symbol
    LOW = 1      # 5 FPS, mask variations only
    MEDIUM = 2   # 7 FPS, reduced redundancy and module noise
    HIGH = 3     # 10 FPS, minimal redundancy and more noise
    CUSTOM = 4   # Parameters set explicitly


@dataclass(frozen=True)
class ProtectionParams:
    """
    How variations differ and how fast they rotate.

    Attributes:
        refresh_rate: Variation switches per second (0 never switches)
        variation_count: Symbols per set (1-8)
        randomize_function_patterns: Re-roll the remainder modules that
            carry no codeword bits
        reduce_ecc: Build odd variations at ``custom_ecc_level`` when it is
            lower than the requested level
        alternate_encoding: Build odd variations one version larger
        custom_ecc_level: Level used by ``reduce_ecc``
        invert_modules: Flip a bounded number of data modules
        invert_percentage: Share of the symbol's modules to flip (0-20),
            capped per RS block
    """

    refresh_rate: int = 0
    variation_count: int = 1
    randomize_function_patterns: bool = False
    reduce_ecc: bool = False
    alternate_encoding: bool = False
    custom_ecc_level: ECLevel = ECLevel.Q
    invert_modules: bool = False
    invert_percentage: int = 0

    def __post_init__(self):
        if not 0 <= self.refresh_rate <= MAX_REFRESH_RATE:
            raise InvalidProtectionConfig(
                f"refresh_rate must be 0..{MAX_REFRESH_RATE}, got {self.refresh_rate}")
        if not 1 <= self.variation_count <= MAX_VARIATIONS:
            raise InvalidProtectionConfig(
                f"variation_count must be 1..{MAX_VARIATIONS}, got {self.variation_count}")
        if not 0 <= self.invert_percentage <= MAX_INVERT_PERCENTAGE:
            raise InvalidProtectionConfig(
                f"invert_percentage must be 0..{MAX_INVERT_PERCENTAGE}, got {self.invert_percentage}")
        object.__setattr__(self, 'custom_ecc_level', ECLevel.parse(self.custom_ecc_level))

    @property
    def enabled(self) -> bool:
        return self.refresh_rate > 0

    def switch_interval(self, frame_rate: int = DEFAULT_FRAME_RATE) -> int:
        """Ticks between switches; 0 means never switch."""
        if not self.enabled:
            return 0
        return max(1, frame_rate // self.refresh_rate)

    @classmethod
    def for_level(cls, level: ProtectionLevel) -> 'ProtectionParams':
        if level == ProtectionLevel.CUSTOM:
            raise InvalidProtectionConfig("CUSTOM has no preset; pass ProtectionParams instead")
        return LEVEL_PRESETS[ProtectionLevel(level)]


LEVEL_PRESETS: Dict[ProtectionLevel, ProtectionParams] = {
    ProtectionLevel.OFF: ProtectionParams(),
    ProtectionLevel.LOW: ProtectionParams(refresh_rate=5, variation_count=4),
    ProtectionLevel.MEDIUM: ProtectionParams(
        refresh_rate=7, variation_count=8, randomize_function_patterns=True,
        reduce_ecc=True, alternate_encoding=True, custom_ecc_level=ECLevel.M,
        invert_modules=True, invert_percentage=10),
    ProtectionLevel.HIGH: ProtectionParams(
        refresh_rate=10, variation_count=8, randomize_function_patterns=True,
        reduce_ecc=True, alternate_encoding=True, custom_ecc_level=ECLevel.L,
        invert_modules=True, invert_percentage=20),
}


#==============================================================================
# VARIATION SET AND SCHEDULE
#==============================================================================

class VariationSet(SequenceABC):
    """Immutable, bounded sequence of symbols encoding one payload."""

    capacity = MAX_VARIATIONS

    def __init__(self, payload: bytes, symbols: Iterable[QrSymbol]):
        symbols = tuple(symbols)
        if not 1 <= len(symbols) <= self.capacity:
            raise ValueError(f"A variation set holds 1..{self.capacity} symbols, got {len(symbols)}")
        self._payload = bytes(payload)
        self._symbols = symbols

    @property
    def payload(self) -> bytes:
        return self._payload

    def __getitem__(self, index):
        return self._symbols[index]

    def __len__(self) -> int:
        return len(self._symbols)

    def mask_ids(self) -> List[int]:
        return [symbol.mask_id for symbol in self._symbols]

    def __repr__(self) -> str:
        return f"VariationSet({len(self)} symbols, masks={self.mask_ids()})"


@dataclass
class ProtectionSchedule:
    """Which variation is showing and when it last changed."""

    current_index: int = 0
    switch_interval: int = 0
    last_switch_tick: Optional[int] = None

    def advance(self, now: int, count: int) -> bool:
        """
        Move to the next variation once the interval has elapsed.

        The first call only anchors the schedule to the caller's clock.

        Returns:
            True if the current index changed
        """
        if self.last_switch_tick is None:
            self.last_switch_tick = now
            return False
        if self.switch_interval <= 0 or count <= 1:
            return False
        if now - self.last_switch_tick >= self.switch_interval:
            self.current_index = (self.current_index + 1) % count
            self.last_switch_tick = now
            return True
        return False


#==============================================================================
# MODULE NOISE
#==============================================================================

def inversion_budget(ecc_len: int) -> int:
    """Most module flips allowed in one RS block: half of what a decoder can repair."""
    return max_correctable_errors(ecc_len) // 2


def inversions_per_block(assembled: AssembledMatrix, cells: Iterable[Cell]) -> List[int]:
    """Count flipped cells landing in each RS block."""
    counts = [0] * len(assembled.blocks)
    for row, col in cells:
        block = assembled.owner[row][col]
        if block != NO_BLOCK:
            counts[block] += 1
    return counts


def choose_inversions(assembled: AssembledMatrix, percentage: int,
                      rng: random.Random) -> List[Cell]:
    """
    Pick data modules to flip.

    Aims for ``percentage`` percent of all modules, but never exceeds
    ``inversion_budget`` flips in any RS block, so every block stays well
    inside what a scanner can correct.
    """
    size = assembled.matrix.size
    target = (size * size * min(percentage, MAX_INVERT_PERCENTAGE)) // 100
    budgets = [inversion_budget(ecc_len) for ecc_len in assembled.ecc_lengths()]
    used = [0] * len(budgets)

    candidates = [(r, c) for r in range(size) for c in range(size)
                  if assembled.owner[r][c] != NO_BLOCK]
    rng.shuffle(candidates)

    chosen = []
    for row, col in candidates:
        if len(chosen) >= target:
            break
        block = assembled.owner[row][col]
        if used[block] < budgets[block]:
            used[block] += 1
            chosen.append((row, col))
    return chosen


def choose_remainder_noise(assembled: AssembledMatrix, rng: random.Random) -> List[Cell]:
    """Random subset of the remainder modules; decoders never read them."""
    return [cell for cell in assembled.remainder_cells() if rng.random() < 0.5]


#==============================================================================
# ROTATOR
#==============================================================================

class RotatorState(Enum):
    IDLE = "idle"
    GENERATING = "generating"
    ACTIVE = "active"


@dataclass
class _VariationPlan:
    index: int
    ec_level: ECLevel
    version_step: int
    mask_id: Optional[int]  # None selects the lowest-penalty mask


@dataclass
class _PendingBuild:
    payload: bytes
    ec_level: ECLevel
    requested_count: Optional[int]
    params: ProtectionParams
    plans: List[_VariationPlan]
    built: List[QrSymbol] = field(default_factory=list)
    position: int = 0

    @property
    def done(self) -> bool:
        return self.position >= len(self.plans)


class ProtectionRotator:
    """
    Owns one display context's variation set and rotation schedule.

    Create one per display and pass it to whatever needs it; nothing here is
    global. Renderers only read ``current()`` and must not mutate the symbol
    (symbols are frozen anyway).

    States: IDLE (nothing built), GENERATING (a build is in progress; a
    previously completed set, if any, keeps displaying), ACTIVE.
    """

    def __init__(self, params: Optional[ProtectionParams] = None,
                 frame_rate: int = DEFAULT_FRAME_RATE, seed: Optional[int] = None):
        if frame_rate < 1:
            raise InvalidProtectionConfig(f"frame_rate must be positive, got {frame_rate}")
        self._params = params or LEVEL_PRESETS[ProtectionLevel.OFF]
        self._level = ProtectionLevel.CUSTOM if params is not None else ProtectionLevel.OFF
        self.frame_rate = frame_rate
        self.seed = seed
        self.state = RotatorState.IDLE
        self.last_error: Optional[QRError] = None
        self._active: Optional[VariationSet] = None
        self._schedule: Optional[ProtectionSchedule] = None
        self._pending: Optional[_PendingBuild] = None

    # -- configuration --------------------------------------------------------

    @property
    def params(self) -> ProtectionParams:
        return self._params

    @property
    def level(self) -> ProtectionLevel:
        return self._level

    def set_level(self, level: ProtectionLevel) -> None:
        """
        Switch to a preset. CUSTOM keeps the current parameters.

        A build in progress restarts under the new parameters.
        """
        level = ProtectionLevel(level)
        if level != ProtectionLevel.CUSTOM:
            self._params = LEVEL_PRESETS[level]
        self._level = level
        self._sync_interval()
        self._restart_pending()
        logger.info("Protection level set to %s", level.name)

    def set_params(self, params: ProtectionParams) -> None:
        """Use explicit parameters; restarts a build in progress like ``set_level``."""
        self._params = params
        self._level = ProtectionLevel.CUSTOM
        self._sync_interval()
        self._restart_pending()
        logger.info("Custom protection params set (refresh rate %d)", params.refresh_rate)

    def _sync_interval(self) -> None:
        if self._schedule is not None:
            self._schedule.switch_interval = self._params.switch_interval(self.frame_rate)

    def _restart_pending(self) -> None:
        """Re-plan an unfinished build so one set never mixes two configurations."""
        pending = self._pending
        if pending is None or pending.params == self._params:
            return
        logger.info("Parameters changed mid-build; restarting %d variation(s)", len(pending.plans))
        self.begin(pending.payload, pending.ec_level, pending.requested_count)

    # -- building -------------------------------------------------------------

    def begin(self, payload: Payload, ec_level: Union[ECLevel, str, None] = None,
              count: Optional[int] = None) -> None:
        """
        Start building a new set for ``payload``, discarding any build in progress.

        Invalid levels or counts are rejected here, before any work.
        """
        level = ECLevel.parse(ec_level if ec_level is not None else DEFAULT_EC_LEVEL)
        requested_count = count
        if count is None:
            count = self._params.variation_count
        if not 1 <= count <= MAX_VARIATIONS:
            raise InvalidProtectionConfig(f"count must be 1..{MAX_VARIATIONS}, got {count}")

        if self._pending is not None:
            logger.debug("Discarding unfinished build of %d variation(s)", len(self._pending.plans))

        self._pending = _PendingBuild(as_bytes(payload), level, requested_count, self._params,
                                     self._plan(level, count))
        self.last_error = None
        self.state = RotatorState.GENERATING

    def _plan(self, level: ECLevel, count: int) -> List[_VariationPlan]:
        params = self._params
        if count == 1 and not params.enabled:
            return [_VariationPlan(0, level, 0, None)]

        plans = []
        for k in range(count):
            variation_level = level
            version_step = 0
            if k % 2 == 1:
                if params.reduce_ecc and params.custom_ecc_level < level:
                    variation_level = params.custom_ecc_level
                if params.alternate_encoding:
                    version_step = 1
            plans.append(_VariationPlan(k, variation_level, version_step, k % 8))
        return plans

    def step(self) -> bool:
        """
        Build the next pending variation.

        Returns:
            True when this call completed the set and made it active

        Raises:
            NoVariationsGenerated: the build finished without a single symbol
        """
        pending = self._pending
        if pending is None:
            return False

        plan = pending.plans[pending.position]
        pending.position += 1
        try:
            pending.built.append(self._build_variation(pending.payload, plan, pending.params))
        except QRError as exc:
            logger.warning("Variation %d failed and was dropped: %s", plan.index, exc)

        if not pending.done:
            return False

        self._pending = None
        if not pending.built:
            self.state = RotatorState.ACTIVE if self._active is not None else RotatorState.IDLE
            error = NoVariationsGenerated(
                f"None of {len(pending.plans)} variation(s) could be built")
            self.last_error = error
            raise error

        self._active = VariationSet(pending.payload, pending.built)
        self._schedule = ProtectionSchedule(
            switch_interval=pending.params.switch_interval(self.frame_rate))
        self.state = RotatorState.ACTIVE
        logger.info("Generated %d of %d QR variation(s)", len(pending.built), len(pending.plans))
        return True

    def generate_variations(self, payload: Payload, ec_level: Union[ECLevel, str, None] = None,
                            count: Optional[int] = None) -> VariationSet:
        """
        Build a complete set in one call and make it active.

        Args:
            payload: Bytes or text every variation encodes
            ec_level: Requested error correction level (default Q)
            count: Number of variations, default ``params.variation_count``

        Returns:
            The new active set. Failed variations are dropped, so it may be
            shorter than ``count``.

        Raises:
            NoVariationsGenerated: no variation could be built; the previous
                set, if any, stays active
        """
        self.begin(payload, ec_level, count)
        while not self.step():
            pass
        return self._active

    def _build_variation(self, payload: bytes, plan: _VariationPlan,
                         params: ProtectionParams) -> QrSymbol:
        version = select_version(len(payload), plan.ec_level)
        if plan.version_step and version + plan.version_step <= MAX_VERSION:
            version += plan.version_step
        assembled = prepare(payload, plan.ec_level, version)

        mask_id = plan.mask_id
        if mask_id is None:
            mask_id, _ = select_best_mask(assembled.matrix, plan.ec_level)

        rng = self._rng(plan.index)
        inverted: List[Cell] = []
        if params.invert_modules and params.invert_percentage > 0:
            inverted.extend(choose_inversions(assembled, params.invert_percentage, rng))
            self._check_budget(assembled, inverted)
        if params.randomize_function_patterns:
            inverted.extend(choose_remainder_noise(assembled, rng))

        symbol = finalize(assembled, mask_id, inverted)
        logger.debug("Variation %d: version %d-%s mask %d, %d module(s) flipped",
                     plan.index, symbol.version, plan.ec_level.name, mask_id, len(inverted))
        return symbol

    @staticmethod
    def _check_budget(assembled: AssembledMatrix, cells: List[Cell]) -> None:
        for block, (count, ecc_len) in enumerate(
                zip(inversions_per_block(assembled, cells), assembled.ecc_lengths())):
            if count > inversion_budget(ecc_len):
                raise EncodingOverflow(
                    f"Block {block} has {count} flipped modules, budget {inversion_budget(ecc_len)}")

    def _rng(self, index: int) -> random.Random:
        if self.seed is None:
            return random.Random()
        return random.Random(self.seed * MAX_VARIATIONS + index)

    # -- display --------------------------------------------------------------

    def tick(self, now: int) -> bool:
        """
        Advance one display tick.

        While a build is pending, one variation is built per tick. Build
        failures are logged and stored in ``last_error``; they never
        propagate out of the tick loop.

        Returns:
            True if the displayed symbol changed
        """
        changed = False
        if self._pending is not None:
            try:
                changed = self.step()
            except NoVariationsGenerated as exc:
                logger.error("Protected QR build failed: %s", exc)

        if self._active is None:
            return changed
        return self._schedule.advance(now, len(self._active)) or changed

    def current(self) -> Optional[QrSymbol]:
        if self._active is None:
            return None
        return self._active[self._schedule.current_index]

    @property
    def variations(self) -> Optional[VariationSet]:
        return self._active

    @property
    def schedule(self) -> Optional[ProtectionSchedule]:
        return self._schedule

    def reset(self) -> None:
        """Drop the active set and any build in progress."""
        self._active = None
        self._schedule = None
        self._pending = None
        self.last_error = None
        self.state = RotatorState.IDLE

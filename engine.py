# engine.py
"""
Page Replacement Engine — Clock (Second Chance) and LRU

Simulates a fixed pool of memory frames servicing a page reference string and
records a snapshot of every intermediate state, so the UI can jump to any step
of the run without replaying it.

Both policies share one contract: an engine owns its frames plus auxiliary
state (use bits and a pointer for Clock, a recency order for LRU) and exposes
``access(page)``. ``simulate()`` drives an engine over the reference string
and assembles the immutable ``SimulationResult``.
"""

import logging
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a simulation is requested with an unusable configuration."""


class ReplacementPolicy:
    """
    Enumeration of available page replacement algorithms.

    CLOCK: Second Chance - sweeps a pointer over use bits, clearing set bits
           and evicting the first page whose bit is already clear
    LRU:   Least Recently Used - evicts the page not used for longest time
    """
    CLOCK = "Clock"
    LRU = "LRU"

    ALL = (CLOCK, LRU)


class Outcome:
    """Result of a single step."""
    INITIAL = "Initial"
    HIT = "Hit"
    FAULT = "Fault"


# =============================================================================
# SIMULATION RESULT - Data Model
# =============================================================================

@dataclass(frozen=True)
class AccessOutcome:
    """
    What happened when an engine serviced one reference.

    Attributes:
        hit (bool): True if the page was already resident
        slot (int): Frame index that was hit or filled
        evicted (Optional[Hashable]): Page removed to make room, None if the
            filled slot was empty or the access was a hit
        inspections (int): Slots the clock pointer looked at (Clock faults only)
    """
    hit: bool
    slot: int
    evicted: Optional[Hashable] = None
    inspections: int = 0


@dataclass(frozen=True)
class Step:
    """
    Immutable snapshot taken after one reference (or before the first one).

    Frames hold page identifiers, with ``None`` marking an empty frame.
    ``use_bits``/``pointer`` are only set for Clock runs and ``recency``
    (least recently used first) only for LRU runs.

    Attributes:
        index (int): Position in the run; 0 is the initial state
        page (Optional[Hashable]): Referenced page, None for the initial step
        outcome (str): One of the ``Outcome`` values
        frames (Tuple): Frame contents after this reference
        previous_frames (Tuple): Frame contents before this reference
        hits (int): Cumulative hits through this step
        faults (int): Cumulative faults through this step
        evicted (Optional[Hashable]): Page evicted by this reference, if any
        slot (Optional[int]): Frame hit or filled by this reference
        inspections (int): Clock pointer inspections made by a fault
        use_bits (Optional[Tuple[int, ...]]): Clock use bits
        pointer (Optional[int]): Clock pointer after this reference
        recency (Optional[Tuple]): LRU order, least recent first
    """
    index: int
    page: Optional[Hashable]
    outcome: str
    frames: Tuple
    previous_frames: Tuple
    hits: int
    faults: int
    evicted: Optional[Hashable] = None
    slot: Optional[int] = None
    inspections: int = 0
    use_bits: Optional[Tuple[int, ...]] = None
    pointer: Optional[int] = None
    recency: Optional[Tuple] = None

    @property
    def is_hit(self) -> bool:
        return self.outcome == Outcome.HIT

    @property
    def is_fault(self) -> bool:
        return self.outcome == Outcome.FAULT

    @property
    def aux_state(self) -> Dict[str, Any]:
        """Policy-specific bookkeeping of this step, keyed by name."""
        if self.recency is not None:
            return {"recency": self.recency}
        return {"use_bits": self.use_bits, "pointer": self.pointer}


@dataclass(frozen=True)
class SimulationResult:
    """
    Complete trace of one run plus final statistics.

    ``steps`` always has one more entry than ``references``: step 0 is the
    state before any reference is serviced. Indexing and iteration go
    straight to the steps.
    """
    policy: str
    frame_count: int
    references: Tuple
    steps: Tuple[Step, ...]
    hits: int
    faults: int
    hit_ratio: float
    miss_ratio: float

    @property
    def total_references(self) -> int:
        return len(self.references)

    @property
    def final_step(self) -> Step:
        return self.steps[-1]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]


def compute_ratios(hits: int, faults: int) -> Tuple[float, float]:
    """
    Calculate hit and miss ratios as percentages.

    Each ratio is rounded to two decimals on its own, so the pair may not add
    up to exactly 100. An empty run has both ratios at 0.

    Args:
        hits (int): Number of page hits
        faults (int): Number of page faults

    Returns:
        Tuple[float, float]: (hit_ratio, miss_ratio)
    """
    total = hits + faults
    if total == 0:
        return 0.0, 0.0
    return round(hits / total * 100, 2), round(faults / total * 100, 2)


# =============================================================================
# POLICY ENGINES
# =============================================================================

def _check_frame_count(frame_count):
    if isinstance(frame_count, bool) or not isinstance(frame_count, int):
        logger.warning("Rejected frame count %r: not an integer", frame_count)
        raise ConfigurationError(f"Frame count must be an integer, got {frame_count!r}")
    if frame_count < 1:
        logger.warning("Rejected frame count %d: must be at least 1", frame_count)
        raise ConfigurationError(f"Frame count must be at least 1, got {frame_count}")


def _check_references(references):
    # None marks an empty frame, and LRU keys its recency order by page
    for position, page in enumerate(references, start=1):
        if page is None:
            logger.warning("Rejected reference %d: None is not a page", position)
            raise ConfigurationError(f"Reference {position} is None; None marks an empty frame")
        try:
            hash(page)
        except TypeError:
            logger.warning("Rejected reference %d: unhashable page %r", position, page)
            raise ConfigurationError(
                f"Reference {position} must be hashable, got {type(page).__name__}"
            ) from None


class PolicyEngine(ABC):
    """
    Base class for the replacement engines.

    Owns the frame list for a single run. Subclasses add their own auxiliary
    state and implement ``access()`` and ``aux_snapshot()``.
    """
    policy: Optional[str] = None

    def __init__(self, frame_count: int):
        # Validate before any frame state exists
        _check_frame_count(frame_count)
        self.frame_count = frame_count
        self.frames: List[Optional[Hashable]] = [None] * frame_count

    @abstractmethod
    def access(self, page: Hashable) -> AccessOutcome:
        """Service one reference, updating frames and auxiliary state."""

    @abstractmethod
    def aux_snapshot(self) -> Dict[str, Any]:
        """Frozen copy of the auxiliary state, as ``Step`` keyword arguments."""


class ClockEngine(PolicyEngine):
    """
    Second Chance (Clock) replacement.

    Every frame carries a use bit. A hit sets the bit and leaves the pointer
    alone. On a fault the pointer sweeps the frames: a set bit is cleared
    and skipped, the first clear bit is replaced. Empty frames have a clear
    bit, so they fill in pointer order.
    """
    policy = ReplacementPolicy.CLOCK

    def __init__(self, frame_count: int):
        super().__init__(frame_count)
        self.use_bits: List[int] = [0] * frame_count
        self.pointer = 0

    def access(self, page: Hashable) -> AccessOutcome:
        # ----- PAGE HIT -----
        for slot, resident in enumerate(self.frames):
            if resident is not None and resident == page:
                self.use_bits[slot] = 1
                return AccessOutcome(hit=True, slot=slot)

        # ----- PAGE FAULT -----
        # Each inspection either uses the slot or clears its bit, so a full
        # sweep leaves every bit clear and the scan stops within two passes.
        inspections = 0
        while True:
            slot = self.pointer
            inspections += 1
            self.pointer = (slot + 1) % self.frame_count
            if self.use_bits[slot] == 0:
                evicted = self.frames[slot]
                self.frames[slot] = page
                self.use_bits[slot] = 1
                return AccessOutcome(hit=False, slot=slot, evicted=evicted,
                                     inspections=inspections)
            self.use_bits[slot] = 0  # second chance

    def aux_snapshot(self) -> Dict[str, Any]:
        return {"use_bits": tuple(self.use_bits), "pointer": self.pointer}


class LRUEngine(PolicyEngine):
    """
    Least Recently Used replacement.

    The recency order maps each resident page to its frame, least recently
    used first. A hit moves the page to the end; a fault fills the lowest
    empty frame, or evicts the page at the front when memory is full.
    """
    policy = ReplacementPolicy.LRU

    def __init__(self, frame_count: int):
        super().__init__(frame_count)
        self.recency: "OrderedDict[Hashable, int]" = OrderedDict()

    def access(self, page: Hashable) -> AccessOutcome:
        # ----- PAGE HIT -----
        if page in self.recency:
            self.recency.move_to_end(page)
            return AccessOutcome(hit=True, slot=self.recency[page])

        # ----- PAGE FAULT -----
        evicted = None
        if len(self.recency) < self.frame_count:
            slot = self.frames.index(None)
        else:
            evicted, slot = self.recency.popitem(last=False)

        self.frames[slot] = page
        self.recency[page] = slot
        return AccessOutcome(hit=False, slot=slot, evicted=evicted)

    def aux_snapshot(self) -> Dict[str, Any]:
        return {"recency": tuple(self.recency)}


_ENGINES = {
    ReplacementPolicy.CLOCK: ClockEngine,
    ReplacementPolicy.LRU: LRUEngine,
}


def create_engine(policy: str, frame_count: int) -> PolicyEngine:
    """
    Build a fresh engine for the given policy.

    Raises:
        ConfigurationError: If the policy is unknown or frame_count < 1
    """
    engine_cls = _ENGINES.get(policy)
    if engine_cls is None:
        logger.warning("Rejected unknown replacement policy %r", policy)
        raise ConfigurationError(
            f"Unknown replacement policy {policy!r}; expected one of {', '.join(ReplacementPolicy.ALL)}"
        )
    return engine_cls(frame_count)


# =============================================================================
# SIMULATION DRIVER
# =============================================================================

def simulate(policy: str, references: Sequence[Hashable], frame_count: int) -> SimulationResult:
    """
    Run a replacement policy over a reference string.

    The whole trace is materialised up front. The same inputs always give an
    equal result.

    Pages may be any hashable value except ``None``, which marks an empty
    frame. Both policies apply the same check, so a reference string is
    either accepted or rejected regardless of the policy.

    Args:
        policy (str): ``ReplacementPolicy.CLOCK`` or ``ReplacementPolicy.LRU``
        references (Sequence[Hashable]): Page identifiers in reference order
        frame_count (int): Number of physical frames, at least 1

    Returns:
        SimulationResult: One step per reference plus the initial step

    Raises:
        ConfigurationError: If the policy is unknown, frame_count < 1, or a
            reference is None or unhashable
    """
    engine = create_engine(policy, frame_count)
    references = tuple(references)
    _check_references(references)

    initial_frames = tuple(engine.frames)
    steps = [Step(
        index=0,
        page=None,
        outcome=Outcome.INITIAL,
        frames=initial_frames,
        previous_frames=initial_frames,
        hits=0,
        faults=0,
        **engine.aux_snapshot(),
    )]

    hits = 0
    faults = 0
    for index, page in enumerate(references, start=1):
        previous_frames = tuple(engine.frames)
        access = engine.access(page)
        if access.hit:
            hits += 1
        else:
            faults += 1
            if access.evicted is not None:
                logger.debug("Step %d: evicted page %s from frame %d for page %s",
                             index, access.evicted, access.slot, page)

        steps.append(Step(
            index=index,
            page=page,
            outcome=Outcome.HIT if access.hit else Outcome.FAULT,
            frames=tuple(engine.frames),
            previous_frames=previous_frames,
            hits=hits,
            faults=faults,
            evicted=access.evicted,
            slot=access.slot,
            inspections=access.inspections,
            **engine.aux_snapshot(),
        ))

    hit_ratio, miss_ratio = compute_ratios(hits, faults)
    logger.debug("%s run: frames=%d references=%d hits=%d faults=%d",
                 engine.policy, frame_count, len(references), hits, faults)

    return SimulationResult(
        policy=engine.policy,
        frame_count=frame_count,
        references=references,
        steps=tuple(steps),
        hits=hits,
        faults=faults,
        hit_ratio=hit_ratio,
        miss_ratio=miss_ratio,
    )

"""War rule variations."""

from dataclasses import dataclass
from typing import Literal

from war.limiter import DEFAULT_COOLDOWN_MS

WarPolicy = Literal["immediate", "chain"]


@dataclass(frozen=True)
class RuleSet:
    """
    War table rules configuration.

    Every rule that varies between editions of the game lives here so the
    engine itself carries no magic numbers.
    """

    # Deck configuration (54 cards when the nuke cards are included)
    include_special_cards: bool = False

    # Cards each side puts face-down when a war starts
    war_face_down: int = 3

    # How a second tie during a war is handled:
    # "immediate" resolves on the next draw no matter what,
    # "chain" stacks another war onto the pile
    war_policy: WarPolicy = "immediate"

    # Nuke: outright win at or below the threshold, otherwise capture
    nuke_threshold: int = 10
    nuke_capture: int = 10

    # Force a war every N moves to bound game length (None disables)
    forced_war_interval: int | None = None

    # Minimum time between accepted moves
    cooldown_ms: int = DEFAULT_COOLDOWN_MS

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.war_face_down < 1:
            raise ValueError("war_face_down must be at least 1")
        if self.war_policy not in ("immediate", "chain"):
            raise ValueError(f"Unknown war_policy: {self.war_policy}")
        if self.nuke_threshold < 0:
            raise ValueError("nuke_threshold cannot be negative")
        if self.nuke_capture < 1:
            raise ValueError("nuke_capture must be at least 1")
        if self.forced_war_interval is not None and self.forced_war_interval < 2:
            raise ValueError("forced_war_interval must be at least 2")
        if self.cooldown_ms < 0:
            raise ValueError("cooldown_ms cannot be negative")

    @property
    def total_cards(self) -> int:
        """Number of cards in play for a game under these rules."""
        return 54 if self.include_special_cards else 52

    @classmethod
    def classic(cls) -> "RuleSet":
        """Plain 52-card War."""
        return cls()

    @classmethod
    def nuclear(cls) -> "RuleSet":
        """54-card War with nuke cards and a forced war every 12 moves."""
        return cls(
            include_special_cards=True,
            nuke_threshold=10,
            nuke_capture=10,
            forced_war_interval=12,
        )

    @classmethod
    def chained(cls) -> "RuleSet":
        """Re-ties during a war extend the war instead of resolving it."""
        return cls(war_policy="chain")

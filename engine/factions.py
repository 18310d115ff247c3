"""Hidden faction assignment at match start."""

from __future__ import annotations

from typing import Sequence

from core.constants import Faction

from .random_source import RandomSource, shuffled


def faction_pool(resistance: int, spies: int) -> list[Faction]:
    """Build the list of faction cards for a match."""
    return [Faction.RESISTANCE] * resistance + [Faction.SPY] * spies


def assign_factions(
    names: Sequence[str],
    split: tuple[int, int],
    rng: RandomSource,
) -> dict[str, Faction]:
    """Randomly partition players into factions.

    The faction cards are shuffled and dealt in join order, so every
    partition that respects the split is equally likely.

    Args:
        names: Player names in join order.
        split: (resistance, spies) counts; must sum to len(names).
        rng: Source of random indices.

    Returns:
        Mapping of player name to faction, in join order.

    Raises:
        ValueError: If the split does not cover exactly the given players.
    """
    resistance, spies = split
    if resistance + spies != len(names):
        raise ValueError(
            f"Faction split {resistance}/{spies} does not cover {len(names)} players"
        )

    factions = shuffled(faction_pool(resistance, spies), rng)
    return dict(zip(names, factions))

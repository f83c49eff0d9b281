# rpgcore/systems/combat/targeting.py
from __future__ import annotations

from typing import List, Sequence, Tuple

from ...models import CombatantIdentity, Owner
from .interface import StatsProvider


def valid_targets(
    combatants: Sequence[Tuple[Owner, CombatantIdentity]],
    actor: CombatantIdentity,
    provider: StatsProvider,
) -> List[CombatantIdentity]:
    """
    Everyone the actor could swing at, in turn order:
    every other combatant that still resolves and isn't dead or dying.
    Allies are included; friendly fire is the owner's call.
    """
    out: List[CombatantIdentity] = []
    for _, ident in combatants:
        if ident == actor:
            continue
        stats = provider.lookup(ident)
        if stats is None or stats.status_effects.is_untargetable():
            continue
        out.append(ident)
    return out

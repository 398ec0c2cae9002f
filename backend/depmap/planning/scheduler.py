# backend/depmap/planning/scheduler.py
"""
Wave Scheduler - assigns every server to a migration wave.

Phases:
1. Wave 1: low-risk servers (criticality <= 15), whatever their dependencies
2. Wave 2: servers without dependencies and criticality <= 40
3. Waves 3+: rounds placing servers whose dependencies are all placed
4. Circular fallback: whatever is left goes into one final wave
5. Regroup into contiguous, sorted WaveGroups

Each phase is a function SchedulerState -> SchedulerState.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from depmap.graph.builder import dependency_map
from depmap.ir.dependency_ir import DependencyRecord
from depmap.ir.wave_ir import SchedulerState, WaveGroup, WaveScheduleResult
from depmap.planning.criticality import CriticalityRules, score_all

LOW_RISK_MAX = 15
INDEPENDENT_MAX = 40
DEFER_BELOW = 40

FIRST_DEPENDENCY_WAVE = 3
ROUND_CAP_SLACK = 10

Deps = Mapping[str, Set[str]]
Scores = Mapping[str, int]


@dataclass(frozen=True)
class RoundOutcome:
    placed: Tuple[str, ...] = ()
    deferred: Tuple[str, ...] = ()

    @property
    def progressed(self) -> bool:
        return bool(self.placed or self.deferred)


def by_risk(servers: Iterable[str], scores: Scores) -> List[str]:
    """Least critical first; name breaks ties."""
    return sorted(servers, key=lambda s: (scores[s], s))


# -------------------------
# Phase 1 / Phase 2
# -------------------------

def place_low_risk(state: SchedulerState, scores: Scores) -> SchedulerState:
    picks = {s: 1 for s in by_risk(state.remaining, scores) if scores[s] <= LOW_RISK_MAX}
    return state.place(picks)


def place_independent(state: SchedulerState, deps: Deps, scores: Scores) -> SchedulerState:
    picks = {
        s: 2 for s in by_risk(state.remaining, scores)
        if not deps.get(s) and scores[s] <= INDEPENDENT_MAX
    }
    return state.place(picks)


# -------------------------
# Phase 3
# -------------------------

def run_round(
    state: SchedulerState,
    deps: Deps,
    scores: Scores,
    current_wave: int,
) -> Tuple[SchedulerState, RoundOutcome]:
    """
    One pass over the unplaced servers, least critical first.

    A server is a candidate once every dependency has a wave (including
    ones placed earlier in this same pass). Its natural wave is
    max(dependency wave) + 1, or the current wave when it has none.
    - natural <= current: joins the current wave
    - natural > current and criticality < 40: held back to a later round
    - natural > current otherwise: placed at its natural wave
    """
    working: Dict[str, int] = dict(state.assigned)
    placed: Dict[str, int] = {}
    deferred: List[str] = []

    for server in by_risk(state.remaining, scores):
        targets = deps.get(server, set())
        if any(t not in working for t in targets):
            continue

        natural = max((working[t] for t in targets), default=current_wave - 1) + 1

        if natural > current_wave and scores[server] < DEFER_BELOW:
            deferred.append(server)
            continue

        wave = max(natural, current_wave)
        placed[server] = wave
        working[server] = wave

    return state.place(placed), RoundOutcome(tuple(placed), tuple(deferred))


def place_by_dependencies(
    state: SchedulerState,
    deps: Deps,
    scores: Scores,
    max_rounds: int,
) -> SchedulerState:
    current_wave = FIRST_DEPENDENCY_WAVE
    rounds = 0

    while not state.done and rounds < max_rounds:
        state, outcome = run_round(state, deps, scores, current_wave)
        rounds += 1

        if not outcome.progressed:
            break

        if outcome.placed:
            print(f"[Scheduler] Round {rounds} (wave {current_wave}): placed {len(outcome.placed)}")
        current_wave += 1

    if not state.done and rounds >= max_rounds:
        print(f"[Scheduler] [WARN] Round cap ({max_rounds}) reached with {len(state.remaining)} servers left")

    return state


# -------------------------
# Phase 4 / Phase 5
# -------------------------

def place_circular(
    state: SchedulerState, deps: Deps, scores: Scores
) -> Tuple[SchedulerState, List[str]]:
    """
    Everything still unplaced shares one final wave.

    Returns the new state and the servers that were blocked by a dependency
    still unplaced (cycle members and servers behind a cycle). Servers that
    were only held back by the round cap are placed but not reported.
    """
    leftovers = by_risk(state.remaining, scores)
    if not leftovers:
        return state, []

    blocked = [
        s for s in leftovers
        if any(t in state.remaining for t in deps.get(s, ()))
    ]

    final_wave = state.last_wave + 1
    print(
        f"[Scheduler] [WARN] {len(leftovers)} servers left -> wave {final_wave}"
        f" ({len(blocked)} in or behind circular dependencies)"
    )
    return state.place({s: final_wave for s in leftovers}), blocked


def regroup(assigned: Mapping[str, int]) -> Tuple[List[WaveGroup], Dict[str, int]]:
    """Invert server -> wave, renumber waves 1..n without gaps, sort servers."""
    by_wave: Dict[int, List[str]] = {}
    for server, wave in assigned.items():
        by_wave.setdefault(wave, []).append(server)

    groups = []
    renumbered: Dict[str, int] = {}

    for number, wave in enumerate(sorted(by_wave), start=1):
        servers = sorted(by_wave[wave])
        groups.append(WaveGroup(wave_number=number, servers=servers))
        for server in servers:
            renumbered[server] = number

    return groups, renumbered


def schedule_waves(
    records: Sequence[DependencyRecord],
    rules: Optional[CriticalityRules] = None,
) -> WaveScheduleResult:
    """
    Pure function of `records`. Never raises on cycles, self-loops or
    disconnected servers: every server gets exactly one wave.
    """
    deps = dependency_map(records)
    scores = score_all(deps, rules)
    servers = list(deps)

    print(f"[Scheduler] {len(servers)} servers, {len(records)} connections")

    state = SchedulerState.initial(servers)
    state = place_low_risk(state, scores)
    state = place_independent(state, deps, scores)
    state = place_by_dependencies(
        state, deps, scores, max_rounds=len(servers) + ROUND_CAP_SLACK
    )
    state, circular = place_circular(state, deps, scores)

    waves, assignments = regroup(state.assigned)

    print(f"[Scheduler] ✅ {len(waves)} waves")

    return WaveScheduleResult(
        waves=waves,
        total_servers=len(servers),
        servers_without_dependencies=sum(1 for s in servers if not deps[s]),
        circular_servers=sorted(circular),
        assignments=assignments,
        scores=dict(scores),
    )

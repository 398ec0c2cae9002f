from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping


@dataclass(frozen=True)
class SchedulerState:
    """
    Snapshot threaded through the scheduling rounds.

    Every round function takes a state and returns a new one; nothing is
    mutated in place.
    """
    assigned: Mapping[str, int]
    remaining: FrozenSet[str]

    @classmethod
    def initial(cls, servers) -> "SchedulerState":
        return cls(assigned=MappingProxyType({}), remaining=frozenset(servers))

    def place(self, placements: Mapping[str, int]) -> "SchedulerState":
        if not placements:
            return self
        assigned = dict(self.assigned)
        assigned.update(placements)
        return SchedulerState(
            assigned=MappingProxyType(assigned),
            remaining=self.remaining - frozenset(placements),
        )

    @property
    def done(self) -> bool:
        return not self.remaining

    @property
    def last_wave(self) -> int:
        return max(self.assigned.values(), default=0)


@dataclass
class WaveGroup:
    wave_number: int
    servers: List[str] = field(default_factory=list)

    @property
    def server_count(self) -> int:
        return len(self.servers)

    def to_dict(self) -> dict:
        return {
            "waveNumber": self.wave_number,
            "servers": list(self.servers),
            "serverCount": self.server_count,
        }


@dataclass
class WaveScheduleResult:
    waves: List[WaveGroup] = field(default_factory=list)
    total_servers: int = 0
    servers_without_dependencies: int = 0
    circular_servers: List[str] = field(default_factory=list)
    assignments: Dict[str, int] = field(default_factory=dict)
    scores: Dict[str, int] = field(default_factory=dict)

    @property
    def total_waves(self) -> int:
        return len(self.waves)

    def wave_of(self, server: str) -> int:
        return self.assignments[server]

    def to_dict(self) -> dict:
        return {
            "waves": [wave.to_dict() for wave in self.waves],
            "totalServers": self.total_servers,
            "totalWaves": self.total_waves,
            "serversWithoutDependencies": self.servers_without_dependencies,
            "circularServers": list(self.circular_servers),
            "criticality": dict(self.scores),
        }

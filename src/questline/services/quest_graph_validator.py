"""Static quest graph validation utilities."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, MutableMapping, Sequence

from questline.domain.quest import Quest, Station


Severity = str


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def validate_quest(quest: Quest, *, error_on_pass_through_cycle: bool = False) -> list[Issue]:
    """Validate a constructed quest starting from its entry station."""
    return validate_quest_graph(
        quest.stations,
        quest.entry_station_id,
        error_on_pass_through_cycle=error_on_pass_through_cycle,
    )


def validate_quest_graph(
    stations: Mapping[str, Station] | Sequence[tuple[str, Station]],
    entry_station_id: str,
    *,
    error_on_pass_through_cycle: bool = False,
) -> list[Issue]:
    """Return every issue found in the station table.

    Missing references and a missing entry point are errors. Unreachable
    stations are warnings. Cycles made only of single-choice stations are
    warnings unless ``error_on_pass_through_cycle`` is set.
    """
    issues: list[Issue] = []
    table, duplicate_ids = _coerce_stations(stations)
    for station_id in duplicate_ids:
        issues.append(
            Issue(
                severity="ERROR",
                code="DUPLICATE_STATION_ID",
                message="Duplicate station id detected.",
                context={"station_id": station_id},
            )
        )

    if entry_station_id not in table:
        issues.append(
            Issue(
                severity="ERROR",
                code="MISSING_ENTRY_STATION",
                message="Entry point references missing station.",
                context={"referenced_id": entry_station_id},
            )
        )

    station_ids = set(table.keys())
    for station in table.values():
        _validate_station_references(station, station_ids, issues)

    _validate_reachability(table, entry_station_id, issues)
    _validate_pass_through_cycles(
        table, issues, error_on_pass_through_cycle=error_on_pass_through_cycle
    )
    return issues


def _coerce_stations(
    stations: Mapping[str, Station] | Sequence[tuple[str, Station]],
) -> tuple[dict[str, Station], list[str]]:
    if isinstance(stations, Mapping):
        return dict(stations), []
    table: dict[str, Station] = {}
    duplicates: list[str] = []
    for station_id, station in stations:
        if station_id in table:
            duplicates.append(station_id)
            continue
        table[station_id] = station
    return table, duplicates


def _validate_station_references(
    station: Station, station_ids: set[str], issues: list[Issue]
) -> None:
    for index, choice in enumerate(station.choices):
        if choice.target_station_id not in station_ids:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="MISSING_STATION_REF",
                    message="Choice references missing station.",
                    context={
                        "station_id": station.id,
                        "field_path": f"choices[{index}].next",
                        "referenced_id": choice.target_station_id,
                    },
                )
            )


def _validate_reachability(
    table: Mapping[str, Station],
    entry_station_id: str,
    issues: list[Issue],
) -> None:
    reachable: set[str] = set()
    stack: list[str] = [entry_station_id] if entry_station_id in table else []
    while stack:
        station_id = stack.pop()
        if station_id in reachable:
            continue
        reachable.add(station_id)
        for choice in table[station_id].choices:
            if choice.target_station_id in table:
                stack.append(choice.target_station_id)
    for station_id in sorted(set(table.keys()) - reachable):
        issues.append(
            Issue(
                severity="WARN",
                code="UNREACHABLE_STATION",
                message="Station is unreachable from the entry point.",
                context={"station_id": station_id},
            )
        )


def _validate_pass_through_cycles(
    table: Mapping[str, Station],
    issues: list[Issue],
    *,
    error_on_pass_through_cycle: bool,
) -> None:
    adjacency: MutableMapping[str, str] = {}
    for station_id, station in table.items():
        if not station.is_pass_through:
            continue
        target = station.choices[0].target_station_id
        if target in table and table[target].is_pass_through:
            adjacency[station_id] = target

    # Each station has at most one outgoing pass-through edge, so walking
    # forward from every unvisited station finds each cycle exactly once.
    visited: set[str] = set()
    cycles: list[list[str]] = []
    for start in sorted(adjacency.keys()):
        if start in visited:
            continue
        walk: list[str] = []
        positions: dict[str, int] = {}
        current: str | None = start
        while current is not None and current not in visited:
            positions[current] = len(walk)
            walk.append(current)
            visited.add(current)
            current = adjacency.get(current)
        if current is not None and current in positions:
            cycles.append(walk[positions[current] :])

    if not cycles:
        return
    severity = "ERROR" if error_on_pass_through_cycle else "WARN"
    for cycle in cycles:
        cycle_path = " -> ".join(cycle + [cycle[0]])
        issues.append(
            Issue(
                severity=severity,
                code="PASS_THROUGH_CYCLE",
                message="Cycle of single-choice stations never reaches a decision.",
                context={"cycle": cycle_path},
            )
        )

from __future__ import annotations

from ubisim.schemas.payout import Scenario, SimulationRequest


SCENARIOS: list[Scenario] = [
    Scenario(
        id="crisis",
        name="Economic Crisis",
        description="High unemployment, rising inflation",
        data=SimulationRequest(unemployment=12.5, inflation=6.2, cost_of_living=115),
        sentiment=-0.6,
    ),
    Scenario(
        id="boom",
        name="Economic Boom",
        description="Low unemployment, stable prices",
        data=SimulationRequest(unemployment=3.2, inflation=2.1, cost_of_living=95),
        sentiment=0.7,
    ),
    Scenario(
        id="disaster",
        name="Natural Disaster",
        description="Emergency response scenario",
        data=SimulationRequest(unemployment=15.0, inflation=4.5, cost_of_living=125),
        sentiment=-0.8,
    ),
]


def get_scenario(scenario_id: str) -> Scenario | None:
    for scenario in SCENARIOS:
        if scenario.id == scenario_id:
            return scenario
    return None

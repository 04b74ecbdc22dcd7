from __future__ import annotations

from prometheus_client import Counter

# Player actions
node_actions_total = Counter(
    "nodewars_node_actions_total",
    "Total node actions by resolved action and outcome",
    labelnames=("action", "outcome"),
)
node_action_retries_total = Counter(
    "nodewars_node_action_retries_total",
    "Actions re-evaluated because the node changed underneath them",
)

# Tick counters
ticks_total = Counter(
    "nodewars_ticks_total",
    "Total tick invocations",
    labelnames=("result",),
)
tick_team_settlements_total = Counter(
    "nodewars_tick_team_settlements_total",
    "Team settlements performed by ticks",
    labelnames=("outcome",),
)

# Control plane
control_actions_total = Counter(
    "nodewars_control_actions_total",
    "Total control plane actions",
    labelnames=("action",),
)

"""Declared causal graph and generation-order checks.

The graph maps every simulated variable to its causal parents. It is kept
apart from the generation code: the pipeline's hand-written order is
checked against it once at startup.
"""

import networkx as nx

from typing import Dict, Iterable, List, Sequence, Tuple

from .errors import DagOrderError


COMORBIDITIES: Tuple[str, ...] = (
    'obesity',
    'hypertension',
    'diabetes',
    'heart_disease',
    'multiple_gestation',
    'placenta_previa',
    'gestational_hypertension',
    'preeclampsia',
)

CAUSAL_GRAPH: Dict[str, Tuple[str, ...]] = {
    # Entity assignment
    'state': (),
    'state_conditions': ('state',),
    'race_ethnicity': ('state',),
    'provider_id': ('state',),
    'provider_quality': ('provider_id', 'state_conditions'),

    # Exogenous
    'age': (),
    'parental_income': (),
    'intelligence': (),
    'resilience': (),
    'motivation': (),
    'community_connections': (),

    # Demographic and socioeconomic
    'religion': ('race_ethnicity',),
    'cultural_orientation': ('religion', 'race_ethnicity', 'community_connections'),
    'education': (
        'parental_income', 'intelligence', 'resilience', 'motivation', 'community_connections'
    ),
    'job_type': ('education', 'intelligence'),
    'income': ('parental_income', 'education', 'job_type', 'age', 'state_conditions'),
    'insurance': ('income', 'job_type', 'state_conditions'),
    'partnered': ('age', 'religion', 'income'),

    # Clinical comorbidities
    'obesity': ('income', 'education', 'race_ethnicity', 'age'),
    'hypertension': ('age', 'obesity', 'race_ethnicity'),
    'diabetes': ('age', 'obesity', 'race_ethnicity'),
    'heart_disease': ('age', 'hypertension', 'diabetes', 'obesity'),
    'multiple_gestation': ('age',),
    'placenta_previa': ('age', 'multiple_gestation'),
    'gestational_hypertension': ('age', 'obesity', 'multiple_gestation'),
    'preeclampsia': (
        'age', 'hypertension', 'gestational_hypertension', 'obesity', 'diabetes',
        'multiple_gestation'
    ),

    # Composites
    'risk_profile': ('age',) + COMORBIDITIES,
    'personal_capacity': (
        'intelligence', 'resilience', 'motivation', 'education', 'community_connections',
        'partnered'
    ),
    'willingness_to_pay': ('income', 'insurance', 'cultural_orientation'),
    'provider_trust': (
        'provider_quality', 'race_ethnicity', 'cultural_orientation', 'community_connections'
    ),
    'risk_aversion': ('risk_profile', 'provider_quality', 'resilience'),

    # Outcome
    'received_comprehensive_pnc': (
        'personal_capacity', 'willingness_to_pay', 'provider_quality', 'provider_trust',
        'risk_aversion', 'risk_profile'
    ),

    # Measurement
    'income_reported': ('income',),
}

ENTITY_VARIABLES: Tuple[str, ...] = (
    'state', 'state_conditions', 'race_ethnicity', 'provider_id', 'provider_quality'
)

TRAITS: Tuple[str, ...] = ('intelligence', 'resilience', 'motivation', 'community_connections')

EXOGENOUS_VARIABLES: Tuple[str, ...] = ('age', 'parental_income') + TRAITS

# Hand-written order of the propagation engine.
GENERATION_ORDER: Tuple[str, ...] = (
    'religion',
    'cultural_orientation',
    'education',
    'job_type',
    'income',
    'insurance',
    'partnered',
    'obesity',
    'hypertension',
    'diabetes',
    'heart_disease',
    'multiple_gestation',
    'placenta_previa',
    'gestational_hypertension',
    'preeclampsia',
    'risk_profile',
    'personal_capacity',
    'willingness_to_pay',
    'provider_trust',
    'risk_aversion',
    'received_comprehensive_pnc',
)

MEASUREMENT_VARIABLES: Tuple[str, ...] = ('income_reported',)

PIPELINE_ORDER: Tuple[str, ...] = (
    ENTITY_VARIABLES + EXOGENOUS_VARIABLES + GENERATION_ORDER + MEASUREMENT_VARIABLES
)


def build_graph(graph: Dict[str, Sequence[str]] = None) -> nx.DiGraph:
    """Build a directed parent -> child graph from a node -> parents mapping."""
    graph = CAUSAL_GRAPH if graph is None else graph

    G = nx.DiGraph()
    G.add_nodes_from(graph)
    for node, parents in graph.items():
        for parent in parents:
            if parent not in graph:
                raise DagOrderError(f"'{node}' declares unknown parent '{parent}'")
            G.add_edge(parent, node)

    if not nx.is_directed_acyclic_graph(G):
        cycle = nx.find_cycle(G)
        raise DagOrderError(f"Causal graph contains a cycle: {cycle}")

    return G


def topological_order(graph: Dict[str, Sequence[str]] = None) -> List[str]:
    """Deterministic topological sort of the declared graph."""
    return list(nx.lexicographical_topological_sort(build_graph(graph)))


def validate_order(
    order: Iterable[str],
    graph: Dict[str, Sequence[str]] = None
) -> None:
    """Check that a generation order is a topological order of the graph.

    Every declared node must appear exactly once and after all of its parents.

    Raises:
        DagOrderError: If the graph is cyclic or the order breaks an edge
    """
    graph = CAUSAL_GRAPH if graph is None else graph
    build_graph(graph)

    order = list(order)
    duplicates = sorted({name for name in order if order.count(name) > 1})
    if duplicates:
        raise DagOrderError(f"Variables generated more than once: {duplicates}")

    unknown = sorted(set(order) - set(graph))
    if unknown:
        raise DagOrderError(f"Variables not declared in the causal graph: {unknown}")

    missing = sorted(set(graph) - set(order))
    if missing:
        raise DagOrderError(f"Declared variables never generated: {missing}")

    position = {name: i for i, name in enumerate(order)}
    for name in order:
        for parent in graph[name]:
            if position[parent] > position[name]:
                raise DagOrderError(
                    f"'{name}' is generated before its parent '{parent}'"
                )

"""
Occurrence Cross-Referencer
===========================

Resolves the links between timeline elements as a typed graph.

LINK RULES:
===========
- Event --producedBy--> Command occurrence, iff event.producedBy equals the
  occurrence key "{name}-{tick}" exactly
- StateView --sourcedFrom--> Event, by event NAME only (every occurrence);
  occurrence disambiguation is left to scenario synthesis
- Actor --readsView/sendsCommand--> any element with that name

LENIENCY:
=========
Unresolved links are not errors. Models are edited iteratively and must
keep rendering while incomplete: a dangling link is simply absent from the
graph and reported by unresolved_references() for diagnostics.

Node identity is "{type}:{name}-{tick}"; elements repeating the same type,
name and tick share one node.
"""

from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Tuple

import networkx as nx

from ..contracts.base import occurrence_key
from ..contracts.timeline import (
    Actor, Command, Event, StateView, TimelineElement,
)
from ..contracts.views import DanglingReference, ReferenceKind

logger = logging.getLogger(__name__)


def node_id(element: TimelineElement) -> str:
    """Graph node of one element occurrence."""
    return f"{element.element_type.value}:{occurrence_key(element.name, element.tick)}"


class CrossReferenceIndex:
    """
    Read-only link index over one timeline snapshot.

    Wraps a NetworkX MultiDiGraph; edge keys are ReferenceKind values so two
    elements may be linked in more than one way.
    """

    def __init__(self, timeline: Iterable[TimelineElement]):
        self._elements: Tuple[TimelineElement, ...] = tuple(timeline)
        self._graph = nx.MultiDiGraph()
        self._by_name: Dict[str, List[str]] = {}
        self._dangling: List[DanglingReference] = []
        self._build()

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    def _build(self) -> None:
        for order, element in enumerate(self._elements):
            nid = node_id(element)
            if nid not in self._graph:
                self._graph.add_node(nid, order=order, tick=element.tick, elements=[])
                self._by_name.setdefault(element.name, []).append(nid)
            self._graph.nodes[nid]['elements'].append(element)

        event_nodes_by_name: Dict[str, List[str]] = {}
        for nid, data in self._graph.nodes(data=True):
            first = data['elements'][0]
            if isinstance(first, Event):
                event_nodes_by_name.setdefault(first.name, []).append(nid)

        for element in self._elements:
            source = node_id(element)
            if isinstance(element, Event) and element.produced_by:
                self._link_produced_by(source, element.produced_by)
            elif isinstance(element, StateView):
                for event_name in element.sourced_from:
                    targets = event_nodes_by_name.get(event_name, [])
                    if not targets:
                        self._dangle(ReferenceKind.SOURCED_FROM, source, event_name)
                    for target in targets:
                        self._add_edge(source, target, ReferenceKind.SOURCED_FROM)
            elif isinstance(element, Actor):
                self._link_by_name(source, element.reads_view, ReferenceKind.READS_VIEW)
                self._link_by_name(source, element.sends_command, ReferenceKind.SENDS_COMMAND)

        logger.debug(
            "cross references: %d nodes, %d links, %d dangling",
            self._graph.number_of_nodes(), self._graph.number_of_edges(), len(self._dangling),
        )

    def _add_edge(self, source: str, target: str, kind: ReferenceKind) -> None:
        # Duplicate elements can produce the same link twice
        if not self._graph.has_edge(source, target, key=kind):
            self._graph.add_edge(source, target, key=kind)

    def _dangle(self, kind: ReferenceKind, source: str, target: str) -> None:
        reference = DanglingReference(kind=kind, source=source, target=target)
        if reference not in self._dangling:
            self._dangling.append(reference)

    def _link_produced_by(self, source: str, key: str) -> None:
        target = f"command:{key}"
        if target in self._graph:
            self._add_edge(source, target, ReferenceKind.PRODUCED_BY)
        else:
            self._dangle(ReferenceKind.PRODUCED_BY, source, key)

    def _link_by_name(self, source: str, name: str, kind: ReferenceKind) -> None:
        targets = self._by_name.get(name, []) if name else []
        if not targets:
            self._dangle(kind, source, name)
        for target in targets:
            self._add_edge(source, target, kind)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def _elements_of(self, node_ids: Iterable[str]) -> Tuple[TimelineElement, ...]:
        """Elements of the given nodes in (tick, document order)."""
        ordered = sorted(
            set(node_ids),
            key=lambda nid: (self._graph.nodes[nid]['tick'], self._graph.nodes[nid]['order']),
        )
        return tuple(el for nid in ordered for el in self._graph.nodes[nid]['elements'])

    def _linked(self, element: TimelineElement, kinds: Tuple[ReferenceKind, ...], incoming: bool):
        nid = node_id(element)
        if nid not in self._graph:
            return ()
        if incoming:
            edges = self._graph.in_edges(nid, keys=True)
            nodes = [src for src, _, kind in edges if kind in kinds]
        else:
            edges = self._graph.out_edges(nid, keys=True)
            nodes = [dst for _, dst, kind in edges if kind in kinds]
        return self._elements_of(nodes)

    def produced_events(self, command: Command) -> Tuple[Event, ...]:
        """Events produced by exactly this command occurrence, in tick order."""
        key = occurrence_key(command.name, command.tick)
        # a shared node can also hold same-name events attributed elsewhere
        return tuple(
            evt for evt in self._linked(command, (ReferenceKind.PRODUCED_BY,), incoming=True)
            if evt.produced_by == key
        )

    def source_events(self, state_view: StateView) -> Tuple[Event, ...]:
        """Every occurrence of every event the view is sourced from, in tick order."""
        return self._linked(state_view, (ReferenceKind.SOURCED_FROM,), incoming=False)

    def actor_targets(self, actor: Actor) -> Tuple[TimelineElement, ...]:
        """Elements named by the actor's readsView or sendsCommand."""
        return self._linked(
            actor, (ReferenceKind.READS_VIEW, ReferenceKind.SENDS_COMMAND), incoming=False,
        )

    def reading_actors(self, view_name: str) -> Tuple[Actor, ...]:
        """Actors reading the named view, at any tick, in document order."""
        return tuple(
            el for el in self._elements
            if isinstance(el, Actor) and el.reads_view == view_name
        )

    def triggering_actors(self, command_name: str) -> Tuple[Actor, ...]:
        """Actors sending the named command, at any tick, in document order."""
        return tuple(
            el for el in self._elements
            if isinstance(el, Actor) and el.sends_command == command_name
        )

    def unresolved_references(self) -> Tuple[DanglingReference, ...]:
        """Links naming something the timeline does not contain."""
        return tuple(self._dangling)

    @property
    def graph(self) -> nx.MultiDiGraph:
        """Read-only view of the link graph."""
        return self._graph.copy(as_view=True)

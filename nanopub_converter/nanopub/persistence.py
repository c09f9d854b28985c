"""Output sinks for generated nanopublication graphs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Sequence

import requests
from rdflib import Dataset, Graph, URIRef

from .models import Statement
from .vocabulary import PREFIXES

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..config import OutputSettings

LOGGER = logging.getLogger(__name__)


def _bind_prefixes(graph: Graph) -> None:
    for prefix, namespace in PREFIXES.items():
        graph.bind(prefix, namespace)


class NanopubStore:
    """Abstract interface for persisting named graphs of statements."""

    def save(self, graph: URIRef, statements: Iterable[Statement]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def flush(self) -> None:
        """Push buffered statements to the backend, if the store buffers."""


class InMemoryNanopubStore(NanopubStore):
    """Collect statements in an rdflib ``Dataset`` and serialise at the end."""

    def __init__(self) -> None:
        self.dataset = Dataset()
        _bind_prefixes(self.dataset)

    def save(self, graph: URIRef, statements: Iterable[Statement]) -> None:
        context = self.dataset.graph(graph)
        for statement in statements:
            context.add(statement)

    def graphs(self) -> List[URIRef]:
        return sorted(
            context.identifier
            for context in self.dataset.graphs()
            if isinstance(context.identifier, URIRef) and len(context)
        )

    def statements(self, graph: URIRef) -> List[Statement]:
        triples = list(self.dataset.graph(graph))
        return sorted(triples, key=lambda triple: tuple(term.n3() for term in triple))  # type: ignore[return-value]

    def __len__(self) -> int:
        return sum(len(self.dataset.graph(identifier)) for identifier in self.graphs())

    def serialize(self, destination: str | Path | None = None, format: str = "trig") -> str:
        """Serialise all named graphs, writing to ``destination`` when given."""

        payload = self.dataset.serialize(format=format)
        if destination is not None:
            path = Path(destination)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
            LOGGER.info("Wrote %d statements to %s (%s)", len(self), path, format)
        return payload


class SparqlGraphStore(NanopubStore):
    """Write graphs to a SPARQL 1.1 Graph Store HTTP Protocol endpoint.

    Statements are buffered per graph and sent as N-Triples on :meth:`flush`,
    or automatically once ``batch_size`` graphs are pending.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        session: requests.Session | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 60.0,
        batch_size: int = 100,
    ) -> None:
        self.endpoint = endpoint
        self.session = session or requests.Session()
        if username:
            self.session.auth = (username, password or "")
        self.timeout = timeout
        self.batch_size = max(1, batch_size)
        self._pending: Dict[URIRef, Graph] = {}

    def save(self, graph: URIRef, statements: Iterable[Statement]) -> None:
        buffer = self._pending.get(graph)
        if buffer is None:
            buffer = self._pending[graph] = Graph(identifier=graph)
        for statement in statements:
            buffer.add(statement)
        if len(self._pending) >= self.batch_size:
            self.flush()

    def flush(self) -> None:
        # Graphs stay buffered until their POST succeeds.
        while self._pending:
            identifier, graph = next(iter(self._pending.items()))
            LOGGER.debug("Posting %d statements to graph <%s>", len(graph), identifier)
            response = self.session.post(
                self.endpoint,
                params={"graph": str(identifier)},
                data=graph.serialize(format="nt").encode("utf-8"),
                headers={"Content-Type": "application/n-triples"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            del self._pending[identifier]


class CompositeNanopubStore(NanopubStore):
    """Replicate writes to mirror stores while the primary stays authoritative."""

    def __init__(self, primary: NanopubStore, mirrors: Sequence[NanopubStore]) -> None:
        if not mirrors:
            raise ValueError("CompositeNanopubStore requires at least one mirror store")
        self.primary = primary
        self.mirrors = list(mirrors)

    def save(self, graph: URIRef, statements: Iterable[Statement]) -> None:
        materialized = list(statements)
        if not materialized:
            return
        self.primary.save(graph, materialized)
        for mirror in self.mirrors:
            try:
                mirror.save(graph, materialized)
            except Exception as exc:  # pragma: no cover - dependent on remote service
                LOGGER.warning("Mirror %s failed to save <%s>: %s", mirror.__class__.__name__, graph, exc)

    def flush(self) -> None:
        self.primary.flush()
        for mirror in self.mirrors:
            try:
                mirror.flush()
            except Exception as exc:  # pragma: no cover - dependent on remote service
                LOGGER.warning("Mirror %s failed to flush: %s", mirror.__class__.__name__, exc)


def _create_target(settings: "OutputSettings") -> NanopubStore:
    backend = settings.normalized_backend()
    if backend == "memory":
        return InMemoryNanopubStore()
    if backend == "sparql":
        if not settings.uri:
            raise ValueError("A graph store endpoint URI is required for the sparql backend")
        return SparqlGraphStore(
            settings.uri,
            username=settings.username,
            password=settings.password,
            timeout=float(settings.options.get("timeout", 60.0)),
            batch_size=int(settings.options.get("batch_size", 100)),
        )
    raise ValueError(f"Unsupported output backend '{settings.backend}'")


def create_store(settings: "OutputSettings") -> NanopubStore:
    """Build the store described by ``settings``, replicating to any mirrors."""

    primary = _create_target(settings)
    if not settings.mirrors:
        return primary
    return CompositeNanopubStore(primary, [_create_target(mirror) for mirror in settings.mirrors])


__all__ = [
    "CompositeNanopubStore",
    "InMemoryNanopubStore",
    "NanopubStore",
    "SparqlGraphStore",
    "create_store",
]

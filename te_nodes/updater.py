import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from .description import compute_description
from .errors import UpdateError
from .nodes_api import NodeQuery, NodeRecord, query_nodes, update_node_description
from .te_client import TEClient

log = logging.getLogger(__name__)

UPDATED = "updated"
SKIPPED = "skipped"     # dry-run or declined at the confirmation prompt
FAILED = "failed"


@dataclass
class NodeResult:
    node_id: Any
    name: Optional[str]
    old_description: Optional[str]
    new_description: str
    status: str = SKIPPED
    error: Optional[str] = None


@dataclass
class UpdateReport:
    dry_run: bool = False
    results: List[NodeResult] = field(default_factory=list)

    def count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def updated(self) -> int:
        return self.count(UPDATED)

    @property
    def skipped(self) -> int:
        return self.count(SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(FAILED)

    @property
    def ok(self) -> bool:
        return self.failed == 0


def plan_updates(nodes: List[NodeRecord], alt_description: Optional[str] = None,
                 append: bool = False) -> List[NodeResult]:
    return [
        NodeResult(
            node_id=n.id,
            name=n.name,
            old_description=n.description,
            new_description=compute_description(n, alt_description, append),
        )
        for n in nodes
    ]


def apply_updates(client: TEClient, planned: List[NodeResult]) -> None:
    # One PUT per node, in order. A failing node is recorded and skipped over.
    for res in planned:
        try:
            update_node_description(client, res.node_id, res.new_description)
        except UpdateError as e:
            res.status = FAILED
            res.error = str(e)
            log.error("Node %s (%s) not updated: %s", res.node_id, res.name, e)
            continue
        res.status = UPDATED
        log.info("Node %s (%s) -> %r", res.node_id, res.name, res.new_description)


def update_descriptions(
    client: TEClient,
    query: NodeQuery,
    alt_description: Optional[str] = None,
    append: bool = False,
    dry_run: bool = False,
    confirm: Optional[Callable[[List[NodeResult]], bool]] = None,
) -> UpdateReport:
    """
    Authenticate (if needed), fetch the matching nodes and rewrite their descriptions.

    AuthenticationError and QueryError propagate; UpdateError is caught per node.
    `confirm` gets the planned changes and may veto them, which turns the run
    into a dry-run.
    """
    if not client.authenticated:
        client.authenticate()
    nodes = query_nodes(client, query)
    log.info("%d node(s) match name=%r tag=%r include_disabled=%s",
             len(nodes), query.name, query.tag_set, query.include_disabled)

    planned = plan_updates(nodes, alt_description, append)
    if planned and not dry_run and confirm is not None and not confirm(planned):
        log.info("Changes not confirmed, nothing will be written")
        dry_run = True

    report = UpdateReport(dry_run=dry_run, results=planned)
    if dry_run:
        for res in planned:
            log.info("[what-if] node %s (%s) -> %r", res.node_id, res.name, res.new_description)
        return report

    apply_updates(client, planned)
    return report

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from .errors import QueryError, UpdateError
from .te_client import TEClient


@dataclass(frozen=True)
class NodeQuery:
    name: str = ""
    tag_set: Optional[str] = None   # "Tag Set:Tag Name"
    include_disabled: bool = False


def _pick(obj: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in obj:
            return obj[k]
    return None


@dataclass
class NodeRecord:
    id: Any
    name: Optional[str] = None
    description: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    version: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_api(cls, obj: Dict[str, Any]) -> "NodeRecord":
        node_id = _pick(obj, "id", "Id", "ID")
        if node_id is None:
            raise QueryError(f"Node without an id in response: {obj!r}")
        return cls(
            id=node_id,
            name=_pick(obj, "Name", "name"),
            description=_pick(obj, "Description", "description"),
            make=_pick(obj, "Make", "make"),
            model=_pick(obj, "Model", "model"),
            version=_pick(obj, "Version", "version"),
            raw=obj,
        )


def build_node_params(query: NodeQuery) -> List[Tuple[str, str]]:
    # Ordered pairs; requests takes care of escaping the tag value.
    params = [("sub_name", query.name or "")]
    if query.tag_set:
        params.append(("tag", query.tag_set))
    params.append(("isDisabled", "true" if query.include_disabled else "false"))
    return params


def node_query_url(base_url: str, query: NodeQuery) -> str:
    req = requests.Request("GET", f"{base_url.rstrip('/')}/nodes", params=build_node_params(query))
    return req.prepare().url


def query_nodes(client: TEClient, query: NodeQuery) -> List[NodeRecord]:
    # Single GET, the whole result is one JSON array.
    data = client.get("/nodes", QueryError, params=build_node_params(query))
    if not isinstance(data, list):
        raise QueryError(f"Expected a JSON array of nodes, got {type(data).__name__}")
    nodes = []
    for item in data:
        if not isinstance(item, dict):
            raise QueryError(f"Unexpected node entry: {item!r}")
        nodes.append(NodeRecord.from_api(item))
    return nodes


def update_node_description(client: TEClient, node_id: Any, description: str) -> None:
    client.put(f"/nodes/{node_id}", {"description": description}, UpdateError)

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GraphNode(BaseModel):
    # The layout engine writes runtime fields (x, y, vx, vy, ...) onto nodes in place.
    model_config = ConfigDict(extra="allow")

    id: str
    group: str
    label: str
    info: str | None = None
    val: float = 1.0
    x: float | None = None
    y: float | None = None


class GraphLink(BaseModel):
    # source/target start as node ids; the layout engine replaces them with the node objects.
    source: str | GraphNode
    target: str | GraphNode
    label: str | None = None


def endpoint_id(endpoint: str | GraphNode) -> str:
    """Id of a link endpoint, whether or not the layout engine has resolved it."""
    if isinstance(endpoint, GraphNode):
        return endpoint.id
    return endpoint


class GraphData(BaseModel):
    nodes: list[GraphNode] = Field(default_factory=list)
    links: list[GraphLink] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_integrity(self) -> GraphData:
        ids: set[str] = set()
        for node in self.nodes:
            if node.id in ids:
                raise ValueError(f"duplicate node id '{node.id}'")
            ids.add(node.id)
        for link in self.links:
            for endpoint in (link.source, link.target):
                if endpoint_id(endpoint) not in ids:
                    raise ValueError(f"link endpoint '{endpoint_id(endpoint)}' does not resolve to a node")
        return self

    def detached(self) -> GraphData:
        """Fresh node/link objects with endpoints reset to ids.

        The layout engine mutates whatever it is given, so each render gets its
        own object graph and never aliases one retained elsewhere.
        """
        return GraphData(
            nodes=[node.model_copy(deep=True) for node in self.nodes],
            links=[
                GraphLink(
                    source=endpoint_id(link.source),
                    target=endpoint_id(link.target),
                    label=link.label,
                )
                for link in self.links
            ],
        )


class SelectedNode(BaseModel):
    id: str
    group: str
    label: str
    info: str | None = None

    @classmethod
    def from_node(cls, node: GraphNode) -> SelectedNode:
        return cls(id=node.id, group=node.group, label=node.label, info=node.info)

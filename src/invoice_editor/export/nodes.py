"""
Plain-dict view of Dash component trees.

The export pipeline works on the JSON form of Dash components, the shape
Dash sends back as callback state::

    {"type": "Div", "namespace": "dash_html_components",
     "props": {"id": ..., "className": ..., "children": [...]}}

Component objects built on the server are converted to the same shape with
to_node(), so the pipeline sees one representation whichever side the tree
came from.
"""

from typing import Any, Iterator

from dash.development.base_component import Component

Node = dict[str, Any]


def to_node(value: Any) -> Any:
    """
    Convert a component, JSON component dict, or children value to nodes.

    Strings, numbers and None pass through unchanged; lists and tuples are
    converted element-wise.
    """
    if isinstance(value, Component):
        value = value.to_plotly_json()
    if is_node(value):
        props = dict(value.get("props") or {})
        if "children" in props:
            props["children"] = to_node(props["children"])
        return {
            "type": value["type"],
            "namespace": value.get("namespace", ""),
            "props": props,
        }
    if isinstance(value, (list, tuple)):
        return [to_node(child) for child in value]
    return value


def is_node(value: Any) -> bool:
    """Return True for a dict shaped like a serialized component."""
    return isinstance(value, dict) and "type" in value and "props" in value


def children_of(node: Node) -> list[Any]:
    """Return a node's children as a list (possibly empty)."""
    children = node["props"].get("children")
    if children is None:
        return []
    if isinstance(children, list):
        return children
    return [children]


def walk(value: Any) -> Iterator[Node]:
    """Yield every node in a tree, depth first, parents before children."""
    if isinstance(value, list):
        for child in value:
            yield from walk(child)
    elif is_node(value):
        yield value
        for child in children_of(value):
            yield from walk(child)


def find_by_id(tree: Any, element_id: str) -> Node | None:
    """Return the first node whose ``id`` prop equals element_id."""
    for node in walk(tree):
        if node["props"].get("id") == element_id:
            return node
    return None


def class_names(node: Node) -> list[str]:
    """Return the node's className split into tokens."""
    return (node["props"].get("className") or "").split()

"""
Serialize node trees to HTML for the rasterizer.

Only dash_html_components nodes carry markup. Nodes from other component
libraries (icons, inputs) have no static HTML form; their children are kept
and the wrapper is dropped.
"""

import html
import re
from typing import Any

from invoice_editor.export.nodes import Node, children_of, is_node
from invoice_editor.lib import logs

LOG = logs.logger(__file__)

HTML_NAMESPACE = "dash_html_components"

_VOID_TAGS = frozenset({"area", "br", "col", "hr", "img", "wbr"})
_ATTRIBUTE_PROPS = {
    "id": "id",
    "className": "class",
    "src": "src",
    "alt": "alt",
    "title": "title",
    "colSpan": "colspan",
    "rowSpan": "rowspan",
    "width": "width",
    "height": "height",
}
_UNITLESS_STYLES = frozenset(
    {"fontWeight", "lineHeight", "opacity", "zIndex", "flex", "flexGrow", "order"}
)
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_html(value: Any) -> str:
    """Return the HTML for a node, a list of nodes, or a text child."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, list):
        return "".join(to_html(child) for child in value)
    if is_node(value):
        return _element(value)
    return html.escape(str(value))


def document_html(body: Any, title: str = "Invoice") -> str:
    """Wrap serialized nodes in a minimal HTML document."""
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{html.escape(title)}</title></head>"
        f"<body>{to_html(body)}</body></html>"
    )


def style_to_css(style: dict[str, Any] | None) -> str:
    """Convert a React-style camelCase style dict to an inline CSS string."""
    if not style:
        return ""
    declarations = []
    for key, value in style.items():
        if value is None:
            continue
        name = _CAMEL_BOUNDARY.sub("-", key).lower()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = f"{value}" if key in _UNITLESS_STYLES or value == 0 else f"{value}px"
        declarations.append(f"{name}: {value}")
    return "; ".join(declarations)


def _element(node: Node) -> str:
    if node.get("namespace") != HTML_NAMESPACE:
        LOG.debug("Dropping non-HTML node %s.%s", node.get("namespace"), node["type"])
        return to_html(children_of(node))

    tag = node["type"].lower()
    attributes = _attributes(node["props"])
    if tag in _VOID_TAGS:
        return f"<{tag}{attributes}>"
    return f"<{tag}{attributes}>{to_html(children_of(node))}</{tag}>"


def _attributes(props: dict[str, Any]) -> str:
    parts = []
    for prop, attribute in _ATTRIBUTE_PROPS.items():
        value = props.get(prop)
        if value is None or value == "":
            continue
        parts.append(f' {attribute}="{html.escape(str(value), quote=True)}"')
    css = style_to_css(props.get("style"))
    if css:
        parts.append(f' style="{html.escape(css, quote=True)}"')
    return "".join(parts)

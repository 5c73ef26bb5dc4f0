"""
Isolation stage: copy the live invoice page into an off-screen container.

The live page may be scaled for the preview, centered with margins, drawn
with a shadow, or hidden behind the mobile tab switcher. None of that
belongs in the exported document, so the pipeline never captures the live
tree. It deep-copies the page into a fixed-width container attached to the
document's overlay layer, strips the preview-only styling from the copy,
and detaches the container when the run ends, whatever the outcome.
"""

import contextlib
import copy
from typing import Any, Iterator

from invoice_editor.components.invoice_paper import PRESENTATION_CLASSES
from invoice_editor.export.errors import ElementNotFound
from invoice_editor.export.nodes import Node, class_names, find_by_id, to_node
from invoice_editor.lib import logs

LOG = logs.logger(__file__)

PAGE_WIDTH_PX = 794
CONTAINER_ID = "invoice-export-container"

_STRIPPED_STYLES = frozenset(
    {
        "transform",
        "transformOrigin",
        "zoom",
        "scale",
        "boxShadow",
        "margin",
        "marginTop",
        "marginRight",
        "marginBottom",
        "marginLeft",
        "marginInline",
        "marginBlock",
    }
)
_STRIPPED_CLASSES = frozenset({*PRESENTATION_CLASSES, "preview-scale"})


class CaptureDocument:
    """
    Server-side handle on the page the user is looking at.

    Wraps the live component tree (read-only for the pipeline) and an
    overlay layer where export runs attach their off-screen containers.
    """

    def __init__(self, tree: Any) -> None:
        """
        Args:
            tree: Live component tree, as Dash components or their JSON form.
        """
        self.tree = to_node(tree)
        self._overlays: list[Node] = []

    @property
    def overlays(self) -> tuple[Node, ...]:
        """Containers currently attached to the document."""
        return tuple(self._overlays)

    def find(self, element_id: str) -> Node | None:
        """Return the live node with the given id, or None."""
        return find_by_id(self.tree, element_id)

    def attach(self, container: Node) -> None:
        self._overlays.append(container)

    def detach(self, container: Node) -> None:
        with contextlib.suppress(ValueError):
            self._overlays.remove(container)


def offscreen_container(width_px: int = PAGE_WIDTH_PX) -> Node:
    """Return an empty, non-interactive container placed outside the viewport."""
    return {
        "type": "Div",
        "namespace": "dash_html_components",
        "props": {
            "id": CONTAINER_ID,
            "style": {
                "position": "fixed",
                "left": "-10000px",
                "top": 0,
                "zIndex": -1,
                "pointerEvents": "none",
                "width": f"{width_px}px",
                "backgroundColor": "#ffffff",
            },
            "children": [],
        },
    }


def strip_presentation(node: Node) -> Node:
    """
    Remove preview-only transform, margin and shadow styling in place.

    Only the given node is touched: those styles are applied to the page
    root by the preview and never inside the document body.
    """
    props = node["props"]
    style = {
        key: value
        for key, value in (props.get("style") or {}).items()
        if key not in _STRIPPED_STYLES
    }
    if style:
        props["style"] = style
    else:
        props.pop("style", None)
    classes = [name for name in class_names(node) if name not in _STRIPPED_CLASSES]
    if classes:
        props["className"] = " ".join(classes)
    else:
        props.pop("className", None)
    return node


@contextlib.contextmanager
def isolate(
    document: CaptureDocument,
    element_id: str,
    width_px: int = PAGE_WIDTH_PX,
) -> Iterator[Node]:
    """
    Yield a clean copy of the live page mounted in an off-screen container.

    Args:
        document: The document holding the live page.
        element_id: Stable id of the page root.
        width_px: Logical width of the container.

    Raises:
        ElementNotFound: If the page is not in the document. Nothing is
            attached in that case.
    """
    live = document.find(element_id)
    if live is None:
        raise ElementNotFound(element_id)

    clone = strip_presentation(copy.deepcopy(live))
    container = offscreen_container(width_px)
    container["props"]["children"] = [clone]
    document.attach(container)
    LOG.debug("Attached export container for #%s", element_id)
    try:
        yield clone
    finally:
        document.detach(container)
        LOG.debug("Detached export container for #%s", element_id)

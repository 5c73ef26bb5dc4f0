"""
Auto-fill modal: paste free-form text and extract the Bill To party.

The modal is always in the layout and toggled with the ``open`` class.
"""

from dash import dcc, html
from dash_iconify import DashIconify

MODAL_CLASS = "modal-backdrop"


def modal_class(is_open: bool) -> str:
    """Return the backdrop className for the given visibility."""
    return f"{MODAL_CLASS} open" if is_open else MODAL_CLASS


def build_extract_modal() -> html.Div:
    """Build the hidden auto-fill modal."""
    return html.Div(
        id="extract-modal",
        className=modal_class(False),
        children=[
            html.Div(
                className="card modal",
                children=[
                    html.Div(
                        className="title-row",
                        children=[
                            DashIconify(icon="lucide:sparkles", className="title-icon"),
                            html.H3("Auto-fill Bill To"),
                        ],
                    ),
                    html.P(
                        "Paste an email signature, address block or invoice "
                        "request. The recipient fields are filled in from it.",
                        className="muted",
                    ),
                    dcc.Textarea(
                        id="extract-text",
                        className="input textarea tall",
                        placeholder="e.g. Jane Doe, Acme Inc., 1 Main St, Springfield ...",
                    ),
                    html.Div(id="extract-error", className="field-error"),
                    html.Div(
                        className="modal-actions",
                        children=[
                            html.Button(
                                "Cancel", id="extract-cancel", className="button ghost"
                            ),
                            html.Button(
                                id="extract-submit",
                                className="button primary gap",
                                children=[
                                    DashIconify(
                                        icon="lucide:wand-2", className="button-icon"
                                    ),
                                    html.Span("Extract", id="extract-submit-label"),
                                ],
                            ),
                        ],
                    ),
                ],
            )
        ],
    )

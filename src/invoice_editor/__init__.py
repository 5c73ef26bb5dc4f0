"""
Invoice Editor: A Dash application for editing invoices and exporting them
as single-page PDFs.

The editor keeps one invoice record per session, renders it as an A4-width
page in the live preview, and exports that same page through a staged
capture pipeline (isolate, settle, rasterize, assemble, deliver).

Subpackages:
- components: Reusable Dash UI components (invoice paper, editor, modal)
- models: Invoice data model and serialization
- export: Capture-and-export pipeline
- services: Recipient extraction (Gemini and offline demo implementations)
- lib: Logging, hashing, paths, caches and service clients

Main entry points:
- app.main(): Start the development server
- app.app: The Dash application instance (for WSGI deployment)
"""

__all__ = ["__version__"]

__version__ = "0.1.0"

"""
Rasterization stage: turn the isolated page into a single RGB image.

Rasterizers are async so the pipeline can suspend while one runs. The
production StoryRasterizer lays the page out with PyMuPDF's HTML Story
engine on a 210 mm wide page, using the same paper stylesheet as the
browser preview, and renders it to a pixmap in a worker thread.
"""

import asyncio
import base64
import io
import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import unquote

import pymupdf
import requests
from PIL import Image, UnidentifiedImageError

from invoice_editor import config
from invoice_editor.export.errors import CaptureFailure
from invoice_editor.export.isolation import PAGE_WIDTH_PX
from invoice_editor.export.markup import HTML_NAMESPACE, document_html
from invoice_editor.export.nodes import Node, walk
from invoice_editor.lib import logs

LOG = logs.logger(__file__)

PAPER_CSS_PATH = Path(__file__).resolve().parent.parent / "assets" / "paper.css"
PAGE_WIDTH_PT = 210 * 72 / 25.4
# The page keeps at least A4 height, as the min-height of .invoice-paper does
# on screen; the Story engine ignores min-height.
MIN_HEIGHT_PT = 297 * 72 / 25.4
# Tallest layout the rasterizer will attempt, in points (ten A4 pages).
MAX_HEIGHT_PT = 297 * 72 / 25.4 * 10

_BASE_CSS = "body { margin: 0; padding: 0; background-color: #ffffff; }\n"


class Rasterizer(ABC):
    """Converts an isolated node tree into an opaque raster image."""

    @abstractmethod
    async def rasterize(self, node: Node) -> Image.Image:
        """
        Render the node to an RGB image.

        Args:
            node: Root of the isolated page copy. The rasterizer may
                rewrite it (e.g. image sources); it is never the live tree.

        Returns:
            RGB image with no transparent regions.
        """


class StoryRasterizer(Rasterizer):
    """
    Rasterizer backed by PyMuPDF's HTML Story layout engine.

    Attributes:
        width_px: Logical page width in CSS pixels.
        scale: Device-pixel multiplier; output width is width_px * scale.
        allow_remote_images: Whether http(s) image sources may be fetched.
        image_timeout: Timeout in seconds for remote image requests.
    """

    def __init__(
        self,
        width_px: int = PAGE_WIDTH_PX,
        scale: float = config.CAPTURE_SCALE,
        allow_remote_images: bool = config.ALLOW_REMOTE_IMAGES,
        image_timeout: float = config.IMAGE_TIMEOUT_SECONDS,
        stylesheet: str | None = None,
    ) -> None:
        self.width_px = width_px
        self.scale = scale
        self.allow_remote_images = allow_remote_images
        self.image_timeout = image_timeout
        self._stylesheet = stylesheet

    @property
    def output_width(self) -> int:
        return round(self.width_px * self.scale)

    @property
    def stylesheet(self) -> str:
        if self._stylesheet is None:
            self._stylesheet = PAPER_CSS_PATH.read_text(encoding="utf-8")
        return self._stylesheet

    async def rasterize(self, node: Node) -> Image.Image:
        return await asyncio.to_thread(self._render, node)

    def _render(self, node: Node) -> Image.Image:
        archive = pymupdf.Archive()
        for name, data in self.resolve_images(node).items():
            archive.add(data, name)

        story = pymupdf.Story(
            html=document_html(node),
            user_css=_BASE_CSS + self.stylesheet,
            archive=archive,
        )
        mediabox = pymupdf.Rect(0, 0, PAGE_WIDTH_PT, MAX_HEIGHT_PT)
        buffer = io.BytesIO()
        writer = pymupdf.DocumentWriter(buffer)
        device = writer.begin_page(mediabox)
        more, filled = story.place(mediabox)
        filled = pymupdf.Rect(filled)
        story.draw(device)
        writer.end_page()
        writer.close()
        if more:
            raise CaptureFailure("Invoice content exceeds the maximum capture height")
        if filled.is_empty:
            raise CaptureFailure("Invoice page rendered no content")

        zoom = self.output_width / PAGE_WIDTH_PT
        with pymupdf.open(stream=buffer.getvalue(), filetype="pdf") as doc:
            clip = pymupdf.Rect(0, 0, PAGE_WIDTH_PT, max(filled.y1, MIN_HEIGHT_PT))
            pixmap = doc[0].get_pixmap(
                matrix=pymupdf.Matrix(zoom, zoom), clip=clip, alpha=False
            )
            image = Image.frombytes(
                "RGB", (pixmap.width, pixmap.height), pixmap.samples
            )

        if image.width != self.output_width:
            height = round(image.height * self.output_width / image.width)
            image = image.resize((self.output_width, height), Image.LANCZOS)
        LOG.info("Rasterized invoice page at %sx%s", image.width, image.height)
        return image

    def resolve_images(self, node: Node) -> dict[str, bytes]:
        """
        Load every image source in the tree into named archive entries.

        Image ``src`` props are rewritten to the entry names, which is what
        the Story engine resolves against its archive.

        Raises:
            CaptureFailure: If a source cannot be loaded, or is remote while
                remote images are not allowed.
        """
        entries: dict[str, bytes] = {}
        images = [
            n
            for n in walk(node)
            if n["type"] == "Img" and n.get("namespace") == HTML_NAMESPACE
        ]
        for index, image in enumerate(images):
            src = image["props"].get("src")
            if not src:
                continue
            data, mime_type = self._load(src)
            name, data = _archive_entry(index, data, mime_type)
            entries[name] = data
            image["props"]["src"] = name
        return entries

    def _load(self, src: str) -> tuple[bytes, str | None]:
        if src.startswith("data:"):
            return decode_data_uri(src)
        if src.startswith(("http://", "https://")):
            if not self.allow_remote_images:
                raise CaptureFailure(f"Remote images are not allowed: {src}")
            try:
                response = requests.get(src, timeout=self.image_timeout)
                response.raise_for_status()
            except requests.RequestException as exc:
                raise CaptureFailure(f"Could not load image {src}: {exc}") from exc
            return response.content, response.headers.get("Content-Type")
        raise CaptureFailure(f"Unsupported image source: {src[:60]}")


def decode_data_uri(uri: str) -> tuple[bytes, str | None]:
    """
    Decode a ``data:`` URI.

    Returns:
        The payload bytes and the declared MIME type (or None).

    Raises:
        CaptureFailure: If the URI is malformed.
    """
    header, sep, payload = uri.partition(",")
    if not sep:
        raise CaptureFailure("Malformed data URI")
    params = header[len("data:") :].split(";")
    mime_type = params[0] or None
    try:
        if "base64" in params[1:]:
            return base64.b64decode(payload, validate=False), mime_type
        return unquote(payload).encode("utf-8"), mime_type
    except ValueError as exc:
        raise CaptureFailure(f"Malformed data URI: {exc}") from exc


def _archive_entry(index: int, data: bytes, mime_type: str | None) -> tuple[str, bytes]:
    """Re-encode raster images as PNG; pass other formats through."""
    try:
        with Image.open(io.BytesIO(data)) as source:
            source.load()
            buffer = io.BytesIO()
            source.convert("RGBA").save(buffer, format="PNG")
            return f"image-{index}.png", buffer.getvalue()
    except UnidentifiedImageError:
        extension = mimetypes.guess_extension((mime_type or "").split(";")[0]) or ".bin"
        LOG.debug("Passing image %s through as %s", index, extension)
        return f"image-{index}{extension}", data

"""
Page assembly: embed the raster in a single fixed-width PDF page.

The page is always 210 mm wide. Its height follows the raster's aspect
ratio, so content taller than an A4 page produces one taller page rather
than several pages.
"""

import io

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

PAGE_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0
PDF_MIME_TYPE = "application/pdf"


def page_height_mm(image_width: int, image_height: int) -> float:
    """Return the page height that keeps the raster's aspect ratio."""
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Invalid raster size {image_width}x{image_height}")
    return image_height * PAGE_WIDTH_MM / image_width


def flatten(image: Image.Image) -> Image.Image:
    """Return an RGB copy of the image composited onto opaque white."""
    if image.mode == "RGB":
        return image
    rgba = image.convert("RGBA")
    background = Image.new("RGB", rgba.size, (255, 255, 255))
    background.paste(rgba, mask=rgba.getchannel("A"))
    return background


def assemble_pdf(image: Image.Image, title: str = "Invoice") -> bytes:
    """
    Build a one-page PDF holding the image at the page origin.

    Args:
        image: Raster of the invoice page.
        title: Document title written to the PDF metadata.

    Returns:
        The PDF file contents.
    """
    image = flatten(image)
    width = PAGE_WIDTH_MM * mm
    height = page_height_mm(image.width, image.height) * mm

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(width, height))
    pdf.setTitle(title)
    pdf.drawImage(ImageReader(image), 0, 0, width=width, height=height)
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()

"""Error kinds raised by the export pipeline stages."""


class ExportError(Exception):
    """Base class for failures that abort an export attempt."""

    kind = "export_error"


class ElementNotFound(ExportError):
    """The invoice page was not present in the captured document."""

    kind = "element_not_found"

    def __init__(self, element_id: str) -> None:
        super().__init__(f"Element #{element_id} not found")
        self.element_id = element_id


class CaptureFailure(ExportError):
    """Layout or rasterization of the isolated page failed."""

    kind = "capture_failure"


class EncodingFailure(ExportError):
    """The raster could not be encoded into the output document."""

    kind = "encoding_failure"


class DeliveryFailure(ExportError):
    """The finished artifact could not be handed to the browser."""

    kind = "delivery_failure"


class InvalidInvoice(ExportError):
    """The stored invoice record could not be read back."""

    kind = "invalid_invoice"

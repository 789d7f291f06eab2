"""Render error taxonomy."""

from typing import Optional


class RenderError(Exception):
  """Base class for everything the engine reports back to the caller."""

  code = "render_error"

  def __init__(
      self,
      message: str,
      layer: Optional[str] = None,
      field: Optional[str] = None,
      count: int = 0,
  ):
    super().__init__(message)
    self.message = message
    self.layer = layer
    self.field = field
    self.count = count

  def to_dict(self) -> dict:
    return {
        "code": self.code,
        "message": self.message,
        "layer": self.layer,
        "field": self.field,
        "count": self.count,
    }


class EmptyDataset(RenderError):
  """No records with valid coordinates; no document can be built."""

  code = "empty_dataset"


class UnknownField(RenderError):
  """A layer references a column the dataset does not have."""

  code = "unknown_field"


class NonNumericValue(RenderError):
  """Records excluded from a layer because a numeric field held non-numeric values."""

  code = "non_numeric_value"


class InvalidCoordinate(RenderError):
  """Records dropped for missing or out-of-range coordinates."""

  code = "invalid_coordinate"


class UnsupportedLayer(RenderError):
  """A layer spec of a kind no factory can realize."""

  code = "unsupported_layer"


class PopupFormatError(RenderError):
  """A popup formatter raised while describing a record."""

  code = "popup_format_error"

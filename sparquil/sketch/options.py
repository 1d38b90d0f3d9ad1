"""Sketch options schema."""

from pydantic import BaseModel, Field, PositiveInt


class SketchOptions(BaseModel):
    """Window and timing options for a sketch."""

    title: str = Field(..., min_length=1, description="Window title")
    size: tuple[PositiveInt, PositiveInt] = Field(
        default=(500, 500), description="Canvas width and height in pixels"
    )
    frame_rate: float = Field(default=30.0, gt=0, description="Frames per second")

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

"""Uploaded file summaries."""

from pydantic import BaseModel, Field


class UploadedFileInfo(BaseModel):
    """Name and size of an uploaded file."""

    filename: str
    size: int = Field(ge=0, description="Size in bytes")

    @property
    def size_kb(self) -> str:
        """Whole kilobytes, e.g. ``"12kb"``."""
        return f"{self.size // 1024}kb"


def describe_files(files: list[UploadedFileInfo]) -> str:
    """Plain-text listing with a blank line before each file."""
    return "".join(f"\n\n{info.filename}\n{info.size_kb}" for info in files)

import mimetypes
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

PDF_MIME_TYPE = "application/pdf"


class ModelType(StrEnum):
    """Detection model families accepted by the processing endpoints."""

    ELECTRICAL = "electrical"
    FIRE_SPRINKLER = "fire_sprinkler"
    FIRE_ALARM = "fire_alarm"
    MECHANICAL = "mechanical"
    PLUMBING = "plumbing"


@dataclass(frozen=True)
class UploadedFile:
    """A file the user picked or dropped, held in memory until upload."""

    name: str
    size_bytes: int
    mime_type: str
    content: bytes = field(repr=False)

    @classmethod
    def from_path(cls, path: Path) -> "UploadedFile":
        content = path.read_bytes()
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            size_bytes=len(content),
            mime_type=mime_type or "",
            content=content,
        )

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == PDF_MIME_TYPE or self.name.lower().endswith(".pdf")


@dataclass(frozen=True)
class RemoteFileHandle:
    """Server-side identity of an uploaded file."""

    file_id: str
    filename: str = ""
    file_size_bytes: int = 0
    total_pages: int = 0
    upload_timestamp: str = ""
    storage_path: str = ""


@dataclass(frozen=True)
class ProcessPageRequest:
    file_id: str
    page_number: int
    model_type: ModelType
    include_raw_detections: bool = False

    def to_payload(self) -> dict[str, object]:
        return {
            "file_id": self.file_id,
            "page_number": self.page_number,
            "model_type": self.model_type.value,
            "include_raw_detections": self.include_raw_detections,
        }


@dataclass(frozen=True)
class ProgressEvent:
    """Transient progress report emitted while a page is processed."""

    percent: int
    status: str = ""
    message: str = ""


@dataclass(frozen=True)
class Detection:
    class_name: str
    confidence: float
    bbox: tuple[float, ...] = ()
    tile_index: int | None = None


@dataclass(frozen=True)
class ConfidenceStats:
    mean: float = 0.0
    min: float = 0.0
    max: float = 0.0


@dataclass(frozen=True)
class DetectionSummary:
    """Aggregated symbol detections for one page."""

    total_detections: int = 0
    detections_by_class: dict[str, int] = field(default_factory=dict)
    confidence: ConfidenceStats = field(default_factory=ConfidenceStats)
    all_detections: list[Detection] = field(default_factory=list)


@dataclass(frozen=True)
class ProcessingResult:
    """Terminal artifact of one page-processing run."""

    file_id: str
    page_number: int
    total_tiles_processed: int = 0
    processing_time_seconds: float = 0.0
    detections: DetectionSummary = field(default_factory=DetectionSummary)
    analysis_text: str = ""
    status: str = ""


@dataclass(frozen=True)
class FileInfo:
    file_id: str
    filename: str
    num_pages: int
    upload_time: str


@dataclass(frozen=True)
class ModelInfo:
    name: str
    description: str = ""
    classes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class HealthStatus:
    status: str
    version: str = ""

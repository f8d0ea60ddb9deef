from dataclasses import dataclass, field
from enum import IntEnum

from planscan.api.models import ProcessingResult, ProgressEvent, RemoteFileHandle, UploadedFile
from planscan.pages.models import PageImage
from planscan.streaming.cancellation import CancellationToken
from planscan.wizard.trades import Trade


class Step(IntEnum):
    UPLOAD_AND_SELECT = 1
    SELECT_PAGE = 2
    RESULTS = 3


@dataclass
class WizardSession:
    """All state of one open wizard; replaced wholesale on close or reopen."""

    step: Step = Step.UPLOAD_AND_SELECT
    uploaded_files: list[UploadedFile] = field(default_factory=list)
    trade: Trade | None = None
    remote_file: RemoteFileHandle | None = None
    pages: list[PageImage] = field(default_factory=list)
    selected_page: int | None = None
    progress: ProgressEvent | None = None
    result: ProcessingResult | None = None
    error: str | None = None
    is_loading_pages: bool = False
    is_uploading: bool = False
    is_processing: bool = False
    cancel_token: CancellationToken = field(default_factory=CancellationToken)

    @property
    def is_busy(self) -> bool:
        return self.is_uploading or self.is_processing

    def page_image(self, page_number: int) -> PageImage | None:
        return next((p for p in self.pages if p.page_number == page_number), None)

"""Three-step upload wizard: upload and pick a trade, pick a page, view results.

The wizard owns exactly one WizardSession at a time. Every user action and
every network callback goes through it; network calls capture the session
they were started for and drop their outcome if that session has since been
replaced by close() or open().
"""

import asyncio
from collections.abc import Callable, Sequence

from planscan.api.exceptions import ApiError
from planscan.api.models import ProcessingResult, ProcessPageRequest, ProgressEvent, UploadedFile
from planscan.api.stream_client import StreamClient
from planscan.api.upload_client import UploadClient
from planscan.logging.logger import Log
from planscan.pages.base import BasePageSource
from planscan.pages.exceptions import PageRenderError
from planscan.wizard.exceptions import GuardViolationError, WizardError
from planscan.wizard.models import Step, WizardSession
from planscan.wizard.trades import Trade, filter_trades, find_trade, resolve_model_type

_SURFACED_ERRORS = (ApiError, PageRenderError, WizardError)


def first_pdf(files: Sequence[UploadedFile]) -> UploadedFile | None:
    return next((f for f in files if f.is_pdf), None)


class UploadWizard:
    """Drives file upload, page selection and page processing for one user."""

    def __init__(
        self,
        upload_client: UploadClient,
        stream_client: StreamClient,
        page_source: BasePageSource,
        *,
        include_raw_detections: bool = False,
        on_change: Callable[[WizardSession], None] | None = None,
    ) -> None:
        self._upload_client = upload_client
        self._stream_client = stream_client
        self._page_source = page_source
        self._include_raw_detections = include_raw_detections
        self._on_change = on_change
        self._session = WizardSession()
        self._is_open = False

    @property
    def session(self) -> WizardSession:
        return self._session

    @property
    def is_open(self) -> bool:
        return self._is_open

    # Lifecycle

    def open(self) -> None:
        """Start a fresh session, discarding anything left from a previous one."""
        self._reset()
        self._is_open = True

    def close(self) -> None:
        self._reset()
        self._is_open = False

    def _reset(self) -> None:
        self._session.cancel_token.cancel()
        self._session = WizardSession()
        Log.info("Wizard session reset")

    # Step 1

    def available_trades(self, search: str = "") -> list[Trade]:
        return filter_trades(search)

    def select_trade(self, trade_id: str) -> bool:
        session = self._session
        session.error = None
        try:
            self._check_step_one_editable(session)
            trade = find_trade(trade_id)
            if trade is None:
                raise GuardViolationError(f"Unknown trade '{trade_id}'")
        except WizardError as exc:
            self._fail(session, exc)
            return False
        session.trade = trade
        Log.info(f"Trade selected: {trade.display_name}")
        return True

    async def add_files(self, files: Sequence[UploadedFile]) -> bool:
        """Accept picked or dropped files and rasterize the first PDF among them.

        Files can only be added on step 1 while no upload is running. The held
        page images are replaced when the new files contain a PDF and cleared
        when they do not. A rendering failure is reported but leaves the files
        in place.
        """
        session = self._session
        try:
            self._check_step_one_editable(session)
        except WizardError as exc:
            self._fail(session, exc)
            return False
        if not files:
            return True
        session.uploaded_files.extend(files)
        Log.info(f"Added {len(files)} file(s), {len(session.uploaded_files)} total")

        pdf = first_pdf(files)
        if pdf is None:
            Log.info("No PDF among the new files, clearing page images")
            session.pages = []
            return True

        session.is_loading_pages = True
        try:
            pages = await asyncio.to_thread(self._page_source.render, pdf.content)
        except PageRenderError as exc:
            self._fail(session, PageRenderError(f"Error loading PDF: {exc}"))
            pages = []
        finally:
            session.is_loading_pages = False
        if self._is_stale(session):
            return False
        session.pages = pages
        Log.info(f"Extracted {len(pages)} page image(s) from {pdf.name}")
        return True

    # Step 2

    def select_page(self, page_number: int) -> bool:
        session = self._session
        session.error = None
        try:
            if session.step is not Step.SELECT_PAGE:
                raise GuardViolationError("Pages can only be selected after uploading")
            if session.is_processing:
                raise GuardViolationError("A page is already being processed")
            self._check_page_exists(session, page_number)
        except WizardError as exc:
            self._fail(session, exc)
            return False
        session.selected_page = page_number
        return True

    # Navigation

    def can_advance(self) -> bool:
        session = self._session
        if session.step is Step.UPLOAD_AND_SELECT:
            return (
                session.trade is not None
                and bool(session.uploaded_files)
                and not session.is_uploading
            )
        if session.step is Step.SELECT_PAGE:
            return (
                session.selected_page is not None
                and not session.is_processing
                and session.remote_file is not None
            )
        return False

    def can_go_back(self) -> bool:
        session = self._session
        return session.step > Step.UPLOAD_AND_SELECT and not session.is_busy

    async def advance(self) -> bool:
        """Run the current step's work and move forward on success."""
        session = self._session
        session.error = None
        try:
            if session.step is Step.UPLOAD_AND_SELECT:
                await self._upload(session)
            elif session.step is Step.SELECT_PAGE:
                await self._process_selected_page(session)
            else:
                raise GuardViolationError("Already on the last step")
        except _SURFACED_ERRORS as exc:
            self._fail(session, exc)
            return False
        return not self._is_stale(session)

    def back(self) -> bool:
        session = self._session
        if session.step is Step.UPLOAD_AND_SELECT:
            return False
        return self.go_to_step(Step(session.step - 1))

    def go_to_step(self, step: Step) -> bool:
        """Jump back to an already completed step without redoing its work."""
        session = self._session
        session.error = None
        try:
            if step >= session.step:
                raise GuardViolationError("Only completed steps can be revisited")
            if session.is_busy:
                raise GuardViolationError("Wait for the current request to finish")
        except WizardError as exc:
            self._fail(session, exc)
            return False
        self._set_step(session, step)
        return True

    # Step 3

    async def reselect_page(self, page_number: int) -> bool:
        """Process another page from the results view without leaving it."""
        session = self._session
        session.error = None
        try:
            if session.step is not Step.RESULTS:
                raise GuardViolationError("Pages can only be re-selected from the results view")
            self._check_page_exists(session, page_number)
            if session.result is not None and session.result.page_number == page_number:
                return True
            await self._run_processing(session, page_number)
        except _SURFACED_ERRORS as exc:
            self._fail(session, exc)
            return False
        return not self._is_stale(session)

    # Internals

    async def _upload(self, session: WizardSession) -> None:
        if session.trade is None or not session.uploaded_files:
            raise GuardViolationError("Select a trade and add at least one file to continue")
        if session.is_uploading:
            raise GuardViolationError("An upload is already in progress")
        pdf = first_pdf(session.uploaded_files)
        if pdf is None:
            raise GuardViolationError("Please upload a PDF file")

        session.is_uploading = True
        try:
            handle = await self._upload_client.upload(pdf)
        finally:
            session.is_uploading = False
        if self._is_stale(session):
            Log.info(f"Discarding upload of {pdf.name} for a closed session")
            return
        session.remote_file = handle
        self._set_step(session, Step.SELECT_PAGE)

    async def _process_selected_page(self, session: WizardSession) -> None:
        if session.selected_page is None:
            raise GuardViolationError("Select a page to process")
        result = await self._run_processing(session, session.selected_page)
        if result is not None:
            self._set_step(session, Step.RESULTS)

    async def _run_processing(
        self, session: WizardSession, page_number: int
    ) -> ProcessingResult | None:
        """Stream one processing run into the session; None if the session went stale."""
        if session.remote_file is None:
            raise GuardViolationError("Upload a file before processing a page")
        if session.is_processing:
            raise GuardViolationError("A page is already being processed")
        if session.trade is None:
            raise GuardViolationError("Select a trade before processing a page")
        request = ProcessPageRequest(
            file_id=session.remote_file.file_id,
            page_number=page_number,
            model_type=resolve_model_type(session.trade),
            include_raw_detections=self._include_raw_detections,
        )

        previous_page = session.selected_page
        session.selected_page = page_number
        session.is_processing = True
        try:
            result = await self._stream_client.process(
                request,
                on_progress=lambda progress: self._on_progress(session, progress),
                on_error=lambda message: self._on_stream_error(session, message),
                cancel_token=session.cancel_token,
            )
        except ApiError:
            if not self._is_stale(session):
                session.selected_page = previous_page
            raise
        finally:
            session.is_processing = False
            session.progress = None
        if self._is_stale(session):
            Log.info(f"Discarding result for page {page_number} of a closed session")
            return None
        session.result = result
        return result

    def _on_progress(self, session: WizardSession, progress: ProgressEvent) -> None:
        if self._is_stale(session):
            return
        session.progress = progress
        Log.debug(f"Progress {progress.percent}% [{progress.status}] {progress.message}")
        self._notify(session)

    def _on_stream_error(self, session: WizardSession, message: str) -> None:
        if self._is_stale(session):
            return
        session.error = message

    def _check_step_one_editable(self, session: WizardSession) -> None:
        if session.step is not Step.UPLOAD_AND_SELECT:
            raise GuardViolationError("Files and trade can only be changed on the first step")
        if session.is_uploading:
            raise GuardViolationError("An upload is already in progress")

    def _check_page_exists(self, session: WizardSession, page_number: int) -> None:
        if page_number < 1:
            raise GuardViolationError(f"Page {page_number} does not exist")
        if session.pages:
            if session.page_image(page_number) is None:
                raise GuardViolationError(f"Page {page_number} does not exist")
        elif session.remote_file is not None and session.remote_file.total_pages:
            if page_number > session.remote_file.total_pages:
                raise GuardViolationError(f"Page {page_number} does not exist")

    def _set_step(self, session: WizardSession, step: Step) -> None:
        if step is Step.UPLOAD_AND_SELECT:
            session.selected_page = None
            session.remote_file = None
        Log.info(f"Wizard step {int(session.step)} -> {int(step)}")
        session.step = step
        self._notify(session)

    def _fail(self, session: WizardSession, exc: Exception) -> None:
        if self._is_stale(session):
            Log.info(f"Ignoring failure for a closed session: {exc}")
            return
        session.error = str(exc)
        Log.error(f"Wizard action failed: {exc}")
        self._notify(session)

    def _notify(self, session: WizardSession) -> None:
        if self._on_change is not None:
            self._on_change(session)

    def _is_stale(self, session: WizardSession) -> bool:
        return session is not self._session

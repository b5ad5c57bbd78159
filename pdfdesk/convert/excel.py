"""Excel to PDF conversion through a remote conversion service.

The conversion happens in three phases. The spreadsheet is uploaded together
with the output parameters, the remote job is polled at a fixed interval
until it reaches a terminal state, and the finished PDF is downloaded once.
:class:`ExcelConversionAdapter` drives the phases against any provider that
implements :class:`ConversionProvider`.
"""

from __future__ import annotations

import asyncio
import base64
import enum
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

import httpx

from ..config import ConversionSettings
from ..core.exceptions import (
    ConversionFailedError,
    ConversionTimedOutError,
    PdfDeskError,
    ServiceMisconfiguredError,
    UpstreamRequestError,
)
from ..core.utils import get_logger

LOGGER = get_logger("pdfdesk.convert.excel")

CLOUDCONVERT_API_URL = "https://api.cloudconvert.com/v2"
PDFCO_API_URL = "https://api.pdf.co/v1"

DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_MAX_ATTEMPTS = 60
DEFAULT_TIMEOUT = 30.0

_EXCEL_SUFFIX = re.compile(r"\.(xlsx|xls|xlsm)$", re.IGNORECASE)

Sleep = Callable[[float], Awaitable[Any]]


class JobStatus(str, enum.Enum):
    PENDING = "pending"
    FINISHED = "finished"
    ERROR = "error"


class AdapterState(str, enum.Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    CONVERTING = "converting"
    DONE = "done"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class ConversionJob:
    """Handle for a remote conversion job."""

    id: str
    status: JobStatus = JobStatus.PENDING
    result_url: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status is not JobStatus.PENDING


@dataclass(frozen=True)
class ConversionOptions:
    """Output parameters sent along with the uploaded spreadsheet."""

    output_format: str = "pdf"
    page_orientation: str = "landscape"
    fit_to_page_width: bool = True
    engine: str = "office"
    engine_version: str = "latest"


def excel_input_format(file_name: str) -> str:
    match = _EXCEL_SUFFIX.search(file_name)
    return match.group(1).lower() if match else "xlsx"


def excel_output_filename(file_name: str) -> str:
    """Replace the spreadsheet extension with ``.pdf``."""

    renamed, count = _EXCEL_SUFFIX.subn(".pdf", file_name)
    return renamed if count else f"{file_name}.pdf"


class ConversionProvider(Protocol):
    async def submit(self, data: bytes, file_name: str, options: ConversionOptions) -> ConversionJob:
        ...

    async def poll(self, job: ConversionJob) -> ConversionJob:
        ...

    async def fetch(self, job: ConversionJob) -> bytes:
        ...


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        return fallback
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback


class _HttpProvider:
    """Shared request handling for HTTP based providers."""

    name = "http"

    def __init__(self, client: httpx.AsyncClient, api_key: str | None) -> None:
        self._client = client
        self._api_key = api_key

    def _require_key(self) -> str:
        if not self._api_key:
            LOGGER.error("No API key configured for the %s conversion service", self.name)
            raise ServiceMisconfiguredError("Server configuration error")
        return self._api_key

    async def _send(self, method: str, url: str, failure: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            LOGGER.error("%s request to %s failed: %s", method, url, exc)
            raise UpstreamRequestError(failure) from exc
        if response.is_error:
            message = _error_message(response, failure)
            LOGGER.error("%s %s returned %s: %s", method, url, response.status_code, message)
            raise UpstreamRequestError(message, status_code=response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response, failure: str, *keys: str) -> dict[str, Any]:
        """Decode a JSON object body that carries every key in ``keys``."""

        try:
            payload = response.json()
        except ValueError as exc:
            LOGGER.error("%s returned a body that is not JSON", response.request.url)
            raise UpstreamRequestError(failure) from exc
        if not isinstance(payload, dict):
            LOGGER.error("%s returned %s instead of a JSON object", response.request.url, type(payload).__name__)
            raise UpstreamRequestError(failure)
        missing = [key for key in keys if payload.get(key) is None]
        if missing:
            LOGGER.error("%s response is missing %s", response.request.url, ", ".join(missing))
            raise UpstreamRequestError(failure)
        return payload

    async def fetch(self, job: ConversionJob) -> bytes:
        if not job.result_url:
            raise UpstreamRequestError("Unable to get the converted file URL")
        response = await self._send("GET", job.result_url, "Failed to download the converted PDF")
        return response.content


class CloudConvertProvider(_HttpProvider):
    """Job based provider: create job, upload the file, poll, export by URL."""

    name = "cloudconvert"

    IMPORT_TASK = "import-my-file"
    CONVERT_TASK = "convert-my-file"
    EXPORT_TASK = "export-my-file"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        *,
        base_url: str = CLOUDCONVERT_API_URL,
    ) -> None:
        super().__init__(client, api_key)
        self._base_url = base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._require_key()}"}

    def _job_payload(self, file_name: str, options: ConversionOptions) -> dict[str, Any]:
        return {
            "tasks": {
                self.IMPORT_TASK: {"operation": "import/upload"},
                self.CONVERT_TASK: {
                    "operation": "convert",
                    "input": self.IMPORT_TASK,
                    "input_format": excel_input_format(file_name),
                    "output_format": options.output_format,
                    "engine": options.engine,
                    "engine_version": options.engine_version,
                    "page_orientation": options.page_orientation,
                    "fit_to_page_width": options.fit_to_page_width,
                },
                self.EXPORT_TASK: {"operation": "export/url", "input": self.CONVERT_TASK},
            }
        }

    def _job_data(self, response: httpx.Response, failure: str) -> dict[str, Any]:
        job_data = self._json(response, failure, "data")["data"]
        if not isinstance(job_data, dict) or job_data.get("id") is None:
            LOGGER.error("CloudConvert response carries no job id")
            raise UpstreamRequestError(failure)
        return job_data

    @staticmethod
    def _task(job_data: dict[str, Any], name: str) -> dict[str, Any] | None:
        for task in job_data.get("tasks") or []:
            if isinstance(task, dict) and task.get("name") == name:
                return task
        return None

    def _to_job(self, job_data: dict[str, Any]) -> ConversionJob:
        status = job_data.get("status")
        if status == "finished":
            export = self._task(job_data, self.EXPORT_TASK) or {}
            files = (export.get("result") or {}).get("files") or []
            url = files[0].get("url") if files and isinstance(files[0], dict) else None
            return ConversionJob(id=job_data["id"], status=JobStatus.FINISHED, result_url=url)
        if status == "error":
            return ConversionJob(id=job_data["id"], status=JobStatus.ERROR)
        return ConversionJob(id=job_data["id"], status=JobStatus.PENDING)

    async def submit(self, data: bytes, file_name: str, options: ConversionOptions) -> ConversionJob:
        headers = self._headers()
        response = await self._send(
            "POST",
            f"{self._base_url}/jobs",
            "Failed to create the conversion job",
            json=self._job_payload(file_name, options),
            headers=headers,
        )
        job_data = self._job_data(response, "Failed to create the conversion job")
        upload_task = self._task(job_data, self.IMPORT_TASK)
        form = ((upload_task or {}).get("result") or {}).get("form")
        if not isinstance(form, dict) or not form.get("url"):
            raise UpstreamRequestError("Unable to get the upload URL")

        await self._send(
            "POST",
            form["url"],
            "Failed to upload the file",
            data=form.get("parameters") or {},
            files={"file": (file_name, data)},
        )
        LOGGER.info("Uploaded %s as CloudConvert job %s", file_name, job_data["id"])
        return ConversionJob(id=job_data["id"])

    async def poll(self, job: ConversionJob) -> ConversionJob:
        response = await self._send(
            "GET",
            f"{self._base_url}/jobs/{job.id}",
            "Failed to check the conversion status",
            headers=self._headers(),
        )
        return self._to_job(self._job_data(response, "Failed to check the conversion status"))


class PdfCoProvider(_HttpProvider):
    """Synchronous provider: the conversion finishes within the submit call."""

    name = "pdfco"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        *,
        base_url: str = PDFCO_API_URL,
    ) -> None:
        super().__init__(client, api_key)
        self._base_url = base_url.rstrip("/")

    @staticmethod
    def _check(payload: dict[str, Any], failure: str, *keys: str) -> dict[str, Any]:
        if payload.get("error"):
            raise UpstreamRequestError(payload.get("message") or failure)
        if any(payload.get(key) is None for key in keys):
            raise UpstreamRequestError(failure)
        return payload

    async def submit(self, data: bytes, file_name: str, options: ConversionOptions) -> ConversionJob:
        headers = {"x-api-key": self._require_key()}
        upload = await self._send(
            "POST",
            f"{self._base_url}/file/upload/base64",
            "Failed to upload the file",
            json={"file": base64.b64encode(data).decode("ascii"), "name": file_name},
            headers=headers,
        )
        uploaded = self._check(self._json(upload, "Failed to upload the file"), "Failed to upload the file", "url")

        converted = await self._send(
            "POST",
            f"{self._base_url}/xls/convert/to/pdf",
            "Conversion failed",
            json={"url": uploaded["url"], "name": excel_output_filename(file_name), "async": False},
            headers=headers,
        )
        result = self._check(self._json(converted, "Conversion failed"), "Conversion failed")
        LOGGER.info("Converted %s with PDF.co", file_name)
        return ConversionJob(
            id=str(result.get("jobId") or file_name),
            status=JobStatus.FINISHED,
            result_url=result.get("url"),
        )

    async def poll(self, job: ConversionJob) -> ConversionJob:
        return job


def build_provider(settings: ConversionSettings, client: httpx.AsyncClient) -> ConversionProvider:
    """Return the provider selected by ``settings``."""

    if settings.provider == "pdfco":
        return PdfCoProvider(client, settings.api_key)
    return CloudConvertProvider(client, settings.api_key)


class ExcelConversionAdapter:
    """Drive a provider through upload, polling and download."""

    def __init__(
        self,
        provider: ConversionProvider,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._provider = provider
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts
        self._sleep = sleep
        self.state = AdapterState.IDLE
        self.attempts = 0

    async def convert(
        self,
        data: bytes,
        file_name: str,
        options: ConversionOptions | None = None,
    ) -> bytes:
        options = options or ConversionOptions()
        self.attempts = 0

        self.state = AdapterState.UPLOADING
        try:
            job = await self._provider.submit(data, file_name, options)
        except PdfDeskError:
            self.state = AdapterState.FAILED
            raise

        self.state = AdapterState.CONVERTING
        job = await self._wait(job)

        try:
            pdf = await self._provider.fetch(job)
        except PdfDeskError:
            self.state = AdapterState.FAILED
            raise
        self.state = AdapterState.DONE
        LOGGER.info("Converted %s after %d status check(s)", file_name, self.attempts)
        return pdf

    async def _wait(self, job: ConversionJob) -> ConversionJob:
        while not job.is_terminal:
            if self.attempts >= self._max_attempts:
                self.state = AdapterState.TIMED_OUT
                LOGGER.error("Job %s still pending after %d status checks", job.id, self.attempts)
                raise ConversionTimedOutError("Conversion time limit exceeded")
            await self._sleep(self._poll_interval)
            self.attempts += 1
            try:
                job = await self._provider.poll(job)
            except PdfDeskError:
                self.state = AdapterState.FAILED
                raise
            LOGGER.debug("Job %s status after check %d: %s", job.id, self.attempts, job.status.value)

        if job.status is JobStatus.ERROR:
            self.state = AdapterState.FAILED
            raise ConversionFailedError("Conversion failed")
        return job


class EndpointConversionClient:
    """Post a spreadsheet to a conversion endpoint as base64 JSON."""

    def __init__(self, endpoint_url: str, client: httpx.AsyncClient) -> None:
        self._endpoint_url = endpoint_url
        self._client = client

    async def convert(self, data: bytes, file_name: str) -> bytes:
        payload = {"base64Data": base64.b64encode(data).decode("ascii"), "fileName": file_name}
        try:
            response = await self._client.post(self._endpoint_url, json=payload)
        except httpx.HTTPError as exc:
            raise UpstreamRequestError("Error converting Excel to PDF") from exc
        if response.is_error:
            raise UpstreamRequestError(
                _error_message(response, "Error converting Excel to PDF"),
                status_code=response.status_code,
            )
        return response.content


__all__ = [
    "AdapterState",
    "CloudConvertProvider",
    "ConversionJob",
    "ConversionOptions",
    "ConversionProvider",
    "EndpointConversionClient",
    "ExcelConversionAdapter",
    "JobStatus",
    "PdfCoProvider",
    "build_provider",
    "excel_input_format",
    "excel_output_filename",
]

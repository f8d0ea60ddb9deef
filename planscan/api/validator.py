"""Builds domain models from decoded JSON response bodies and stream payloads."""

from typing import Any

from planscan.api.exceptions import ApiProtocolError
from planscan.api.models import (
    ConfidenceStats,
    Detection,
    DetectionSummary,
    FileInfo,
    HealthStatus,
    ModelInfo,
    ProcessingResult,
    ProgressEvent,
    RemoteFileHandle,
)


def build_remote_file_handle(data: Any) -> RemoteFileHandle:
    data = _require_object(data, "upload response")
    return RemoteFileHandle(
        file_id=_require_str(data, "file_id"),
        filename=str(data.get("filename") or ""),
        file_size_bytes=_as_int(data.get("file_size_bytes"), "file_size_bytes"),
        total_pages=_as_int(data.get("total_pages"), "total_pages"),
        upload_timestamp=str(data.get("upload_timestamp") or ""),
        storage_path=str(data.get("storage_path") or ""),
    )


def build_progress_event(data: Any) -> ProgressEvent:
    """Build a progress report; percent is clamped to 0..100."""
    data = _require_object(data, "progress payload")
    if "percent" not in data:
        raise ApiProtocolError("Progress payload is missing 'percent'")
    percent = _as_int(data["percent"], "percent")
    return ProgressEvent(
        percent=max(0, min(100, percent)),
        status=str(data.get("status") or ""),
        message=str(data.get("message") or ""),
    )


def build_processing_result(data: Any) -> ProcessingResult:
    data = _require_object(data, "processing result")
    page_number = _as_int(data.get("page_number"), "page_number")
    if page_number < 1:
        raise ApiProtocolError("'page_number' must be a positive integer")
    analysis = data.get("gemini_analysis") or {}
    if not isinstance(analysis, dict):
        raise ApiProtocolError("'gemini_analysis' must be an object")
    return ProcessingResult(
        file_id=_require_str(data, "file_id"),
        page_number=page_number,
        total_tiles_processed=_as_int(data.get("total_tiles_processed"), "total_tiles_processed"),
        processing_time_seconds=_as_float(
            data.get("processing_time_seconds"), "processing_time_seconds"
        ),
        detections=_build_detection_summary(data.get("yolo_results") or {}),
        analysis_text=str(analysis.get("formatted_output") or ""),
        status=str(data.get("status") or ""),
    )


def build_file_info(data: Any) -> FileInfo:
    data = _require_object(data, "file info")
    return FileInfo(
        file_id=_require_str(data, "file_id"),
        filename=str(data.get("filename") or ""),
        num_pages=_as_int(data.get("num_pages"), "num_pages"),
        upload_time=str(data.get("upload_time") or ""),
    )


def build_model_infos(data: Any) -> list[ModelInfo]:
    data = _require_object(data, "models response")
    raw_models = data.get("models")
    if not isinstance(raw_models, list):
        raise ApiProtocolError("'models' must be a list")
    models: list[ModelInfo] = []
    for i, raw in enumerate(raw_models):
        if not isinstance(raw, dict):
            raise ApiProtocolError(f"Model at index {i} must be an object")
        classes = raw.get("classes") or []
        if not isinstance(classes, list):
            raise ApiProtocolError(f"Model at index {i}: 'classes' must be a list")
        models.append(
            ModelInfo(
                name=_require_str(raw, "name"),
                description=str(raw.get("description") or ""),
                classes=[str(c) for c in classes],
            )
        )
    return models


def build_health_status(data: Any) -> HealthStatus:
    data = _require_object(data, "health response")
    return HealthStatus(
        status=_require_str(data, "status"),
        version=str(data.get("version") or ""),
    )


def _build_detection_summary(raw: Any) -> DetectionSummary:
    if not isinstance(raw, dict):
        raise ApiProtocolError("'yolo_results' must be an object")
    by_class = raw.get("detections_by_class") or {}
    if not isinstance(by_class, dict):
        raise ApiProtocolError("'detections_by_class' must be an object")
    stats = raw.get("confidence_stats") or {}
    if not isinstance(stats, dict):
        raise ApiProtocolError("'confidence_stats' must be an object")
    raw_detections = raw.get("all_detections") or []
    if not isinstance(raw_detections, list):
        raise ApiProtocolError("'all_detections' must be a list")
    return DetectionSummary(
        total_detections=_as_int(raw.get("total_detections"), "total_detections"),
        detections_by_class={
            str(name): _as_int(count, f"detections_by_class.{name}")
            for name, count in by_class.items()
        },
        confidence=ConfidenceStats(
            mean=_as_float(stats.get("mean"), "confidence_stats.mean"),
            min=_as_float(stats.get("min"), "confidence_stats.min"),
            max=_as_float(stats.get("max"), "confidence_stats.max"),
        ),
        all_detections=[_build_detection(d, i) for i, d in enumerate(raw_detections)],
    )


def _build_detection(raw: Any, index: int) -> Detection:
    if not isinstance(raw, dict):
        raise ApiProtocolError(f"Detection at index {index} must be an object")
    bbox = raw.get("bbox") or []
    if not isinstance(bbox, list):
        raise ApiProtocolError(f"Detection at index {index}: 'bbox' must be a list")
    tile_index = raw.get("tile_index")
    return Detection(
        class_name=_require_str(raw, "class_name"),
        confidence=_as_float(raw.get("confidence"), "confidence"),
        bbox=tuple(_as_float(v, "bbox") for v in bbox),
        tile_index=None if tile_index is None else _as_int(tile_index, "tile_index"),
    )


def _require_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ApiProtocolError(f"Expected {what} to be a JSON object")
    return data


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not value or not isinstance(value, str):
        raise ApiProtocolError(f"'{key}' must be a non-empty string")
    return value


def _as_int(value: Any, key: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ApiProtocolError(f"'{key}' must be a number")
    return int(value)


def _as_float(value: Any, key: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ApiProtocolError(f"'{key}' must be a number")
    return float(value)

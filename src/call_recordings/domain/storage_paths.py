"""Naming rules for recording objects in storage."""

import time

SYSTEM_NAMESPACE = "system"
DEFAULT_FILE_NAME = "recording.wav"


def recording_file_name(recording_id: str, timestamp_ms: int | None = None) -> str:
    """Builds a collision-resistant file name from the recording id and time."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"recording_{recording_id}_{timestamp_ms}.wav"


def recording_object_path(owner_id: str | None, file_name: str) -> str:
    """Namespaces a file name under its owner, or the shared system folder."""
    return f"{owner_id or SYSTEM_NAMESPACE}/{file_name}"


def file_name_from_path(storage_path: str) -> str:
    """Returns the last segment of a storage path."""
    return storage_path.rsplit("/", 1)[-1] or DEFAULT_FILE_NAME

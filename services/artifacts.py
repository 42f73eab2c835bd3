# services/artifacts.py
from __future__ import annotations

import base64
import binascii
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from config.settings import ARTIFACT_BUCKET
from schemas.incident import IncidentRequest
from services.supabase.client import SupabaseClient, SupabaseError

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "artifact.png"
DEFAULT_FILE_TYPE = "image/png"


class ArtifactError(ValueError):
    """Artifact input that cannot be turned into a stored artifact."""


@dataclass
class ArtifactResult:
    data: Optional[Dict[str, Any]]
    uploaded_path: Optional[str] = None


def code_artifact(content: str) -> Dict[str, Any]:
    return {"type": "code", "content": content}


def decode_file_data(file_data: str) -> bytes:
    """Accept a ``data:<mime>;base64,<payload>`` URL or a bare base64 string."""
    payload = file_data.split(",", 1)[1] if "," in file_data else file_data
    try:
        raw = base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ArtifactError("fileData is not valid base64") from exc
    if not raw:
        raise ArtifactError("fileData is empty")
    return raw


async def upload_image_artifact(
    supabase: SupabaseClient,
    file_data: str,
    *,
    file_name: Optional[str],
    file_type: Optional[str],
    display_name: str,
) -> ArtifactResult:
    blob = decode_file_data(file_data)
    path = f"{int(time.time() * 1000)}-{file_name or DEFAULT_FILE_NAME}"

    stored_path = await supabase.storage.upload(
        ARTIFACT_BUCKET, path, blob, content_type=file_type or DEFAULT_FILE_TYPE
    )
    logger.info("artifact_uploaded bucket=%s bytes=%d", ARTIFACT_BUCKET, len(blob))

    return ArtifactResult(
        data={
            "type": "image",
            "url": supabase.storage.get_public_url(ARTIFACT_BUCKET, stored_path),
            "alt": f"Image for {display_name}",
        },
        uploaded_path=stored_path,
    )


async def build_artifact(
    supabase: SupabaseClient,
    body: IncidentRequest,
    *,
    is_update: bool = False,
) -> ArtifactResult:
    """Turn the artifact fields of an incident request into the row's ``artifact`` value."""
    kind = body.artifact_type
    if kind is None or kind == "none":
        return ArtifactResult(data=None)

    if kind == "code":
        if not body.artifact_content:
            raise ArtifactError("artifactContent is required for code artifacts")
        return ArtifactResult(data=code_artifact(body.artifact_content))

    # kind == "image"
    if not body.file_data:
        raise ArtifactError("fileData is required for image artifacts")
    source = (body.update if is_update else body.addition) or {}
    display_name = source.get("name") or "incident"
    return await upload_image_artifact(
        supabase,
        body.file_data,
        file_name=body.file_name,
        file_type=body.file_type,
        display_name=str(display_name),
    )


async def discard_artifact(supabase: SupabaseClient, result: ArtifactResult) -> None:
    """Remove an uploaded image whose row never got written."""
    if not result.uploaded_path:
        return
    try:
        await supabase.storage.remove(ARTIFACT_BUCKET, [result.uploaded_path])
        logger.info("artifact_discarded bucket=%s", ARTIFACT_BUCKET)
    except SupabaseError as exc:
        logger.warning(
            "artifact_discard_failed bucket=%s status=%s path=%s",
            ARTIFACT_BUCKET, exc.status_code, result.uploaded_path,
        )

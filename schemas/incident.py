from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

ArtifactType = Literal["code", "image", "none"]
IncidentId = Union[int, str]


class IncidentRequest(BaseModel):
    """Body shared by POST, PUT and DELETE on an incidents table."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    addition: Optional[Dict[str, Any]] = None
    update: Optional[Dict[str, Any]] = None
    id: Optional[IncidentId] = None
    ids: Optional[List[IncidentId]] = None

    artifact_type: Optional[ArtifactType] = Field(default=None, alias="artifactType")
    artifact_content: Optional[str] = Field(default=None, alias="artifactContent")
    file_data: Optional[str] = Field(default=None, alias="fileData")
    file_name: Optional[str] = Field(default=None, alias="fileName")
    file_type: Optional[str] = Field(default=None, alias="fileType")

    @field_validator("ids")
    @classmethod
    def validate_ids(cls, v: Optional[List[IncidentId]]) -> Optional[List[IncidentId]]:
        # An empty list would turn into "delete nothing" silently
        if v is not None and not v:
            return None
        return v

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        value = v.strip().replace("/", "_")
        return value or None

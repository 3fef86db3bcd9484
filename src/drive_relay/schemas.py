"""Request and response models for the relay endpoints."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class UploadRequest(BaseModel):
    """Body of ``POST /upload``. Field names follow the caller's camelCase."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    file_path: Optional[str] = Field(None, alias="filePath")
    file_name: Optional[str] = Field(None, alias="fileName")
    folder_id: Optional[str] = Field(None, alias="folderId")
    mime_type: Optional[str] = Field(None, alias="mimeType")


class UploadedFile(BaseModel):
    """The fields requested back from the provider's create call."""

    id: Optional[str] = None
    name: Optional[str] = None
    webViewLink: Optional[str] = None
    webContentLink: Optional[str] = None
    mimeType: Optional[str] = None
    size: Optional[Union[str, int]] = None

    @classmethod
    def from_provider(cls, data: Dict[str, Any]) -> "UploadedFile":
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            webViewLink=data.get("webViewLink"),
            webContentLink=data.get("webContentLink"),
            mimeType=data.get("mimeType"),
            size=data.get("size"),
        )


class UploadResponse(BaseModel):
    file: UploadedFile


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str
    version: str


class AuthCheckResponse(BaseModel):
    status: str = "authenticated"
    message: str = "Token is valid"
    testFile: Optional[Dict[str, Any]] = None


class ErrorEnvelope(BaseModel):
    """Normalized error body returned for every failure."""

    error: str = Field(..., description="Short error summary")
    details: Optional[Union[List[Any], str]] = Field(
        None,
        description="Provider-style error details, or a plain message"
    )

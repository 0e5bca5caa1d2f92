"""Configuration schemas for bucketfs."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AdapterConfig(BaseModel):
    """Settings owned by a storage adapter."""

    model_config = ConfigDict(extra="forbid")

    bucket: str = Field(..., min_length=1, description="Bucket name")
    prefix: str = Field(default="", description="Key prefix the adapter is rooted at")
    domain: Optional[str] = Field(
        default=None, description="External base URL used to build public URLs"
    )
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Fixed request parameters, e.g. {'ServerSideEncryption': 'AES256'}",
    )


class WriteConfig(BaseModel):
    """Per-call options for writes and directory creation."""

    model_config = ConfigDict(extra="forbid")

    visibility: Optional[str] = Field(
        default=None, description="Visibility label applied as the object ACL"
    )
    headers: dict[str, Any] = Field(
        default_factory=dict,
        description="Request parameters merged over the adapter options",
    )
    content_length: Optional[int] = Field(
        default=None, ge=0, description="Declared size, computed from contents if unset"
    )


class S3StorageConfig(AdapterConfig):
    """Connection and adapter configuration for S3 object storage."""

    access_key_id: str | None = Field(default=None, description="AWS access key ID")
    secret_access_key: str | None = Field(
        default=None, description="AWS secret access key"
    )
    session_token: str | None = Field(default=None, description="AWS session token")
    region_name: str | None = Field(default=None, description="AWS region")
    endpoint_url: str | None = Field(default=None, description="Custom S3 endpoint URL")
    aws_profile: str | None = Field(default=None, description="AWS profile name")

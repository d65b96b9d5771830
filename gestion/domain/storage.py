"""
File / Storage Domain Models
"""
from datetime import datetime
from typing import Optional

from gestion.domain.base import CamelModel


class FileResponse(CamelModel):
    id: str
    original_name: str
    file_name: str
    mime_type: str
    size: int
    s3_key: str
    s3_bucket: str
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    uploaded_by: Optional[str] = None
    url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SignedUrlResponse(CamelModel):
    url: str
    expires_in: int

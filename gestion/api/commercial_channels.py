"""
Commercial channels API endpoints
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gestion.core.auth import AuthenticatedUser, require_permissions
from gestion.core.database import get_db
from gestion.domain.base import MessageResponse
from gestion.domain.client import (
    CommercialChannelResponse,
    CreateCommercialChannelRequest,
    UpdateCommercialChannelRequest,
)
from gestion.services.commercial_channel_service import CommercialChannelService


router = APIRouter()


@router.post("", response_model=CommercialChannelResponse, status_code=201)
async def create_channel(
    data: CreateCommercialChannelRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("create_commercial_channels")),
):
    return CommercialChannelService(db).create(data)


@router.get("", response_model=List[CommercialChannelResponse])
async def get_channels(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_commercial_channels")),
):
    return CommercialChannelService(db).find_all()


@router.get("/{channel_id}", response_model=CommercialChannelResponse)
async def get_channel(
    channel_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("read_commercial_channels")),
):
    return CommercialChannelService(db).find_one(channel_id)


@router.put("/{channel_id}", response_model=CommercialChannelResponse)
async def update_channel(
    channel_id: str,
    data: UpdateCommercialChannelRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("update_commercial_channels")),
):
    return CommercialChannelService(db).update(channel_id, data)


@router.delete("/{channel_id}", response_model=MessageResponse)
async def delete_channel(
    channel_id: str,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(require_permissions("delete_commercial_channels")),
):
    return CommercialChannelService(db).remove(channel_id)

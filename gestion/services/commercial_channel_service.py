"""
Commercial Channel Service
"""
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from gestion.domain.client import CreateCommercialChannelRequest, UpdateCommercialChannelRequest
from gestion.models import CommercialChannel
from gestion.repositories import CommercialChannelRepository

logger = logging.getLogger(__name__)


class CommercialChannelService:

    def __init__(self, db: Session):
        self.db = db
        self.repository = CommercialChannelRepository(db)

    def find_all(self) -> List[CommercialChannel]:
        return self.repository.find_all()

    def find_one(self, channel_id: str) -> CommercialChannel:
        channel = self.repository.get_by_id(channel_id)
        if not channel:
            raise HTTPException(
                status_code=404,
                detail=f"Canal comercial con ID {channel_id} no encontrado"
            )
        return channel

    def create(self, data: CreateCommercialChannelRequest) -> CommercialChannel:
        self._ensure_unique_name(data.name)
        channel = self.repository.create(
            CommercialChannel(name=data.name, description=data.description)
        )
        self.db.commit()
        self.db.refresh(channel)
        logger.info(f"Commercial channel created: {channel.name}")
        return channel

    def update(self, channel_id: str, data: UpdateCommercialChannelRequest) -> CommercialChannel:
        channel = self.find_one(channel_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("name") and values["name"] != channel.name:
            self._ensure_unique_name(values["name"], exclude_id=channel_id)

        self.repository.update(channel, values)
        self.db.commit()
        self.db.refresh(channel)
        return channel

    def remove(self, channel_id: str) -> dict:
        channel = self.find_one(channel_id)
        self.repository.delete(channel)
        self.db.commit()
        logger.info(f"Commercial channel deleted: {channel_id}")
        return {"message": "Canal comercial eliminado correctamente"}

    def _ensure_unique_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        if self.repository.find_by_name(name, exclude_id=exclude_id):
            raise HTTPException(
                status_code=400,
                detail=f'El canal comercial con el nombre "{name}" ya existe'
            )

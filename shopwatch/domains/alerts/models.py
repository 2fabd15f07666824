from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

VAL_COLOR = 0xFD4553
REMOVE_ALERT_PREFIX = "removealert"


class Alert(BaseModel):
    """One watched item, bound to the channel the alert was created in"""
    item_id: str = Field(..., alias="uuid", description="Shop item id")
    channel_id: str = Field(..., description="Channel to notify")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_document(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


class User(BaseModel):
    """User record as kept in the user store"""
    id: str = Field(..., description="Chat user id")
    username: Optional[str] = None
    locale: str = "en-US"
    alerts: List[Alert] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> Dict[str, object]:
        doc = self.model_dump(by_alias=True, exclude={"id"})
        doc["_id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, object]) -> "User":
        data = dict(doc)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)


class OfferSnapshot(BaseModel):
    """Result of one shop query for one user"""
    success: bool
    maintenance: bool = False
    offers: List[str] = Field(default_factory=list)
    expires: Optional[int] = Field(default=None, description="Unix timestamp at which the shop rotates")

    @classmethod
    def ok(cls, offers: List[str], expires: Optional[int] = None) -> "OfferSnapshot":
        return cls(success=True, offers=list(offers), expires=expires)

    @classmethod
    def failed(cls, maintenance: bool = False) -> "OfferSnapshot":
        return cls(success=False, maintenance=maintenance)

    @property
    def is_maintenance(self) -> bool:
        return not self.success and self.maintenance

    def contains(self, item_id: str) -> bool:
        return self.success and item_id in self.offers


class ItemMetadata(BaseModel):
    item_id: str
    display_name: str
    icon_url: Optional[str] = None


class Channel(BaseModel):
    id: str
    name: str = ""
    guild_id: Optional[str] = None


class ChatUser(BaseModel):
    id: str
    username: str
    discriminator: Optional[str] = None

    @property
    def tag(self) -> str:
        if self.discriminator and self.discriminator != "0":
            return f"{self.username}#{self.discriminator}"
        return self.username


class OriginContext(BaseModel):
    """Where a command came from"""
    user_id: str
    channel_id: str
    guild_id: Optional[str] = None
    locale: str = "en-US"
    user_tag: Optional[str] = None


class Embed(BaseModel):
    description: str
    color: int = VAL_COLOR
    thumbnail_url: Optional[str] = None

    def to_payload(self) -> Dict[str, object]:
        data: Dict[str, object] = {"description": self.description, "color": self.color}
        if self.thumbnail_url:
            data["thumbnail"] = {"url": self.thumbnail_url}
        return data


class RemoveAlertButton(BaseModel):
    user_id: str
    item_id: str
    label: str

    @property
    def custom_id(self) -> str:
        return f"{REMOVE_ALERT_PREFIX}/{self.item_id}/{self.user_id}"

    def to_payload(self) -> Dict[str, object]:
        return {
            "type": 1,
            "components": [
                {"type": 2, "style": 4, "label": self.label, "custom_id": self.custom_id, "emoji": {"name": "✖"}}
            ],
        }


class MessagePayload(BaseModel):
    content: Optional[str] = None
    embeds: List[Embed] = Field(default_factory=list)
    components: List[RemoveAlertButton] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "embeds": [embed.to_payload() for embed in self.embeds],
            "components": [component.to_payload() for component in self.components],
        }
        if self.content:
            data["content"] = self.content
        return data


# Guild id -> channel id -> alert count. DM channels live under None.
GuildAggregate = Dict[Optional[str], Dict[str, int]]

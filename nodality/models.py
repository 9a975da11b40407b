"""
Firestore document models using Python dataclasses.

Each model includes:
  - An `id` field for the Firestore document ID
  - A `to_dict()` instance method for serialization
  - A `from_dict(data, doc_id)` classmethod where documents are read back
    into the model

Field names in `to_dict()` follow the stored schema (camelCase), which is
shared with the web client, so they differ from the attribute names.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from nodality.firestore_helpers import now


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _parse_datetime(value) -> Optional[datetime]:
    """Convert a value to datetime. Accepts datetime objects, ISO-format
    strings, and Firestore DatetimeWithNanoseconds objects."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        value = value.replace("Z", "+00:00")
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            return None
    return None


# ===========================================================================
# 1. Theme  (collection: Themes)
# ===========================================================================

@dataclass
class Theme:
    id: Optional[str] = None
    title: str = ""
    description: str = ""
    image_url: Optional[str] = None
    created_by: Optional[str] = None   # display name, not a reference
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url or None,
            "createdBy": self.created_by,
            "createdAt": self.created_at or now(),
        }


# ===========================================================================
# 2. Node  (collection: Nodes)
# ===========================================================================

@dataclass
class Node:
    id: Optional[str] = None
    title: str = ""
    content: str = ""
    created_at: Optional[datetime] = None
    created_by: Any = None   # DocumentReference to users/{uid}
    theme: Any = None        # DocumentReference to Themes/{id}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "createdAt": self.created_at or now(),
            "createdBy": self.created_by,
            "themeId": self.theme,
        }


# ===========================================================================
# 3. ChatMessage  (collection: Themes/{id}/GroupChat/{id}/Messages)
# ===========================================================================

@dataclass
class ChatMessage:
    id: Optional[str] = None
    message: str = ""
    sender: str = "system"
    timestamp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "sender": self.sender,
            "timestamp": self.timestamp or now(),
        }


# ===========================================================================
# 4. UserProfile  (collection: users)
# ===========================================================================

@dataclass
class UserProfile:
    id: Optional[str] = None   # Firebase Auth UID
    email: str = ""
    admin: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "admin": self.admin,
            "createdAt": self.created_at or now(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> UserProfile:
        return cls(
            id=doc_id,
            email=data.get("email", ""),
            admin=bool(data.get("admin", False)),
            created_at=_parse_datetime(data.get("createdAt")),
        )

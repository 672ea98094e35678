"""
Board state types
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from finance_categories.schemas.category import CategoryResponse


class RequestStatus(str, Enum):
    """Lifecycle of one board action"""
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class DialogMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


@dataclass
class Dialog:
    """Open sheet or confirmation dialog"""
    mode: DialogMode
    category: Optional[CategoryResponse] = None
    values: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, List[str]] = field(default_factory=dict)
    message: Optional[str] = None


@dataclass
class Notification:
    level: str  # success, info or error
    title: str
    message: str

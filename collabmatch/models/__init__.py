"""Stored entity records."""

from collabmatch.models.like import LikeEdge
from collabmatch.models.message import Message, MessageStatus, MessageType
from collabmatch.models.portfolio import PortfolioItem
from collabmatch.models.showcase import Showcase
from collabmatch.models.thread import Thread, direct_thread_key
from collabmatch.models.user import User, UserRole

__all__ = [
    "LikeEdge",
    "Message",
    "MessageStatus",
    "MessageType",
    "PortfolioItem",
    "Showcase",
    "Thread",
    "User",
    "UserRole",
    "direct_thread_key",
]

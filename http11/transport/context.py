"""Context object shared across worker threads."""

from dataclasses import dataclass, field
from typing import Optional

from http11.bootstrap.config import ServerConfig
from http11.domain.session import SessionStore
from http11.domain.users import InMemoryUserRepository, UserRepository
from http11.handlers.static_resources import StaticResources
from http11.lifecycle.state import ServerLifecycle


@dataclass
class WorkerContext:
    """Dependencies shared across handler threads.

    The session store and user repository are the only mutable state
    connections share.
    """

    resources: StaticResources
    sessions: SessionStore = field(default_factory=SessionStore)
    users: UserRepository = field(default_factory=InMemoryUserRepository)
    config: ServerConfig = field(default_factory=ServerConfig)
    lifecycle: Optional[ServerLifecycle] = None

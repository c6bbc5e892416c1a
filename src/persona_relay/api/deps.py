"""Centralized FastAPI dependency type aliases.

Import these ``*Dep`` aliases in route modules instead of manually
writing ``Annotated[T, Depends(get_xxx)]`` everywhere.  Each alias
corresponds to a single ``get_*`` factory and can be overridden in
tests via ``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends

from persona_relay.configs.config import AppConfig, get_app_config
from persona_relay.core.relay.deps import get_relay
from persona_relay.core.relay.relay import ConversationRelay
from persona_relay.infra.sessions.store import SessionStore, get_session_store

AppConfigDep = Annotated[AppConfig, Depends(get_app_config)]
RelayDep = Annotated[ConversationRelay, Depends(get_relay)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]

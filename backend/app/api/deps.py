import logging
from collections.abc import Generator
from typing import Annotated

import jwt
from fastapi import Depends, Header, Request
from sqlmodel import Session

from app.agent.chat_agent import ChatAgent
from app.agent.llm_client import LLMClient
from app.core.errors import AuthenticationRequired, InvalidToken
from app.core.security import AuthUser, extract_bearer_token, verify_access_token

logger = logging.getLogger(__name__)


def get_db(request: Request) -> Generator[Session, None, None]:
    with Session(request.app.state.engine) as session:
        yield session


def get_llm_client(request: Request) -> LLMClient:
    return request.app.state.llm_client


def get_chat_agent(llm: Annotated[LLMClient, Depends(get_llm_client)]) -> ChatAgent:
    return ChatAgent(llm=llm)


def get_current_user(authorization: Annotated[str | None, Header()] = None) -> AuthUser:
    token = extract_bearer_token(authorization)
    logger.debug("Authentication attempt (header=%s, token=%s)", bool(authorization), bool(token))
    if not token:
        raise AuthenticationRequired()
    try:
        user = verify_access_token(token)
    except jwt.InvalidTokenError as e:
        logger.info("Token verification failed: %s", e)
        raise InvalidToken() from e
    logger.debug("Authentication successful for user %s", user.id)
    return user


def get_optional_user(authorization: Annotated[str | None, Header()] = None) -> AuthUser | None:
    """Anonymous when no token is sent or the token does not verify."""
    token = extract_bearer_token(authorization)
    if not token:
        return None
    try:
        return verify_access_token(token)
    except jwt.InvalidTokenError as e:
        logger.debug("Ignoring unverifiable token on optional-auth route: %s", e)
        return None


SessionDep = Annotated[Session, Depends(get_db)]
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
OptionalUser = Annotated[AuthUser | None, Depends(get_optional_user)]
ChatAgentDep = Annotated[ChatAgent, Depends(get_chat_agent)]

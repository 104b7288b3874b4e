import logging
import uuid
from typing import Any

from fastapi import APIRouter

from app.agent.artifacts import ChatTurn, ChatTurnMessage, IdeaDraft
from app.agent.idea_extractor import draft_from_response
from app.agent.prompt_registry import DEFAULT_CONTEXT, context_catalog
from app.api.deps import ChatAgentDep
from app.core.errors import BuildsyError, ChatGenerationError
from app.models import (
    ApiResponse,
    ChatContexts,
    ChatConversationRequest,
    ChatMessageRequest,
    ChatReply,
    ExtractRequest,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/contexts", response_model=ApiResponse[ChatContexts])
def read_chat_contexts() -> Any:
    return ApiResponse(
        message="Available chat contexts",
        data=ChatContexts.model_validate({"contexts": context_catalog()}),
    )


@router.post("/message", response_model=ApiResponse[ChatReply])
async def send_message(request: ChatMessageRequest, agent: ChatAgentDep) -> Any:
    logger.info("send_message - start (context=%r)", request.context)
    session_id = request.sessionId or str(uuid.uuid4())
    turn = ChatTurn(
        messages=[ChatTurnMessage(role="user", content=request.message)],
        context=request.context or DEFAULT_CONTEXT,
        additional_params=request.additionalParams or {},
    )
    try:
        completion = await agent.run(turn)
    except ChatGenerationError as e:
        raise BuildsyError("Failed to process chat message", error=e.message) from e

    logger.info("send_message - success (session=%s)", session_id)
    return ApiResponse(
        message="Chat response generated successfully",
        data=ChatReply(
            response=completion.content,
            sessionId=session_id,
            timestamp=completion.timestamp,
        ),
    )


@router.post("/conversation", response_model=ApiResponse[ChatReply])
async def send_conversation(request: ChatConversationRequest, agent: ChatAgentDep) -> Any:
    logger.info(
        "send_conversation - start (%s message(s), context=%r)",
        len(request.messages),
        request.context,
    )
    session_id = request.sessionId or str(uuid.uuid4())
    turn = ChatTurn(
        messages=[ChatTurnMessage(role=m.role, content=m.content) for m in request.messages],
        context=request.context or DEFAULT_CONTEXT,
        additional_params=request.additionalParams or {},
    )
    try:
        completion = await agent.run(turn)
    except ChatGenerationError as e:
        raise BuildsyError("Failed to process conversation", error=e.message) from e

    logger.info("send_conversation - success (session=%s)", session_id)
    return ApiResponse(
        message="Conversation processed successfully",
        data=ChatReply(
            response=completion.content,
            sessionId=session_id,
            timestamp=completion.timestamp,
        ),
    )


# Older clients post the conversation payload to the router root.
router.add_api_route(
    "",
    send_conversation,
    methods=["POST"],
    response_model=ApiResponse[ChatReply],
    include_in_schema=False,
)


@router.post("/extract", response_model=ApiResponse[IdeaDraft])
def extract_project_idea(request: ExtractRequest) -> Any:
    draft = draft_from_response(request.content)
    logger.info("extract_project_idea - extracted %r", draft.name)
    return ApiResponse(message="Project idea extracted successfully", data=draft)

from typing import Any, Literal

from pydantic import BaseModel, Field

OPENAI_ROLES = {"system": "system", "human": "user", "assistant": "assistant"}


class LLMMessage(BaseModel):
    """A single role-tagged message in the list sent to the language model."""
    role: Literal["system", "human", "assistant"]
    content: str

    def to_openai(self) -> dict[str, str]:
        return {"role": OPENAI_ROLES[self.role], "content": self.content}


class ChatCompletion(BaseModel):
    """Artifact produced by the LLM gateway for one chat exchange."""
    content: str = Field(description="Generated assistant text")
    timestamp: str = Field(description="ISO-8601 wall-clock time the response was obtained")


class IdeaDraft(BaseModel):
    """Project fields derived from assistant text, not yet persisted."""
    name: str = Field(description="Project name, at most 100 characters")
    description: str = Field(description="What the project does, at most 1000 characters")
    tech_stack: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    difficulty: Literal["beginner", "intermediate", "advanced"] = "intermediate"
    estimated_duration: str = "To be determined"
    category: str = "Software Development"

    def to_project_payload(self) -> dict:
        """Body accepted by `POST /api/projects`."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "difficulty": self.difficulty,
            "estimatedDuration": self.estimated_duration,
            "techStack": list(self.tech_stack),
            "features": list(self.features),
            "requirements": [],
        }


class ChatTurnMessage(BaseModel):
    role: str
    content: str


class ChatTurn(BaseModel):
    """Input to the chat agent: the history so far plus the governing context."""
    messages: list[ChatTurnMessage] = Field(min_length=1)
    context: str | None = None
    additional_params: dict[str, Any] = Field(default_factory=dict)

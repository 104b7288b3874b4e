"""
Maps a chat "context" label to the system prompt that governs the exchange.

Each specialised context owns a parameter model whose slots default to
"Not specified"; unknown labels fall back to the general brainstorming prompt,
which is parameterised only by the raw context string.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from app.agent.artifacts import LLMMessage
from app.agent.prompts.chat import (
    FEATURES_SYSTEM_PROMPT,
    GENERAL_SYSTEM_PROMPT,
    HUMAN_MESSAGE_TEMPLATE,
    PROBLEM_SOLVING_SYSTEM_PROMPT,
    REFINEMENT_SYSTEM_PROMPT,
    TECHNOLOGY_SYSTEM_PROMPT,
    TIMELINE_SYSTEM_PROMPT,
)

AI_NAME = "Buildsy AI"
NOT_SPECIFIED = "Not specified"
DEFAULT_CONTEXT = "general project brainstorming"


class PromptParams(BaseModel):
    """Optional substitution slots. Missing or blank values read as "Not specified"."""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, data: Any) -> dict[str, str]:
        if not isinstance(data, Mapping):
            return {}
        return {str(key): str(value) for key, value in data.items() if value}


class RefinementParams(PromptParams):
    projectContext: str = NOT_SPECIFIED
    skillLevel: str = NOT_SPECIFIED
    timeframe: str = NOT_SPECIFIED


class TechnologyParams(PromptParams):
    projectType: str = NOT_SPECIFIED
    experienceLevel: str = NOT_SPECIFIED
    requirements: str = NOT_SPECIFIED
    learningStyle: str = NOT_SPECIFIED


class FeatureParams(PromptParams):
    projectConcept: str = NOT_SPECIFIED
    targetAudience: str = NOT_SPECIFIED
    coreFunctionality: str = NOT_SPECIFIED
    projectScope: str = NOT_SPECIFIED


class TimelineParams(PromptParams):
    projectDetails: str = NOT_SPECIFIED
    developerExperience: str = NOT_SPECIFIED
    timePerWeek: str = NOT_SPECIFIED
    complexity: str = NOT_SPECIFIED


class ProblemSolvingParams(PromptParams):
    currentIssue: str = NOT_SPECIFIED
    techStack: str = NOT_SPECIFIED
    errorDetails: str = NOT_SPECIFIED
    attemptedSolutions: str = NOT_SPECIFIED


@dataclass(frozen=True)
class PromptTemplate:
    name: str
    description: str
    system_template: str
    params_model: type[PromptParams] | None = None
    aliases: tuple[str, ...] = field(default_factory=tuple)

    @property
    def parameters(self) -> list[str]:
        if self.params_model is None:
            return []
        return list(self.params_model.model_fields)

    def matches(self, label: str) -> bool:
        return label in (self.name, *self.aliases)

    def format_system(self, params: Mapping[str, str]) -> str:
        return self.system_template.format(**params)

    def format_messages(self, params: Mapping[str, str], user_message: str) -> list[LLMMessage]:
        return [
            LLMMessage(role="system", content=self.format_system(params)),
            LLMMessage(role="human", content=HUMAN_MESSAGE_TEMPLATE.format(userMessage=user_message)),
        ]


GENERAL_TEMPLATE = PromptTemplate(
    name="general",
    description="General project brainstorming and idea generation",
    system_template=GENERAL_SYSTEM_PROMPT,
)

CONTEXT_TEMPLATES: tuple[PromptTemplate, ...] = (
    PromptTemplate(
        name="refinement",
        description="Refine and improve existing project ideas",
        system_template=REFINEMENT_SYSTEM_PROMPT,
        params_model=RefinementParams,
        aliases=("project refinement",),
    ),
    PromptTemplate(
        name="technology",
        description="Get technology and tech stack recommendations",
        system_template=TECHNOLOGY_SYSTEM_PROMPT,
        params_model=TechnologyParams,
        aliases=("tech recommendation",),
    ),
    PromptTemplate(
        name="features",
        description="Brainstorm features for your project",
        system_template=FEATURES_SYSTEM_PROMPT,
        params_model=FeatureParams,
        aliases=("feature brainstorming",),
    ),
    PromptTemplate(
        name="timeline",
        description="Create realistic project timelines",
        system_template=TIMELINE_SYSTEM_PROMPT,
        params_model=TimelineParams,
        aliases=("project timeline",),
    ),
    PromptTemplate(
        name="problem solving",
        description="Get help with technical problems and debugging",
        system_template=PROBLEM_SOLVING_SYSTEM_PROMPT,
        params_model=ProblemSolvingParams,
        aliases=("problem-solving", "debugging"),
    ),
)


@dataclass(frozen=True)
class ResolvedPrompt:
    template: PromptTemplate
    params: dict[str, str]

    @property
    def is_fallback(self) -> bool:
        return self.template is GENERAL_TEMPLATE


def find_template(context: str | None) -> PromptTemplate | None:
    label = (context or "").lower()
    for template in CONTEXT_TEMPLATES:
        if template.matches(label):
            return template
    return None


def resolve_prompt(
    context: str | None,
    additional_params: Mapping[str, Any] | None = None,
) -> ResolvedPrompt:
    """Never raises: unknown contexts resolve to the general template."""
    context = context or DEFAULT_CONTEXT
    template = find_template(context)
    if template is None or template.params_model is None:
        return ResolvedPrompt(
            template=GENERAL_TEMPLATE,
            params={"aiName": AI_NAME, "context": context},
        )

    slots = template.params_model.model_validate(additional_params or {})
    return ResolvedPrompt(
        template=template,
        params={"aiName": AI_NAME, **slots.model_dump()},
    )


def context_catalog() -> list[dict[str, Any]]:
    """Supported contexts with the `additionalParams` slot names each one reads."""
    return [
        {
            "name": template.name,
            "description": template.description,
            "parameters": template.parameters,
        }
        for template in (GENERAL_TEMPLATE, *CONTEXT_TEMPLATES)
    ]

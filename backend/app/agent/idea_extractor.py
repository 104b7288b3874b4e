"""
Best-effort extraction of a project draft from free-form assistant text.

Every field is derived by an ordered list of regex rules where the first usable
match wins, with a literal fallback when nothing matches. There is no grammar
behind this: unusual or non-English model output simply lands on the fallbacks.
Callers run `extract_idea` and then `sanitize_draft` before saving a project.
"""

import logging
import re

from app.agent.artifacts import IdeaDraft

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
DURATION_MAX_LENGTH = 100
MAX_TECH_ITEMS = 10
MAX_FEATURE_ITEMS = 10

DEFAULT_NAME = "Untitled Project"
DEFAULT_DURATION = "To be determined"
DEFAULT_CATEGORY = "Software Development"
DEFAULT_DIFFICULTY = "intermediate"

_LABEL_TAIL = r"\**\s*:[ \t]*\**[ \t]*"

_LABELED_NAME = re.compile(
    r"\b(?:project|idea|app|application)(?:\s+name)?" + _LABEL_TAIL + r"([^\n]+)", re.IGNORECASE
)
_HEADING_NAME = re.compile(r"^\s*#{1,6}\s+([^\n]+)$", re.MULTILINE)
_QUOTED_PHRASE = re.compile(r"\"([^\"\n]+)\"|“([^”\n]+)”")
_BUILD_A_NAME = re.compile(r"\b[Bb]uild (?:a|an)\s+([A-Z][\w-]*(?:\s+[A-Z][\w-]*)*)")
_LEADING_LABEL = re.compile(r"^\**[A-Za-z][A-Za-z0-9 /&()'-]{0,40}?\**\s*:\s*")
_DESCRIPTION_LABEL = re.compile(
    r"^\s*(?:[-*•]\s*)?\**\s*(?:description|about|overview|summary)" + _LABEL_TAIL + r"(.*)$",
    re.IGNORECASE,
)
_SECTION_START = re.compile(
    r"^\s*(?:#{1,6}\s+|(?:[-*•]\s*)?\**\s*[A-Za-z][A-Za-z0-9 /&()'-]{0,40}?\**\s*:)"
)
_PRODUCT_SENTENCE = re.compile(
    r"[^.!?\n]*\b(?:app|application|platform|system|tool|website|service)\b[^.!?\n]*[.!?]",
    re.IGNORECASE,
)

_TECH_LABEL = re.compile(
    r"\b(?:technologies|technology|tech stack|using|built with|tools|frontend|backend|database)"
    + _LABEL_TAIL
    + r"([^\n]*)",
    re.IGNORECASE,
)
# Labels the assistant uses to open a new section of a structured reply.
_SECTION_LABEL = re.compile(
    r"^\s*(?:(?:[-*+•]|\d+[.)])\s*)?\**\s*(?:project(?:\s+name)?|name|idea|description|about|overview|summary"
    r"|technologies|technology|tech stack|built with|tools|frontend|backend|database"
    r"|(?:key\s+)?features|functionality|capabilities|difficulty|(?:estimated\s+)?duration|timeline"
    r"|time|category|requirements)\**\s*:",
    re.IGNORECASE,
)
_TECH_SPLIT = re.compile(r"[,&+\n]")
_LIST_MARKER = re.compile(r"^\s*(?:[-*+•]|\d+[.)])\s+")

_FEATURE_HEADER = re.compile(
    r"\b(?:features|functionality|capabilities|includes|will have)" + _LABEL_TAIL + r"$",
    re.IGNORECASE,
)
_BULLET_ITEM = re.compile(r"^\s*(?:[-*+•]|\d+[.)])\s+(.+)$")

_DURATION_PATTERNS = (
    re.compile(r"\b(?:duration|timeline|time|takes)" + _LABEL_TAIL + r"([^\n]+)", re.IGNORECASE),
    re.compile(
        r"\b(?:complete|build)\s+(?:it\s+|this\s+)?in\s+(?:about\s+|around\s+|approximately\s+)?([^\n.,;!?]+)",
        re.IGNORECASE,
    ),
    re.compile(r"\btakes?\s+(?:about|around|approximately)\s+([^\n.,;!?]+)", re.IGNORECASE),
)

_DIFFICULTY_KEYWORDS = (
    ("advanced", re.compile(r"\b(?:advanced|complex|expert)", re.IGNORECASE)),
    ("beginner", re.compile(r"\b(?:beginner|simple|easy)", re.IGNORECASE)),
)

# Priority order matters: "react native" is shadowed by "react" on purpose.
_CATEGORY_KEYWORDS = (
    ("Web Development", re.compile(r"\b(?:web|website|react|vue)", re.IGNORECASE)),
    ("Mobile Development", re.compile(r"\b(?:mobile|ios\b|android|react native)", re.IGNORECASE)),
    ("Game Development", re.compile(r"\b(?:game|unity|gaming)", re.IGNORECASE)),
    ("AI/ML", re.compile(r"\b(?:ai\b|machine learning|ml\b)", re.IGNORECASE)),
    ("Data Science", re.compile(r"\b(?:data|analytics|dashboard)", re.IGNORECASE)),
)

_CONVERSATIONAL_OPENER = re.compile(
    r"^(?:"
    r"here(?:'s|’s| is)(?:\s+(?:an?|my|the)\s+(?:idea|project(?:\s+idea)?|suggestion))?"
    r"|i(?:\s+would|'d|’d)?\s+(?:suggest|recommend)(?:\s+(?:building|creating|making))?"
    r"|you\s+could\s+(?:build|create|make)"
    r"|how\s+about"
    r"|consider\s+(?:building|creating|making)"
    r")\s*[:,\-]?\s*",
    re.IGNORECASE,
)
CONVERSATIONAL_FILLERS = (
    "happy coding",
    "feel free",
    "let me know",
    "hope this helps",
    "good luck",
    "would you like",
    "i'd be happy",
)


def _strip_emphasis(text: str) -> str:
    return text.replace("**", "").replace("__", "").replace("*", "").replace("`", "")


def strip_conversational_opener(text: str) -> str:
    stripped = _CONVERSATIONAL_OPENER.sub("", text.strip(), count=1).strip()
    if stripped and stripped != text.strip():
        stripped = stripped[0].upper() + stripped[1:]
    return stripped


def has_conversational_filler(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in CONVERSATIONAL_FILLERS)


def _clean_name(raw: str) -> str:
    name = _strip_emphasis(raw).strip()
    name = name.strip("\"'“”#:- \t")
    return name.rstrip(".!?,;").strip()


def _quoted_phrase(text: str) -> str | None:
    for match in _QUOTED_PHRASE.finditer(text):
        phrase = match.group(1) or match.group(2)
        if len(phrase.strip()) >= 3:
            return phrase
    return None


def _name_candidates(text: str):
    for pattern in (_LABELED_NAME, _HEADING_NAME):
        match = pattern.search(text)
        yield match.group(1) if match else None
    yield _quoted_phrase(text)
    match = _BUILD_A_NAME.search(text)
    yield match.group(1) if match else None


def _extract_name(text: str) -> str:
    for raw in _name_candidates(text):
        if raw is None:
            continue
        candidate = _clean_name(raw)
        if candidate and len(candidate) < 80:
            return candidate

    first_sentence = " ".join(text.split(".")[0].split())
    first_sentence = _LEADING_LABEL.sub("", _LIST_MARKER.sub("", first_sentence)).strip()
    if first_sentence and len(first_sentence) < 100:
        return _clean_name(first_sentence) or DEFAULT_NAME
    return DEFAULT_NAME


def _labeled_description(lines: list[str]) -> str | None:
    for index, line in enumerate(lines):
        match = _DESCRIPTION_LABEL.match(line)
        if not match:
            continue
        parts = [match.group(1).strip()]
        for following in lines[index + 1:]:
            if _SECTION_START.match(following):
                break
            if following.strip():
                parts.append(following.strip())
        block = " ".join(part for part in parts if part)
        if block:
            return block
    return None


def _fallback_description_line(lines: list[str]) -> str | None:
    for line in lines:
        candidate = strip_conversational_opener(_strip_emphasis(line).strip().lstrip("#-• ").strip())
        if len(candidate) > 30 and not has_conversational_filler(candidate):
            return candidate
    return None


def _templated_description(difficulty: str, category: str) -> str:
    article = "An" if difficulty[:1].lower() in "aeiou" else "A"
    return f"{article} {difficulty} level {category.lower()} project."


def _extract_description(text: str, difficulty: str, category: str) -> str:
    lines = text.splitlines()
    candidate = _labeled_description(lines)
    if candidate is None:
        match = _PRODUCT_SENTENCE.search(text)
        if match:
            candidate = match.group(0)

    if candidate is not None:
        candidate = strip_conversational_opener(_strip_emphasis(candidate).strip())
        if len(candidate) >= 20:
            return candidate

    return _fallback_description_line(lines) or _templated_description(difficulty, category)


def _tech_blocks(text: str):
    """Yield each labeled tech list together with the bullets listed under it."""
    lines = text.splitlines()
    for index, line in enumerate(lines):
        for match in _TECH_LABEL.finditer(line):
            block = [match.group(1)]
            for following in lines[index + 1:]:
                if not _BULLET_ITEM.match(following) or _SECTION_LABEL.match(following):
                    break
                block.append(following)
            yield "\n".join(block)


def _extract_tech_stack(text: str) -> list[str]:
    stack: list[str] = []
    seen: set[str] = set()
    for block in _tech_blocks(text):
        for raw_item in _TECH_SPLIT.split(block):
            item = _LIST_MARKER.sub("", _strip_emphasis(raw_item)).strip().strip(";:-• ").rstrip(".").strip()
            if len(item) < 2 or len(item) > 30:
                continue
            key = item.lower()
            if key in seen:
                continue
            seen.add(key)
            stack.append(item)
            if len(stack) >= MAX_TECH_ITEMS:
                return stack
    return stack


def _extract_features(text: str) -> list[str]:
    lines = text.splitlines()
    features: list[str] = []
    index = 0
    while index < len(lines) and len(features) < MAX_FEATURE_ITEMS:
        if not _FEATURE_HEADER.search(lines[index]):
            index += 1
            continue
        index += 1
        while index < len(lines):
            line = lines[index]
            if not line.strip():
                index += 1
                continue
            bullet = _BULLET_ITEM.match(line)
            if not bullet or _SECTION_LABEL.match(line):
                break
            item = _strip_emphasis(bullet.group(1)).strip()
            if 5 <= len(item) <= 100 and item not in features:
                features.append(item)
                if len(features) >= MAX_FEATURE_ITEMS:
                    break
            index += 1
    return features


def _extract_difficulty(text: str) -> str:
    for level, pattern in _DIFFICULTY_KEYWORDS:
        if pattern.search(text):
            return level
    return DEFAULT_DIFFICULTY


def _extract_duration(text: str) -> str:
    for pattern in _DURATION_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        duration = _strip_emphasis(match.group(1)).strip().strip("\"'.,;:!?- \t")
        if duration:
            return duration[:DURATION_MAX_LENGTH]
    return DEFAULT_DURATION


def _extract_category(text: str) -> str:
    for category, pattern in _CATEGORY_KEYWORDS:
        if pattern.search(text):
            return category
    return DEFAULT_CATEGORY


def extract_idea(text: str | None) -> IdeaDraft:
    """First pass: derive a draft from raw assistant text. Never raises."""
    text = text or ""
    try:
        difficulty = _extract_difficulty(text)
        category = _extract_category(text)
        return IdeaDraft(
            name=_extract_name(text)[:NAME_MAX_LENGTH],
            description=_extract_description(text, difficulty, category)[:DESCRIPTION_MAX_LENGTH],
            tech_stack=_extract_tech_stack(text),
            features=_extract_features(text),
            difficulty=difficulty,
            estimated_duration=_extract_duration(text),
            category=category,
        )
    except Exception as e:
        logger.warning("Idea extraction fell back to defaults: %s", e)
        return IdeaDraft(
            name=DEFAULT_NAME,
            description=_templated_description(DEFAULT_DIFFICULTY, DEFAULT_CATEGORY),
        )


def _sanitize_description(description: str, difficulty: str, category: str) -> str:
    description = strip_conversational_opener(_strip_emphasis(description or "").strip())
    if has_conversational_filler(description):
        sentences = re.split(r"(?<=[.!?])\s+", description)
        description = " ".join(s for s in sentences if not has_conversational_filler(s)).strip()
    if len(description) < 20:
        description = _templated_description(difficulty, category)
    return description[:DESCRIPTION_MAX_LENGTH]


def sanitize_draft(draft: IdeaDraft) -> IdeaDraft:
    """Second pass run right before a draft is submitted as a project."""
    difficulty = draft.difficulty if draft.difficulty in ("beginner", "intermediate", "advanced") else DEFAULT_DIFFICULTY
    category = (draft.category or "").strip() or DEFAULT_CATEGORY
    name = _clean_name(strip_conversational_opener(draft.name or "")) or DEFAULT_NAME

    return IdeaDraft(
        name=name[:NAME_MAX_LENGTH],
        description=_sanitize_description(draft.description, difficulty, category),
        tech_stack=[item.strip() for item in draft.tech_stack if item and item.strip()],
        features=[item.strip() for item in draft.features if item and item.strip()],
        difficulty=difficulty,
        estimated_duration=(draft.estimated_duration or "").strip() or DEFAULT_DURATION,
        category=category,
    )


def draft_from_response(text: str | None) -> IdeaDraft:
    """Both passes, in the order a save expects them."""
    return sanitize_draft(extract_idea(text))

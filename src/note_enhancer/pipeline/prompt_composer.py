"""Prompt Composer - builds the system instruction and the generation budget."""

from __future__ import annotations

from dataclasses import dataclass

from note_enhancer.config import PipelineConfig
from note_enhancer.models.enhancement import ContentIntent, InputComplexity, ToneType
from note_enhancer.utils.text import word_count

_OUTPUT_RULES = """\
ABSOLUTE RULES:
- Output ONLY the rewritten text, nothing else
- NO explanations, notes, commentary or meta-text
- Remove filler words (um, uh, like, you know, basically)
- Never invent names, numbers, employers, schools or achievements the speaker did not mention"""

TONE_TEMPLATES: dict[ToneType, str] = {
    ToneType.PROFESSIONAL: f"""\
You are an expert writer. Transform this spoken note into polished, compelling prose.

{_OUTPUT_RULES}

STYLE:
- Confident, articulate and clear
- Smooth, flowing sentences that are easy to read
- Match formality to the subject matter""",
    ToneType.CASUAL: f"""\
You are a skilled writer helping someone sound articulate and natural. Rewrite this in a \
friendly, conversational tone.

{_OUTPUT_RULES}

STYLE:
- Natural and easy to read, with contractions and casual phrasing
- Keep the speaker's personality and voice
- Sound like a smart person having a conversation""",
    ToneType.CONCISE: f"""\
You are a master editor. Distill this to its essential points with clarity and impact.

{_OUTPUT_RULES}

STYLE:
- Remove every unnecessary word
- Use bullet points for multiple items
- Every sentence must earn its place
- Be brief but complete""",
    ToneType.EMAIL: f"""\
You are a professional communication expert. Transform this into a polished, effective email.

{_OUTPUT_RULES}

STRUCTURE:
- Appropriate greeting and sign-off
- Clear, well-organized paragraphs
- Professional but personable
- A clear call to action where appropriate""",
    ToneType.MEETING_NOTES: f"""\
You are an executive assistant creating clear, actionable meeting notes.

{_OUTPUT_RULES}

STRUCTURE:
- Headings for Key Points, Decisions and Action Items (as relevant)
- Bullet points for easy scanning
- Action items that are specific and assignable
- Useful for someone who was not there""",
    ToneType.ORIGINAL: """\
Clean up this text with minimal changes. Fix errors, remove filler words (um, uh, like, \
you know) and improve flow.

RULES:
- Output ONLY the cleaned text
- NO commentary
- Preserve the speaker's voice, style and length""",
}

INTENT_GUIDANCE: dict[ContentIntent, str] = {
    ContentIntent.JOB_APPLICATION: """\
This is a JOB APPLICATION. Make the speaker sound capable, thoughtful and results-driven. \
Lead with concrete achievements, keep any technologies they named, and connect their \
experience to the role.""",
    ContentIntent.COVER_LETTER: """\
This is a COVER LETTER. Use a formal greeting, an opening that names the role, one or two \
body paragraphs tying experience to the company, and a confident closing with a call to action.""",
    ContentIntent.COLLEGE_ESSAY: """\
This is a COLLEGE ESSAY. Keep it personal and reflective, in the first person. Preserve the \
speaker's authentic voice; favor a specific story and what it taught them over lists of \
accomplishments.""",
    ContentIntent.SCHOLARSHIP_APPLICATION: """\
This is a SCHOLARSHIP APPLICATION. Emphasize goals, achievements and community impact, and \
make clear how the award would help the applicant.""",
    ContentIntent.COMPETITION_ENTRY: """\
This is a COMPETITION ENTRY. Structure it as problem, approach, results and what makes it \
novel. Be precise and keep every technical detail the speaker gave.""",
    ContentIntent.CLUB_APPLICATION: """\
This is a CLUB APPLICATION. Sound enthusiastic and genuine: why they want to join, what \
they will contribute and any relevant experience.""",
    ContentIntent.PERSONAL_STATEMENT: """\
This is a PERSONAL STATEMENT. Build a coherent narrative from past experience to future \
goals, reflective and specific, in the first person.""",
    ContentIntent.PROJECT_DESCRIPTION: """\
This is a PROJECT DESCRIPTION. Explain what was built, the problem it solves, the \
technologies the speaker named, and any measurable impact.""",
    ContentIntent.EMAIL_DRAFT: """\
This is an EMAIL DRAFT. Keep it clear and courteous with an explicit request or next step.""",
    ContentIntent.MEETING_NOTES: """\
These are MEETING NOTES. Separate discussion points, decisions and action items; keep \
owners and dates exactly as stated.""",
    ContentIntent.GENERAL: "",
}

SIMPLE_INPUT_GUIDANCE = """\
The input is very short. Keep the output about the same length as the input; do not \
expand it into a longer message."""


@dataclass(frozen=True)
class ComposedPrompt:
    system: str
    max_tokens: int
    complexity: InputComplexity


def classify_input_complexity(
    text: str,
    intent: ContentIntent,
    simple_word_threshold: int = PipelineConfig.simple_word_threshold,
) -> InputComplexity:
    """SIMPLE when the text is below the word threshold and has no specific intent."""
    if word_count(text) < simple_word_threshold and intent == ContentIntent.GENERAL:
        return InputComplexity.SIMPLE
    return InputComplexity.SUBSTANTIAL


def compute_token_budget(
    text: str,
    complexity: InputComplexity,
    config: PipelineConfig | None = None,
) -> int:
    """Generation length budget scaled to input size.

    Simple inputs get a small budget proportional to their length; all other
    inputs scale with length but are clamped to [min_tokens, max_tokens].
    """
    cfg = config or PipelineConfig()
    words = max(word_count(text), 1)
    if complexity == InputComplexity.SIMPLE:
        return max(words * cfg.simple_tokens_per_word, cfg.simple_min_tokens)
    return min(max(words * cfg.tokens_per_word, cfg.min_tokens), cfg.max_tokens)


class PromptComposer:
    """Combine tone template, intent guidance and context into one instruction."""

    def __init__(self, config: PipelineConfig | None = None):
        self.config = config or PipelineConfig()

    def build_system_prompt(
        self,
        tone: ToneType,
        intent: ContentIntent,
        context: str = "",
        complexity: InputComplexity = InputComplexity.SUBSTANTIAL,
    ) -> str:
        parts = [TONE_TEMPLATES.get(tone, TONE_TEMPLATES[ToneType.PROFESSIONAL])]
        guidance = INTENT_GUIDANCE.get(intent, "")
        if guidance:
            parts.append(guidance)
        if complexity == InputComplexity.SIMPLE:
            parts.append(SIMPLE_INPUT_GUIDANCE)
        if context:
            parts.append(context)
        return "\n\n".join(parts)

    def compose(
        self,
        text: str,
        tone: ToneType,
        intent: ContentIntent,
        context: str = "",
        complexity: InputComplexity | None = None,
    ) -> ComposedPrompt:
        if complexity is None:
            complexity = classify_input_complexity(
                text, intent, self.config.simple_word_threshold
            )
        return ComposedPrompt(
            system=self.build_system_prompt(tone, intent, context, complexity),
            max_tokens=compute_token_budget(text, complexity, self.config),
            complexity=complexity,
        )

"""
Prompts for Animal Academy Lesson Generation.

Contains:
- The system prompt describing the Headmaster persona and the JSON contract
- The lesson prompt template (topic + target language)
- Grounding preambles for uploaded documents (primary source vs supplementary)

Every prompt carries the canonical image-prompt prefix verbatim so the
comic script can be illustrated consistently.
"""
from __future__ import annotations

from src.core.models import GroundingMode, LessonLanguage, SourceDocument

IMAGE_PROMPT_PREFIX = "clean, minimalist, educational vector illustration of"

PARAGRAPH_BREAK = "\\n\\n"

DEFAULT_LANGUAGE_NAMES = {
    LessonLanguage.PRIMARY.value: "English",
    LessonLanguage.SECONDARY.value: "Spanish",
}

MAX_DOCUMENT_CHARS = 12000

# (min, max) panels per mode; None = no document supplied
PANEL_RANGES: dict[GroundingMode | None, tuple[int, int]] = {
    None: (4, 8),
    GroundingMode.SUPPLEMENTARY: (4, 8),
    GroundingMode.PRIMARY_SOURCE: (6, 10),
}


# =============================================================================
# System Prompt (Applied to All Generation)
# =============================================================================

SYSTEM_PROMPT = f"""You are the wise Headmaster of the Animal Academy, an institution where animal experts explain complex concepts to learners of all ages. Your goal is to be clear, educational, and engaging.
For any given topic, you must produce a single JSON object with these properties: "quote", "explanation", "recommended_reading", "comic_script", "flashcards" and "mind_map".

1. **quote**: an inspiring quote related to the topic, with "text" and "author".

2. **explanation**: a well-structured, encyclopedic overview of the topic in clear, accessible language.
   * Separate paragraphs with the exact token {PARAGRAPH_BREAK}.
   * Wrap key terms in markdown hyperlinks pointing to fully-qualified URLs, e.g. [photosynthesis](https://en.wikipedia.org/wiki/Photosynthesis).
   * Use **double asterisks** for bold emphasis.

3. **recommended_reading**: a list of citations for further reading, formatted in APA style.

4. **comic_script**: a script for a comic strip that visually demonstrates a deeper aspect of the topic.
   * The characters are ALWAYS anthropomorphic animals dressed in academic attire (gowns, mortarboards, spectacles).
   * Each panel is an object with:
     a. "narrative": a very short, insightful caption (under 15 words, no markup).
     b. "image_prompt": a detailed description for an image generator. It MUST start with '{IMAGE_PROMPT_PREFIX}...'.

5. **flashcards**: a list of objects with "term" and "definition". Highlight key words inside each definition with **double asterisks**.

6. **mind_map**: a root node with "title" and "children"; each child has its own "title" and "children", at most three levels deep.

The final output MUST be a single JSON object that strictly follows the provided schema. The tone should be educational, clear, and charming."""


# =============================================================================
# Lesson Prompt
# =============================================================================

LESSON_PROMPT = """Please create a complete lesson about: {topic}.

Write every text field in {language}.

Requirements:
- The explanation must have several paragraphs separated by {paragraph_break}, with markdown hyperlinks ([term](https://...)) on key terms and **bold** for emphasis.
- The quote must NOT be taken from any uploaded document; choose a real quote by a known author.
- The recommended_reading list must use APA citation format.
- The comic_script must have between {min_panels} and {max_panels} panels depending on the topic's complexity; its characters are always anthropomorphic animals in academic dress.
- Every image_prompt must start with '{image_prefix}'.
- Flashcard definitions must mark key terms with **bold**.
- The mind_map must start from the topic and branch into its main ideas."""


# =============================================================================
# Grounding Preambles
# =============================================================================

PRIMARY_SOURCE_PREAMBLE = """An uploaded document named "{name}" is provided below. Use it as the PRIMARY source for the explanation.
Whenever you use information from it, cite it explicitly with an attribution sentence such as "According to the uploaded document, ...".
Prefer the document's facts over general knowledge when they differ.

--- BEGIN DOCUMENT ---
{text}
--- END DOCUMENT ---
"""

SUPPLEMENTARY_PREAMBLE = """An uploaded document named "{name}" is provided below as SUPPLEMENTARY material.
Synthesize a broader explanation from your own knowledge; when you draw on the document, quote the relevant passage as a markdown blockquote (a line starting with "> ").

--- BEGIN DOCUMENT ---
{text}
--- END DOCUMENT ---
"""


# =============================================================================
# Prompt Factory
# =============================================================================

def get_system_prompt() -> str:
    """Get the system prompt for LLM initialization."""
    return SYSTEM_PROMPT


def panel_range(
    source_document: SourceDocument | None = None,
    grounding: GroundingMode = GroundingMode.PRIMARY_SOURCE,
) -> tuple[int, int]:
    """Panel-count bounds requested from the model for this mode."""
    if source_document is None:
        return PANEL_RANGES[None]
    return PANEL_RANGES[GroundingMode(grounding)]


def build_grounding_preamble(
    source_document: SourceDocument,
    grounding: GroundingMode = GroundingMode.PRIMARY_SOURCE,
    max_chars: int = MAX_DOCUMENT_CHARS,
) -> str:
    """
    Build the instruction block that embeds an uploaded document.

    Args:
        source_document: Document name and extracted text
        grounding: Whether the document is the primary source or supplementary
        max_chars: Document text beyond this length is cut off

    Returns:
        Preamble to place before the lesson prompt
    """
    text = source_document.text.strip()
    if len(text) > max_chars:
        text = text[:max_chars].rstrip() + "\n[... document truncated ...]"

    template = (
        PRIMARY_SOURCE_PREAMBLE
        if GroundingMode(grounding) == GroundingMode.PRIMARY_SOURCE
        else SUPPLEMENTARY_PREAMBLE
    )
    return template.format(name=source_document.name, text=text)


def build_lesson_prompt(
    topic: str,
    language: LessonLanguage | str = LessonLanguage.PRIMARY,
    source_document: SourceDocument | None = None,
    grounding: GroundingMode = GroundingMode.PRIMARY_SOURCE,
    language_names: dict[str, str] | None = None,
    max_document_chars: int = MAX_DOCUMENT_CHARS,
) -> str:
    """
    Build the user prompt for the lesson text call.

    Args:
        topic: Concept to explain (caller guarantees it is non-blank)
        language: Target language selector
        source_document: Optional uploaded document to ground the lesson
        grounding: How the document is used (ignored without a document)
        language_names: Maps language selectors to names ("primary" -> "English")
        max_document_chars: Truncation limit for the document text

    Returns:
        Formatted prompt string
    """
    names = language_names or DEFAULT_LANGUAGE_NAMES
    language_value = LessonLanguage(language).value
    min_panels, max_panels = panel_range(source_document, grounding)

    prompt = LESSON_PROMPT.format(
        topic=topic.strip(),
        language=names.get(language_value, DEFAULT_LANGUAGE_NAMES[language_value]),
        paragraph_break=PARAGRAPH_BREAK,
        min_panels=min_panels,
        max_panels=max_panels,
        image_prefix=IMAGE_PROMPT_PREFIX,
    )

    if source_document is None:
        return prompt

    preamble = build_grounding_preamble(source_document, grounding, max_document_chars)
    return f"{preamble}\n{prompt}"

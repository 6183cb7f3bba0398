"""
Query feature: System prompts per answer mode.
"""

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from app.features.query.schemas import AnswerMode

NOT_FOUND_REPLY = "This topic was not found in your syllabus."

_BASE = """You are an academic assistant for a university course.
Answer the student's question using ONLY the provided context from their syllabus.
"""

_GUARD = f"""If the answer is not found in the context, respond with: "{NOT_FOUND_REPLY}"
Do NOT make up information."""

SYSTEM_PROMPTS: dict[AnswerMode, str] = {
    AnswerMode.SIMPLE: _BASE + """Explain concepts clearly as if teaching a first-year student. Use simple language and examples.
""" + _GUARD + " Always base your answer on the provided context.",

    AnswerMode.EXAM: _BASE + """Format your answer in a structured, exam-ready format:
- Use clear headings and subheadings
- Include definitions, key points, and important formulas
- Write in a formal academic tone suitable for exam answers
- Organize content logically with numbered points
""" + _GUARD,

    AnswerMode.SUMMARY: _BASE + """Provide a concise summary with:
- Maximum 5 key bullet points
- Each point should be one clear sentence
- Highlight the most important concepts
- Include any critical formulas or definitions
""" + _GUARD,
}

CONTEXT_SEPARATOR = "\n\n---\n\n"

USER_PROMPT_TEMPLATE = """--- SYLLABUS CONTEXT ---
{context}
--- END CONTEXT ---

Student's Question: {question}"""


def build_messages(question: str, context_chunks: list[str], mode: AnswerMode) -> list[BaseMessage]:
    """System prompt for the mode + one user turn wrapping context and question."""
    context = CONTEXT_SEPARATOR.join(context_chunks)
    return [
        SystemMessage(content=SYSTEM_PROMPTS[mode]),
        HumanMessage(content=USER_PROMPT_TEMPLATE.format(context=context, question=question.strip())),
    ]

# AI INSTRUCTION:
# Provide the prompt fragments and the assembler that turns a ConversationRequest
# (plus any extracted document text) into the single prompt string sent upstream.
# Mode priority: optimizer > followup > persona.

from __future__ import annotations
from typing import Optional

from .registry import PersonaRegistry
from .types import (
    FOLLOWUP_TOOL,
    OPTIMIZER_TOOL,
    AssembledPrompt,
    ConversationRequest,
)

QUESTION_MARKER = "User question:"
FOLLOWUP_MARKER = "User follow-up:"

DOCS_START = "--- UPLOADED DOCUMENTS ---"
DOCS_END = "--- END DOCUMENTS ---"

INSTRUCTION_SUFFIX = """\
Answer the user's question directly and completely. Do not restate or refer to \
these instructions, and do not ask the user to provide information before answering."""

OPTIMIZER_TEMPLATE = """\
You are a prompt optimization assistant for legal queries. Rewrite the query below \
into a clearer, more specific and well-structured question that a legal expert could \
answer precisely. Keep the user's intent and every fact they gave, add structure \
(jurisdiction, parties, issue, relief sought) where it is implied, and do not answer \
the question yourself. Return only the rewritten query.

Original query: {query}"""

CONTEXT_TEMPLATE = """\
{persona}

Previous context: {context}
{marker} {query}

{suffix}"""

QUESTION_TEMPLATE = """\
{persona}

{marker} {query}

{suffix}"""

FALLBACK_TEMPLATE = """\
You are an expert legal assistant. The user asked the following question. Even if it \
seems incomplete or lacks detail, make reasonable assumptions, state them briefly, and \
give the most helpful and complete answer you can. Do not ask for more information and \
do not say that you are ready to help.

Question: {query}"""


def build_persona_text(registry: PersonaRegistry, tool: Optional[str], reasoning: bool) -> str:
    """Leading instruction block: reasoning overlay (if enabled) followed by the tool persona."""
    persona = registry.lookup(tool)
    if reasoning:
        return f"{registry.reasoning_text}\n\n{persona}"
    return persona


def insert_documents(
    prompt: str,
    extracted_text: Optional[str],
    marker: str = QUESTION_MARKER,
    start: int = 0,
) -> str:
    """Splice document text in right after the first marker found at or past start."""
    if not extracted_text or not extracted_text.strip():
        return prompt
    anchor = f"{marker} "
    # searching from start skips marker text that sits earlier, inside persona or context
    idx = prompt.find(anchor, start)
    if idx < 0:
        return prompt
    block = f"{DOCS_START}\n{extracted_text.strip()}\n{DOCS_END}"
    return prompt[:idx] + f"{marker}\n{block}\n" + prompt[idx + len(anchor):]


def build_fallback_prompt(query: str) -> str:
    return FALLBACK_TEMPLATE.format(query=query)


def assemble(
    req: ConversationRequest,
    registry: PersonaRegistry,
    extracted_text: Optional[str] = None,
) -> AssembledPrompt:
    tool = (req.tool or "").strip()

    if tool == OPTIMIZER_TOOL:
        return AssembledPrompt(
            text=OPTIMIZER_TEMPLATE.format(query=req.query),
            query=req.query,
            mode=OPTIMIZER_TOOL,
        )

    if tool == FOLLOWUP_TOOL:
        return AssembledPrompt(text=req.query, query=req.query, mode=FOLLOWUP_TOOL)

    persona = build_persona_text(registry, tool, req.reasoning_enabled)
    if req.context:
        marker = FOLLOWUP_MARKER
        text = CONTEXT_TEMPLATE.format(
            persona=persona,
            context=req.context,
            marker=marker,
            query=req.query,
            suffix=INSTRUCTION_SUFFIX,
        )
    else:
        marker = QUESTION_MARKER
        text = QUESTION_TEMPLATE.format(
            persona=persona,
            marker=marker,
            query=req.query,
            suffix=INSTRUCTION_SUFFIX,
        )

    # both templates end with "{marker} {query}\n\n{suffix}"
    start = len(text) - len(f"{marker} {req.query}\n\n{INSTRUCTION_SUFFIX}")
    return AssembledPrompt(
        text=insert_documents(text, extracted_text, marker, start),
        query=req.query,
    )

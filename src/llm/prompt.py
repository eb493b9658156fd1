"""Prompt assembly: instructions, knowledge and rolling memory."""

from dataclasses import dataclass

MEMORY_HEADING = "Previous conversation:\n"


@dataclass(frozen=True)
class PromptContext:
    """The two strings sent to the completion backend."""

    system_prompt: str
    user_prompt: str


def build_system_prompt(instructions: str, rag_fragment: str = "") -> str:
    """Instructions first, then the knowledge-base fragment (if any)."""
    return f"{instructions}{rag_fragment}"


def build_user_prompt(memory: str, user_message: str) -> str:
    """Prior conversation (if any) followed by the new user line.

    Memory is passed through whole; nothing here truncates it.
    """
    context = f"{MEMORY_HEADING}{memory}\n\n" if memory else ""
    return f"{context}User: {user_message}"


def build_prompt_context(
    instructions: str,
    rag_fragment: str,
    memory: str,
    user_message: str,
) -> PromptContext:
    return PromptContext(
        system_prompt=build_system_prompt(instructions, rag_fragment),
        user_prompt=build_user_prompt(memory, user_message),
    )

"""Tests for prompt context assembly."""

from src.llm.prompt import (
    PromptContext,
    build_prompt_context,
    build_system_prompt,
    build_user_prompt,
)


def test_system_prompt_without_knowledge() -> None:
    assert build_system_prompt("Be terse.") == "Be terse."


def test_system_prompt_starts_with_instructions() -> None:
    fragment = "\n\nKnowledge Base:\nFile: faq.txt\nhours"
    prompt = build_system_prompt("Be terse.", fragment)
    assert prompt.startswith("Be terse.")
    assert prompt == "Be terse." + fragment


def test_user_prompt_without_memory() -> None:
    assert build_user_prompt("", "hi") == "User: hi"


def test_user_prompt_with_memory() -> None:
    memory = "\nUser: hi\nBot: hello"
    assert build_user_prompt(memory, "again") == (
        "Previous conversation:\n\nUser: hi\nBot: hello\n\nUser: again"
    )


def test_memory_is_not_truncated() -> None:
    memory = "x" * 100_000
    assert memory in build_user_prompt(memory, "hi")


def test_build_prompt_context() -> None:
    ctx = build_prompt_context(
        instructions="Be terse.", rag_fragment="", memory="", user_message="hi"
    )
    assert ctx == PromptContext(system_prompt="Be terse.", user_prompt="User: hi")

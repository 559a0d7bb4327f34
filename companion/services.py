from __future__ import annotations
from typing import Dict, List, Optional

from accounts.models import profile_for
from entries.services import AnalysisProvider, get_provider
from insights.services import journal_summaries, working_set


MIN_MESSAGES_FOR_REPORT = 3

PERSONA_INSTRUCTION = (
    'You are "Shizuku", a mindfulness partner. '
    "Based on the user's profile and the summaries of their past journal entries, "
    "hold a calm, reflective conversation. Stay close to the user's feelings and "
    "encourage insight, like a friend or mentor would."
)

CHAT_REPORT_INSTRUCTION = (
    "You are a thoughtful AI assistant. Based on the conversation below, write a short, "
    "insightful markdown report that helps the user reflect on themselves, in a gentle, "
    "encouraging tone. Use exactly these sections:\n\n"
    "### Theme of the conversation\n"
    "One or two sentences on the central topic or feeling.\n\n"
    "### Insights\n"
    "Two or three bullet points with the discoveries that seem important for the user.\n\n"
    "### A hint for the next step\n"
    "One concrete action or question that deepens the reflection.\n"
)

# our wire roles -> chat-completion roles
ROLE_MAP = {"user": "user", "model": "assistant"}


def build_system_prompt(user) -> str:
    return (
        f"{PERSONA_INSTRUCTION}\n\n"
        f"{profile_for(user).as_prompt()}\n"
        "Summaries of the user's journal:\n"
        "---\n"
        f"{journal_summaries(working_set(user))}\n"
        "---"
    )


def chat_with_companion(user, history: List[Dict[str, str]], message: str,
                        provider: Optional[AnalysisProvider] = None) -> str:
    """One companion turn. The conversation lives on the client; we get it back every time."""
    provider = provider or get_provider()
    messages = [{"role": "system", "content": build_system_prompt(user)}]
    messages += [{"role": ROLE_MAP[m["role"]], "content": m["content"]} for m in history]
    messages.append({"role": "user", "content": message})
    return provider.chat(messages)


def format_conversation(messages: List[Dict[str, str]]) -> str:
    # the first message is the companion's greeting
    return "\n".join(
        f"{'USER' if m['role'] == 'user' else 'MODEL'}: {m['content']}" for m in messages[1:]
    )


def generate_chat_report(messages: List[Dict[str, str]], provider: Optional[AnalysisProvider] = None) -> str:
    provider = provider or get_provider()
    prompt = f"---\nConversation:\n{format_conversation(messages)}\n---"
    return provider.complete(prompt, instructions=CHAT_REPORT_INSTRUCTION)

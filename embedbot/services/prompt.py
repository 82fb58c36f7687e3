"""Grounding prompt assembly.

Gemini's chat contents have no system role, so the grounding text goes out as
a first user turn followed by a fixed model acknowledgement. Neither turn is
stored; both are rebuilt for every call.
"""

from typing import Dict, List, Optional, Tuple

from embedbot.models.domain import Bot, CommunicationStyle

STYLE_INSTRUCTIONS: Dict[str, str] = {
    CommunicationStyle.FORMAL.value: "You must communicate formally and professionally.",
    CommunicationStyle.FRIENDLY.value: "You must communicate in a friendly and warm manner.",
    CommunicationStyle.HUMOROUS.value: "You may use humor in conversation while remaining professional.",
    CommunicationStyle.EXPERT.value: (
        "You must communicate as an expert in your field, providing detailed information."
    ),
}

KNOWLEDGE_HEADER = "Use the following information to answer user questions:"

GROUNDING_DIRECTIVE = (
    "Answer only on the basis of the information provided. If the information is "
    "insufficient, say so honestly and suggest that the user contact a manager."
)

ACKNOWLEDGEMENT = "Understood, ready to help!"


def style_instruction(style: Optional[str]) -> str:
    """Instruction for a communication style; unknown styles yield ''."""
    if not style:
        return ""
    return STYLE_INSTRUCTIONS.get(style, "")


def build_grounding_prompt(bot: Bot, knowledge: List[str]) -> str:
    """Assemble the priming instruction for ``bot`` from its persona and snippets."""
    lines = [f"You are an AI assistant named {bot.name} for the company {bot.company_name}."]
    if bot.industry:
        lines.append(f"Industry: {bot.industry}.")
    if bot.description:
        lines.append(f"About the company: {bot.description}")

    style = style_instruction(bot.style)
    if style:
        lines.append(style)
    if bot.language:
        lines.append(f'Always reply in the language with ISO code "{bot.language}".')
    if bot.custom_prompt:
        lines.append(bot.custom_prompt)

    if knowledge:
        lines.append("")
        lines.append(KNOWLEDGE_HEADER)
        lines.append("\n\n".join(knowledge))

    lines.append("")
    lines.append(GROUNDING_DIRECTIVE)
    return "\n".join(lines)


def build_priming_turns(grounding_prompt: str) -> List[Tuple[str, str]]:
    """The two (role, text) turns sent ahead of the real user message."""
    return [("user", grounding_prompt), ("model", ACKNOWLEDGEMENT)]

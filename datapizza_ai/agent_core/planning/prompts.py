"""System prompt for the ReAct loop."""

from __future__ import annotations

REACT_INSTRUCTIONS = """To answer, follow this format:
Thought: [your reasoning about what to do next]
Action: [name of the tool to use]
Input: [JSON object with the tool parameters]

After each Observation you can:
- continue with another Thought/Action/Input if you need more information
- give the final answer with: Final Answer: [your complete response]

Rules:
1. Always write a Thought before an Action
2. Use only one tool at a time
3. Wait for the Observation before continuing
4. Once you have everything you need, reply with Final Answer

Example:
User: How many days until Christmas?

Thought: I need the difference between today and December 25th
Action: datetime
Input: {"action": "diff", "date1": "2025-10-14", "date2": "2025-12-25"}

Observation: 72 days, 0 hours, 0 minutes

Thought: I have the answer
Final Answer: There are 72 days until Christmas!"""


def build_system_prompt(tools_description: str) -> str:
    """Compose the system message from the registry's tool catalogue."""
    return (
        "You are an AI assistant that uses the ReAct pattern to answer questions.\n\n"
        f"{tools_description}\n\n"
        f"{REACT_INSTRUCTIONS}"
    )

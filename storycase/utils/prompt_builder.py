from __future__ import annotations

from typing import Optional

from storycase.core.config import get_settings

PRIORITY_CHOICES = "Low | Medium | High"


def navigation_instruction(navigation_url: str) -> str:
    return f'For steps, always start with "Navigate to {navigation_url}"'


def build_testcase_prompt(
    user_story: str,
    *,
    navigation_url: Optional[str] = None,
) -> str:
    """
    Build the instruction prompt for one user story.

    The story is interpolated verbatim; callers reject empty input before
    getting here.
    """
    url = navigation_url or get_settings().navigation_url
    preamble = f"""
You are an expert Senior Software Tester and QA Test Case Generator.
Generate well-structured positive, negative, boundary and edge test cases in strict JSON format only.
Do not include any explanations or extra text.
Write the Steps in a numbered list format. Each step should be a single line.
{navigation_instruction(url)}

The format must be a JSON array:
[
  {{
    "id": "number",
    "title": "string",
    "steps": "string",
    "expectedResult": "string",
    "priority": "{PRIORITY_CHOICES}"
  }}
]
""".strip()
    # Story is appended after strip() and kept byte-for-byte.
    return f"{preamble}\n\nUser Story:\n{user_story}\n"

"""Regeneration feedback prompts.

Templates used by the pipeline's feedback strategies to steer the model
after a rejected attempt, one pair per stage.
"""

from __future__ import annotations

VALIDATION_FAILURE_HEADER = "PREVIOUS ATTEMPT FAILED WITH THESE ERRORS:"
COMPILE_FAILURE_HEADER = "PREVIOUS ATTEMPT FAILED TO COMPILE WITH THIS ERROR:"

_FIX_CHECKLIST = """\
Fix these errors. In particular:
- Use only the provided utilities for data access, never fetch()
- Use only relative imports, project aliases and allowed packages
- Keep all variables and helpers inside the exported component
- Give elements rendered from arrays a unique key
- Use React event handlers such as onClick={handler}"""

_COMPILE_CHECKLIST = """\
Fix the compilation error. Check in particular that:
- Only imports and exports appear at the top level, besides the final render line
- Every JSX tag is closed and every brace is balanced
- No TypeScript syntax is used unless it was explicitly allowed"""

_MINIMAL_CHECKLIST = """\
Use the simplest possible approach:
- Only React and basic HTML elements
- No external utilities unless absolutely necessary
- Inline styles only
- All variables inside the component
- Basic accessibility attributes"""


def _bullets(messages: list[str] | tuple[str, ...]) -> str:
    return "\n".join(f"- {m}" for m in messages)


def build_validation_fix_prompt(instruction: str, errors: list[str] | tuple[str, ...]) -> str:
    return (
        f"{instruction}\n\n"
        f"{VALIDATION_FAILURE_HEADER}\n{_bullets(errors)}\n\n"
        f"{_FIX_CHECKLIST}"
    )


def build_compile_fix_prompt(instruction: str, errors: list[str] | tuple[str, ...]) -> str:
    return (
        f"{instruction}\n\n"
        f"{COMPILE_FAILURE_HEADER}\n{_bullets(errors)}\n\n"
        f"{_COMPILE_CHECKLIST}"
    )


def build_minimal_prompt(instruction: str, errors: list[str] | tuple[str, ...]) -> str:
    """Ask for a deliberately minimal rendition of the requested component."""
    return (
        f"Create a minimal version of: {instruction}\n\n"
        f"Earlier attempts failed with:\n{_bullets(errors)}\n\n"
        f"{_MINIMAL_CHECKLIST}"
    )

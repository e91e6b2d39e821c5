"""Component generation prompts.

Provides the system prompt for MDX component generation, the catalog
documentation section, and the instruction composer used by the
self-healing pipeline.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from vibeguard.models.catalog import CatalogEntry, GenerationRequest

_SECURITY_RULES = """\
SECURITY REQUIREMENTS
Your code is validated automatically. These constructs are rejected:
- fetch(), XMLHttpRequest, WebSocket: use the provided utilities instead
- eval(), new Function(), string arguments to setTimeout/setInterval
- require() and dynamic import()
- innerHTML/outerHTML assignment, document.write()
- process.*, global.*, globalThis.* access
- window.location assignment and document.cookie writes
- imports from packages that are not explicitly allowed
localStorage/sessionStorage and dangerouslySetInnerHTML produce warnings; avoid them."""

_ACCESSIBILITY_RULES = """\
ACCESSIBILITY REQUIREMENTS
- Add aria-label to interactive elements without text
- Clickable <div>/<span> elements need onKeyDown and a role, prefer <button>
- Every <img> needs alt text
- Every form control needs a label (htmlFor/id) or aria-label"""

_KEY_RULES = """\
LIST KEYS
When rendering arrays, give every element a unique key, preferably an id from
the data: {items.map(item => <li key={item.id}>{item.name}</li>)}"""

_MDX_STRUCTURE = """\
MDX FILE STRUCTURE
Only these are allowed at the top level:
1. Frontmatter between --- markers
2. import statements
3. export statements
4. A final JSX expression rendering the component, e.g. <Component />
Put every constant, variable and helper function INSIDE the exported
component. Top-level const/let/var declarations fail to compile."""

_JAVASCRIPT_ONLY = (
    "Use JavaScript syntax only. Do not use TypeScript type annotations, "
    "interfaces or type definitions."
)

_TYPESCRIPT_ALLOWED = (
    "TypeScript interfaces are allowed for props. Take props as a single typed "
    "parameter and destructure inside the body: "
    "export const Card = (props: CardProps) => { const { title } = props; ... }"
)

_FORMAT = """\
OUTPUT FORMAT
Output raw MDX only, never wrapped in markdown code fences:
1. YAML frontmatter with title, description, category, tags and version ("1.0.0")
2. import React from 'react';
3. Named imports for project utilities and components, using the exact paths given
4. The exported component, styled with inline styles
5. A final line rendering the component

---
title: "Blue Button"
description: "A button with a blue background"
category: "ui"
tags: ["button", "ui"]
version: "1.0.0"
---

import React from 'react';

export const BlueButton = () => {
  const handleClick = () => console.log('clicked');
  return (
    <button style={{ background: 'blue', color: 'white' }} onClick={handleClick}>
      Click me
    </button>
  );
};

<BlueButton />"""

_MAX_INSTRUCTION_CHARS = 5000

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile(r"&[a-zA-Z0-9#]+;")
_JS_URL_RE = re.compile(r"javascript\s*:", re.IGNORECASE)


def build_system_prompt(*, allow_typescript: bool = False) -> str:
    """Build the system prompt for component generation.

    Args:
        allow_typescript: Whether generated code may use TypeScript syntax.

    Returns:
        The system prompt string.
    """
    return "\n\n".join([
        "You are an expert React developer. Generate a single React component "
        "in MDX format that will be validated, compiled and rendered.",
        _SECURITY_RULES,
        _ACCESSIBILITY_RULES,
        _KEY_RULES,
        _MDX_STRUCTURE,
        _TYPESCRIPT_ALLOWED if allow_typescript else _JAVASCRIPT_ONLY,
        _FORMAT,
    ])


def sanitize_instruction(text: str) -> str:
    """Strip markup and control characters from a user instruction.

    Newlines and tabs are kept; script blocks, HTML tags, entities and
    ``javascript:`` URLs are removed.
    """
    text = _CONTROL_CHARS_RE.sub("", text)
    text = _SCRIPT_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    text = _ENTITY_RE.sub("", text)
    text = _JS_URL_RE.sub("", text)
    return text.strip()[:_MAX_INSTRUCTION_CHARS]


def _describe_entry(entry: CatalogEntry) -> list[str]:
    lines = [f"- {entry.name}: {entry.description}".rstrip(": ")]
    if entry.signature:
        lines.append(f"  Signature: {entry.signature}")
    if entry.return_type:
        lines.append(f"  Returns: {entry.return_type}")
    if entry.props:
        lines.append(f"  Props: {entry.props}")
    if entry.category:
        lines.append(f"  Category: {entry.category}")
    if entry.import_path:
        lines.append(f"  Import: import {{ {entry.name} }} from '{entry.import_path}';")
    if entry.example:
        lines.append(f"  Example: {entry.example}")
    return lines


def build_catalog_section(entries: Iterable[CatalogEntry]) -> str:
    """Document project components and utilities for the model.

    Returns an empty string when there is nothing to document.
    """
    entries = list(entries)
    utilities = [e for e in entries if e.kind == "utility"]
    components = [e for e in entries if e.kind == "component"]
    sections = []
    if utilities:
        lines = ["AVAILABLE UTILITIES (the only permitted way to fetch data):"]
        for entry in utilities:
            lines.extend(_describe_entry(entry))
        lines.append(
            "Call async utilities from useEffect, and handle loading and error states."
        )
        sections.append("\n".join(lines))
    if components:
        lines = ["AVAILABLE COMPONENTS:"]
        for entry in components:
            lines.extend(_describe_entry(entry))
        sections.append("\n".join(lines))
    if sections:
        sections.append("Always use the exact import paths listed above, as named imports.")
    return "\n\n".join(sections)


def compose_instruction(request: GenerationRequest) -> str:
    """Build the base instruction text for a pipeline run.

    The sanitized instruction comes first, followed by the catalog
    documentation when the request carries a catalog.

    Raises:
        ValueError: If nothing is left of the instruction after sanitizing.
    """
    instruction = sanitize_instruction(request.instruction)
    if not instruction:
        raise ValueError("Instruction is empty once markup is removed")
    catalog = build_catalog_section(request.catalog)
    if not catalog:
        return instruction
    return f"{instruction}\n\n{catalog}"

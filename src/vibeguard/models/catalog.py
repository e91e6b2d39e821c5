"""Generation request and catalog models.

These describe a request coming from the layer above the core. The core
reads the catalog only to embed its documentation into instruction text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from vibeguard.models.config import ValidationPolicy

ProviderName = Literal["openai", "anthropic", "google"]


class ProviderSelection(BaseModel):
    """Which model provider (and optionally which model) to generate with."""

    provider: ProviderName = "openai"
    model: str | None = None

    model_config = {"frozen": True}


class CatalogEntry(BaseModel):
    """A project component or utility the generated code may use."""

    name: str = Field(min_length=1)
    description: str = ""
    kind: Literal["component", "utility"] = "component"
    import_path: str | None = None
    category: str | None = None
    signature: str | None = None
    return_type: str | None = None
    props: str | None = None
    example: str | None = None

    model_config = {"frozen": True}


class GenerationRequest(BaseModel):
    """Everything one pipeline run needs besides its collaborators.

    Attributes:
        instruction: Natural-language description of the component.
        provider: Model provider selection, used when the pipeline builds
            its generator from a factory.
        policy: Import policy applied by the validator.
        catalog: Project components and utilities to document for the model.
        project_path: Working directory handed to the compiler.
    """

    instruction: str = Field(min_length=1, max_length=5000)
    provider: ProviderSelection = Field(default_factory=ProviderSelection)
    policy: ValidationPolicy = Field(default_factory=ValidationPolicy)
    catalog: tuple[CatalogEntry, ...] = ()
    project_path: Path | None = None

"""Shared test fixtures for vibeguard.

Provides sample artifacts and a default validation policy.
"""

import pytest

from vibeguard.models.config import ValidationPolicy

CLEAN_SOURCE = """\
---
title: "Greeting"
category: "ui"
---

import React from 'react';

export const Greeting = () => {
  return <p>Hello</p>;
};

<Greeting />
"""

EVAL_SOURCE = 'export const X = () => { eval("1"); return <div/>; };\n'

UNPARSABLE_SOURCE = "export const = => {{ <div\n"


@pytest.fixture
def policy() -> ValidationPolicy:
    return ValidationPolicy()


@pytest.fixture
def clean_source() -> str:
    return CLEAN_SOURCE


@pytest.fixture
def eval_source() -> str:
    return EVAL_SOURCE


@pytest.fixture
def unparsable_source() -> str:
    return UNPARSABLE_SOURCE

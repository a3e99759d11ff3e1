# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Data transfer objects for runner input/output.

These Pydantic models define the JSON contract of
``python -m datastore_helper.runner``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from datastore_helper.config import HelperConfig


class OperationSchema(BaseModel):
    """Single operation to run against the helper.

    Attributes:
        op: Operation ("get", "set", "load", "save" or "setting")
        key: Target key (get/set/load, optional for save)
        value: Value to stage (set) or setting value (setting)
        name: Setting name (setting)
    """

    op: Literal["get", "set", "load", "save", "setting"]
    key: str | int | None = None
    value: Any = None
    name: str = ""


class RunnerInput(BaseModel):
    """Complete input read from stdin.

    Attributes:
        config: Helper configuration (name, store, settings)
        operations: Operations to run, in order
        flush_on_exit: Save every remaining dirty key before exiting
    """

    config: HelperConfig
    operations: list[OperationSchema] = Field(default_factory=list)
    flush_on_exit: bool = True


class OperationResultSchema(BaseModel):
    """Outcome of one operation.

    Attributes:
        op: Operation that ran
        key: Key it targeted, if any
        value: Value returned by get/load
        ok: False when a save failed or was gated
        saved: Keys persisted and evicted by a save
        failed: Keys a save could not persist, mapped to the error text
        gated: Whether a save was blocked by the environment policy
    """

    op: str
    key: str | int | None = None
    value: Any = None
    ok: bool = True
    saved: list[str | int] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)
    gated: bool = False


class RunnerOutput(BaseModel):
    """Complete output written to stdout.

    The runner always outputs valid JSON matching this schema,
    even on errors.

    Attributes:
        success: Whether every operation completed without error
        results: Per-operation results, in input order
        error: Error message (on failure)
        error_type: Error class name (on failure)
    """

    success: bool
    results: list[OperationResultSchema] = Field(default_factory=list)
    error: str = ""
    error_type: str = ""

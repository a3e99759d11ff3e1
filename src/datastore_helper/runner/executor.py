# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Executor for running a batch of operations against one helper.

Orchestrates the full execution flow:
1. Create store from configuration
2. Build DataStoreHelper
3. Run each operation in order
4. Flush remaining dirty keys (the teardown save)
5. Return structured result
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from datastore_helper.exceptions import ConfigError
from datastore_helper.helper import DataStoreHelper

from .schema import OperationResultSchema, OperationSchema, RunnerInput, RunnerOutput

if TYPE_CHECKING:
    from datastore_helper.environment import Environment
    from datastore_helper.result import SaveReport
    from datastore_helper.stores.base import RemoteStore


class ExecutionError(Exception):
    """Raised when an operation is malformed."""

    pass


class Executor:
    """Runs operations against a helper built from configuration.

    The executor is designed for dependency injection to support testing.
    Pass a custom store or environment to the constructor to override the
    ones derived from config.

    Example:
        executor = Executor()
        output = await executor.execute(input_data)

        # For testing with an in-memory store:
        executor = Executor(store=InMemoryStore())
    """

    def __init__(
        self,
        store: RemoteStore | None = None,
        environment: Environment | None = None,
    ) -> None:
        self._injected_store = store
        self._environment = environment

    async def execute(self, input_data: RunnerInput) -> RunnerOutput:
        """Run every operation and always return a RunnerOutput.

        Note:
            This method catches all exceptions and returns them as
            RunnerOutput errors, ensuring valid JSON is always returned.
        """
        try:
            return await self._execute_internal(input_data)
        except ConfigError as e:
            return RunnerOutput(success=False, error=str(e), error_type="ConfigError")
        except ExecutionError as e:
            return RunnerOutput(success=False, error=str(e), error_type="ExecutionError")
        except Exception as e:
            return RunnerOutput(success=False, error=str(e), error_type=type(e).__name__)

    async def _execute_internal(self, input_data: RunnerInput) -> RunnerOutput:
        helper = DataStoreHelper.from_config(
            input_data.config,
            store=self._injected_store,
            environment=self._environment,
        )
        results: list[OperationResultSchema] = []
        try:
            for operation in input_data.operations:
                results.append(await self._run_operation(helper, operation))
        finally:
            flush = input_data.flush_on_exit and len(helper.cache) > 0
            report = await helper.close(flush=flush)

        if report is not None:
            results.append(self._save_result(None, report))

        return RunnerOutput(success=all(r.ok for r in results), results=results)

    async def _run_operation(
        self, helper: DataStoreHelper, operation: OperationSchema
    ) -> OperationResultSchema:
        if operation.op == "setting":
            if not operation.name:
                raise ExecutionError("'setting' operation requires 'name'")
            helper.set_setting(operation.name, operation.value)
            return OperationResultSchema(
                op="setting", value=helper.get_settings().get(operation.name)
            )

        if operation.op == "save":
            return self._save_result(operation.key, await helper.save(operation.key))

        if operation.key is None:
            raise ExecutionError(f"'{operation.op}' operation requires 'key'")

        if operation.op == "set":
            helper.set(operation.key, operation.value)
            return OperationResultSchema(op="set", key=operation.key)
        if operation.op == "load":
            value = await helper.load(operation.key)
        else:
            value = await helper.get(operation.key)
        return OperationResultSchema(op=operation.op, key=operation.key, value=value)

    def _save_result(self, key: str | int | None, report: SaveReport) -> OperationResultSchema:
        return OperationResultSchema(
            op="save",
            key=key,
            ok=report.ok,
            saved=list(report.saved),
            failed={str(k): str(e) for k, e in report.failed.items()},
            gated=report.gated,
        )

# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Batch runner: ``python -m datastore_helper.runner < ops.json``.

One JSON document on stdin describes a helper and a list of operations.
One JSON document on stdout reports what each operation returned, plus
the final flush.  Logs go to stderr so stdout stays parseable.  The exit
status is 0 only when every operation and the final flush succeeded.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from .executor import Executor
from .schema import RunnerInput, RunnerOutput

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _emit(output: RunnerOutput) -> int:
    print(output.model_dump_json())
    return 0 if output.success else 1


def main() -> int:
    logging.basicConfig(stream=sys.stderr, level=logging.INFO, format=LOG_FORMAT)
    try:
        request = RunnerInput.model_validate_json(sys.stdin.read())
        return _emit(asyncio.run(Executor().execute(request)))
    except Exception as exc:
        # Malformed input still gets a JSON answer.
        return _emit(
            RunnerOutput(success=False, error=str(exc), error_type=type(exc).__name__)
        )


if __name__ == "__main__":
    sys.exit(main())

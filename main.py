"""Run a grnkdb command with a traced start/finish record in the run log."""

from __future__ import annotations

import json
import logging
import os
import socket
import sys
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Sequence

from grnkdb.cli import COMMANDS, main as run_command

LOGGER = logging.getLogger("grnkdb.run")


@dataclass(frozen=True, slots=True)
class RunContext:
    """Identity of one grnkdb invocation as it appears in the logs."""

    command: str
    trace_id: str = field(default_factory=lambda: os.getenv("GRNKDB_TRACE_ID") or uuid.uuid4().hex)
    host: str = field(default_factory=lambda: os.getenv("GRNKDB_INSTANCE_ID") or socket.gethostname())
    started_ns: int = field(default_factory=time.perf_counter_ns)

    def elapsed_ms(self) -> float:
        """Milliseconds since the run started."""
        return round((time.perf_counter_ns() - self.started_ns) / 1_000_000, 2)

    def emit(self, level: int, event: str, **fields: Any) -> None:
        """Log one JSON run event tagged with this run's identity."""
        record = {"event": event, "command": self.command, "trace_id": self.trace_id, "host": self.host, **fields}
        LOGGER.log(level, json.dumps(record, default=str, separators=(",", ":")), extra={"event": event})


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    context = RunContext(command=next((arg for arg in args if arg in COMMANDS), "-"))
    try:
        exit_code = run_command(args)
    except KeyboardInterrupt:
        context.emit(logging.WARNING, "grnkdb.interrupted", duration_ms=context.elapsed_ms())
        return 130
    except Exception as exc:
        context.emit(
            logging.CRITICAL,
            "grnkdb.crashed",
            error_type=type(exc).__name__,
            error_message=str(exc),
            duration_ms=context.elapsed_ms(),
        )
        raise
    context.emit(
        logging.INFO if exit_code == 0 else logging.ERROR,
        "grnkdb.finished",
        exit_code=exit_code,
        duration_ms=context.elapsed_ms(),
    )
    return exit_code


if __name__ == "__main__":
    sys.exit(main())

"""External AST producers: SourceKitten for Swift, clang for Objective-C.

Each unit is parsed by its own subprocess. Parallelism is bounded by a
semaphore (``parsers.max_concurrency``) and every invocation is subject to
``parsers.timeout_sec``. A unit that fails to parse (non-zero exit, timeout,
undecodable output) is recorded in ``ParseRun.failures`` and never aborts the
other units.
"""

from __future__ import annotations

import asyncio
import json
import shutil
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from symgraph.config.models import ParsersConfig
from symgraph.core.errors import InternalError, ParserError
from symgraph.graph.models import Dialect
from symgraph.parsers.discovery import SourceUnit

log = structlog.get_logger(__name__)

_INSTALL_HINTS: dict[Dialect, str] = {
    Dialect.SWIFT: "Install with: brew install sourcekitten",
    Dialect.OBJC: "Install Xcode command line tools: xcode-select --install",
}

# clang -x language per suffix; headers are parsed as Objective-C
_CLANG_LANGUAGES: dict[str, str] = {
    ".h": "objective-c",
    ".m": "objective-c",
    ".mm": "objective-c++",
}


@dataclass
class ParseRun:
    """Raw ASTs for every unit that parsed, plus per-unit failure reasons."""

    units: dict[str, tuple[Dialect, Any]] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    duration_seconds: float = 0.0

    @property
    def total(self) -> int:
        return len(self.units) + len(self.failures)


class ParserRunner:
    """Runs the external parser for each source unit."""

    def __init__(self, config: ParsersConfig | None = None) -> None:
        self._config = config or ParsersConfig()

    @property
    def config(self) -> ParsersConfig:
        return self._config

    def executable_for(self, dialect: Dialect) -> str:
        if dialect is Dialect.SWIFT:
            return self._config.sourcekitten_path
        return self._config.clang_path

    def resolve_executables(self, dialects: Iterable[Dialect]) -> dict[Dialect, str]:
        """Locate the parser binary for each dialect.

        Raises:
            ParserError: PARSER_NOT_FOUND for the first missing binary.
        """
        resolved: dict[Dialect, str] = {}
        for dialect in dict.fromkeys(dialects):
            executable = self.executable_for(dialect)
            found = shutil.which(executable)
            if found is None:
                raise ParserError.parser_not_found(executable, _INSTALL_HINTS[dialect])
            resolved[dialect] = found
        return resolved

    def build_command(self, unit: SourceUnit, executable: str) -> list[str]:
        if unit.dialect is Dialect.SWIFT:
            return [executable, "structure", "--file", str(unit.path)]
        cmd = [executable, "-Xclang", "-ast-dump=json", "-fsyntax-only"]
        language = _CLANG_LANGUAGES.get(unit.path.suffix)
        if language:
            cmd.extend(["-x", language])
        cmd.extend(self._config.clang_args)
        cmd.append(str(unit.path))
        return cmd

    async def parse_unit(self, unit: SourceUnit, executable: str, cwd: Path | None = None) -> Any:
        """Run the parser for one unit and decode its JSON output.

        Raises:
            ParserError: PARSE_FAILED on non-zero exit, OS error or bad JSON.
            InternalError: INTERNAL_TIMEOUT if the parser exceeds ``timeout_sec``.
        """
        cmd = self.build_command(unit, executable)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
        except OSError as e:
            raise ParserError.parse_failed(unit.unit_id, str(e)) from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(), timeout=self._config.timeout_sec
            )
        except TimeoutError:
            proc.kill()
            await proc.wait()
            raise InternalError.timeout(f"parse {unit.unit_id}", self._config.timeout_sec) from None

        # clang exits non-zero on semantic errors but still dumps a usable AST
        stdout = stdout_bytes.decode(errors="replace")
        if proc.returncode != 0 and not stdout.strip():
            stderr = stderr_bytes.decode(errors="replace").strip()
            raise ParserError.parse_failed(
                unit.unit_id, stderr.splitlines()[-1] if stderr else f"exit code {proc.returncode}"
            )
        try:
            return json.loads(stdout)
        except json.JSONDecodeError as e:
            raise ParserError.parse_failed(unit.unit_id, f"invalid JSON output: {e}") from e

    async def run(self, units: Sequence[SourceUnit], cwd: Path | None = None) -> ParseRun:
        """Parse every unit concurrently. Results keep the input order.

        Raises:
            ParserError: PARSER_NOT_FOUND if a required binary is missing.
        """
        start = time.perf_counter()
        executables = self.resolve_executables(u.dialect for u in units)
        sem = asyncio.Semaphore(max(1, min(self._config.max_concurrency, len(units) or 1)))

        async def run_unit(unit: SourceUnit) -> tuple[SourceUnit, Any, str | None]:
            async with sem:
                try:
                    ast = await self.parse_unit(unit, executables[unit.dialect], cwd)
                except (ParserError, InternalError) as e:
                    log.warning("unit_parse_failed", unit=unit.unit_id, error=e.message)
                    return unit, None, e.message
                return unit, ast, None

        outcomes = await asyncio.gather(*(run_unit(u) for u in units))

        result = ParseRun()
        for unit, ast, error in outcomes:
            if error is None:
                result.units[unit.unit_id] = (unit.dialect, ast)
            else:
                result.failures[unit.unit_id] = error
        result.duration_seconds = time.perf_counter() - start

        log.info(
            "units_parsed",
            parsed=len(result.units),
            failed=len(result.failures),
            duration_ms=round(result.duration_seconds * 1000, 1),
        )
        return result

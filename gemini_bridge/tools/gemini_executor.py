"""
Async runner for the external `gemini` CLI.
Builds the argument vector, streams output to an optional progress callback,
enforces a timeout, and retries once on the fallback model when the quota for
the requested model is exhausted.
"""
from __future__ import annotations

import asyncio
import codecs
import logging
from typing import Callable, List, Optional, Tuple

from ..core.config import Settings
from ..core.constants import (
    CHANGE_MODE_INSTRUCTIONS,
    FLAG_MODEL,
    FLAG_PROMPT,
    FLAG_SANDBOX,
    QUOTA_MARKERS,
)


ProgressCallback = Callable[[str], None]


class GeminiCLIError(RuntimeError):
    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr

    @property
    def is_quota_error(self) -> bool:
        return any(marker in self.stderr for marker in QUOTA_MARKERS)


class GeminiExecutor:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def build_prompt(self, prompt: str, change_mode: bool) -> str:
        if change_mode:
            return CHANGE_MODE_INSTRUCTIONS.format(prompt=prompt)
        return prompt

    def build_argv(self, prompt: str, model: str, sandbox: bool) -> List[str]:
        argv = [self.settings.gemini_command, FLAG_MODEL, model]
        if sandbox:
            argv.append(FLAG_SANDBOX)
        argv.extend([FLAG_PROMPT, prompt])
        return argv

    async def run(
        self,
        prompt: str,
        model: str,
        sandbox: bool = False,
        change_mode: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        model = getattr(model, "value", model)
        full_prompt = self.build_prompt(prompt, change_mode)
        try:
            return await self._attempt(full_prompt, model, sandbox, on_progress)
        except GeminiCLIError as exc:
            if not exc.is_quota_error or model == self.settings.fallback_model:
                raise
            self.logger.warning("Quota exceeded for %s, retrying with %s", model, self.settings.fallback_model)
            if on_progress:
                on_progress(f"Quota exceeded for {model}, switching to {self.settings.fallback_model}\n")
            return await self._attempt(full_prompt, self.settings.fallback_model, sandbox, on_progress)

    async def _attempt(self, prompt: str, model: str, sandbox: bool, on_progress: Optional[ProgressCallback]) -> str:
        argv = self.build_argv(prompt, model, sandbox)
        self.logger.info("Running %s model=%s sandbox=%s prompt_chars=%d", argv[0], model, sandbox, len(prompt))
        returncode, stdout, stderr = await self._spawn(argv, on_progress)
        if returncode != 0:
            self.logger.error("gemini exited with %s: %s", returncode, stderr.strip()[-500:])
            raise GeminiCLIError(
                f"Gemini CLI failed (exit {returncode}): {stderr.strip()[-2000:]}",
                returncode=returncode,
                stderr=stderr,
            )
        return stdout.strip()

    async def _spawn(self, argv: List[str], on_progress: Optional[ProgressCallback]) -> Tuple[int, str, str]:
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise GeminiCLIError(
                f"Gemini CLI not found: tried '{argv[0]}'. Install @google/gemini-cli or set GEMINI_BRIDGE_COMMAND"
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(
                self._collect(proc, on_progress), timeout=self.settings.timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            proc.kill()
            await proc.wait()
            raise GeminiCLIError(f"Gemini CLI timeout after {self.settings.timeout_seconds:g}s") from exc
        return proc.returncode, stdout, stderr

    async def _collect(self, proc, on_progress: Optional[ProgressCallback]) -> Tuple[str, str]:
        async def pump(stream, notify):
            decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
            parts = []
            while True:
                data = await stream.read(4096)
                if not data:
                    break
                text = decoder.decode(data)
                parts.append(text)
                if notify and text:
                    notify(text)
            parts.append(decoder.decode(b"", final=True))
            return "".join(parts)

        stdout, stderr = await asyncio.gather(pump(proc.stdout, on_progress), pump(proc.stderr, None))
        await proc.wait()
        return stdout, stderr

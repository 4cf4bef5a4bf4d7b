"""Streaming proofread - run the model command with real-time partial results"""

import asyncio
import codecs
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from zenreview.core.stream_parser import enforce_whitelist, parse_final, parse_partial
from zenreview.models.config import ZenConfig
from zenreview.models.issue import PartialResult, ProofreadResult
from zenreview.presets.modes import build_system_prompt

logger = logging.getLogger(__name__)

READ_SIZE = 256


@dataclass
class StreamProgress:
    """Progress update during generation"""
    status: str  # "starting", "streaming", "complete", "error"
    raw_text: str  # Everything received so far
    partial: PartialResult = field(default_factory=PartialResult)


class StreamCommandError(Exception):
    """Raised when the model command exits with an error"""

    pass


def build_request(document: str, mode: str, config: ZenConfig, user_prompt: str = "", tone: str = "general") -> str:
    """Build the stdin payload: system prompt followed by the document"""
    prompt = build_system_prompt(
        mode,
        whitelist=config.whitelist,
        sensitive_words=config.sensitive_words,
        custom_rules=config.custom_rules,
        user_prompt=user_prompt,
        tone=tone,
    )
    return f"{prompt}\n待校对文本：\n{document}\n"


async def stream_proofread(
    document: str,
    mode: str,
    config: ZenConfig,
    on_progress: Optional[Callable[[StreamProgress], None]] = None,
    user_prompt: str = "",
    tone: str = "general",
) -> ProofreadResult:
    """Run the model command on a document with streaming progress.

    Args:
        document: Text to proofread
        mode: Check mode id
        config: Project config (command, whitelist, word lists)
        on_progress: Called with each progress update

    Returns:
        The final result with whitelisted issues removed

    Raises:
        StreamCommandError: If the command fails or cannot be started
        MalformedResultError: If the output holds no corrected text
    """
    def notify(progress: StreamProgress) -> None:
        if on_progress is not None:
            on_progress(progress)

    request = build_request(document, mode, config, user_prompt, tone)
    notify(StreamProgress(status="starting", raw_text=""))

    try:
        process = await asyncio.create_subprocess_exec(
            *config.command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        notify(StreamProgress(status="error", raw_text=""))
        raise StreamCommandError(f"Could not start {config.command[0]}: {e}")

    logger.info("Started %s in %s mode", config.command[0], mode)

    # Write input and close stdin
    try:
        process.stdin.write(request.encode("utf-8"))
        await process.stdin.drain()
    except (BrokenPipeError, ConnectionResetError):
        logger.warning("%s closed its input early", config.command[0])
    finally:
        process.stdin.close()

    async def read_stdout() -> str:
        # Incremental decoder so multi-byte characters split across reads survive
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        raw = ""
        while True:
            chunk = await process.stdout.read(READ_SIZE)
            if not chunk:
                break
            text = decoder.decode(chunk)
            if not text:
                continue
            raw += text
            notify(StreamProgress(status="streaming", raw_text=raw, partial=parse_partial(raw)))
        return raw + decoder.decode(b"", final=True)

    # Drain stderr while stdout streams
    raw, stderr = await asyncio.gather(read_stdout(), process.stderr.read())
    await process.wait()

    if process.returncode != 0:
        notify(StreamProgress(status="error", raw_text=raw, partial=parse_partial(raw)))
        message = stderr.decode("utf-8", errors="replace").strip()
        raise StreamCommandError(
            f"{config.command[0]} exited with code {process.returncode}: {message}"
        )

    result = enforce_whitelist(parse_final(raw), config.whitelist)
    notify(StreamProgress(status="complete", raw_text=raw, partial=parse_partial(raw)))
    logger.info("Received %d issues", len(result.issues))
    return result

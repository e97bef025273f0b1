"""MCP server: exposes transcription as a tool for MCP clients.

WHY: Assistants that speak the Model Context Protocol should be able to
transcribe a local file or a YouTube video without shelling out to the
CLI. This module is a thin front end over pipeline.transcribe().

HOW: FastMCP registers one ``transcribe`` tool and serves it over stdio.
The tool builds a TranscriptionConfig from its arguments, fixes the
output path up front (so it can be reported back), runs the pipeline and
returns the exit status together with the transcript path.

RULES:
- stdout belongs to the protocol; logging goes to stderr
- Invalid options are reported in the result, never raised to the client
- output_path is only reported when the transcript file exists
- Runnable as: python -m scribe_transcriber.mcp_server
"""

from __future__ import annotations

import dataclasses
import logging
import sys
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from scribe_transcriber import pipeline
from scribe_transcriber.api.client import ScribeClient
from scribe_transcriber.config import TranscriptionConfig
from scribe_transcriber.core.transcript import generate_output_filename

logger = logging.getLogger(__name__)

mcp = FastMCP("scribe-transcriber")


async def run_transcription(
    source: str,
    options: Dict[str, Any],
    client: Optional[ScribeClient] = None,
) -> Dict[str, Any]:
    """Run one transcription and describe the outcome as a plain dict.

    Args:
        source: Audio/video file path or YouTube URL.
        options: TranscriptionConfig.create() keyword arguments; None
            values fall back to the configured defaults.
        client: An entered ScribeClient to reuse (tests pass a fake).

    Returns:
        ``{"status", "success", "output_path", "error"}``.
    """
    try:
        config = TranscriptionConfig.create(**options)
    except ValueError as e:
        logger.error("Invalid transcription options: %s", e)
        return {"status": 1, "success": False, "output_path": None, "error": str(e)}

    output_path = config.output_path or generate_output_filename()
    config = dataclasses.replace(config, output_path=output_path)

    status = await pipeline.transcribe(source, config, client=client)
    return {
        "status": status,
        "success": status == 0,
        "output_path": str(output_path) if output_path.is_file() else None,
        "error": None if status == 0 else "Transcription failed; see server log for details",
    }


@mcp.tool()
async def transcribe(
    source: str,
    output_format: Optional[str] = None,
    diarize: Optional[bool] = None,
    tag_audio_events: Optional[bool] = None,
    num_speakers: Optional[int] = None,
    language_code: Optional[str] = None,
    output_path: Optional[str] = None,
) -> Dict[str, Any]:
    """Transcribe an audio/video file or YouTube URL with ElevenLabs Scribe.

    Args:
        source: Path to a local audio/video file, or a YouTube URL.
        output_format: "text" or "json" utterance lines.
        diarize: Label speakers.
        tag_audio_events: Keep non-speech events such as (laughter).
        num_speakers: Expected number of speakers (1-32).
        language_code: ISO language code; detected when omitted.
        output_path: Where to write the transcript.
    """
    return await run_transcription(
        source,
        {
            "output_format": output_format,
            "diarize": diarize,
            "tag_audio_events": tag_audio_events,
            "num_speakers": num_speakers,
            "language_code": language_code,
            "output_path": output_path,
        },
    )


def main() -> None:
    """Serve the MCP tools over stdio."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logger.info("Starting scribe-transcriber MCP server")
    mcp.run()


if __name__ == "__main__":
    main()

"""CLI entry point for voxnav.

Parses arguments, configures logging, and launches the chosen mode.

Subcommands:
    (none)  — same as ``listen``
    listen  — read transcripts line by line and run the full session
    parse   — resolve one transcript and print the intent as JSON
    serve   — run the interpreter HTTP server
"""

import argparse
import json
import sys

from voxnav.core.constants import DEFAULT_API_BASE


def _add_shared_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments shared across subcommands."""
    parser.add_argument(
        "--config-file",
        default=None,
        help="JSON config file (default: ~/.config/voxnav/config.json)",
    )
    parser.add_argument(
        "--wake-word",
        default=None,
        help="Wake word (default: from config or 'hey platform')",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: $LOG_LEVEL or INFO)",
    )


def _add_remote_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--api-base",
        default=None,
        help=f"Interpreter API base URL (default: from config or {DEFAULT_API_BASE})",
    )
    parser.add_argument(
        "--remote-timeout-ms",
        type=int,
        default=None,
        help="Hard timeout for the remote fallback (default: from config or 1200)",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with subcommand support."""
    parser = argparse.ArgumentParser(
        description="Hands-free voice navigation: wake word, command matching, dispatch"
    )
    _add_shared_args(parser)
    subparsers = parser.add_subparsers(dest="subcommand")

    # `voxnav listen`
    listen_parser = subparsers.add_parser(
        "listen",
        help="Run the session on transcripts read from stdin (one per line)",
    )
    _add_shared_args(listen_parser)
    _add_remote_args(listen_parser)
    listen_parser.add_argument(
        "--input",
        default=None,
        help="Read transcripts from this file instead of stdin",
    )
    listen_parser.add_argument(
        "--no-remote",
        action="store_true",
        help="Disable the remote fallback interpreter",
    )

    # `voxnav parse`
    parse_parser = subparsers.add_parser(
        "parse",
        help="Resolve one transcript and print the intent as JSON",
    )
    _add_shared_args(parse_parser)
    _add_remote_args(parse_parser)
    parse_parser.add_argument("transcript", help="Transcript text")
    parse_parser.add_argument(
        "--no-wake",
        action="store_true",
        help="Treat the text as an already wake-word-stripped command",
    )
    parse_parser.add_argument(
        "--remote",
        action="store_true",
        help="Ask the interpreter server when local matching fails",
    )

    # `voxnav serve`
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the interpreter HTTP server",
    )
    _add_shared_args(serve_parser)
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Port")
    serve_parser.add_argument(
        "--llm-model",
        default=None,
        help="litellm model for the optional LLM pass (e.g. ollama/qwen3:1.7b)",
    )
    return parser


def _wake_word(args: argparse.Namespace, config) -> str:
    return (getattr(args, "wake_word", None) or config.wake.word).lower()


def _remote(args: argparse.Namespace, config):
    from voxnav.remote import RemoteInterpreter

    return RemoteInterpreter(
        api_base=args.api_base or config.remote.api_base,
        timeout_ms=args.remote_timeout_ms or config.remote.timeout_ms,
    )


async def _pump_lines(stream, recognizer) -> None:
    """Feed lines from a blocking text stream into *recognizer*."""
    import asyncio

    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            break
        recognizer.feed(line.rstrip("\n"))
    recognizer.close()


async def _listen(args: argparse.Namespace, config) -> int:
    from rich.console import Console

    from voxnav.bus import DispatchBus
    from voxnav.core.dictation import FieldBuffer
    from voxnav.listener import QueueRecognizer, TranscriptSource
    from voxnav.session import SessionController
    from voxnav.ui import ConsoleFeedback, render_history_panel, render_intent

    console_out = Console()
    feedback = ConsoleFeedback()
    bus = DispatchBus()
    fields = FieldBuffer()
    bus.subscribe(fields)
    bus.subscribe(lambda event: console_out.print(render_intent(event.intent)))

    remote = None
    if config.remote.enabled and not args.no_remote:
        remote = _remote(args, config)

    recognizer = QueueRecognizer()
    session = SessionController(
        bus=bus,
        feedback=feedback,
        remote=remote,
        wake_word=_wake_word(args, config),
        wake_window_ms=config.wake.window_ms,
        corrections=config.corrections,
    )
    source = TranscriptSource(recognizer, session.on_transcript, session.on_status)
    session.source = source
    feedback.update_status(f"Listening… say “{session.wake_word} …”")

    stream = open(args.input) if args.input else sys.stdin
    try:
        source.start()
        await _pump_lines(stream, recognizer)
        await source.finished.wait()
        await session.drain()
    finally:
        session.close()
        source.stop()
        if stream is not sys.stdin:
            stream.close()

    console_out.print(render_history_panel(feedback.state))
    if fields.values:
        console_out.print_json(data=fields.values)
    return 0


def _run_listen(args: argparse.Namespace, config) -> int:
    import asyncio

    try:
        return asyncio.run(_listen(args, config))
    except KeyboardInterrupt:
        return 130


def _run_parse(args: argparse.Namespace, config) -> int:
    """Print the intent for one transcript; exit 1 when nothing matched."""
    import asyncio

    from voxnav.core.matchers import DEFAULT_CASCADE
    from voxnav.core.text import apply_vocab, strip_wake_word

    text = apply_vocab(args.transcript, config.corrections)
    wake_word = _wake_word(args, config)
    if args.no_wake:
        intent = DEFAULT_CASCADE.resolve(text)
    else:
        intent = DEFAULT_CASCADE.parse(text, wake_word)

    if intent is None and args.remote:
        command = text if args.no_wake else strip_wake_word(text, wake_word)
        if command:
            intent = asyncio.run(_remote(args, config).interpret(command))

    print(json.dumps({"intent": intent.to_dict() if intent is not None else None}))
    return 0 if intent is not None else 1


def _run_serve(args: argparse.Namespace, config) -> int:
    import dataclasses

    import uvicorn

    from voxnav.server.app import create_app

    llm = config.server.llm
    if args.llm_model:
        llm = dataclasses.replace(llm, model=args.llm_model)
    app = create_app(llm)
    uvicorn.run(
        app,
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        log_config=None,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code."""
    from voxnav.apps.config import load_config
    from voxnav.core.env import configure_logging

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    config = load_config(args.config_file)

    if args.subcommand == "parse":
        return _run_parse(args, config)
    if args.subcommand == "serve":
        return _run_serve(args, config)
    if args.subcommand is None:
        args.input = None
        args.no_remote = False
        args.api_base = None
        args.remote_timeout_ms = None
    return _run_listen(args, config)

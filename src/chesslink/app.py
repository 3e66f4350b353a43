"""Command line entry point: start a configured engine and report it."""

from __future__ import annotations

import argparse
import logging
import sys

from PyQt6.QtCore import QCoreApplication, QObject, QProcess, QTimer

from chesslink.core.enums import PlayerState
from chesslink.engine.chess_engine import ChessEngine, DebugLine
from chesslink.engine.process import launch_engine
from chesslink.engine.settings import (
    EngineConfigError,
    find_engine_configuration,
    load_engine_configurations,
)

_LOGGER = logging.getLogger(__name__)

_EXIT_OK = 0
_EXIT_CONFIG_ERROR = 2
_EXIT_ENGINE_ERROR = 3
_QUIT_WAIT_MS = 2000


class EngineProbe(QObject):
    """Waits for an engine to start, prints what it declared, then quits."""

    def __init__(self, engine: ChessEngine, timeout_ms: int, *, verbose: bool = False) -> None:
        super().__init__()
        self._engine = engine
        self._verbose = verbose
        self.exit_code = _EXIT_ENGINE_ERROR

        self._deadline = QTimer(self)
        self._deadline.setSingleShot(True)
        self._deadline.timeout.connect(self._on_deadline)

        engine.ready.connect(self._on_ready)
        engine.disconnected.connect(self._on_disconnected)
        if verbose:
            engine.debug_message.connect(self._print_debug)
        self._deadline.start(timeout_ms)

    def _on_ready(self) -> None:
        if self._engine.state != PlayerState.IDLE:
            return
        self._deadline.stop()
        print(f"name: {self._engine.name}")
        print(f"protocol: {self._engine.driver.name}")
        print(f"variants: {', '.join(sorted(self._engine.variants))}")
        for option in self._engine.options:
            print(f"option: {option.name} ({option.type}) = {option.to_text()}")
        self.exit_code = _EXIT_OK
        self._engine.quit()
        QTimer.singleShot(0, QCoreApplication.quit)

    def _on_disconnected(self) -> None:
        self._deadline.stop()
        QTimer.singleShot(0, QCoreApplication.quit)

    def _on_deadline(self) -> None:
        _LOGGER.error("%s did not finish starting", self._engine.name)
        self._engine.close_connection()

    def _print_debug(self, line: DebugLine) -> None:
        print(line, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chesslink",
        description="Start a chess engine from an engines file and list its options.",
    )
    parser.add_argument("engines", help="JSON engines file")
    parser.add_argument("name", help="engine name in the engines file")
    parser.add_argument("--timeout", type=float, default=10.0, help="start-up timeout in seconds")
    parser.add_argument("--debug", action="store_true", help="print engine traffic to stderr")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default WARNING)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the engine probe; returns the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = find_engine_configuration(load_engine_configurations(args.engines), args.name)
    except EngineConfigError as exc:
        _LOGGER.error("%s", exc)
        return _EXIT_CONFIG_ERROR

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    engine = launch_engine(config)
    probe = EngineProbe(engine, int(args.timeout * 1000), verbose=args.debug)
    engine.start()
    app.exec()

    process = engine.findChild(QProcess)
    if process is not None and not process.waitForFinished(_QUIT_WAIT_MS):
        process.kill()
    return probe.exit_code


if __name__ == "__main__":
    sys.exit(main())

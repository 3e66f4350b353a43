"""Launch engine processes and wrap them in adapters."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QProcess

from chesslink.engine.chess_engine import ChessEngine
from chesslink.engine.driver import ProtocolDriver
from chesslink.engine.settings import EngineConfigError, EngineConfiguration
from chesslink.engine.uci import UciDriver
from chesslink.engine.xboard import XboardDriver

_LOGGER = logging.getLogger(__name__)

_DRIVERS: dict[str, type[UciDriver] | type[XboardDriver]] = {
    "uci": UciDriver,
    "xboard": XboardDriver,
}


def create_driver(protocol: str) -> ProtocolDriver:
    """Return a fresh driver for *protocol* (``"uci"`` or ``"xboard"``)."""
    try:
        driver_cls = _DRIVERS[protocol.lower()]
    except KeyError:
        raise EngineConfigError(f"unknown protocol {protocol!r}") from None
    return driver_cls()


def launch_engine(config: EngineConfiguration, parent: QObject | None = None) -> ChessEngine:
    """Spawn the engine process and return its adapter, not yet started.

    The configured settings are applied right away; option values are held
    until the engine has declared its options.
    """
    driver = create_driver(config.protocol)

    process = QProcess()
    process.setProgram(config.command)
    process.setArguments(config.arguments)
    if config.working_directory:
        process.setWorkingDirectory(config.working_directory)

    engine = ChessEngine(process, driver, config.name, parent)
    process.setParent(engine)

    def on_error(error: QProcess.ProcessError) -> None:
        _LOGGER.error("%s: process error %s", config.name, error.name)
        if error == QProcess.ProcessError.FailedToStart:
            engine.close_connection()

    process.errorOccurred.connect(on_error)
    engine.apply_settings(config.settings)

    _LOGGER.info("Launching %s: %s %s", config.name, config.command, " ".join(config.arguments))
    process.start()
    return engine

"""
CLI Configuration

Process-wide output settings for the equimutant CLI.
"""

from typing import Optional

from equimutant.logging_config import env_flag


class CLIConfig:
    """Configuration for CLI commands"""

    # Candidate rows shown by `select` in human mode
    MAX_TABLE_ROWS = 200

    # Machine mode (plain JSON output, no rich rendering)
    _machine_mode: Optional[bool] = None

    @classmethod
    def set_machine_mode(cls, enabled: Optional[bool]) -> None:
        """Set machine mode; None falls back to the environment."""
        cls._machine_mode = enabled

    @classmethod
    def is_machine_mode(cls) -> bool:
        """
        Check if machine mode is active.

        Human output is the default. EQUIMUTANT_MACHINE_MODE=1 or --machine
        switches every command to JSON.
        """
        if cls._machine_mode is not None:
            return cls._machine_mode
        return env_flag("EQUIMUTANT_MACHINE_MODE")

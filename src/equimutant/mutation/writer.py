"""
MutantWriter: unique file names, provenance headers and atomic writes.
"""

import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Union

from equimutant.exceptions import MutantWriteError
from equimutant.logging_config import logger
from equimutant.parser.nodes import SyntaxNode
from equimutant.schemas import Mutant, NodeDescriptor
from .config import MUTANT_FILE, MUTATION_CONFIG


class SequenceCounter:
    """Monotonic, lock-protected counter owned by one writer (one run)."""

    def __init__(self, start: int = 1):
        self._start = start
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    def peek(self) -> int:
        with self._lock:
            return self._next

    def reset(self) -> None:
        with self._lock:
            self._next = self._start


class MutantWriter:
    """
    Writes mutants as `{base}_mutant_{plugin}_{seq}.java` under an output directory.

    The first line of every file is `// mutant by transform {plugin} from {path}`.
    """

    def __init__(self, sequence: Optional[SequenceCounter] = None, extension: Optional[str] = None):
        self.sequence = sequence or SequenceCounter(MUTATION_CONFIG["sequence_start"])
        self.extension = extension or MUTATION_CONFIG["mutant_extension"]
        # Name choice and write happen under one lock so parallel attempts never share a name
        self._write_lock = threading.Lock()

    @staticmethod
    def header_for(plugin_name: str, input_path: Optional[Union[str, Path]]) -> str:
        path = str(input_path).replace("\\", "\\\\") if input_path else MUTANT_FILE["unknown"]
        return MUTANT_FILE["header"].format(plugin=plugin_name, path=path)

    def file_name_for(self, input_path: Optional[Union[str, Path]], plugin_name: str, seq: int) -> str:
        base = ""
        if input_path:
            name = Path(str(input_path)).name
            base = name.rsplit(".", 1)[0] if "." in name else name
        return MUTANT_FILE["name"].format(
            base=base or MUTANT_FILE["unknown"],
            plugin=plugin_name,
            seq=seq,
            ext=self.extension,
        )

    def write(
        self,
        mutant_text: str,
        plugin_name: str,
        input_path: Optional[Union[str, Path]],
        output_dir: Union[str, Path],
    ) -> Path:
        """
        Write one mutant file.

        Args:
            mutant_text: Full rewritten source
            plugin_name: Name of the transform that produced it
            input_path: Path of the original source file (used for the header and the name)
            output_dir: Directory to write into; created with parents if missing

        Returns:
            Path of the written file

        Raises:
            MutantWriteError: If the directory or the file cannot be written
        """
        directory = Path(output_dir)
        content = self.header_for(plugin_name, input_path) + "\n" + mutant_text

        with self._write_lock:
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise MutantWriteError(str(directory), str(e)) from e

            target = directory / self.file_name_for(input_path, plugin_name, self.sequence.next())
            while target.exists():
                logger.debug(f"Mutant file exists, trying next sequence: {target.name}")
                target = directory / self.file_name_for(input_path, plugin_name, self.sequence.next())

            self._atomic_write(target, content)

        logger.debug(f"Mutant written: {target}")
        return target

    def create_mutant(
        self,
        plugin_name: str,
        target_node: SyntaxNode,
        mutant_text: str,
        input_path: Optional[Union[str, Path]],
        output_dir: Union[str, Path],
    ) -> Mutant:
        path = self.write(mutant_text, plugin_name, input_path, output_dir)
        return Mutant(
            plugin_name=plugin_name,
            target=NodeDescriptor.from_node(target_node),
            generated_text=mutant_text,
            output_path=str(path),
        )

    def reset_sequence(self) -> None:
        self.sequence.reset()

    def _atomic_write(self, path: Path, content: str) -> None:
        """Write through a temp file in the same directory, then rename into place."""
        try:
            fd, temp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
        except OSError as e:
            raise MutantWriteError(str(path), f"cannot create temp file: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(temp_path, str(path))
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError:
                logger.debug(f"Temp file already gone: {temp_path}")
            raise MutantWriteError(str(path), str(e)) from e

"""Configuration for the jackal command-line driver."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jackal.jack_serialize import OUTPUT_EXTENSIONS


@dataclass
class AnalyzerConfig:
    """Settings that control which files are read and what is written.

    For an input `Main.jack` with the defaults, the token listing goes to
    `MainT.xml` and the parse tree to `Main.xml`, beside the input.
    """

    source_suffix: str = ".jack"
    token_suffix: str = "T"
    tree_suffix: str = ""
    target: str = "xml"
    encoding: str = "utf-8"
    output_dir: Path | None = None
    write_tokens: bool = True
    indent: int | None = None

    @property
    def extension(self) -> str:
        return OUTPUT_EXTENSIONS[self.target.lower()]

    def is_source(self, path: Path) -> bool:
        return path.is_file() and path.suffix == self.source_suffix

    def _output_path(self, source: Path, suffix: str) -> Path:
        directory = self.output_dir if self.output_dir is not None else source.parent
        return directory / f"{source.stem}{suffix}{self.extension}"

    def token_output(self, source: Path) -> Path:
        return self._output_path(source, self.token_suffix)

    def tree_output(self, source: Path) -> Path:
        return self._output_path(source, self.tree_suffix)

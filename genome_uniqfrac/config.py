import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError
from .utils.file_utils import OUTPUT_FORMATS, ensure_directory, output_format

@dataclass
class Config:
    """Configuration for a unique k-mer run"""
    k: int
    input_file: str
    output_file: Optional[str] = None
    log_file: Optional[str] = None
    show_progress: bool = False

    def __post_init__(self):
        """Validate inputs and create the output directory"""
        if isinstance(self.k, bool) or not isinstance(self.k, int) or self.k <= 0:
            raise ConfigurationError(f"k-mer size must be a positive integer, got {self.k!r}")
        if not self.input_file:
            raise ConfigurationError("An input file is required")
        if not os.path.isfile(self.input_file):
            raise ConfigurationError(f"Input file not found: {self.input_file}")
        if self.output_file is not None:
            if output_format(self.output_file) is None:
                suffixes = ", ".join(f"'{s}'" for s in OUTPUT_FORMATS)
                raise ConfigurationError(
                    f"Output file must end in one of {suffixes}: {self.output_file}"
                )
            ensure_directory(Path(self.output_file).parent)
            if self.log_file is None:
                self.log_file = str(Path(self.output_file).parent / "genomeuniqfrac.log")

    @property
    def stats_only(self) -> bool:
        return self.output_file is None

import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() replaces the root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def write_fasta(tmp_path: Path):
    """Write {name: sequence} records to a FASTA file, wrapped at 60 columns."""
    def _write(records, name="genome.fa"):
        path = tmp_path / name
        with path.open("w") as f:
            for rec_id, seq in records.items():
                f.write(f">{rec_id}\n")
                for start in range(0, len(seq), 60):
                    f.write(seq[start:start + 60] + "\n")
        return path
    return _write


@pytest.fixture
def raw_sequence(tmp_path: Path):
    def _write(sequence, name="genome.txt"):
        path = tmp_path / name
        path.write_text(sequence)
        return path
    return _write

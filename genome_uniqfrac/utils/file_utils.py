import os
import gzip
import lz4.frame
from contextlib import contextmanager
from pathlib import Path
from typing import List, NamedTuple, TextIO
from Bio import SeqIO

from ..exceptions import InputError, SinkError
from .logging_utils import get_logger

logger = get_logger(__name__)

# Output suffix -> writer
OUTPUT_FORMATS = {
    ".lz4": "lz4",
    ".gz": "gzip",
    ".tsv": "plain",
}


class Contig(NamedTuple):
    name: str
    start: int
    length: int


class LoadedSequence(NamedTuple):
    sequence: str
    contigs: List[Contig]


def ensure_directory(path) -> Path:
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def output_format(path) -> str:
    """Writer name for an output path, or None if the suffix is not supported."""
    return OUTPUT_FORMATS.get(Path(path).suffix.lower())


def _open_text(path: Path) -> TextIO:
    if path.suffix.lower() == ".gz":
        return gzip.open(path, "rt")
    return open(path, "r")


def _is_fasta(path: Path) -> bool:
    with _open_text(path) as f:
        for line in f:
            stripped = line.strip()
            if stripped:
                return stripped.startswith(">")
    return False


def normalize_sequence(text: str) -> str:
    """Drop all whitespace and upper-case the remaining symbols."""
    return "".join(text.split()).upper()


def read_sequence(path) -> LoadedSequence:
    """
    Load a nucleotide sequence from a FASTA or raw sequence file.

    FASTA records are concatenated in file order; the start offset of each
    record in the concatenated sequence is returned so coordinates can be
    mapped back. Raw files are read as a single sequence. Either way the
    result is whitespace-free and upper-case. `.gz` inputs are decompressed.
    """
    path = Path(path)
    if not path.is_file():
        raise InputError(f"Input file not found: {path}")

    try:
        if _is_fasta(path):
            parts = []
            contigs = []
            offset = 0
            with _open_text(path) as handle:
                for record in SeqIO.parse(handle, "fasta"):
                    seq = normalize_sequence(str(record.seq))
                    contigs.append(Contig(record.id, offset, len(seq)))
                    parts.append(seq)
                    offset += len(seq)
            sequence = "".join(parts)
        else:
            with _open_text(path) as handle:
                sequence = normalize_sequence(handle.read())
            contigs = [Contig(path.name, 0, len(sequence))]
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise InputError(f"Failed to read input file {path}: {e}") from e

    if not sequence:
        raise InputError(f"No sequence found in {path}")

    if len(contigs) > 1:
        logger.warning(
            f"{len(contigs):,} records in {path.name} were concatenated; "
            f"k-mers spanning record boundaries are included"
        )
        for contig in contigs:
            logger.info(f"  - {contig.name}: offset {contig.start:,}, length {contig.length:,}")

    return LoadedSequence(sequence, contigs)


def _open_writer(path: Path):
    fmt = output_format(path)
    if fmt == "lz4":
        return lz4.frame.open(path, mode="wb")
    if fmt == "gzip":
        return gzip.open(path, "wb")
    return open(path, "wb")


def _remove_partial(path: Path):
    if path.exists():
        os.remove(path)
        logger.warning(f"Removed incomplete output file {path}")


@contextmanager
def open_output_sink(path):
    """
    Open a binary, append-only output sink chosen by the file suffix.

    If the body raises, the partially written file is removed before the
    exception propagates. Close/flush failures raise SinkError.
    """
    path = Path(path)
    try:
        handle = _open_writer(path)
    except OSError as e:
        raise SinkError(f"Failed to open output file {path}: {e}") from e

    try:
        yield handle
    except BaseException:
        try:
            handle.close()
        finally:
            _remove_partial(path)
        raise

    try:
        handle.close()
    except OSError as e:
        _remove_partial(path)
        raise SinkError(f"Failed to flush output file {path}: {e}") from e


def open_coordinates(path) -> TextIO:
    """Open an emitted coordinates file (lz4, gzip or plain) for reading text."""
    path = Path(path)
    if not path.is_file():
        raise InputError(f"Coordinates file not found: {path}")
    fmt = output_format(path)
    if fmt == "lz4":
        return lz4.frame.open(path, mode="rt")
    if fmt == "gzip":
        return gzip.open(path, "rt")
    return open(path, "r")

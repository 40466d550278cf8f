import numpy as np
import pandas as pd
from typing import Dict, Optional

from .index import kmer_offsets
from ..exceptions import InputError
from ..utils.file_utils import open_coordinates
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

COLUMNS = ["coordinate", "kmer", "strand", "offset"]


def unique_fraction(unique: int, sequence_length: int, k: int) -> float:
    """Fraction of the 2*(L-K+1) strand-specific k-mer candidates that were unique."""
    candidates = 2 * kmer_offsets(sequence_length, k)
    if candidates == 0:
        return 0.0
    return unique / candidates


def assign_strands(coordinates: np.ndarray) -> np.ndarray:
    """
    Strand per emitted line: '+' for positive coordinates, '-' for negative.

    Coordinate 0 is written for both strands at offset 0, forward first.
    Two zero lines are therefore '+' then '-'; a single one is unattributable
    and gets '.'.
    """
    strands = np.where(coordinates > 0, "+", np.where(coordinates < 0, "-", "."))
    zeros = np.flatnonzero(coordinates == 0)
    if len(zeros) == 2:
        strands[zeros[0]] = "+"
        strands[zeros[1]] = "-"
    elif len(zeros) > 2:
        logger.warning(f"Found {len(zeros)} lines with coordinate 0, expected at most 2")
    return strands


def load_unique_kmers(path) -> pd.DataFrame:
    """Read a coordinates file written by the `count` command into a DataFrame."""
    with open_coordinates(path) as handle:
        try:
            df = pd.read_csv(handle, sep="\t", header=None, names=["coordinate", "kmer"],
                             dtype={"coordinate": np.int64, "kmer": str})
        except pd.errors.EmptyDataError:
            return pd.DataFrame({
                "coordinate": pd.Series(dtype=np.int64),
                "kmer": pd.Series(dtype=str),
                "strand": pd.Series(dtype=str),
                "offset": pd.Series(dtype=np.int64),
            })
        except (pd.errors.ParserError, ValueError) as e:
            raise InputError(f"Malformed coordinates file {path}: {e}") from e

    coordinates = df["coordinate"].to_numpy()
    df["strand"] = assign_strands(coordinates)
    df["offset"] = np.abs(coordinates)
    return df[COLUMNS]


def summarize_coordinates(df: pd.DataFrame, sequence_length: Optional[int] = None,
                          k: Optional[int] = None) -> Dict[str, object]:
    """
    Summarise emitted unique k-mers: lines per strand, offsets covered and,
    when the sequence length is known, the fraction of offsets covered.
    """
    offsets = np.unique(df["offset"].to_numpy())
    strand_counts = df["strand"].value_counts()
    summary = {
        "lines": int(len(df)),
        "forward_lines": int(strand_counts.get("+", 0)),
        "reverse_lines": int(strand_counts.get("-", 0)),
        "ambiguous_lines": int(strand_counts.get(".", 0)),
        "distinct_offsets": int(offsets.size),
    }

    if k is None and len(df):
        k = int(df["kmer"].str.len().iloc[0])
    if sequence_length is not None and k:
        n_offsets = kmer_offsets(sequence_length, k)
        summary["covered_fraction"] = offsets.size / n_offsets if n_offsets else 0.0
    return summary

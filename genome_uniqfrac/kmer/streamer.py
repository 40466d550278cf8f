from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional, Tuple
from tqdm import tqdm

from .index import KmerIndex, PROGRESS_BLOCK, kmer_offsets
from ..exceptions import SinkError
from ..utils.logging_utils import get_logger, log_tqdm_summary

logger = get_logger(__name__)

WRITABLE_BASES = frozenset("ACGT")


@dataclass
class StreamStats:
    """Counters for one pass of the uniqueness streamer"""
    candidates: int = 0
    unique: int = 0
    lines: int = 0


def format_record(coordinate: int, kmer: str) -> bytes:
    return f"{coordinate}\t{kmer}\n".encode("ascii")


class UniqueKmerStreamer:
    """
    Second pass over the sequence: looks every forward and reverse-strand
    k-mer up in a frozen KmerIndex and writes the unique ones.

    Coordinates are signed offsets, ``i`` on the forward strand and ``-i``
    on the reverse strand. At offset 0 both strands give coordinate 0.
    """

    def __init__(self, sequence: str, rc_sequence: str, index: KmerIndex, k: int = None):
        if not isinstance(index, KmerIndex):
            raise TypeError(
                f"UniqueKmerStreamer needs a frozen KmerIndex, got {type(index).__name__}"
            )
        if k is None:
            k = index.k
        if k != index.k:
            raise ValueError(f"k={k} does not match index built with k={index.k}")
        if len(sequence) != len(rc_sequence):
            raise ValueError("Sequence and reverse complement differ in length")
        self.sequence = sequence
        self.rc_sequence = rc_sequence
        self.index = index
        self.k = k

    @property
    def n_offsets(self) -> int:
        return kmer_offsets(len(self.sequence), self.k)

    def candidates(self) -> Iterator[Tuple[int, str]]:
        """Yield (coordinate, kmer), offset ascending, forward before reverse."""
        k = self.k
        for i in range(self.n_offsets):
            yield i, self.sequence[i:i + k]
            yield -i, self.rc_sequence[i:i + k]

    def unique_records(self) -> Iterator[Tuple[int, str]]:
        index = self.index
        return ((coord, kmer) for coord, kmer in self.candidates() if index.count(kmer) == 1)

    def stream(self, sink: Optional[BinaryIO] = None, show_progress: bool = False) -> StreamStats:
        """
        Count unique candidates and write the ACGT-only ones to `sink`.

        A unique k-mer holding an N is counted but never written. With no
        sink only the counters are updated.
        """
        stats = StreamStats()
        index = self.index
        n_offsets = self.n_offsets

        with tqdm(total=n_offsets, desc="Finding unique k-mers", unit="offsets",
                  unit_scale=True, disable=not show_progress) as pbar:
            for position, (coord, kmer) in enumerate(self.candidates(), start=1):
                stats.candidates += 1
                if position % (2 * PROGRESS_BLOCK) == 0:
                    pbar.update(PROGRESS_BLOCK)
                if index.count(kmer) != 1:
                    continue
                stats.unique += 1
                if sink is None or not WRITABLE_BASES.issuperset(kmer):
                    continue
                try:
                    sink.write(format_record(coord, kmer))
                except OSError as e:
                    raise SinkError(f"Failed to write output: {e}") from e
                stats.lines += 1
            pbar.update(n_offsets - pbar.n)
        if show_progress:
            log_tqdm_summary(pbar, logger)

        return stats


def stream_unique_kmers(sequence: str, rc_sequence: str, index: KmerIndex,
                        sink: Optional[BinaryIO] = None,
                        show_progress: bool = False) -> StreamStats:
    streamer = UniqueKmerStreamer(sequence, rc_sequence, index)
    stats = streamer.stream(sink, show_progress=show_progress)
    logger.info(f"Unique k-mers: {stats.unique:,}, lines written: {stats.lines:,}")
    return stats

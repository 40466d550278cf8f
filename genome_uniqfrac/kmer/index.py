from types import MappingProxyType
from collections.abc import Mapping
from typing import Dict, Iterator
from tqdm import tqdm

from ..exceptions import ConfigurationError, IndexFrozenError
from ..utils.logging_utils import get_logger, log_tqdm_summary

logger = get_logger(__name__)

# Progress bars advance in blocks of this many offsets
PROGRESS_BLOCK = 1 << 16


def check_kmer_size(k) -> int:
    if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
        raise ConfigurationError(f"k-mer size must be a positive integer, got {k!r}")
    return k


def kmer_offsets(sequence_length: int, k: int) -> int:
    """Number of start offsets i with i + k <= sequence_length."""
    return max(sequence_length - k + 1, 0)


class KmerIndex(Mapping):
    """
    Read-only view of k-mer occurrence counts.

    Only KmerIndexBuilder.freeze() should create one. Indexing a k-mer
    that was never seen raises KeyError; count() returns 0 for it.
    """

    def __init__(self, counts: Dict[str, int], k: int):
        self._counts = MappingProxyType(counts)
        self.k = k

    def __getitem__(self, kmer: str) -> int:
        return self._counts[kmer]

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def count(self, kmer: str) -> int:
        return self._counts.get(kmer, 0)

    def is_unique(self, kmer: str) -> bool:
        return self._counts.get(kmer, 0) == 1

    def total(self) -> int:
        return sum(self._counts.values())

    def unique_kmers(self) -> Iterator[str]:
        return (kmer for kmer, count in self._counts.items() if count == 1)

    def __repr__(self) -> str:
        return f"KmerIndex(k={self.k}, distinct={len(self):,})"


class KmerIndexBuilder:
    """
    Mutable k-mer counter, used only while the index is being built.

    Every locus contributes its forward k-mer and the reverse-strand k-mer
    at the same offset. A self-complementary k-mer is the same locus seen
    from both strands, so it is counted once.
    """

    def __init__(self, k: int):
        self.k = check_kmer_size(k)
        self._counts: Dict[str, int] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_open(self):
        if self._frozen:
            raise IndexFrozenError("k-mer index has already been frozen")

    def _count(self, fwd: str, rc: str):
        counts = self._counts
        counts[fwd] = counts.get(fwd, 0) + 1
        if rc != fwd:
            counts[rc] = counts.get(rc, 0) + 1

    def add(self, fwd: str, rc: str):
        self._check_open()
        self._count(fwd, rc)

    def scan(self, sequence: str, rc_sequence: str, show_progress: bool = False) -> int:
        """
        Count every k-mer of `sequence` together with the k-mer of
        `rc_sequence` at the same offset. Returns the number of offsets
        visited, which is zero when k exceeds the sequence length.
        """
        self._check_open()
        if len(sequence) != len(rc_sequence):
            raise ValueError(
                f"Sequence and reverse complement differ in length: "
                f"{len(sequence):,} vs {len(rc_sequence):,}"
            )
        k = self.k
        n_offsets = kmer_offsets(len(sequence), k)
        count = self._count

        with tqdm(total=n_offsets, desc="Counting k-mers", unit="offsets",
                  unit_scale=True, disable=not show_progress) as pbar:
            for i in range(n_offsets):
                count(sequence[i:i + k], rc_sequence[i:i + k])
                if (i + 1) % PROGRESS_BLOCK == 0:
                    pbar.update(PROGRESS_BLOCK)
            pbar.update(n_offsets - pbar.n)
        if show_progress:
            log_tqdm_summary(pbar, logger)

        return n_offsets

    def freeze(self) -> KmerIndex:
        """Close the builder and hand its counts to a read-only KmerIndex."""
        self._check_open()
        self._frozen = True
        index = KmerIndex(self._counts, self.k)
        self._counts = None
        return index


def build_kmer_index(sequence: str, rc_sequence: str, k: int,
                     show_progress: bool = False) -> KmerIndex:
    builder = KmerIndexBuilder(k)
    n_offsets = builder.scan(sequence, rc_sequence, show_progress=show_progress)
    index = builder.freeze()
    logger.info(f"Indexed {n_offsets:,} offsets, {len(index):,} distinct k-mers")
    return index

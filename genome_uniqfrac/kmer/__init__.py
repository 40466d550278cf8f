"""Reverse complement, k-mer counting and unique k-mer emission."""

from .complement import (
    complement, reverse_complement, is_self_complementary
)
from .index import (
    KmerIndex, KmerIndexBuilder, build_kmer_index
)
from .streamer import (
    StreamStats, UniqueKmerStreamer, stream_unique_kmers
)
from .summary import (
    load_unique_kmers, summarize_coordinates, unique_fraction
)

__all__ = [
    'complement',
    'reverse_complement',
    'is_self_complementary',
    'KmerIndex',
    'KmerIndexBuilder',
    'build_kmer_index',
    'StreamStats',
    'UniqueKmerStreamer',
    'stream_unique_kmers',
    'load_unique_kmers',
    'summarize_coordinates',
    'unique_fraction'
]

"""Nucleotide complement table and whole-sequence reverse complement."""

from ..exceptions import InvalidSymbolError

COMPLEMENT = {
    'A': 'T', 'T': 'A', 'G': 'C', 'C': 'G', 'N': 'N',
    'a': 't', 't': 'a', 'g': 'c', 'c': 'g', 'n': 'n',
}

_COMPLEMENT_TABLE = str.maketrans(COMPLEMENT)


def complement(symbol: str) -> str:
    """Return the Watson-Crick complement of a single base (case preserved)."""
    try:
        return COMPLEMENT[symbol]
    except KeyError:
        raise InvalidSymbolError(symbol) from None


def reverse_complement(sequence: str) -> str:
    """
    Reverse complement an entire sequence.

    Position ``L-1-i`` of the result holds the complement of position ``i``
    of the input. The whole sequence is checked before anything is built, so
    an invalid symbol raises InvalidSymbolError with the first offending
    position and no partial result.
    """
    invalid = set(sequence).difference(COMPLEMENT)
    if invalid:
        position = next(i for i, base in enumerate(sequence) if base in invalid)
        raise InvalidSymbolError(sequence[position], position)
    return sequence.translate(_COMPLEMENT_TABLE)[::-1]


def is_self_complementary(kmer: str) -> bool:
    return kmer == reverse_complement(kmer)

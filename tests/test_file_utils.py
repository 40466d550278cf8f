import gzip

import lz4.frame
import pytest

from genome_uniqfrac.exceptions import InputError, SinkError
from genome_uniqfrac.utils import file_utils
from genome_uniqfrac.utils.file_utils import (
    Contig, normalize_sequence, open_coordinates, open_output_sink,
    output_format, read_sequence
)


def test_normalize_sequence():
    assert normalize_sequence("ac gt\nNn\r\n") == "ACGTNN"


def test_read_raw_sequence(raw_sequence):
    path = raw_sequence("acgtAC\nGTnn\n")
    loaded = read_sequence(path)
    assert loaded.sequence == "ACGTACGTNN"
    assert loaded.contigs == [Contig(path.name, 0, 10)]


def test_read_fasta_concatenates_records(write_fasta):
    path = write_fasta({"chr1": "acgt" * 20, "chr2": "TTTT"})
    loaded = read_sequence(path)
    assert loaded.sequence == "ACGT" * 20 + "TTTT"
    assert loaded.contigs == [Contig("chr1", 0, 80), Contig("chr2", 80, 4)]


def test_read_gzipped_fasta(tmp_path):
    path = tmp_path / "genome.fa.gz"
    with gzip.open(path, "wt") as f:
        f.write(">chr1\nacgtn\n")
    assert read_sequence(path).sequence == "ACGTN"


def test_read_missing_file(tmp_path):
    with pytest.raises(InputError):
        read_sequence(tmp_path / "absent.fa")


def test_read_empty_file(raw_sequence):
    with pytest.raises(InputError):
        read_sequence(raw_sequence("\n\n"))


def test_read_keeps_invalid_symbols_for_the_core(raw_sequence):
    # validation happens when the sequence is reverse complemented
    assert read_sequence(raw_sequence("ACXT")).sequence == "ACXT"


@pytest.mark.parametrize("name,fmt", [
    ("out.lz4", "lz4"), ("out.gz", "gzip"), ("out.tsv", "plain"),
    ("OUT.LZ4", "lz4"), ("out.txt", None), ("out", None),
])
def test_output_format(name, fmt):
    assert output_format(name) == fmt


def test_lz4_sink_writes_frame(tmp_path):
    path = tmp_path / "out.lz4"
    with open_output_sink(path) as sink:
        sink.write(b"0\tACGT\n")
    assert lz4.frame.decompress(path.read_bytes()) == b"0\tACGT\n"


def test_gzip_sink(tmp_path):
    path = tmp_path / "out.gz"
    with open_output_sink(path) as sink:
        sink.write(b"3\tAAC\n")
    with gzip.open(path, "rb") as f:
        assert f.read() == b"3\tAAC\n"


@pytest.mark.parametrize("name", ["out.lz4", "out.gz", "out.tsv"])
def test_open_coordinates_reads_every_format(tmp_path, name):
    path = tmp_path / name
    with open_output_sink(path) as sink:
        sink.write(b"0\tGT\n2\tAC\n")
    with open_coordinates(path) as f:
        assert f.read() == "0\tGT\n2\tAC\n"


def test_sink_removes_partial_output(tmp_path):
    path = tmp_path / "out.tsv"
    with pytest.raises(RuntimeError):
        with open_output_sink(path) as sink:
            sink.write(b"0\tGT\n")
            raise RuntimeError("boom")
    assert not path.exists()


def test_sink_open_failure(tmp_path):
    with pytest.raises(SinkError):
        with open_output_sink(tmp_path / "missing_dir" / "out.tsv"):
            pass


def test_open_coordinates_missing(tmp_path):
    with pytest.raises(InputError):
        open_coordinates(tmp_path / "none.tsv")


class UnflushableWriter:
    """Writes to a real file but fails when closed, like a full disk on flush."""

    def __init__(self, path):
        self._f = open(path, "wb")

    def write(self, data):
        return self._f.write(data)

    def close(self):
        self._f.close()
        raise OSError("No space left on device")


def test_sink_removes_output_when_close_fails(tmp_path, monkeypatch):
    path = tmp_path / "out.tsv"
    monkeypatch.setattr(file_utils, "_open_writer", UnflushableWriter)
    with pytest.raises(SinkError, match="No space left"):
        with open_output_sink(path) as sink:
            sink.write(b"0\tGT\n")
    assert not path.exists()

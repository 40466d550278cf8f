import time
import click
import datetime
from typing import Dict
from .config import Config
from .exceptions import GenomeUniqFracError
from .utils.logging_utils import (
    setup_logging, get_logger, log_step, log_summary_block,
    log_all_warnings_and_errors, get_clean_command
)
from .utils.file_utils import read_sequence, open_output_sink
from .kmer.complement import reverse_complement
from .kmer.index import build_kmer_index
from .kmer.streamer import stream_unique_kmers
from .kmer.summary import load_unique_kmers, summarize_coordinates, unique_fraction


logger = get_logger(__name__)


def run_unique_kmers(config: Config) -> Dict[str, object]:
    """Read the sequence, count k-mers on both strands and emit the unique ones."""
    log_step("Step 1 Reading input")
    loaded = read_sequence(config.input_file)
    sequence = loaded.sequence
    logger.info(f"Sequence length: {len(sequence):,} bp")
    if config.k > len(sequence):
        logger.warning(f"k={config.k} is longer than the sequence ({len(sequence):,} bp); no k-mers to count")

    log_step("Step 2 Reverse complementing")
    rc_sequence = reverse_complement(sequence)

    log_step("Step 3 Counting k-mers")
    index = build_kmer_index(sequence, rc_sequence, config.k, show_progress=config.show_progress)

    log_step("Step 4 Finding unique k-mers")
    if config.stats_only:
        logger.info("No output file specified, will print stats only")
        stats = stream_unique_kmers(sequence, rc_sequence, index,
                                    show_progress=config.show_progress)
    else:
        with open_output_sink(config.output_file) as sink:
            stats = stream_unique_kmers(sequence, rc_sequence, index, sink=sink,
                                        show_progress=config.show_progress)
        logger.info(f"Unique k-mer coordinates written to {config.output_file}")

    fraction = unique_fraction(stats.unique, len(sequence), config.k)
    return {
        "Sequence length": f"{len(sequence):,}",
        "Records": f"{len(loaded.contigs):,}",
        "k": f"{config.k}",
        "Distinct k-mers": f"{len(index):,}",
        "Unique k-mers": f"{stats.unique:,}",
        "Unique fraction": f"{fraction:.4f}",
        "Lines written": f"{stats.lines:,}",
    }


@click.group()
@click.version_option(package_name="genome-uniqfrac")
def cli():
    """Find k-mers that occur at exactly one locus of a genome."""
    pass

@cli.command("count")
@click.option('-k', '--kmer-size', 'k', required=True, type=int, help='k-mer size')
@click.option('--input', 'input_file', required=True, help='Input sequence file (FASTA or raw sequence, optionally gzipped)')
@click.option('--output', 'output_file', default=None, help="Output file ending in '.lz4', '.gz' or '.tsv'. Omit to print stats only")
@click.option('--log', 'log_file', default=None, help='Log file (default: genomeuniqfrac.log next to the output)')
@click.option('--progress/--no-progress', default=True, help='Show progress bars')
def count(k: int, input_file: str, output_file: str, log_file: str, progress: bool):
    """Record the coordinates of unique k-mers on both strands."""
    setup_logging(log_file)
    try:
        config = Config(k=k, input_file=input_file, output_file=output_file,
                        log_file=log_file, show_progress=progress)
        if log_file is None and config.log_file is not None:
            setup_logging(config.log_file)

        logger.info(f"{'Command:':<5}{get_clean_command()}")
        start_time = time.time()
        logger.info(f"Start time: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

        stats = run_unique_kmers(config)

        runtime = time.time() - start_time
        log_step("Summary")
        log_summary_block(
            cmd=get_clean_command(),
            start=start_time,
            duration=runtime,
            stats=stats)
        log_all_warnings_and_errors()
    except GenomeUniqFracError as e:
        logger.error(f"Error in count: {e}")
        raise click.Abort()

@cli.command("summarize")
@click.option('--coords', required=True, help='Coordinates file written by the count command')
@click.option('--length', 'sequence_length', default=None, type=int, help='Sequence length, to report the fraction of offsets covered')
@click.option('-k', '--kmer-size', 'k', default=None, type=int, help='k-mer size (inferred from the file when omitted)')
def summarize(coords: str, sequence_length: int, k: int):
    """Summarise a coordinates file by strand and offset coverage."""
    setup_logging()
    try:
        df = load_unique_kmers(coords)
        summary = summarize_coordinates(df, sequence_length=sequence_length, k=k)
    except GenomeUniqFracError as e:
        logger.error(f"Error in summarize: {e}")
        raise click.Abort()

    log_step("Summary")
    for key, value in summary.items():
        if isinstance(value, float):
            value = f"{value:.4f}"
        else:
            value = f"{value:,}"
        logger.info(f"{key.replace('_', ' ').capitalize() + ':':<30}{value}")


if __name__ == '__main__':
    cli()

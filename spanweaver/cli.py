#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for SpanWeaver.

This module provides the main CLI entry point and all subcommands for
aligning interleaved paired reads to assembled contigs.
"""

import sys
import click
from pathlib import Path
import yaml

from .version import __version__
from .config.parser import ConfigParser
from .config.schema import (
    TEMPLATES,
    VALID_FORMATS,
    AlignmentParameters,
    ConfigValidationError,
    configure_logging,
    load_config,
    save_config_template,
    validate_config,
)


def _log_level(ctx):
    """Logging level implied by the global --verbose / --quiet flags."""
    if ctx.obj.get('VERBOSE'):
        return 'DEBUG'
    if ctx.obj.get('QUIET'):
        return 'WARNING'
    return None


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    SpanWeaver: k-mer seeded read-to-contig span alignment

    Places interleaved paired-end reads on assembled contigs through a
    canonical k-mer index, scoring each ungapped span by quality-weighted
    substitution mismatches.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='spanweaver_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t', type=click.Choice(TEMPLATES),
              default='default', help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
        click.echo(f"✓ Configuration file created: {output}")
        click.echo("\nThe configuration file includes:")
        click.echo("  • Span finding parameters (k-mer size, quality floor, mismatch ceiling)")
        click.echo("  • Index sharding and contig length filter")
        click.echo("  • Thread count and output format")
        click.echo("\nEdit this file to customize your alignment run.")
    except (OSError, ValueError) as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        config = load_config(Path(config_file))
    except (OSError, yaml.YAMLError, ConfigValidationError) as e:
        click.echo(f"✗ Error validating configuration: {e}", err=True)
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")

    # Show key settings
    alignment = config['alignment']
    click.echo("\nKey Settings:")
    click.echo(f"  K-mer size: {alignment['kmer_size']}")
    click.echo(f"  Min quality: Q{alignment['min_quality']}")
    click.echo(f"  Max mismatch quality sum: {alignment['max_quality_sum']}")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    try:
        config = load_config(Path(config_file))
    except (OSError, yaml.YAMLError, ConfigValidationError) as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return

    errors = validate_config(config)
    if errors:
        click.echo("✗ Configuration is invalid:", err=True)
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)

    alignment = config.get('alignment', {})
    click.echo("\nSpan Finding:")
    click.echo(f"  K-mer size: {alignment.get('kmer_size')}")
    click.echo(f"  Min quality: {alignment.get('min_quality')}")
    click.echo(f"  Max quality sum: {alignment.get('max_quality_sum')}")

    index = config.get('index', {})
    click.echo("\nIndex:")
    click.echo(f"  Shards: {index.get('shards')}")
    click.echo(f"  Min contig length: {index.get('min_contig_length')}")

    click.echo("\nExecution:")
    click.echo(f"  Threads: {config.get('execution', {}).get('threads') or 1}")

    output = config.get('output', {})
    click.echo("\nOutput:")
    click.echo(f"  Format: {output.get('format')}")
    click.echo(f"  Log level: {output.get('logging', {}).get('level')}")


# ============================================================================
# Alignment Commands
# ============================================================================

@main.command()
@click.option('--reads', '-r', required=True, type=click.Path(exists=True),
              help='Interleaved paired-end reads (FASTQ, optionally gzipped)')
@click.option('--contigs', '-c', required=True, type=click.Path(exists=True),
              help='Assembled contigs (FASTA, optionally gzipped)')
@click.option('--config', 'config_file', type=click.Path(exists=True), default=None,
              help='Configuration file (YAML)')
@click.option('--kmer-size', '-k', type=int, default=None,
              help='K-mer size (odd, default: 31)')
@click.option('--min-quality', type=int, default=None,
              help='Quality floor for read seeding (default: 10)')
@click.option('--max-quality-sum', type=int, default=None,
              help='Maximum mismatch quality sum per span (default: 60)')
@click.option('--threads', '-t', type=int, default=None,
              help='Number of threads for pair alignment')
@click.option('--shards', type=int, default=None,
              help='Number of contig shards indexed concurrently')
@click.option('--format', 'fmt', type=click.Choice(VALID_FORMATS), default=None,
              help='Report format')
@click.option('--output', '-o', type=click.Path(), default=None,
              help='Report file (default: stdout)')
@click.pass_context
def align(ctx, reads, contigs, config_file, kmer_size, min_quality, max_quality_sum,
          threads, shards, fmt, output):
    """
    Align interleaved read pairs to contigs.

    Builds a canonical k-mer index over the contigs, then reports for every
    pair the ungapped spans of each mate that pass the mismatch filter.

    Examples:
        # Text report to stdout with default parameters
        spanweaver align -r pairs.fq -c contigs.fa

        # JSON report, k=21, four threads
        spanweaver align -r pairs.fq.gz -c contigs.fa -k 21 -t 4 --format json -o spans.json
    """
    from .io import read_fastq, read_contigs, write_pair_report, contig_names, ReadFormatError
    from .kmer import KmerIndex
    from .alignment import PairAligner, PairFormatError

    try:
        parser = ConfigParser(config_file)
        parser.merge_cli_overrides({
            'alignment.kmer_size': kmer_size,
            'alignment.min_quality': min_quality,
            'alignment.max_quality_sum': max_quality_sum,
            'execution.threads': threads,
            'index.shards': shards,
            'output.format': fmt,
        })
        parser.validate()
    except (ConfigValidationError, FileNotFoundError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    configure_logging(parser.to_dict(), level_override=_log_level(ctx))
    parameters = parser.alignment_parameters()
    index_config = parser.get_index_config()
    report_format = parser.get_output_config().get('format', 'text')
    num_threads = parser.get_execution_config().get('threads') or 1

    # Progress goes to stderr when the report itself goes to stdout
    to_stderr = output is None
    show = not ctx.obj.get('QUIET')

    def status(message):
        if show:
            click.echo(message, err=to_stderr)

    status(f"{'='*60}")
    status("SpanWeaver Pair Alignment")
    status(f"{'='*60}")
    status(f"Reads: {reads}")
    status(f"Contigs: {contigs}")
    status(f"K-mer size: {parameters.kmer_size}")
    status(f"Min quality: Q{parameters.min_quality}")
    status(f"Max quality sum: {parameters.max_quality_sum}")
    status(f"Threads: {num_threads}")
    status(f"{'='*60}\n")

    try:
        # Phase 1: index
        contig_list = read_contigs(contigs, min_length=index_config.get('min_contig_length', 0))
        kmer_index = KmerIndex.build(
            contig_list, parameters.kmer_size, num_shards=index_config.get('shards', 1)
        )
        stats = kmer_index.stats()
        status(f"✓ Indexed {stats.num_contigs:,} contigs ({stats.distinct_kmers:,} distinct k-mers)")

        # Phase 2: pairs
        read_list = list(read_fastq(reads))
        aligner = PairAligner(kmer_index, contig_list, parameters, num_threads=num_threads)
        alignments = aligner.align_pairs(read_list)
    except (PairFormatError, ReadFormatError, FileNotFoundError, ValueError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    metadata = {
        'version': __version__,
        'parameters': parameters.to_dict(),
        'index': stats.to_dict(),
        'contigs': contig_names(contig_list),
    }
    with click.open_file(output or '-', 'w') as handle:
        written = write_pair_report(alignments, handle, fmt=report_format, metadata=metadata)

    status(f"✓ Wrote {written:,} pair alignments" + (f" to {output}" if output else ""))


@main.command('index-stats')
@click.option('--contigs', '-c', required=True, type=click.Path(exists=True),
              help='Assembled contigs (FASTA, optionally gzipped)')
@click.option('--kmer-size', '-k', type=int, default=AlignmentParameters.kmer_size,
              help='K-mer size (odd)')
@click.option('--shards', type=int, default=1,
              help='Number of contig shards indexed concurrently')
@click.option('--min-length', type=int, default=0,
              help='Skip contigs shorter than this')
@click.pass_context
def index_stats(ctx, contigs, kmer_size, shards, min_length):
    """
    Build the k-mer index over a contig set and print its summary.
    """
    from .io import read_contigs, ReadFormatError
    from .kmer import KmerIndex

    configure_logging({}, level_override=_log_level(ctx) or 'WARNING')

    if kmer_size < 1 or kmer_size % 2 == 0:
        click.echo(f"✗ K-mer size must be an odd integer >= 1, got {kmer_size}", err=True)
        sys.exit(1)

    try:
        contig_list = read_contigs(contigs, min_length=min_length)
        kmer_index = KmerIndex.build(contig_list, kmer_size, num_shards=shards)
    except (ReadFormatError, FileNotFoundError, ValueError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    click.echo(kmer_index.stats().summary())


# ============================================================================
# Utility Commands
# ============================================================================

@main.command()
def version():
    """Show version information."""
    import Bio
    import numpy

    click.echo(f"SpanWeaver v{__version__}")
    click.echo("\nDependencies:")
    click.echo(f"  BioPython: {Bio.__version__}")
    click.echo(f"  NumPy: {numpy.__version__}")
    click.echo(f"  PyYAML: {yaml.__version__}")


if __name__ == '__main__':
    sys.exit(main())

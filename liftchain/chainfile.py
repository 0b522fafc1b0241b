"""
Parser for UCSC .chain files.

Specification of the chain format: http://genome.ucsc.edu/goldenPath/help/chain.html

A chain is a header line followed by alignment block lines::

    chain 4900 chrY 58368225 + 25985403 25985638 chr5 151006098 - 43257292 43257528 1
    9 1 0
    10 0 5
    61

Every block line but the last has three numbers: the size of an ungapped
block and the gaps that follow it in the source and the target. The last line
has the size only, and must finish exactly at the ends declared in the header.
The "source" and "target" here are called "target" and "query" in the UCSC
documentation.
"""

import collections.abc
import logging
import multiprocessing.pool
from collections import namedtuple

from liftchain import constants
from liftchain.exceptions import BadFormatError, ChainEndMismatchError, UnorderedInputError
from liftchain.genome_chain import GenomeChainBuilder
from liftchain.model import ChromosomeName, Locus, LocusRange, Strand

logger = logging.getLogger("liftchain.chainfile")


ChainParseState = namedtuple(
    "ChainParseState",
    [
        "chain_id",
        "score",
        "source_chr",
        "source_strand",
        "target_chr",
        "target_strand",
        "source_pos",
        "target_pos",
        "source_end",
        "target_end",
        "header_line_number",
        "closed",
    ],
)
ChainParseState.__doc__ = """\
Running state of the chain grammar: the current header's chromosomes and
strands, the running source/target positions and the declared ends. closed is
True once the terminal block line of the chain has been read."""


def _parse_coordinate(token, name):
    value = int(token)
    if value < 0:
        raise ValueError("{} must not be negative: {}".format(name, token))
    return value


def parse_header(parts, line_number=0):
    """
    Reads a split chain header line and returns the state for its blocks.
    Raises ValueError or IndexError on a malformed header.
    """
    if parts[0] != constants.chain_header_token:
        raise ValueError("Chain header must start with '{}'".format(constants.chain_header_token))
    if len(parts) not in (12, 13):
        raise ValueError("Chain header has {} fields, expected 12 or 13".format(len(parts)))
    # chain 4900 chrY 58368225 + 25985403 25985638 chr5 151006098 - 43257292 43257528 1
    source_start = _parse_coordinate(parts[5], "source start")
    source_end = _parse_coordinate(parts[6], "source end")
    target_start = _parse_coordinate(parts[10], "target start")
    target_end = _parse_coordinate(parts[11], "target end")
    if source_start > source_end or target_start > target_end:
        raise ValueError("Chain header start is after its end")
    return ChainParseState(
        chain_id=parts[12] if len(parts) == 13 else None,
        score=parts[1],
        source_chr=ChromosomeName(parts[2]),
        source_strand=Strand.from_symbol(parts[4]),
        target_chr=ChromosomeName(parts[7]),
        target_strand=Strand.from_symbol(parts[9]),
        source_pos=source_start,
        target_pos=target_start,
        source_end=source_end,
        target_end=target_end,
        header_line_number=line_number,
        closed=False,
    )


def parse_block(state, parts, line_number=0, line=None):
    """
    Reads a split alignment block line.
    Returns (next_state, source_range, target_range).
    """
    if state.closed:
        raise ValueError("Alignment block after the last block of the chain")
    if len(parts) == 1:
        size = _parse_coordinate(parts[0], "block size")
        source_gap = target_gap = 0
    elif len(parts) == 3:
        size = _parse_coordinate(parts[0], "block size")
        source_gap = _parse_coordinate(parts[1], "source gap")
        target_gap = _parse_coordinate(parts[2], "target gap")
    else:
        raise ValueError("Alignment block line has {} fields, expected 1 or 3".format(len(parts)))
    source = LocusRange(
        Locus(state.source_chr, state.source_pos, state.source_strand),
        Locus(state.source_chr, state.source_pos + size, state.source_strand),
    )
    target = LocusRange(
        Locus(state.target_chr, state.target_pos, state.target_strand),
        Locus(state.target_chr, state.target_pos + size, state.target_strand),
    )
    terminal = len(parts) == 1
    state = state._replace(
        source_pos=state.source_pos + size + source_gap,
        target_pos=state.target_pos + size + target_gap,
        closed=terminal,
    )
    if terminal:
        if state.source_pos != state.source_end:
            raise ChainEndMismatchError(
                line_number, line, "source", state.source_end, state.source_pos
            )
        if state.target_pos != state.target_end:
            raise ChainEndMismatchError(
                line_number, line, "target", state.target_end, state.target_pos
            )
    return state, source, target


def check_ordered(lines):
    """
    Raises UnorderedInputError for inputs that do not deliver lines in a
    defined order. Blocks are positioned relative to the lines before them.
    """
    if isinstance(lines, (str, bytes)):
        raise UnorderedInputError("Expected an iterable of lines, not a single string")
    if isinstance(lines, collections.abc.Set):
        raise UnorderedInputError(
            "Lines of a chain file must be ordered; got a {}".format(type(lines).__name__)
        )
    if isinstance(lines, multiprocessing.pool.IMapUnorderedIterator):
        raise UnorderedInputError("Lines of a chain file cannot come from imap_unordered")


class GenomeChainParser:
    """
    Builds a GenomeChain from the lines of a chain file.

    One bad line fails the whole parse with BadFormatError. The parser keeps no
    state between calls to parse() other than the count of lines read by the
    latest call.

    Line numbers are physical, 1-based line numbers of the input: blank and
    comment lines are skipped but still counted, both in error messages and in
    lines_processed, so a reported line number can be found with an editor.
    """

    def __init__(self, log_every=constants.default_log_every):
        self.log_every = log_every
        self._lines_processed = 0

    @property
    def lines_processed(self):
        return self._lines_processed

    def __call__(self, lines):
        return self.parse(lines)

    def parse(self, lines):
        check_ordered(lines)
        self._lines_processed = 0
        builder = GenomeChainBuilder()
        state = None
        header = None
        for line in lines:
            self._lines_processed += 1
            line_number = self._lines_processed
            if line_number % self.log_every == 0:
                logger.debug("Reading line #%d", line_number)
            try:
                if isinstance(line, bytes):
                    line = line.decode("ascii")
                line = line.rstrip("\r\n")
                if line.strip() == "" or line.startswith("#"):
                    continue
                parts = line.split()
                if parts[0] == constants.chain_header_token:
                    if state is not None and not state.closed:
                        raise BadFormatError(
                            state.header_line_number,
                            header,
                            "chain has no terminal block line before line #{}".format(line_number),
                        )
                    state = parse_header(parts, line_number)
                    header = line
                    logger.debug(
                        "chain %s: %s ----> %s",
                        state.chain_id,
                        Locus(state.source_chr, state.source_pos, state.source_strand),
                        Locus(state.target_chr, state.target_pos, state.target_strand),
                    )
                else:
                    if state is None:
                        raise ValueError("Alignment block line before any chain header")
                    state, source, target = parse_block(state, parts, line_number, line)
                    builder.add(source, target)
            except BadFormatError:
                raise
            except (ValueError, IndexError) as e:
                raise BadFormatError(line_number, line, str(e)) from e
            except Exception as e:
                e.add_note("Unexpectedly failed to parse line #{}".format(line_number))
                raise
        if state is not None and not state.closed:
            raise BadFormatError(
                state.header_line_number, header, "chain has no terminal block line"
            )
        chain = builder.build(lines_processed=self._lines_processed)
        logger.info(
            "Read %d alignment blocks from %d lines", len(chain), self._lines_processed
        )
        return chain

"""
Value types shared by the chain parser and the genome chain.

Positions are 0-based. Ranges are half-open: [start, end).
"""

import functools
import operator
import re
from collections import namedtuple
from enum import Enum


class ChromosomeName(str):
    """
    A chromosome or contig name, e.g. chr1, chrX, chrM, chrUn_gl000220.
    Compares, hashes and sorts as the plain string.
    """

    __slots__ = ()

    def __new__(cls, name):
        if isinstance(name, ChromosomeName):
            return name
        if not isinstance(name, str):
            raise ValueError("Chromosome name must be a string, not %s" % type(name).__name__)
        if name == "" or any(c.isspace() for c in name):
            raise ValueError("Invalid chromosome name: %r" % name)
        return super().__new__(cls, name)

    def __repr__(self):
        return "ChromosomeName(%s)" % super().__repr__()


@functools.total_ordering
class Strand(Enum):
    PLUS = "+"
    MINUS = "-"

    @property
    def symbol(self):
        return self.value

    @classmethod
    def lookup_by_symbol(cls, symbol):
        """Returns the strand for "+" or "-", or None for anything else."""
        for strand in cls:
            if strand.value == symbol:
                return strand
        return None

    @classmethod
    def from_symbol(cls, symbol):
        strand = cls.lookup_by_symbol(symbol)
        if strand is None:
            raise ValueError("Unknown strand symbol: %r" % (symbol,))
        return strand

    def __lt__(self, other):
        if not isinstance(other, Strand):
            return NotImplemented
        return _strand_order[self] < _strand_order[other]

    def __str__(self):
        return self.value


_strand_order = {strand: i for i, strand in enumerate(Strand)}


def _to_strand(strand):
    if isinstance(strand, Strand):
        return strand
    return Strand.from_symbol(strand)


class Locus(namedtuple("Locus", "chromosome position strand")):
    """
    A position on one strand of a chromosome.
    Loci sort by chromosome, then position, then strand.
    Negative positions are allowed.
    """

    __slots__ = ()

    # chr1(+):100
    _pattern = re.compile(r"^(\S+?)\(([+\-])\):(-?\d+)$")

    def __new__(cls, chromosome, position, strand):
        return super().__new__(
            cls,
            ChromosomeName(chromosome),
            operator.index(position),
            _to_strand(strand),
        )

    @classmethod
    def parse(cls, text):
        match = cls._pattern.match(text.strip())
        if match is None:
            raise ValueError("String %r is not a valid locus" % text)
        chromosome, symbol, position = match.groups()
        return cls(chromosome, int(position), symbol)

    def is_compatible_with(self, other):
        return self.chromosome == other.chromosome and self.strand is other.strand

    def __str__(self):
        return "%s(%s):%d" % (self.chromosome, self.strand.symbol, self.position)


class LocusRange(namedtuple("LocusRange", "start end")):
    """
    A half-open range between two loci on the same chromosome and strand.
    """

    __slots__ = ()

    def __new__(cls, start, end):
        if not start.is_compatible_with(end):
            raise ValueError("Range ends %s and %s are not on the same chromosome and strand" % (start, end))
        if start.position > end.position:
            raise ValueError("Range start %s is after its end %s" % (start, end))
        return super().__new__(cls, start, end)

    @property
    def chromosome(self):
        return self.start.chromosome

    @property
    def strand(self):
        return self.start.strand

    @property
    def length(self):
        return self.end.position - self.start.position

    def contains(self, locus):
        return (
            self.start.is_compatible_with(locus)
            and self.start.position <= locus.position < self.end.position
        )

    def __str__(self):
        return "%s(%s):%d-%d" % (
            self.chromosome,
            self.strand.symbol,
            self.start.position,
            self.end.position,
        )

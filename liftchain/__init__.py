"""
Genome coordinate liftover with UCSC "chain" files.

    >> from liftchain import LiftOver, Locus
    >> lo = LiftOver('hg19ToHg38.over.chain.gz')
    >> lo.lift(Locus('chr1', 1000000, '+'))

Positions are 0-based. A position with no mapping lifts to None.
"""
__version__ = "1.0.0"

from .model import ChromosomeName, Strand, Locus, LocusRange
from .chainfile import GenomeChainParser
from .genome_chain import GenomeChain, GenomeChainBuilder
from .liftover import LiftOver

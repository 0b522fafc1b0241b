"""
Convenience wrapper around chainfile.py's GenomeChainParser.
"""

import logging
import os
import time

from liftchain.chainfile import GenomeChainParser
from liftchain.config_loader import ConfigLoader
from liftchain.exceptions import LiftoverFailure
from liftchain.model import Locus
from liftchain.util import open_input_file

logger = logging.getLogger("liftchain.liftover")


class LiftOver:
    def __init__(self, from_db, to_db=None, conf=None):
        """
        LiftOver can be initialized in multiple ways.
         * By providing a filename as a single argument: LiftOver("hg17ToHg18.over.chain.gz")
           The file may be a usual or a gzip-compressed file. The compression is detected from the .gz extension.
         * By providing an opened file object, or any other iterable of lines, as a single argument:
           LiftOver(open("hg17ToHg18.over.chain"))
         * By providing names of from_db and to_db, e.g. LiftOver('hg18', 'hg19').
           The chain file is then looked up in the configuration, see ConfigLoader.chain_path.
        """
        self.conf = conf if conf is not None else ConfigLoader()
        parser = GenomeChainParser(log_every=self.conf.get_val("log_every"))
        if to_db is not None:
            from_db = self.conf.chain_path(from_db, to_db)
        start_time = time.time()
        if isinstance(from_db, (str, os.PathLike)):
            logger.info("reading chain file: %s", from_db)
            with open_input_file(from_db) as f:
                self.chain = parser.parse(f)
        else:
            self.chain = parser.parse(from_db)
        logger.info(
            "chain ready: %d blocks, %d lines, %.3fs",
            len(self.chain),
            self.chain.lines_processed,
            time.time() - start_time,
        )

    def lift(self, locus):
        return self.chain.map_locus(locus)

    def convert_coordinate(self, chromosome, position, strand="+"):
        """
        Returns the target Locus for a 0-based position, or None when the
        position is not covered by any block.
        """
        return self.chain.map_locus(Locus(chromosome, position, strand))

    def convert_strict(self, chromosome, position, strand="+"):
        """
        Same as convert_coordinate, but raises LiftoverFailure when there is
        no mapping.
        """
        locus = Locus(chromosome, position, strand)
        mapped = self.chain.map_locus(locus)
        if mapped is None:
            raise LiftoverFailure("Liftover failure: {}".format(locus))
        return mapped

    def lift_many(self, loci):
        """
        Returns one result per locus in loci, None where there is no mapping.
        """
        return [self.chain.map_locus(locus) for locus in loci]

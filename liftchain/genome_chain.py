"""
In-memory index of chain alignment blocks, queried one locus at a time.

A GenomeChain is built once by GenomeChainBuilder and is read-only after that,
so any number of threads may call map_locus on the same instance.

Example::

    chain = GenomeChainParser().parse(open('hg19ToHg38.over.chain'))
    lifted = [l for l in map(chain, loci) if l is not None]
"""

import heapq
import types

import numpy as np

from liftchain.model import Locus, LocusRange


def _frozen(a):
    a.setflags(write=False)
    return a


class _BlockIndex:
    """
    Blocks of one (chromosome, strand) pair, sorted by source start.

    Block starts and ends cut the source axis into elementary segments. Each
    segment records the block that answers every position inside it: among the
    blocks covering the segment, the one sorted last (greatest start). Blocks of
    different chains may overlap, so this is worked out once here and a lookup
    is a single binary search over the segment boundaries.
    """

    __slots__ = ["blocks", "boundaries", "owners"]

    def __init__(self, blocks):
        starts = np.fromiter(
            (source.start.position for source, _ in blocks),
            dtype=np.int64,
            count=len(blocks),
        )
        order = np.argsort(starts, kind="stable")
        self.blocks = tuple(blocks[i] for i in order)
        starts = starts[order]
        ends = np.fromiter(
            (source.end.position for source, _ in self.blocks),
            dtype=np.int64,
            count=len(self.blocks),
        )
        boundaries = np.unique(np.concatenate((starts, ends)))
        owners = np.full(len(boundaries), -1, dtype=np.int64)
        start_list = starts.tolist()
        end_list = ends.tolist()
        # max-heap of open block numbers; closed blocks are dropped lazily
        open_blocks = []
        next_block = 0
        for j, boundary in enumerate(boundaries.tolist()):
            while next_block < len(start_list) and start_list[next_block] <= boundary:
                heapq.heappush(open_blocks, -next_block)
                next_block += 1
            while open_blocks and end_list[-open_blocks[0]] <= boundary:
                heapq.heappop(open_blocks)
            if open_blocks:
                owners[j] = -open_blocks[0]
        self.boundaries = _frozen(boundaries)
        self.owners = _frozen(owners)

    def find(self, position):
        j = int(np.searchsorted(self.boundaries, position, side="right")) - 1
        if j < 0:
            return None
        owner = int(self.owners[j])
        if owner < 0:
            return None
        return self.blocks[owner]

    def __len__(self):
        return len(self.blocks)


class GenomeChain:
    """
    Maps loci on a source assembly to loci on a target assembly.

    Blocks are grouped by the source chromosome and strand. A lookup binary
    searches the group for the block whose half-open source range holds the
    position and shifts the position by the same offset into the block's
    target range. The result carries the target block's chromosome and strand
    as recorded; positions are never reflected.
    """

    __slots__ = ["_index", "_keys", "_blocks", "_lines_processed"]

    def __init__(self, index, lines_processed=0):
        keys = tuple(sorted(index))
        object.__setattr__(self, "_index", types.MappingProxyType(dict(index)))
        object.__setattr__(self, "_keys", keys)
        object.__setattr__(
            self,
            "_blocks",
            tuple(block for key in keys for block in index[key].blocks),
        )
        object.__setattr__(self, "_lines_processed", lines_processed)

    def __setattr__(self, name, value):
        raise AttributeError("GenomeChain is immutable")

    def __delattr__(self, name):
        raise AttributeError("GenomeChain is immutable")

    def _find_block(self, locus):
        group = self._index.get((locus.chromosome, locus.strand))
        if group is None:
            return None
        return group.find(locus.position)

    def map_locus(self, locus):
        """
        Returns the target locus for locus, or None if no block covers it.
        """
        block = self._find_block(locus)
        if block is None:
            return None
        source, target = block
        delta = locus.position - source.start.position
        return Locus(target.chromosome, target.start.position + delta, target.strand)

    __call__ = map_locus

    def map_range(self, locus_range):
        """
        Maps a range that lies within a single block. Ranges that cross a gap
        or a block boundary return None.
        """
        block = self._find_block(locus_range.start)
        if block is None:
            return None
        source, target = block
        if locus_range.end.position > source.end.position:
            return None
        delta = locus_range.start.position - source.start.position
        start = target.start.position + delta
        return LocusRange(
            Locus(target.chromosome, start, target.strand),
            Locus(target.chromosome, start + locus_range.length, target.strand),
        )

    def lift_over(self, loci):
        """
        Maps every locus in loci and returns the mapped ones, dropping any
        without a mapping.
        """
        lifted = []
        for locus in loci:
            mapped = self.map_locus(locus)
            if mapped is not None:
                lifted.append(mapped)
        return lifted

    @property
    def blocks(self):
        return self._blocks

    @property
    def lines_processed(self):
        return self._lines_processed

    def keys(self):
        return self._keys

    def num_blocks(self, chromosome, strand):
        group = self._index.get((chromosome, strand))
        if group is None:
            return 0
        return len(group)

    def __len__(self):
        return len(self._blocks)

    def __eq__(self, other):
        if not isinstance(other, GenomeChain):
            return NotImplemented
        return self._blocks == other._blocks

    def __hash__(self):
        return hash(self._blocks)

    def __repr__(self):
        return "<GenomeChain: {} blocks on {} chromosome strands>".format(
            len(self._blocks), len(self._keys)
        )


class GenomeChainBuilder:
    """
    Collects (source, target) block pairs for a GenomeChain. Owned by a single
    producer; add() is not allowed once build() has been called.
    """

    def __init__(self):
        self._blocks = []
        self._built = False

    def add(self, source, target):
        if self._built:
            raise RuntimeError("Cannot add blocks to a GenomeChainBuilder after build()")
        self._blocks.append((source, target))

    def build(self, lines_processed=0):
        self._built = True
        groups = {}
        for source, target in self._blocks:
            key = (source.chromosome, source.strand)
            groups.setdefault(key, []).append((source, target))
        index = {key: _BlockIndex(blocks) for key, blocks in groups.items()}
        return GenomeChain(index, lines_processed=lines_processed)

    def __len__(self):
        return len(self._blocks)

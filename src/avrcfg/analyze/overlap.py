#!/usr/bin/env python3

import logging
from avrcfg.analyze.bb_utils import relation
from avrcfg.analyze.errors import UnsupportedOverlapError

logger = logging.getLogger(__name__)

# Return (i, j) indices of the first overlapping pair by entry offset, blocks[i] starting first
def find_overlap(blocks):
    order = sorted(range(len(blocks)), key=lambda i: blocks[i].first_offset)
    # a block overlapping anything overlaps its successor in entry order
    for i, j in zip(order, order[1:]):
        if blocks[i].overlaps(blocks[j]):
            return i, j
    return None

def split_block(blocks, relations, big_idx, small_idx):
    biggest = blocks[big_idx]
    smallest = blocks[small_idx]
    logger.debug("Overlapping blocks found: %s - %s", biggest, smallest)
    #  +---------+
    #  | biggest |
    #  |         | +----------+
    #  |         | | smallest |
    #  +---------+ +----------+
    if biggest.last_offset != smallest.last_offset or biggest.first_offset == smallest.first_offset:
        raise UnsupportedOverlapError(biggest, smallest)
    # Shrink the biggest block ...
    blocks[big_idx] = biggest.shrink(smallest.first_offset)
    # ... move its relations to the smallest block ...
    to_remove = [r for r in relations if r.source == biggest.first_offset]
    to_add = [relation(smallest.first_offset, r.target) for r in to_remove]
    # ... and fall through into it
    to_add.append(relation(biggest.first_offset, smallest.first_offset))
    relations.difference_update(to_remove)
    relations.update(to_add)

# Split overlapping blocks in place until none are left, return the number of splits
def resolve_overlaps(blocks, relations):
    resolved = 0
    while True:
        pair = find_overlap(blocks)
        if pair is None:
            return resolved
        split_block(blocks, relations, pair[0], pair[1])
        resolved += 1

#!/usr/bin/env python3

from collections import namedtuple

# source and target are basic block entry offsets
relation = namedtuple('relation', ['source', 'target'])

class basic_block:
    def __init__(self, id, instrs):
        assert len(instrs) > 0, "Empty basic block"
        self.id = id
        self.instrs = tuple(instrs)

    @property
    def first_offset(self):
        return self.instrs[0].offset

    @property
    def last_offset(self):
        return self.instrs[-1].offset

    def overlaps(self, other):
        return self.first_offset <= other.last_offset and other.first_offset <= self.last_offset

    # Return a copy keeping only the instructions below offset
    def shrink(self, offset):
        return basic_block(self.id, [x for x in self.instrs if x.offset < offset])

    def __len__(self):
        return len(self.instrs)

    def __iter__(self):
        return iter(self.instrs)

    def __repr__(self):
        return f"BB {self.id}: @{self.first_offset:08X}->@{self.last_offset:08X} ({len(self)} instrs)"

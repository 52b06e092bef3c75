#!/usr/bin/env python3

from avrcfg.analyze.errors import MissingInstructionError

class address_index:
    def __init__(self, instrs):
        self.index = dict() # offset => instruction
        for instr in instrs:
            if instr.offset in self.index:
                raise ValueError(f"Duplicate instruction at offset 0x{instr.offset:08X}")
            self.index[instr.offset] = instr
        self.highest_offset = max(self.index) if self.index else -1

    def lookup(self, offset):
        instr = self.index.get(offset)
        if instr is None:
            raise MissingInstructionError(offset)
        return instr

    def __contains__(self, offset):
        return offset in self.index

    def __len__(self):
        return len(self.index)

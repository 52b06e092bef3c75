#!/usr/bin/env python3

class CfgError(Exception):
    pass

class MissingInstructionError(CfgError):
    def __init__(self, offset):
        self.offset = offset
        super().__init__(f"Unable to find instruction at offset 0x{offset:08X}")

class UnbalancedReturnError(CfgError):
    def __init__(self, offset):
        self.offset = offset
        super().__init__(f"Return at offset 0x{offset:08X} with an empty call stack")

class UnsupportedOverlapError(CfgError):
    def __init__(self, block, other):
        self.block = block.id
        self.other = other.id
        self.ranges = ((block.first_offset, block.last_offset), (other.first_offset, other.last_offset))
        super().__init__(f"Unsupported overlap between {block} and {other}")

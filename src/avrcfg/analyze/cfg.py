#!/usr/bin/env python3

import logging
from avrcfg.analyze import render
from avrcfg.analyze.addr_index import address_index
from avrcfg.analyze.bb_utils import basic_block, relation
from avrcfg.analyze.errors import UnbalancedReturnError
from avrcfg.analyze.overlap import resolve_overlaps

logger = logging.getLogger(__name__)

class cfg_builder:
    def __init__(self, instrs, start=0, resolve=True):
        self.index = address_index(instrs)
        self.blocks = []
        self.relations = set()
        self.visited = set()
        logger.info("Highest offset: 0x%08X", self.index.highest_offset)
        logger.info("First pass (traversing from 0x%08X)...", start)
        self.discover(start)
        logger.info("Number of basic blocks found: %d", len(self.blocks))
        if resolve:
            logger.info("Second pass (splitting overlapping blocks)...")
            splits = resolve_overlaps(self.blocks, self.relations)
            logger.info("Overlapping blocks split: %d", splits)

    # Return ([basic_block] newly found in depth-first preorder, {relation})
    def discover(self, entry):
        found = []
        # (entry, call stack of return addresses)
        worklist = [(entry, ())]
        while len(worklist) > 0:
            entry, call_stack = worklist.pop()
            if entry in self.visited:
                continue
            self.visited.add(entry)
            logger.debug("Visiting 0x%08X", entry)
            bb, succs = self.__walk_block(entry, call_stack)
            logger.debug("Adding <%s>", bb)
            found.append(bb)
            for target, _ in succs:
                logger.debug("Adding relation 0x%08X -> 0x%08X", entry, target)
                self.relations.add(relation(entry, target))
            # reversed so that the first successor is visited first
            for target, stack in reversed(succs):
                if target not in self.visited:
                    worklist.append((target, stack))
        return found, self.relations

    # Return (basic_block, [(successor, call stack)])
    def __walk_block(self, entry, call_stack):
        instrs = []
        offset = entry
        while True:
            instr = self.index.lookup(offset)
            instrs.append(instr)
            if instr.kind is not None:
                break
            offset = instr.offset + instr.length
            if offset > self.index.highest_offset:
                logger.debug("Block at 0x%08X falls off the end of memory", entry)
                break
        bb = basic_block(len(self.blocks), instrs)
        self.blocks.append(bb)
        if instr.kind is None:
            return bb, []
        logger.debug("Encountered %s: %s", instr.kind, instr.text)
        return bb, self.__successors(instr, call_stack)

    def __successors(self, instr, call_stack):
        next_offset = instr.offset + instr.length
        if instr.kind == 'jmp':
            return [(instr.operands[0], call_stack)]
        elif instr.kind == 'rjmp':
            return [(next_offset + instr.operands[0], call_stack)]
        elif instr.kind in ['brbs', 'brbc']:
            # taken, then fallthrough
            return [(next_offset + instr.operands[1], call_stack), (next_offset, call_stack)]
        elif instr.kind == 'call':
            return [(instr.operands[0], call_stack + (next_offset,))]
        elif instr.kind == 'rcall':
            return [(next_offset + instr.operands[0], call_stack + (next_offset,))]
        elif instr.kind == 'ret':
            if len(call_stack) == 0:
                raise UnbalancedReturnError(instr.offset)
            return [(call_stack[-1], call_stack[:-1])]
        raise ValueError(f"Unknown control flow kind {instr.kind}")

    def build_graphviz(self, filename, dpi=200):
        dot = render.build_graphviz(self.blocks, self.relations, dpi)
        with open(filename, 'w', encoding='utf-8') as f:
            f.write(dot.source)

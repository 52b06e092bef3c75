#!/usr/bin/env python3

import re
from avrcfg.arch.arch import arch_tools, instruction

BRANCH_KINDS = ['jmp', 'rjmp', 'brbs', 'brbc', 'call', 'rcall', 'ret']

# objdump alias => (kind, SREG bit)
BRANCH_ALIASES = {
    'brcs': ('brbs', 0), 'brlo': ('brbs', 0), 'brcc': ('brbc', 0), 'brsh': ('brbc', 0),
    'breq': ('brbs', 1), 'brne': ('brbc', 1),
    'brmi': ('brbs', 2), 'brpl': ('brbc', 2),
    'brvs': ('brbs', 3), 'brvc': ('brbc', 3),
    'brlt': ('brbs', 4), 'brge': ('brbc', 4),
    'brhs': ('brbs', 5), 'brhc': ('brbc', 5),
    'brts': ('brbs', 6), 'brtc': ('brbc', 6),
    'brie': ('brbs', 7), 'brid': ('brbc', 7),
}

# number of int operands each kind is decoded with
BRANCH_ARITY = {'jmp': 1, 'rjmp': 1, 'brbs': 2, 'brbc': 2, 'call': 1, 'rcall': 1, 'ret': 0}

disp_re = re.compile(r'^\.([+-]\d+)$')
hex_re = re.compile(r'^-?0x[0-9a-fA-F]+$')
dec_re = re.compile(r'^-?\d+$')
reg_re = re.compile(r'^r(\d+)$')

def decode_operand(op):
    m = disp_re.match(op)
    if m:
        return int(m.group(1))
    if hex_re.match(op):
        return int(op, 16)
    if dec_re.match(op):
        return int(op)
    m = reg_re.match(op)
    if m:
        return int(m.group(1))
    # X, Y+q, -Z, ...
    return None

class avr_tools(arch_tools):
    def __init__(self, path, fmt='listing', objdump='avr-objdump'):
        self.path = path
        self.format = fmt
        self.objdump = objdump

    def read_textdump(self):
        if self.format == 'ihex':
            return super().read_textdump(['-D', '-m', 'avr', '-b', 'ihex'])
        return super().read_textdump(['-d'])

    def decode_instr(self, addr, mnemonic, operand_str, length):
        ops = [x.strip() for x in operand_str.split(',')] if operand_str else []
        operands = tuple(v for v in map(decode_operand, ops) if v is not None)
        kind = None
        if mnemonic in BRANCH_ALIASES:
            kind, bit = BRANCH_ALIASES[mnemonic]
            operands = (bit,) + operands
        elif mnemonic in BRANCH_KINDS:
            kind = mnemonic
        if kind is not None and len(operands) != BRANCH_ARITY[kind]:
            raise ValueError(f"Unable to decode operands of {mnemonic} {operand_str} at 0x{addr:x}")
        text = f"{mnemonic} {operand_str}".strip()
        return instruction(addr, kind, mnemonic, operands, length, text)

#!/usr/bin/env python3

import logging
import re
import subprocess
from collections import OrderedDict, namedtuple
from elftools.elf.elffile import ELFFile

logger = logging.getLogger(__name__)

# kind is the control flow class of the instruction, None if it does not branch
instruction = namedtuple('instruction', ['offset', 'kind', 'mnemonic', 'operands', 'length', 'text'])

INPUT_FORMATS = ['auto', 'elf', 'ihex', 'listing']

def detect_format(path):
    with open(path, 'rb') as f:
        head = f.read(4096)
    if head.startswith(b'\x7fELF'):
        return 'elf'
    for line in head.splitlines():
        line = line.strip()
        if line:
            return 'ihex' if line.startswith(b':') else 'listing'
    return 'listing'

skip_line = set()

class arch_tools:
    def open_input(path, fmt='auto', objdump='avr-objdump'):
        from avrcfg.arch.avr import avr_tools
        if fmt not in INPUT_FORMATS:
            raise ValueError(f"Unknown input format {fmt}")
        if fmt == 'auto':
            fmt = detect_format(path)
            logger.debug("Detected input format of '%s': %s", path, fmt)
        if fmt == 'elf':
            with open(path, 'rb') as f:
                elf = ELFFile(f)
                if elf['e_machine'] != 'EM_AVR':
                    raise Exception('Unsupported ELF file')
        return avr_tools(path, fmt, objdump)

    # Return textdump lines, objdump is skipped if the input already is a textdump
    def read_textdump(self, objdump_opts=()):
        if self.format == 'listing':
            with open(self.path, 'r') as f:
                return f.read().splitlines()
        res = subprocess.run(
            [self.objdump] + list(objdump_opts) + [self.path],
            capture_output=True,
            text=True
        )
        if res.returncode != 0:
            raise Exception(f'Failed to objdump {self.path}: {res.stderr.strip()}')
        return res.stdout.splitlines()

    def decode_instr(self, addr, mnemonic, operand_str, length):
        assert False, "Not implemented"

    # Return [instruction] sorted by offset
    def parse_textdump(self, lines):
        section_re = re.compile(r'^Disassembly of section ([^:]+):$')
        symbol_re = re.compile(r'^([0-9a-fA-F]+)\s+<([^>]+)>:$')
        instrs = OrderedDict()
        for line in lines:
            line = line.strip()
            if line == "" or line == "...":
                continue
            if section_re.match(line) or symbol_re.match(line):
                continue
            instr_tuple = line.split("\t")
            if len(instr_tuple) < 3 or not instr_tuple[0].endswith(':'):
                continue
            mnemonic = instr_tuple[2].strip()
            if mnemonic == "":
                continue
            try:
                addr = int(instr_tuple[0].strip()[:-1], 16)
                raw = bytes.fromhex(instr_tuple[1].strip())
                if len(raw) == 0:
                    raise ValueError("no opcode bytes")
            except ValueError:
                if line not in skip_line:
                    logger.warning("Unable to decode textdump line: %s", line)
                    skip_line.add(line)
                continue
            if addr in instrs:
                logger.debug("Ignoring second instruction at 0x%x", addr)
                continue
            # drop the objdump comment, e.g. "; 0x68 <__ctors_end>"
            rest = "\t".join(instr_tuple[3:]).split(';')[0].strip()
            instrs[addr] = self.decode_instr(addr, mnemonic, rest, len(raw))
        return [instrs[addr] for addr in sorted(instrs)]

    def read_instrs(self):
        return self.parse_textdump(self.read_textdump())

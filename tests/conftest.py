import pytest

from avrcfg.arch.arch import instruction

TEXTDUMP = (
    "\n"
    "blink.elf:     file format elf32-avr\n"
    "\n"
    "\n"
    "Disassembly of section .text:\n"
    "\n"
    "00000000 <__vectors>:\n"
    "   0:\t0c 94 04 00 \tjmp\t0x8\t; 0x8 <__ctors_end>\n"
    "   4:\t0c 94 0b 00 \tjmp\t0x16\t; 0x16 <__bad_interrupt>\n"
    "\n"
    "00000008 <__ctors_end>:\n"
    "   8:\t11 24       \teor\tr1, r1\n"
    "   a:\t0e 94 0c 00 \tcall\t0x18\t; 0x18 <main>\n"
    "   e:\t0c 94 10 00 \tjmp\t0x20\t; 0x20 <_exit>\n"
    "  12:\t00 00       \tnop\n"
    "  14:\t00 00       \tnop\n"
    "\n"
    "00000016 <__bad_interrupt>:\n"
    "  16:\tf4 cf       \trjmp\t.-24     \t; 0x0 <__vectors>\n"
    "\n"
    "00000018 <main>:\n"
    "  18:\t81 e0       \tldi\tr24, 0x01\t; 1\n"
    "  1a:\t81 30       \tcpi\tr24, 0x01\t; 1\n"
    "  1c:\t09 f4       \tbrne\t.+2      \t; 0x20 <_exit>\n"
    "  1e:\t08 95       \tret\n"
    "\n"
    "00000020 <_exit>:\n"
    "  20:\tf8 94       \tcli\n"
    "\n"
    "00000022 <__stop_program>:\n"
    "  22:\tff cf       \trjmp\t.-2      \t; 0x22 <__stop_program>\n"
)


def make_instr(offset, kind=None, operands=(), length=2, mnemonic=None):
    mnemonic = mnemonic or kind or "nop"
    text = " ".join([mnemonic] + [str(x) for x in operands])
    return instruction(offset, kind, mnemonic, tuple(operands), length, text)


@pytest.fixture
def instr():
    """Factory for decoded instructions; non-branching 2-byte nop by default."""
    return make_instr


@pytest.fixture
def textdump():
    """avr-objdump -d output of a small program: vectors, crt, main, _exit."""
    return TEXTDUMP


@pytest.fixture
def listing(tmp_path):
    path = tmp_path / "blink.lst"
    path.write_text(TEXTDUMP)
    return path

#!/usr/bin/env python3

import argparse
import logging
import sys
from avrcfg.arch.arch import arch_tools, INPUT_FORMATS
from avrcfg.analyze.cfg import cfg_builder

EXIT_SUCCESS = 0
EXIT_BAD_ARGS = 1
EXIT_RUNTIME_ERROR = 2

logger = logging.getLogger('avrcfg')

def configure_logging(verbosity):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        ))
        logger.addHandler(handler)
    logger.setLevel(level)

def build_parser():
    parser = argparse.ArgumentParser(description='Draw the control flow graph of an AVR program')
    parser.add_argument('-i', '--input', type=str, required=True, help='input file (ELF, Intel HEX or avr-objdump listing)')
    parser.add_argument('-o', '--output', type=str, required=True, help='CFG output dot file')
    parser.add_argument('-s', '--start', type=lambda x: int(x, 0), default=0, help='start offset (defaults to 0x0)')
    parser.add_argument('-d', '--dpi', type=int, default=200, help='DPI of the rendered graph')
    parser.add_argument('-f', '--format', choices=INPUT_FORMATS, default='auto', help='input format')
    parser.add_argument('--objdump', type=str, default='avr-objdump', help='objdump executable')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='-v for progress, -vv for details')
    return parser

def generate_cfg(args):
    logger.info("Generating CFG...")
    logger.info("Disassembling '%s'...", args.input)
    tools = arch_tools.open_input(args.input, args.format, args.objdump)
    instrs = tools.read_instrs()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Disassembly:\n%s", "\n".join([f"{x.offset:08X}: {x.text}" for x in instrs]))
    cfg = cfg_builder(instrs, args.start)
    logger.info("Writing '%s'...", args.output)
    cfg.build_graphviz(args.output, args.dpi)

def main(argv=None):
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return EXIT_SUCCESS if e.code in (0, None) else EXIT_BAD_ARGS
    if args.start < 0 or args.dpi <= 0:
        parser.print_usage(sys.stderr)
        print("Error: start offset must be >= 0 and DPI > 0", file=sys.stderr)
        return EXIT_BAD_ARGS
    configure_logging(args.verbose)
    try:
        generate_cfg(args)
    except Exception as e:
        logger.exception("Unexpected runtime error: %s", e)
        return EXIT_RUNTIME_ERROR
    return EXIT_SUCCESS

if __name__ == "__main__":
    sys.exit(main())

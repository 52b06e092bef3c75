#!/usr/bin/env python3

import graphviz

def format_block(offset):
    return f"Block_{offset:08X}"

def format_contents(instrs):
    return "\\l".join([f"{x.offset:08X}: {x.text}" for x in instrs] + [""])

def build_graphviz(blocks, relations, dpi=200):
    dot = graphviz.Digraph('G', comment='Control Flow Graph')
    dot.attr('graph', dpi=str(dpi), bgcolor='#333333', fontcolor='white')
    dot.attr('node', style='filled', shape='box', fontcolor='white', color='white', fillcolor='#006699', fontname='Consolas')
    dot.attr('edge', style='dashed', color='white', arrowhead='open')
    seen = set()
    for bb in sorted(blocks, key=lambda x: x.first_offset):
        assert bb.first_offset not in seen, f"Duplicate block entry {bb}"
        seen.add(bb.first_offset)
        dot.node(format_block(bb.first_offset), format_contents(bb))
    for rel in sorted(relations):
        dot.edge(format_block(rel.source), format_block(rel.target))
    return dot

#!/usr/bin/env python3

import os
import sys
from glob import glob

import configargparse
from tqdm import tqdm

from udpas.__version__ import GIT_VERSION
from udpas.cfgutil import add_boolean_option, add_config_arg, add_verbose_arg
from udpas.conversion.conllu import ConlluConverter
from udpas.diagnostics import DiagnosticsSink
from udpas.graph import EMPTY, GraphError
from udpas.pas import annotate
from udpas.validation import validate, print_errors

desc = """Reads CoNLL-U with enhanced dependencies, infers predicate-argument structure of verbs
and writes it in two new columns, DEEP:PRED and DEEP:ARGS (CoNLL-U Plus).
Statistics of predicates, argument patterns and annotation anomalies are printed at the end."""


def iter_files(patterns):
    for pattern in patterns:
        filenames = sorted(glob(pattern))
        if not filenames:
            raise IOError("Not found: " + pattern)
        yield from filenames


def add_pas(lines, converter, sink=None, validation=False):
    """
    Annotate all sentences read from the lines.
    :param lines: iterable of lines in CoNLL-U format
    :param converter: ConlluConverter to read and write with
    :param sink: DiagnosticsSink collecting warnings and statistics
    :param validation: check graph invariants of every annotated sentence and print violations
    :return generator of lines in CoNLL-U Plus format
    """
    for graph in converter.from_format(lines):
        annotate(graph, sink, empty=converter.empty)
        if validation:
            errors = list(validate(graph))
            if errors:
                with tqdm.external_write_mode():
                    print_errors(errors, graph.id, file=sys.stderr)
        yield from converter.generate_lines(graph)


def create_converter(args, sink):
    return ConlluConverter(sink=sink, strict=args.strict, debug=args.debug, empty=args.empty, release=args.release,
                           folder=args.folder, file=args.file)


def write_lines(lines, out):
    for line in lines:
        print(line, file=out)


def main(args):
    sink = DiagnosticsSink(verbose=args.verbose)
    converter = create_converter(args, sink)
    try:
        if args.filenames:
            if args.out_dir:
                os.makedirs(args.out_dir, exist_ok=True)
            t = tqdm(list(iter_files(args.filenames)), unit="file", desc="Adding PAS", disable=args.quiet)
            for filename in t:
                t.set_postfix(file=filename)
                converter.set_source(filename, folder=args.folder, file=args.file)
                with open(filename, encoding="utf-8") as f:
                    lines = add_pas(f, converter, sink, validation=args.validate)
                    if args.out_dir:
                        converter.header_written = False
                        with open(os.path.join(args.out_dir, os.path.basename(filename)), "w",
                                  encoding="utf-8") as out:
                            write_lines(lines, out)
                    else:
                        write_lines(lines, sys.stdout)
        else:
            write_lines(add_pas(sys.stdin, converter, sink, validation=args.validate), sys.stdout)
    except GraphError as e:
        print("Error: %s" % e, file=sys.stderr)
        sys.exit(1)
    if args.stats_file:
        sink.save(args.stats_file)
    if not args.quiet:
        print(file=sys.stderr)
        sink.print_summary(sys.stderr)
    return sink


def add_pas_args(p):
    p.add_argument("filenames", nargs="*", help="CoNLL-U file names to annotate (default: read standard input)")
    p.add_argument("-o", "--out-dir", help="directory to write annotated files to (default: standard output)")
    p.add_argument("-d", "--debug", action="store_true", help="put the new columns first and pad them to equal width")
    p.add_argument("--empty", default=EMPTY, help="marker for empty values in the new columns")
    p.add_argument("--release", help="identifier of the underlying treebank release, e.g. http://hdl.handle.net/..."
                                     " (adds a source_sent_id comment to every sentence)")
    p.add_argument("--folder", help="treebank folder for source_sent_id (default: parent directory of the file)")
    p.add_argument("--file", help="treebank file for source_sent_id (default: file name)")
    add_boolean_option(p, "strict", "abort the whole run on the first sentence with structural errors",
                       short="S")
    p.add_argument("--validate", action="store_true", help="check graph invariants of every annotated sentence")
    p.add_argument("--stats-file", help="JSON file to write the collected statistics to, for merge_stats")
    p.add_argument("-q", "--quiet", action="store_true", help="do not print progress or statistics")
    p.add_argument("--version", action="version", version="%(prog)s " + GIT_VERSION)
    add_verbose_arg(p, help="print every warning as it occurs (-vv)")
    add_config_arg(p)
    return p


if __name__ == '__main__':
    argparser = configargparse.ArgParser(description=desc)
    add_pas_args(argparser)
    main(argparser.parse_args())
    sys.exit(0)

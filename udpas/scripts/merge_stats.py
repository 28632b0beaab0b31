#!/usr/bin/env python3

import sys
from functools import reduce
from operator import add

import configargparse

from udpas.cfgutil import add_config_arg
from udpas.diagnostics import DiagnosticsSink

desc = """Merge statistics files written by add_pas --stats-file (e.g. from runs on parts of a treebank),
and print the frequency tables of the whole."""


def merge(filenames):
    return reduce(add, (DiagnosticsSink.load(filename) for filename in filenames), DiagnosticsSink())


def main(args):
    sink = merge(args.filenames)
    if args.out:
        sink.save(args.out)
    if not args.quiet:
        sink.print_summary(sys.stdout)
    return sink


if __name__ == '__main__':
    argparser = configargparse.ArgParser(description=desc)
    argparser.add_argument("filenames", nargs="+", help="statistics files to merge")
    argparser.add_argument("-o", "--out", help="file to write the merged statistics to")
    argparser.add_argument("-q", "--quiet", action="store_true", help="do not print the tables")
    add_config_arg(argparser)
    main(argparser.parse_args())

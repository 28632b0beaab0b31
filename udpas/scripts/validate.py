#!/usr/bin/env python3

import sys
from itertools import islice

import configargparse
from tqdm import tqdm

from udpas.add_pas import iter_files
from udpas.cfgutil import add_config_arg
from udpas.conversion.conllu import ConlluConverter
from udpas.diagnostics import DiagnosticsSink
from udpas.graph import GraphError
from udpas.pas import annotate
from udpas.validation import validate, print_errors

desc = """Validate the dependency graphs of CoNLL-U files: unique ids, existing heads, acyclic basic tree,
symmetric enhanced edges, and argument links of the inferred predicate-argument structure."""


def sentence_errors(filename, sink=None):
    converter = ConlluConverter(sink=sink)
    with open(filename, encoding="utf-8") as f:
        for i, sentence in enumerate(converter.split_sentences(f), start=1):
            try:
                graph = converter.build_graph(sentence, str(i))
            except GraphError as e:
                yield e.sentence_id or str(i), [str(e)]
            else:
                yield graph.id, list(validate(annotate(graph, sink)))


def main(args):
    sink = DiagnosticsSink()
    errors = ((sentence_id, es) for filename in tqdm(list(iter_files(args.filenames)), unit="file", desc="Validating")
              for sentence_id, es in sentence_errors(filename, sink))
    errors = list(islice(((k, v) for k, v in errors if v), 1 if args.strict else None))
    if errors:
        id_len = max(len(k) for k, _ in errors)
        for sentence_id, es in errors:
            print_errors(es, sentence_id, id_len)
        sys.exit(1)
    else:
        print("No errors found.")


if __name__ == "__main__":
    argparser = configargparse.ArgParser(description=desc)
    argparser.add_argument("filenames", nargs="+", help="CoNLL-U files to validate")
    argparser.add_argument("-S", "--strict", action="store_true", help="fail as soon as a violation is found")
    add_config_arg(argparser)
    main(argparser.parse_args())

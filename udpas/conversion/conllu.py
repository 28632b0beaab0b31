import os
import re
import sys

from tqdm import tqdm

from ..diagnostics import warn
from ..graph import EMPTY, FormatError, Graph, GraphError, Node

FEATURE_PATTERN = re.compile(r"^([A-Za-z\[\]]+)=([A-Za-z0-9,]+)$")
SENT_ID_PATTERN = re.compile(r"#\s*sent_id\s*=\s*(\S+)")
COMMENT_PREFIX = "#"

COLUMNS = ("ID", "FORM", "LEMMA", "UPOS", "XPOS", "FEATS", "HEAD", "DEPREL", "DEPS", "MISC")
PLUS_COLUMNS = COLUMNS + ("DEEP:PRED", "DEEP:ARGS")
# Interesting columns first, and padded to equal width, for reading the output in a terminal
DEBUG_COLUMNS = ("ID", "FORM", "UPOS", "DEEP:PRED", "DEEP:ARGS", "DEEP:ARGPATT", "FEATS", "HEAD", "DEPREL", "DEPS",
                 "MISC", "LEMMA")
PADDED_COLUMNS = ("FORM", "DEEP:PRED", "DEEP:ARGS", "DEEP:ARGPATT", "FEATS")

UNRECOGNIZED_FEATURE = "Unrecognized feature-value pair."
DUPLICATE_FEATURE = "Duplicate feature definition."
SKIPPED_SENTENCE = "Skipped sentence with structural error."


def parse_feats(feats, sink=None, context=""):
    """
    :param feats: FEATS column, "_" or Name=Value pairs separated by |
    :param sink: DiagnosticsSink to report pairs that cannot be parsed to
    :param context: where the column comes from, for the warning
    :return dict of feature names to values
    """
    parsed = {}
    if feats in (None, "", EMPTY):
        return parsed
    for pair in feats.split("|"):
        m = FEATURE_PATTERN.match(pair)
        if not m:
            warn(sink, UNRECOGNIZED_FEATURE, "'%s' %s" % (pair, context))
            continue
        name, value = m.groups()
        if name in parsed:
            warn(sink, DUPLICATE_FEATURE, "'%s=%s' will be overwritten with '%s=%s' %s" % (
                name, parsed[name], name, value, context))
        parsed[name] = value
    return parsed


def parse_misc(misc):
    misc = (misc or "").strip()
    return [] if misc in ("", EMPTY) else misc.split("|")


class ConlluConverter:
    """
    Reads sentences of a CoNLL-U file into graphs, and writes annotated graphs in CoNLL-U Plus with the additional
    DEEP:PRED and DEEP:ARGS columns.
    """
    def __init__(self, sink=None, strict=False, debug=False, empty=EMPTY, release=None, folder=None, file=None):
        self.sink = sink
        self.strict = strict
        self.debug = debug
        self.empty = empty
        self.release = release
        self.folder = folder
        self.file = file
        self.header_written = False
        self.sentences_read = 0

    @property
    def columns(self):
        return DEBUG_COLUMNS if self.debug else PLUS_COLUMNS

    def set_source(self, filename, folder=None, file=None):
        """Name the underlying treebank folder and file for the source_sent_id comment"""
        path = os.path.abspath(filename)
        self.folder = folder or os.path.basename(os.path.dirname(path))
        self.file = file or os.path.basename(path)

    @staticmethod
    def split_sentences(lines):
        """
        :return generator of lists of non-empty lines, one per sentence
        """
        sentence = []
        for line in lines:
            line = line.rstrip("\r\n")
            if line.strip():
                sentence.append(line)
            elif sentence:
                yield sentence
                sentence = []
        if sentence:  # last sentence without the terminating empty line
            yield sentence

    def read_line(self, line, graph):
        fields = line.split("\t")
        if len(fields) != len(COLUMNS):
            raise FormatError("Expected %d tab-separated columns, found %d: '%s'" % (
                len(COLUMNS), len(fields), line), graph.id, fields[0])
        node_id, form, lemma, upos, xpos, feats, head, deprel, deps, misc = fields
        return Node(node_id, form, lemma, upos, xpos,
                    feats=parse_feats(feats, self.sink, "of node '%s' in sentence '%s'" % (node_id, graph.id)),
                    misc=parse_misc(misc), head=head, deprel=deprel, deps=deps)

    def build_graph(self, lines, sentence_id=None):
        """
        Create nodes from the lines of one sentence, then link them in the basic tree and enhanced graph.
        :raises GraphError if the sentence is not well-formed
        """
        graph = Graph(sentence_id)
        for line in lines:
            if line.startswith(COMMENT_PREFIX):
                graph.comments.append(line)
                m = SENT_ID_PATTERN.match(line)
                if m:
                    graph.id = m.group(1)
            elif line[:1].isdigit():
                graph.add_node(self.read_line(line, graph))
        return graph.link(self.sink)

    def from_format(self, lines):
        """
        :param lines: iterable of lines in CoNLL-U format
        :return generator of linked Graph objects; sentences with structural errors are skipped unless strict
        """
        for sentence in self.split_sentences(lines):
            self.sentences_read += 1
            try:
                yield self.build_graph(sentence, str(self.sentences_read))
            except GraphError as e:
                if self.strict:
                    raise
                with tqdm.external_write_mode():
                    print("Skipped sentence '%s': %s" % (e.sentence_id, e), file=sys.stderr)
                warn(self.sink, SKIPPED_SENTENCE, str(e))

    def generate_header_lines(self, graph):
        if not self.header_written:
            self.header_written = True
            yield "# global.columns = " + " ".join(self.columns)
        for comment in graph.comments:
            m = SENT_ID_PATTERN.match(comment)
            if m and self.release:
                yield "# source_sent_id = conllu %s %s/%s %s" % (self.release, self.folder, self.file, m.group(1))
            yield comment

    def fields(self, node):
        return {
            "ID": node.id,
            "FORM": node.form,
            "LEMMA": node.lemma,
            "UPOS": node.upos,
            "XPOS": node.xpos,
            "FEATS": node.feats_string(),
            "HEAD": node.basic_parent or EMPTY,
            "DEPREL": node.basic_relation or EMPTY,
            "DEPS": node.deps_string(),
            "MISC": node.misc_string(),
            "DEEP:PRED": node.predicate or self.empty,
            "DEEP:ARGS": node.args_string(self.empty),
            "DEEP:ARGPATT": node.argument_pattern or self.empty,
        }

    def generate_lines(self, graph):
        yield from self.generate_header_lines(graph)
        rows = [self.fields(node) for node in graph]
        if self.debug:
            for column in PADDED_COLUMNS:
                width = max((len(row[column]) for row in rows), default=0)
                for row in rows:
                    row[column] = "%-*s" % (width, row[column])
        for row in rows:
            yield "\t".join(row[column] for column in self.columns)
        yield ""

    def to_format(self, graphs):
        """
        :param graphs: iterable of annotated Graph objects
        :return list of lines in CoNLL-U Plus format
        """
        return [line for graph in graphs for line in self.generate_lines(graph)]

import json
import sys
from collections import Counter

from tqdm import tqdm

PLAIN = "plain"
DIATHESES = ("active", "passive")
ARGUMENT_TYPES = ("subj", "obj", "iobj", "oblagent", "xcomp")

ARGPATTERN = "argpattern"
PARGPATTERN = "pargpattern"
PREDICATE = "predicate"
DIATHESIS = "diathesis"
ARGUMENTS = "arguments"


def print_warning(kind, context=None, file=None):
    with tqdm.external_write_mode(file=file):
        print("WARNING: " + kind + ("" if context is None else " " + context), file=file or sys.stderr)


def warn(sink, kind, context=None):
    """Report a recoverable anomaly to the sink, or print it right away if there is none"""
    if sink is None:
        print_warning(kind, context)
    else:
        sink.warn(kind, context)


class DiagnosticsSink:
    """
    Collects warnings and frequency counters over a run, so that they can be summarized at the end.
    Sinks of independent runs can be merged by adding their counts.
    """
    def __init__(self, verbose=0):
        self.verbose = verbose
        self.warnings = Counter()
        self.counters = Counter()

    def warn(self, kind, context=None):
        self.warnings[kind] += 1
        if self.verbose > 1:
            print_warning(kind, context)

    def count(self, *key):
        self.counters[key] += 1

    def select(self, prefix):
        """
        :param prefix: first element of the counter keys to look at
        :return dict of the remaining key elements to counts
        """
        return {key[1:]: n for key, n in self.counters.items() if key[0] == prefix}

    def merge(self, other):
        self.warnings.update(other.warnings)
        self.counters.update(other.counters)
        return self

    def __add__(self, other):
        return DiagnosticsSink(self.verbose).merge(self).merge(other)

    def __eq__(self, other):
        return isinstance(other, DiagnosticsSink) and \
            self.warnings == other.warnings and self.counters == other.counters

    def __bool__(self):
        return bool(self.warnings or self.counters)

    def to_json(self):
        return dict(warnings=dict(self.warnings), counters=[[list(key), n] for key, n in self.counters.items()])

    @classmethod
    def from_json(cls, d, verbose=0):
        sink = cls(verbose)
        sink.warnings.update(d.get("warnings", {}))
        sink.counters.update({tuple(key): n for key, n in d.get("counters", [])})
        return sink

    def save(self, filename):
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(self.to_json(), f, ensure_ascii=False, indent=1)

    @classmethod
    def load(cls, filename, verbose=0):
        with open(filename, encoding="utf-8") as f:
            return cls.from_json(json.load(f), verbose=verbose)

    def print_summary(self, file=None):
        for line in self.summary_lines():
            print(line, file=file or sys.stderr)

    def summary_lines(self):
        for kind, n in sorted(self.warnings.items(), key=lambda x: (-x[1], x[0])):
            yield "%s (%d ×)" % (kind, n)
        yield ""
        yield "Observed argument patterns (regardless of predicate):"
        for (pattern,), n in sorted(self.select(ARGPATTERN).items(), key=lambda x: (-x[1], x[0])):
            yield "%s\t%d" % (pattern, n)
        predicates = {}
        for (ptype, predicate), n in self.select(PREDICATE).items():
            predicates.setdefault(ptype, {})[predicate] = n
        ptypes = sorted(predicates, key=lambda t: (t != PLAIN, t))
        yield ""
        yield "Observed predicates:"
        for ptype in ptypes:
            yield "%s\t%d" % (ptype, len(predicates[ptype]))
        yield ""
        for ptype in sorted(predicates):
            for predicate, n in sorted(predicates[ptype].items()):
                yield "%s\t%s\t%d" % (predicate, ptype, n)
        yield ""
        yield "Observed predicate-argument patterns:"
        for (pattern,), n in sorted(self.select(PARGPATTERN).items()):
            yield "%s\t%d" % (pattern, n)
        clauses = self.select(DIATHESIS)
        arguments = self.select(ARGUMENTS)
        for diathesis in DIATHESES:
            yield ""
            yield "Number of %s verbal clauses: %d" % (diathesis, clauses.get((diathesis,), 0))
            for argtype in ARGUMENT_TYPES:
                for count in sorted(c for d, t, c in arguments if d == diathesis and t == argtype):
                    yield "Number of %s verbal clauses with %d uncoordinated '%s' arguments: %d" % (
                        diathesis, count, argtype, arguments[diathesis, argtype, count])

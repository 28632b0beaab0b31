from collections import Counter
from enum import Enum

from .diagnostics import warn, PLAIN, ARGPATTERN, PARGPATTERN, PREDICATE, DIATHESIS, ARGUMENTS, ARGUMENT_TYPES
from .graph import ArgumentEdge, EMPTY
from .relations import Family, classify, is_argument_like, is_predicate_part, strip_derived_subtype

VERB = "VERB"
NOARG = "<NOARG>"
ARG = "arg%d"


class Diathesis(Enum):
    ACTIVE = "active"
    PASSIVE = "passive"


MULTIPLE_SUBJECTS = "More than 1 subject, not in coordination."
MULTIPLE_OBJECTS = "More than 1 direct object, not in coordination."
MULTIPLE_IOBJECTS = "More than 1 indirect object, not in coordination."
MULTIPLE_AGENTS = "More than 1 oblique agent, not in coordination."
MULTIPLE_XCOMPS = "More than 1 open clausal complement, not in coordination."
ACTIVE_SUBJECT_IN_PASSIVE = "Non-passive subject in a passive clause."
OBJECT_IN_PASSIVE = "Direct object in a passive clause."
IOBJ_AND_XCOMP = "Indirect object and open clausal complement in the same active clause."

MULTIPLE_WARNINGS = (
    (Family.OBJECT, MULTIPLE_OBJECTS),
    (Family.IOBJ, MULTIPLE_IOBJECTS),
    (Family.OBLIQUE_AGENT, MULTIPLE_AGENTS),
    (Family.XCOMP, MULTIPLE_XCOMPS),
)

# slot number: relation families of the edges whose dependents fill it
SLOTS = {
    Diathesis.ACTIVE: {
        2: (Family.SUBJECT, Family.SUBJECT_PASSIVE),
        3: (Family.OBJECT,),
        4: (Family.IOBJ,),
    },
    Diathesis.PASSIVE: {
        1: (Family.OBLIQUE_AGENT,),
        2: (Family.SUBJECT_PASSIVE,),
        3: (Family.IOBJ,),
        4: (Family.XCOMP,),
    },
}
XCOMP_SLOT = 4


def coordination_filtered(node):
    """
    Outgoing enhanced edges of a node, except those leading to a dependent that is also attached as a conjunct to
    another dependent of the same node. Enhanced graphs propagate a dependency to all conjuncts; only the edge to the
    first conjunct is kept here.
    """
    graph = node.graph
    targets = {e.node_id for e in node.outgoing}
    return [e for e in node.outgoing if not any(
        classify(i.rel) is Family.COORDINATION and i.node_id in targets and i.node_id != e.node_id
        for i in graph.get_node(e.node_id).incoming)]


def is_compound_dependent(node):
    return any(classify(e.rel) is Family.COMPOUND for e in node.incoming) or \
        classify(node.basic_relation) is Family.COMPOUND


def is_predicate(node):
    return node.upos == VERB and node.lemma not in (None, "", EMPTY) and not is_compound_dependent(node)


def get_predicate(node, sink=None):
    """
    The predicate could be identified by a reference to a frame in a valency lexicon. Without one, it is the lemma,
    extended by the forms of inherent reflexives, verbal particles, light verb and serial verb compounds: "wash se".
    :return predicate identifier, or None if the node is not a predicate
    """
    if not is_predicate(node):
        return None
    parts = [e for e in node.outgoing if is_predicate_part(e.rel)]
    predicate = " ".join([node.lemma] + [n.form.lower() for n in node.outgoing_nodes(parts)])
    if sink is not None:
        for ptype in [e.rel for e in parts] or [PLAIN]:
            sink.count(PREDICATE, ptype, predicate)
    return predicate


def get_diathesis(edges):
    return Diathesis.PASSIVE if any(classify(e.rel) is Family.SUBJECT_PASSIVE for e in edges) else Diathesis.ACTIVE


def get_argument_pattern(node, edges=None):
    """
    :param node: predicate node
    :param edges: coordination-filtered outgoing edges, if already computed
    :return sorted relations of argument-like dependents, space-separated, or NOARG if there are none
    """
    if edges is None:
        edges = coordination_filtered(node)
    return " ".join(sorted(strip_derived_subtype(e.rel) for e in edges if is_argument_like(e.rel))) or NOARG


def targets(node, families):
    return [e.node_id for e in node.outgoing if classify(e.rel) in families]


def assign_roles(node, sink=None):
    """
    Decide the diathesis of the predicate's clause and fill its argument slots.
    Every conjunct is attributed to the slot, while the diagnostics count coordinated dependents once.
    :param node: predicate node
    :param sink: DiagnosticsSink for anomalies and statistics
    :return Diathesis
    """
    filtered = coordination_filtered(node)
    diathesis = get_diathesis(filtered)
    counts = Counter(classify(e.rel) for e in filtered)
    check_counts(node, diathesis, counts, sink)
    slots = {slot: targets(node, families) for slot, families in SLOTS[diathesis].items()}
    if diathesis is Diathesis.ACTIVE:
        xcomps = targets(node, (Family.XCOMP,))
        if xcomps and slots[XCOMP_SLOT]:  # observed only as annotation errors so far
            warn(sink, IOBJ_AND_XCOMP, context(node))
        elif xcomps:
            slots[XCOMP_SLOT] = xcomps
    node.diathesis = diathesis
    node.arguments = [ArgumentEdge(ARG % slot, ids) for slot, ids in sorted(slots.items()) if ids]
    return diathesis


def check_counts(node, diathesis, counts, sink=None):
    n_subj_act, n_subj_pass = counts[Family.SUBJECT], counts[Family.SUBJECT_PASSIVE]
    if n_subj_act + n_subj_pass > 1:
        warn(sink, MULTIPLE_SUBJECTS, context(node))
    for family, message in MULTIPLE_WARNINGS:
        if counts[family] > 1:
            warn(sink, message, context(node))
    if diathesis is Diathesis.PASSIVE:
        if n_subj_act:
            warn(sink, ACTIVE_SUBJECT_IN_PASSIVE, context(node))
        if counts[Family.OBJECT]:
            warn(sink, OBJECT_IN_PASSIVE, context(node))
    if sink is not None:
        sink.count(DIATHESIS, diathesis.value)
        for argtype, n in zip(ARGUMENT_TYPES,
                              (n_subj_pass if diathesis is Diathesis.PASSIVE else n_subj_act,
                               counts[Family.OBJECT], counts[Family.IOBJ], counts[Family.OBLIQUE_AGENT],
                               counts[Family.XCOMP])):
            sink.count(ARGUMENTS, diathesis.value, argtype, n)


def context(node):
    return "(predicate '%s', node '%s', sentence '%s')" % (node.predicate, node.id, node.sentence_id)


def annotate_node(node, sink=None, empty=EMPTY):
    """
    Set predicate, argument pattern and argument edges of one node.
    :return Diathesis of the node's clause, or None if it is not a predicate
    """
    predicate = get_predicate(node, sink)
    node.arguments = []
    node.diathesis = None
    if predicate is None:
        node.predicate = node.argument_pattern = empty
        return None
    node.predicate = predicate
    filtered = coordination_filtered(node)
    node.argument_pattern = get_argument_pattern(node, filtered)
    if sink is not None:
        sink.count(ARGPATTERN, node.argument_pattern)
        sink.count(PARGPATTERN, "%s %s" % ("_".join(predicate.split()), node.argument_pattern))
    return assign_roles(node, sink)


def annotate(graph, sink=None, empty=EMPTY):
    """
    Add predicate-argument structure to all nodes of a linked graph.
    """
    for node in graph:
        annotate_node(node, sink, empty=empty)
    return graph

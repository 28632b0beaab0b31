"""Testing predicate identification and argument assignment on small graphs."""

import pytest

from udpas.diagnostics import DiagnosticsSink
from udpas.graph import Graph, Node, EMPTY
from udpas.pas import Diathesis, NOARG, annotate, annotate_node, assign_roles, coordination_filtered, \
    get_argument_pattern, get_predicate, is_predicate, MULTIPLE_SUBJECTS, MULTIPLE_OBJECTS, MULTIPLE_XCOMPS, \
    ACTIVE_SUBJECT_IN_PASSIVE, OBJECT_IN_PASSIVE, IOBJ_AND_XCOMP


def make_graph(nodes, edges=()):
    """
    :param nodes: (id, form, lemma, upos) for each node
    :param edges: (head id, dependent id, relation) for each enhanced edge
    """
    graph = Graph("test")
    for node_id, form, lemma, upos in nodes:
        graph.add_node(Node(node_id, form, lemma, upos))
    graph.link_basic()
    for head_id, dependent_id, rel in edges:
        graph.get_node(dependent_id).add_enhanced_edge(head_id, rel)
    return graph


def clause(*edges, lemma="give"):
    """Verb 1 with dependents named by the edges, e.g. ("A", "nsubj") makes node 2 'A' an nsubj of 1"""
    nodes = [("1", lemma, lemma, "VERB")] + [(str(i), form, form.lower(), "NOUN")
                                           for i, (form, _) in enumerate(edges, start=2)]
    return make_graph(nodes, [("1", str(i), rel) for i, (_, rel) in enumerate(edges, start=2)])


def args(node):
    return {a.rel: a.ids for a in node.arguments}


def test_predicate_identity():
    graph = make_graph([("1", "washes", "wash", "VERB"), ("2", "Se", "se", "PRON")], [("1", "2", "expl:pv")])
    sink = DiagnosticsSink()
    assert get_predicate(graph.get_node("1"), sink) == "wash se"
    assert get_predicate(graph.get_node("2"), sink) is None
    assert sink.counters[("predicate", "expl:pv", "wash se")] == 1


def test_compound_predicate():
    graph = make_graph([("1", "laten", "laten", "VERB"), ("2", "zien", "zien", "VERB")], [("1", "2", "compound")])
    sink = DiagnosticsSink()
    annotate(graph, sink)
    assert graph.get_node("1").predicate == "laten zien"
    assert graph.get_node("2").predicate == EMPTY, "Verb attached as compound is not a predicate of its own"
    assert sink.counters[("predicate", "compound", "laten zien")] == 1
    assert sink.counters[("pargpattern", "laten_zien " + NOARG)] == 1


def test_particle_predicate():
    graph = make_graph([("1", "gave", "give", "VERB"), ("2", "UP", "up", "ADP"), ("3", "Himself", "he", "PRON")],
                       [("1", "2", "compound:prt"), ("1", "3", "expl:pv")])
    assert get_predicate(graph.get_node("1")) == "give up himself"


def test_basic_compound_not_predicate():
    graph = Graph("test")
    for node in (Node("1", "laten", "laten", "VERB", head="0", deprel="root"),
                 Node("2", "zien", "zien", "VERB", head="1", deprel="compound:svc")):
        graph.add_node(node)
    graph.link()
    assert is_predicate(graph.get_node("1"))
    assert not is_predicate(graph.get_node("2"))


@pytest.mark.parametrize("upos, lemma, expected", (
        ("VERB", "go", True),
        ("AUX", "be", False),
        ("NOUN", "book", False),
        ("VERB", "_", False),
        ("VERB", "", False),
        ("VERB", None, False),
))
def test_is_predicate(upos, lemma, expected):
    graph = make_graph([("1", "w", lemma, upos)])
    assert is_predicate(graph.get_node("1")) == expected


def test_non_predicate():
    graph = clause(("A", "nsubj"), lemma="book")
    node = graph.get_node("1")
    node.upos = "NOUN"
    assert annotate_node(node, empty="*") is None
    assert node.predicate == "*" and node.argument_pattern == "*"
    assert node.arguments == [] and node.args_string("*") == "*"


def test_active_clause():
    graph = clause(("A", "nsubj"), ("B", "obj"), ("C", "iobj"))
    sink = DiagnosticsSink()
    annotate(graph, sink)
    node = graph.get_node("1")
    assert node.diathesis is Diathesis.ACTIVE
    assert args(node) == {"arg2": ["2"], "arg3": ["3"], "arg4": ["4"]}
    assert node.argument_pattern == "iobj nsubj obj"
    assert node.args_string() == "arg2:2|arg3:3|arg4:4"
    assert not sink.warnings
    assert sink.counters[("diathesis", "active")] == 1
    assert sink.counters[("arguments", "active", "subj", 1)] == 1
    assert sink.counters[("arguments", "active", "xcomp", 0)] == 1
    assert sink.counters[("argpattern", "iobj nsubj obj")] == 1
    assert sink.counters[("pargpattern", "give iobj nsubj obj")] == 1
    assert sink.counters[("predicate", "plain", "give")] == 1


def test_clausal_complement():
    graph = clause(("A", "csubj"), ("B", "ccomp"))
    node = graph.get_node("1")
    assert assign_roles(node) is Diathesis.ACTIVE
    assert args(node) == {"arg2": ["2"], "arg3": ["3"]}


def test_passive_clause():
    graph = clause(("A", "nsubj:pass"), ("B", "obl:agent"), ("C", "aux:pass"))
    sink = DiagnosticsSink()
    annotate(graph, sink)
    node = graph.get_node("1")
    assert node.diathesis is Diathesis.PASSIVE
    assert args(node) == {"arg1": ["3"], "arg2": ["2"]}
    assert node.argument_pattern == "nsubj:pass obl:agent"
    assert not sink.warnings
    assert sink.counters[("arguments", "passive", "subj", 1)] == 1
    assert sink.counters[("arguments", "passive", "oblagent", 1)] == 1


def test_passive_iobj_xcomp():
    graph = clause(("A", "csubj:pass"), ("B", "iobj"), ("C", "xcomp"))
    node = graph.get_node("1")
    assert assign_roles(node) is Diathesis.PASSIVE
    assert args(node) == {"arg2": ["2"], "arg3": ["3"], "arg4": ["4"]}


def test_passive_marker_without_subject():
    graph = clause(("A", "aux:pass"), ("B", "obl"))
    assert assign_roles(graph.get_node("1")) is Diathesis.ACTIVE


def test_coordination():
    graph = clause(("A", "nsubj"), ("B", "nsubj"))
    graph.get_node("3").add_enhanced_edge("2", "conj")
    sink = DiagnosticsSink()
    annotate(graph, sink)
    node = graph.get_node("1")
    assert [e.node_id for e in coordination_filtered(node)] == ["2"]
    assert MULTIPLE_SUBJECTS not in sink.warnings
    assert args(node) == {"arg2": ["2", "3"]}
    assert node.args_string() == "arg2:2,3"
    assert node.argument_pattern == "nsubj"
    assert sink.counters[("arguments", "active", "subj", 1)] == 1


def test_coordination_not_among_dependents():
    graph = clause(("A", "nsubj"), ("B", "obj"))
    graph.add_node(Node("4", "C", "c", "NOUN"))
    graph.get_node("3").add_enhanced_edge("4", "conj")  # conjunct of a node that is not a dependent of the verb
    assert [e.node_id for e in coordination_filtered(graph.get_node("1"))] == ["2", "3"]


def test_uncoordinated_subjects():
    graph = clause(("A", "nsubj"), ("B", "nsubj"))
    sink = DiagnosticsSink()
    annotate(graph, sink)
    assert sink.warnings[MULTIPLE_SUBJECTS] == 1
    assert args(graph.get_node("1")) == {"arg2": ["2", "3"]}
    assert sink.counters[("arguments", "active", "subj", 2)] == 1


def test_multiple_objects_and_xcomps():
    graph = clause(("A", "obj"), ("B", "ccomp"), ("C", "xcomp"), ("D", "xcomp"))
    sink = DiagnosticsSink()
    assign_roles(graph.get_node("1"), sink)
    assert sink.warnings[MULTIPLE_OBJECTS] == 1
    assert sink.warnings[MULTIPLE_XCOMPS] == 1
    assert args(graph.get_node("1")) == {"arg3": ["2", "3"], "arg4": ["4", "5"]}


def test_active_xcomp():
    graph = clause(("A", "nsubj"), ("B", "xcomp"))
    node = graph.get_node("1")
    assign_roles(node)
    assert args(node) == {"arg2": ["2"], "arg4": ["3"]}


def test_active_iobj_and_xcomp():
    graph = clause(("A", "iobj"), ("B", "xcomp"))
    sink = DiagnosticsSink()
    node = graph.get_node("1")
    assert assign_roles(node, sink) is Diathesis.ACTIVE
    assert args(node) == {"arg4": ["2"]}
    assert sink.warnings[IOBJ_AND_XCOMP] == 1


def test_passive_anomalies():
    graph = clause(("A", "nsubj:pass"), ("B", "nsubj"), ("C", "obj"))
    sink = DiagnosticsSink()
    node = graph.get_node("1")
    assert assign_roles(node, sink) is Diathesis.PASSIVE
    assert sink.warnings[ACTIVE_SUBJECT_IN_PASSIVE] == 1
    assert sink.warnings[OBJECT_IN_PASSIVE] == 1
    assert sink.warnings[MULTIPLE_SUBJECTS] == 1
    assert args(node) == {"arg2": ["2"]}, "Only passive subjects fill slot 2 of a passive clause"


def test_same_target_twice():
    graph = clause(("A", "nsubj"))
    graph.get_node("2").add_enhanced_edge("1", "nsubj:xsubj")
    node = graph.get_node("1")
    assign_roles(node)
    assert args(node) == {"arg2": ["2"]}, "Target ids form a set"


@pytest.mark.parametrize("edges, pattern", (
        ((), NOARG),
        ((("A", "advmod"), ("B", "punct")), NOARG),
        ((("A", "nsubj:xsubj"), ("B", "obj")), "nsubj obj"),
        ((("A", "nsubj:pass:xsubj"),), "nsubj:pass"),
        ((("A", "obl:arg"), ("B", "obl:tmod"), ("C", "obl:agent")), "obl:agent obl:arg"),
        ((("A", "xcomp"), ("B", "csubj"), ("C", "ccomp")), "ccomp csubj xcomp"),
))
def test_argument_pattern(edges, pattern):
    graph = clause(*edges)
    assert get_argument_pattern(graph.get_node("1")) == pattern


def test_annotate_without_sink(capsys):
    graph = clause(("A", "nsubj"), ("B", "nsubj"))
    annotate(graph)
    assert "WARNING: " + MULTIPLE_SUBJECTS in capsys.readouterr().err

from collections import Counter

from .graph import Edge, EMPTY


def detect_cycles(graph):
    reported = set()
    for node in graph:
        path = [node.id]
        parent_id = node.basic_parent
        while parent_id not in (None, EMPTY) and parent_id in graph:
            if parent_id in path:
                cycle = path[path.index(parent_id):]
                if frozenset(cycle) not in reported:
                    reported.add(frozenset(cycle))
                    yield "Detected cycle (%s)" % "->".join(cycle + [parent_id])
                break
            path.append(parent_id)
            parent_id = graph.get_node(parent_id).basic_parent


def check_basic_links(graph, node):
    if node.basic_parent not in (None, EMPTY):
        parent = graph.get_node(node.basic_parent)
        if parent is None:
            yield "Basic parent %s of %s not in graph" % (node.basic_parent, node.id)
        elif node.id not in parent.basic_children:
            yield "%s missing from basic children of its parent %s" % (node.id, node.basic_parent)
    for child_id in node.basic_children:
        child = graph.get_node(child_id)
        if child is None or child.basic_parent != node.id:
            yield "Basic child %s of %s does not have it as parent" % (child_id, node.id)


def check_symmetry(graph, node):
    for edge in node.outgoing:
        dependent = graph.get_node(edge.node_id)
        if dependent is None:
            yield "Enhanced edge %s-[%s]->%s to a node not in graph" % (node.id, edge.rel, edge.node_id)
        elif Edge(node.id, edge.rel) not in dependent.incoming:
            yield "Outgoing enhanced edge %s-[%s]->%s not incoming at %s" % (
                node.id, edge.rel, edge.node_id, edge.node_id)
    for edge in node.incoming:
        head = graph.get_node(edge.node_id)
        if head is None:
            yield "Enhanced edge %s-[%s]->%s from a node not in graph" % (edge.node_id, edge.rel, node.id)
        elif Edge(node.id, edge.rel) not in head.outgoing:
            yield "Incoming enhanced edge %s-[%s]->%s not outgoing at %s" % (
                edge.node_id, edge.rel, node.id, edge.node_id)


def check_repeated_edges(node):
    for edges, direction in ((node.incoming, "incoming"), (node.outgoing, "outgoing")):
        for edge, n in Counter(edges).items():
            if n > 1:
                yield "Repeated %s enhanced edge %s at %s (%d ×)" % (direction, edge, node.id, n)


def check_argument_targets(graph, node):
    for argument in node.arguments:
        for target_id in argument.ids:
            if target_id not in graph:
                yield "Argument %s of %s refers to a node not in graph: %s" % (argument.rel, node.id, target_id)


def validate(graph):
    """
    :param graph: linked (and possibly annotated) Graph
    :return generator of messages describing violations of the graph invariants
    """
    yield from detect_cycles(graph)
    for node in graph:
        yield from check_basic_links(graph, node)
        yield from check_symmetry(graph, node)
        yield from check_repeated_edges(node)
        yield from check_argument_targets(graph, node)


def print_errors(errors, sentence_id, id_len=None, file=None):
    if id_len is None:
        id_len = len(sentence_id)
    for i, e in enumerate(errors):
        print("%-*s|%s" % (id_len, "" if i else sentence_id, e), file=file)

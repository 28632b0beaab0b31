import re

from .diagnostics import warn

EMPTY = "_"
ROOT_ID = "0"
# word or empty node (no leading zeros, minor > 0), or multi-word token range
ID_PATTERN = re.compile(r"^(?:([1-9]\d*)-([1-9]\d*)|(0|[1-9]\d*)(?:\.([1-9]\d*))?)$")
DEP_PATTERN = re.compile(r"^(\d+(?:\.\d+)?):(.+)$")

REPEATED_EDGE = "Ignoring repeated enhanced edge."
UNKNOWN_DEP = "Cannot understand enhanced dependency."


class GraphError(ValueError):
    """
    Structural problem that makes a sentence unusable: the graph cannot be built from it.
    """
    def __init__(self, message, sentence_id=None, *ids):
        self.sentence_id = sentence_id
        self.ids = ids
        super().__init__(message if sentence_id is None else "%s in sentence '%s'" % (message, sentence_id))


class InvalidIdError(GraphError):
    pass


class DuplicateIdError(GraphError):
    pass


class MissingHeadError(GraphError):
    pass


class SelfAttachmentError(GraphError):
    pass


class CycleError(GraphError):
    pass


class FormatError(GraphError):
    pass


def id_key(node_id):
    """Sort key for node ids: words (3), empty nodes (3.1) and multi-word token ranges (3-4).
    Empty node minor numbers compare as integers, so 3.14 follows 3.2.
    A range sorts before the word it starts with.
    """
    m = ID_PATTERN.match(str(node_id))
    if not m:
        raise InvalidIdError("Unexpected node id '%s'" % node_id, None, node_id)
    start, end, major, minor = m.groups()
    if start is None:
        return int(major), int(minor or 0), 0
    if int(end) <= int(start):
        raise InvalidIdError("Multi-word token range must end after its start: '%s'" % node_id, None, node_id)
    return int(start), 0, -int(end)


def cmpids(a, b):
    key_a, key_b = id_key(a), id_key(b)
    return (key_a > key_b) - (key_a < key_b)


class Edge:
    """
    Enhanced dependency as stored on one of its endpoints: the id of the node at the other end, and the relation.
    """
    def __init__(self, node_id, rel):
        self.node_id = node_id
        self.rel = rel

    def __eq__(self, other):
        return isinstance(other, Edge) and self.node_id == other.node_id and self.rel == other.rel

    def __hash__(self):
        return hash((self.node_id, self.rel))

    def __repr__(self):
        return "%s:%s" % (self.node_id, self.rel)


class ArgumentEdge:
    """
    Link from a predicate to the node(s) filling one of its argument slots.
    """
    def __init__(self, rel, ids):
        self.rel = rel
        self.ids = list(dict.fromkeys(ids))  # ordered set

    @property
    def ids_string(self):
        return ",".join(self.ids)

    def __eq__(self, other):
        return isinstance(other, ArgumentEdge) and self.rel == other.rel and self.ids == other.ids

    def __hash__(self):
        return hash((self.rel, tuple(self.ids)))

    def __repr__(self):
        return "%s:%s" % (self.rel, self.ids_string)


class Node:
    """
    One line of a CoNLL-U sentence: a word, an empty node or a multi-word token.
    The HEAD, DEPREL and DEPS columns are kept as read until the graph links its nodes.
    """
    def __init__(self, node_id, form=EMPTY, lemma=EMPTY, upos=EMPTY, xpos=EMPTY, feats=None, misc=None, head=None,
                 deprel=None, deps=None):
        self.id = node_id
        self.form = form
        self.lemma = lemma
        self.upos = upos
        self.xpos = xpos
        self.feats = {} if feats is None else feats
        self.misc = [] if misc is None else misc
        self.head = head
        self.deprel = deprel
        self.deps = deps
        self.graph = None
        self.incoming = []
        self.outgoing = []
        self.basic_parent = self.basic_relation = None
        self.basic_children = []
        self.predicate = None
        self.diathesis = None
        self.arguments = []
        self.argument_pattern = None

    @property
    def sentence_id(self):
        return None if self.graph is None else self.graph.id

    @property
    def in_degree(self):
        return len(self.incoming)

    @property
    def out_degree(self):
        return len(self.outgoing)

    def _require_graph(self):
        if self.graph is None:
            raise ValueError("Node '%s' is not member of a graph" % self.id)
        return self.graph

    def basic_depends_on(self, ancestor_id):
        """
        Whether this node depends, directly or indirectly, on the given node in the basic tree.
        :param ancestor_id: id of the potential ancestor
        """
        graph = self._require_graph()
        visited = {self.id}
        parent_id = self.basic_parent
        while parent_id not in (None, EMPTY) and parent_id not in visited:
            if parent_id == ancestor_id:
                return True
            visited.add(parent_id)
            parent = graph.get_node(parent_id)
            parent_id = None if parent is None else parent.basic_parent
        return False

    def set_basic_dep(self):
        """
        Attach the node to its parent in the basic tree, as given by its HEAD and DEPREL columns.
        Nodes without a head (multi-word tokens, empty nodes) get the empty marker as parent and relation.
        """
        graph = self._require_graph()
        if self.head in (None, "", EMPTY):
            self.basic_parent = self.basic_relation = EMPTY
            return
        if self.basic_parent is not None:
            raise ValueError("Basic parent of node '%s' is already set" % self.id)
        if self.head == self.id:
            raise SelfAttachmentError("Cannot attach node '%s' to itself in the basic tree" % self.id, graph.id,
                                      self.id)
        parent = graph.get_node(self.head)
        if parent is None:
            raise MissingHeadError("Basic dependency '%s' of node '%s' from a non-existent node '%s'" % (
                self.deprel, self.id, self.head), graph.id, self.id, self.head)
        if parent.basic_depends_on(self.id):
            raise CycleError("Cannot attach node '%s' to '%s' in the basic tree because it would make a cycle" % (
                self.id, self.head), graph.id, self.id, self.head)
        self.basic_parent = self.head
        self.basic_relation = self.deprel
        parent.basic_children.append(self.id)

    def set_deps(self, sink=None):
        """
        Create enhanced edges from the DEPS column: a |-separated list of head:relation pairs.
        """
        self._require_graph()
        if self.deps in (None, "", EMPTY):
            return
        for dep in self.deps.split("|"):
            m = DEP_PATTERN.match(dep)
            if m:
                self.add_enhanced_edge(*m.groups(), sink=sink)
            else:
                warn(sink, UNKNOWN_DEP, "'%s' of node '%s' in sentence '%s'" % (dep, self.id, self.sentence_id))

    def add_enhanced_edge(self, head_id, rel, sink=None):
        """
        Record an enhanced edge on both of its ends, unless the same edge is already there.
        :param head_id: id of the node the edge comes from
        :param rel: relation label
        :param sink: DiagnosticsSink to report a repeated edge to
        :return whether the edge was added
        """
        graph = self._require_graph()
        head = graph.get_node(head_id)
        if head is None:
            raise MissingHeadError("Incoming dependency '%s' of node '%s' from a non-existent node '%s'" % (
                rel, self.id, head_id), graph.id, self.id, head_id)
        edge = Edge(head_id, rel)
        if edge in self.incoming:
            warn(sink, REPEATED_EDGE, "'%s --- %s ---> %s' in sentence '%s'" % (head_id, rel, self.id, graph.id))
            return False
        self.incoming.append(edge)
        head.outgoing.append(Edge(self.id, rel))
        return True

    def outgoing_nodes(self, edges=None):
        graph = self._require_graph()
        return [graph.get_node(e.node_id) for e in (self.outgoing if edges is None else edges)]

    def feats_string(self):
        if not self.feats:
            return EMPTY
        return "|".join("%s=%s" % (f, self.feats[f]) for f in sorted(self.feats, key=str.lower))

    def misc_string(self):
        return "|".join(self.misc) if self.misc else EMPTY

    def deps_string(self):
        if not self.incoming:
            return EMPTY
        return "|".join(map(str, sorted(self.incoming, key=lambda e: (id_key(e.node_id), e.rel))))

    def args_string(self, empty=EMPTY):
        return "|".join(map(str, self.arguments)) if self.arguments else empty

    def __repr__(self):
        return "%s %s" % (self.id, self.form)


class Graph:
    """
    All nodes of one sentence, by id, including an artificial root node with id 0.
    Edges are stored in the nodes.
    """
    def __init__(self, sentence_id=None, comments=None):
        self.id = sentence_id
        self.comments = [] if comments is None else comments
        self.root = Node(ROOT_ID)
        self.root.graph = self
        self.nodes = {ROOT_ID: self.root}

    def has_node(self, node_id):
        return node_id in self.nodes

    def get_node(self, node_id):
        return self.nodes.get(node_id)

    def add_node(self, node):
        if node.id is None:
            raise InvalidIdError("Cannot add node with undefined id", self.id)
        try:
            id_key(node.id)
        except InvalidIdError as e:
            raise InvalidIdError(str(e), self.id, node.id) from e
        if node.id in self.nodes:
            raise DuplicateIdError("There is already a node with id '%s'" % node.id, self.id, node.id)
        self.nodes[node.id] = node
        node.graph = self
        return node

    def ordered_nodes(self):
        """
        :return generator of all nodes except the root, ordered by id
        """
        for node_id in sorted((i for i in self.nodes if i != ROOT_ID), key=id_key):
            yield self.nodes[node_id]

    def link_basic(self):
        for node in self:
            node.set_basic_dep()

    def link_enhanced(self, sink=None):
        for node in self:
            node.set_deps(sink)

    def link(self, sink=None):
        self.link_basic()
        self.link_enhanced(sink)
        return self

    def __iter__(self):
        return self.ordered_nodes()

    def __len__(self):
        return len(self.nodes) - 1

    def __contains__(self, node_id):
        return self.has_node(node_id)

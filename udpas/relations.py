import re
from enum import Enum


class Family(Enum):
    SUBJECT = "subject"
    SUBJECT_PASSIVE = "subject_passive"
    OBJECT = "object"
    IOBJ = "iobj"
    XCOMP = "xcomp"
    OBLIQUE_AGENT = "oblique_agent"
    COORDINATION = "coordination"
    COMPOUND = "compound"
    OTHER = "other"


NSUBJ = "nsubj"
CSUBJ = "csubj"
OBJ = "obj"
IOBJ = "iobj"
CCOMP = "ccomp"
XCOMP = "xcomp"
OBL = "obl"
CONJ = "conj"
COMPOUND = "compound"
PASS = "pass"
AGENT = "agent"
EXPL_PV = "expl:pv"

SUBJECT_RELS = (NSUBJ, CSUBJ)
OBJECT_RELS = (OBJ, CCOMP)
ARGUMENT_RELS = (NSUBJ, CSUBJ, OBJ, IOBJ, CCOMP, XCOMP)
ARGUMENT_OBLIQUES = (OBL + ":arg", OBL + ":" + AGENT)
# Enhanced subtypes that say how the edge was derived, not what kind of argument it is
DERIVED_SUBTYPE_PATTERN = re.compile(r":(xsubj|relsubj|relobj)(?=:|$)")

FAMILIES = {
    IOBJ: Family.IOBJ,
    XCOMP: Family.XCOMP,
    CONJ: Family.COORDINATION,
    COMPOUND: Family.COMPOUND,
}


def split(rel):
    """
    :return universal relation and list of its subtypes, e.g. "nsubj:pass:xsubj" -> ("nsubj", ["pass", "xsubj"])
    """
    base, *subtypes = rel.split(":")
    return base, subtypes


def classify(rel):
    if not rel:
        return Family.OTHER
    base, subtypes = split(rel)
    if base in SUBJECT_RELS:
        return Family.SUBJECT_PASSIVE if PASS in subtypes else Family.SUBJECT
    if base in OBJECT_RELS:
        return Family.OBJECT
    if base == OBL:
        return Family.OBLIQUE_AGENT if subtypes[:1] == [AGENT] else Family.OTHER
    return FAMILIES.get(base, Family.OTHER)


def is_argument_like(rel):
    return split(rel)[0] in ARGUMENT_RELS or rel in ARGUMENT_OBLIQUES


def is_predicate_part(rel):
    """Whether the dependent contributes to the identity of the predicate (reflexive marker, particle, compound)"""
    return rel == EXPL_PV or classify(rel) is Family.COMPOUND


def strip_derived_subtype(rel):
    return DERIVED_SUBTYPE_PATTERN.sub("", rel, count=1)

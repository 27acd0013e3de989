"""
Types too general to say anything useful about a column.

Entities carrying only these types contribute no type evidence. Human (Q5) and
Organization (Q43229) are kept out of this list so that person and
organization columns can still be typed in the Wikidata vocabulary.
"""

TOO_GENERAL_TYPES = frozenset([
    # OWL/Schema top-level
    "http://www.w3.org/2002/07/owl#Thing",
    "http://schema.org/Thing",

    # DBpedia top-level types
    "http://dbpedia.org/ontology/Thing",
    "http://dbpedia.org/ontology/Agent",
    "http://dbpedia.org/ontology/Place",
    "http://dbpedia.org/ontology/TopicalConcept",
    "http://dbpedia.org/ontology/Event",
    "http://dbpedia.org/ontology/Work",
    "http://dbpedia.org/ontology/Species",
    "http://dbpedia.org/ontology/TimePeriod",
    "http://dbpedia.org/ontology/MeanOfTransportation",
    "http://dbpedia.org/ontology/PersonFunction",

    # DBpedia number types
    "http://dbpedia.org/ontology/Number",
    "http://dbpedia.org/ontology/Integer",
    "http://dbpedia.org/ontology/Decimal",
    "http://dbpedia.org/ontology/Float",

    # Wikidata top-level types
    "http://www.wikidata.org/entity/Q35120",    # entity
    "http://www.wikidata.org/entity/Q488383",   # object
    "http://www.wikidata.org/entity/Q7184903",  # abstract object
    "http://www.wikidata.org/entity/Q830077",   # subject
    "http://www.wikidata.org/entity/Q1190554",  # occurrence
    "http://www.wikidata.org/entity/Q186081",   # time interval
    "http://www.wikidata.org/entity/Q795052",   # information entity
    "http://www.wikidata.org/entity/Q4406616",  # structure
    "http://www.wikidata.org/entity/Q618123",   # geographic feature
    "http://www.wikidata.org/entity/Q2221906",  # geographic location
    "http://www.wikidata.org/entity/Q7725634",  # literary work
    "http://www.wikidata.org/entity/Q386724",   # work
    "http://www.wikidata.org/entity/Q1656682",  # event

    # Wikidata number types
    "http://www.wikidata.org/entity/Q12503",    # number
    "http://www.wikidata.org/entity/Q28920044", # numeric value
    "http://www.wikidata.org/entity/Q199",      # integer
    "http://www.wikidata.org/entity/Q1413235",  # decimal number
    "http://www.wikidata.org/entity/Q11563",    # floating point number
])


def is_too_general(type_uri):
    return type_uri in TOO_GENERAL_TYPES

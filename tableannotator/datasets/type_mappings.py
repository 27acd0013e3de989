"""
Known equivalences between DBpedia ontology classes and Wikidata classes.

Each entry links a DBpedia type to its Wikidata counterpart with a confidence
and a short description. Extend KNOWN_TYPE_MAPPINGS by adding entries to
_MAPPINGS as (DBpedia class name, Wikidata ID, confidence, description).
"""

from tableannotator.models import TypeMapping

DBO = "http://dbpedia.org/ontology/"
WD = "http://www.wikidata.org/entity/"

_MAPPINGS = [
    # Places and Geographical Features
    ("Place", "Q2221906", 0.9, "General concept of a place or location"),
    ("City", "Q515", 1.0, "Large human settlement, typically with administrative or legal status"),
    ("Country", "Q6256", 1.0, "Distinct political entity with sovereignty over a geographical territory"),
    ("Capital", "Q5119", 1.0, "City or town that functions as the seat of government"),
    ("Settlement", "Q486972", 0.9, "Place where people permanently live"),
    ("Mountain", "Q8502", 1.0, "Large natural elevation of the Earth's surface"),
    ("Lake", "Q23397", 1.0, "Body of relatively still water localized in a basin"),
    ("River", "Q4022", 1.0, "Natural flowing watercourse"),
    ("Road", "Q34442", 0.95, "Linear path with a smooth surface for travel"),
    ("Airport", "Q1248784", 1.0, "Location where aircraft take off and land with extended facilities"),
    ("Region", "Q82794", 0.9, "Area having definable characteristics but not always fixed boundaries"),

    # People and Groups
    ("Person", "Q215627", 0.95, "Being with personhood (generic concept, prefer Human for individuals)"),
    ("Human", "Q5", 1.0, "Member of species Homo sapiens, commonly used for individuals"),
    ("Scientist", "Q901", 1.0, "Person who conducts scientific research or investigation"),
    ("Artist", "Q483501", 0.95, "Person who creates art"),
    ("Politician", "Q82955", 0.95, "Person involved in politics and government"),
    ("Athlete", "Q2066131", 0.95, "Person trained or skilled in exercises, sports, or games"),

    # Organizations
    ("Organisation", "Q43229", 1.0, "Social entity established to meet needs or pursue goals"),
    ("Company", "Q783794", 1.0, "Business organization that makes, buys, or sells goods or provides services"),
    ("GovernmentAgency", "Q327333", 0.95, "Organization in the executive branch of government"),
    ("EducationalInstitution", "Q2385804", 0.95, "Institution that provides education"),
    ("School", "Q3914", 1.0, "Institution for the education of students by teachers"),
    ("University", "Q3918", 1.0, "Academic institution for further education"),
    ("Non-ProfitOrganisation", "Q163740", 0.9, "Organization that uses surplus revenues to achieve its goals"),

    # Events
    ("Event", "Q1656682", 0.95, "Something that happens at a specific time and place"),
    ("SportsEvent", "Q1656682", 0.9, "Competition or gathering for sports activities"),
    ("MusicFestival", "Q181683", 0.95, "Festival focused on music performances"),
    ("Election", "Q40231", 0.95, "Formal decision-making process by which a population chooses an individual"),

    # Creative Works
    ("Work", "Q386724", 0.9, "Intellectual or artistic creation"),
    ("CreativeWork", "Q17537576", 0.9, "Content created by humans that expresses creative or artistic effort"),
    ("Artwork", "Q838948", 0.95, "Aesthetic item or artistic creation"),
    ("Book", "Q571", 1.0, "Medium for recording information in the form of writing or images"),
    ("Film", "Q11424", 1.0, "Sequence of images creating the impression of moving pictures"),
    ("TelevisionShow", "Q5398426", 0.95, "Connected set of television program episodes under the same title"),
    ("Song", "Q7366", 0.95, "Musical composition with lyrics for voice performance"),
    ("MusicalWork", "Q2188189", 0.9, "Composition of music, often created by multiple contributors"),
    ("Album", "Q482994", 0.95, "Collection of audio recordings released together"),
    ("WrittenWork", "Q47461344", 0.9, "Text-based creation such as books, articles or manuscripts"),
    ("AcademicArticle", "Q13442814", 0.95, "Article published in a scholarly journal"),
    ("VideoGame", "Q7889", 0.95, "Electronic game that involves interaction with a user interface"),

    # Others
    ("Software", "Q7397", 0.95, "Collection of computer programs and related data"),
    ("Language", "Q34770", 0.9, "Method of human communication using structured or conventional symbols"),
    ("Species", "Q7432", 0.9, "Biological classification rank between genus and subspecies"),
    ("Disease", "Q12136", 0.95, "Particular abnormal condition negatively affecting organisms"),

    # Vehicles and Means of Transport
    ("Vehicle", "Q42889", 0.95, "Mobile machine used for transport, including wheeled and tracked vehicles, air, water, and space craft"),
    ("Automobile", "Q1420", 0.95, "Type of vehicle designed to transport people and cargo, typically with four wheels and an engine"),

    # Technologies and Electronic Devices
    ("Computer", "Q68", 0.95, "General-purpose device that performs arithmetic or logical operations automatically"),
    ("ComputerHardware", "Q3966", 0.9, "Physical components of a computer"),
    ("Electronics", "Q11650", 0.9, "Technology dealing with the control of electrons in electrical circuits"),

    # Sports
    ("Sport", "Q349", 0.95, "Form of physical activity practiced for recreation or competition"),
    ("SportingEvent", "Q16510064", 0.9, "Event in sports, including tournaments, matches, and competitions"),

    # Food and Beverages
    ("Food", "Q2095", 1.0, "Any substance consumed to provide nutritional support for the body"),
    ("Beverage", "Q40050", 0.95, "Liquid intended for human consumption"),
    ("FoodIngredient", "Q25403900", 0.95, "Ingredient used in food products"),
]

KNOWN_TYPE_MAPPINGS = [
    TypeMapping(dbpedia_type=DBO + dbpedia, wikidata_type=WD + wikidata, confidence=confidence, description=description)
    for dbpedia, wikidata, confidence, description in _MAPPINGS
]

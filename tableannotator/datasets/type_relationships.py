"""
Known directed semantic relations between types.

Used by the column relationship analyzer to infer how two columns relate and
by the type aggregation step to decide which column types a relation supports.
Entries are (source type, target type, relation name, confidence).
"""

from tableannotator.models import TypeRelationship

DBO = "http://dbpedia.org/ontology/"
WD = "http://www.wikidata.org/entity/"

_RELATIONSHIPS = [
    # Country - Capital relationships
    (DBO + "Country", DBO + "City", "hasCapital", 0.9),
    (WD + "Q6256", WD + "Q5119", "hasCapital", 0.9),

    # Country - City relationships
    (DBO + "Country", DBO + "City", "hasCity", 0.7),
    (WD + "Q6256", WD + "Q515", "hasCity", 0.7),

    # Administrative/Geographic hierarchies
    (DBO + "Country", DBO + "Region", "hasRegion", 0.8),
    (WD + "Q6256", WD + "Q82794", "hasRegion", 0.8),
    (DBO + "Region", DBO + "City", "hasCity", 0.8),
    (WD + "Q82794", WD + "Q515", "hasCity", 0.8),

    # Country - Natural features
    (DBO + "Country", DBO + "Mountain", "hasMountain", 0.7),
    (WD + "Q6256", WD + "Q8502", "hasMountain", 0.7),
    (DBO + "Country", DBO + "River", "hasRiver", 0.7),
    (WD + "Q6256", WD + "Q4022", "hasRiver", 0.7),
    (DBO + "Country", DBO + "Lake", "hasLake", 0.7),
    (WD + "Q6256", WD + "Q23397", "hasLake", 0.7),

    # Country - Infrastructure
    (DBO + "Country", DBO + "Airport", "hasAirport", 0.8),
    (WD + "Q6256", WD + "Q1248784", "hasAirport", 0.8),

    # Organization - Person relations
    (DBO + "Organisation", DBO + "Person", "foundedBy", 0.8),
    (WD + "Q43229", WD + "Q5", "foundedBy", 0.8),
    (DBO + "Organisation", DBO + "Person", "hasMember", 0.7),
    (WD + "Q43229", WD + "Q5", "hasMember", 0.7),
    (DBO + "Company", DBO + "Person", "hasCEO", 0.8),
    (WD + "Q783794", WD + "Q5", "hasCEO", 0.8),

    # Educational institutions - Person
    (DBO + "University", DBO + "Person", "hasAlumnus", 0.8),
    (WD + "Q3918", WD + "Q5", "hasAlumnus", 0.8),
    (DBO + "University", DBO + "Person", "hasProfessor", 0.8),
    (WD + "Q3918", WD + "Q5", "hasProfessor", 0.8),

    # Authors and works
    (DBO + "Person", DBO + "Book", "isAuthorOf", 0.9),
    (WD + "Q5", WD + "Q571", "isAuthorOf", 0.9),
    (DBO + "Person", DBO + "Film", "isDirectorOf", 0.9),
    (WD + "Q5", WD + "Q11424", "isDirectorOf", 0.9),
    (DBO + "Person", DBO + "MusicalWork", "isComposerOf", 0.9),
    (WD + "Q5", WD + "Q2188189", "isComposerOf", 0.9),

    # Sports
    (DBO + "Person", DBO + "Sport", "practicesSport", 0.8),
    (WD + "Q5", WD + "Q349", "practicesSport", 0.8),
    (DBO + "Person", DBO + "SportsTeam", "memberOfSportsTeam", 0.9),
    (WD + "Q5", WD + "Q12973014", "memberOfSportsTeam", 0.9),
    (DBO + "SportsTeam", DBO + "SportingEvent", "participatesIn", 0.8),
    (WD + "Q12973014", WD + "Q16510064", "participatesIn", 0.8),

    # Technology
    (DBO + "Company", DBO + "Device", "manufactures", 0.9),
    (WD + "Q783794", WD + "Q3966", "manufactures", 0.9),
    (DBO + "Company", DBO + "Software", "develops", 0.9),
    (WD + "Q783794", WD + "Q7397", "develops", 0.9),
    (DBO + "Software", DBO + "ComputerHardware", "runsOn", 0.8),
    (WD + "Q7397", WD + "Q3966", "runsOn", 0.8),

    # Food
    (DBO + "Food", DBO + "FoodIngredient", "hasIngredient", 0.9),
    (WD + "Q2095", WD + "Q25403900", "hasIngredient", 0.9),
    (DBO + "Country", DBO + "Food", "hasTraditionalFood", 0.8),
    (WD + "Q6256", WD + "Q2095", "hasTraditionalFood", 0.8),
    (DBO + "Company", DBO + "Food", "produces", 0.8),
    (WD + "Q783794", WD + "Q2095", "produces", 0.8),

    # Vehicles and manufacturers
    (DBO + "Company", DBO + "Automobile", "manufactures", 0.9),
    (WD + "Q783794", WD + "Q1420", "manufactures", 0.9),
    (DBO + "Automobile", DBO + "Company", "manufacturedBy", 0.9),
    (WD + "Q1420", WD + "Q783794", "manufacturedBy", 0.9),

    # Family
    (DBO + "Person", DBO + "Person", "hasParent", 0.9),
    (WD + "Q5", WD + "Q5", "hasParent", 0.9),
    (DBO + "Person", DBO + "Person", "hasChild", 0.9),
    (WD + "Q5", WD + "Q5", "hasChild", 0.9),
    (DBO + "Person", DBO + "Person", "hasSibling", 0.8),
    (WD + "Q5", WD + "Q5", "hasSibling", 0.8),
    (DBO + "Person", DBO + "Person", "hasSpouse", 0.9),
    (WD + "Q5", WD + "Q5", "hasSpouse", 0.9),

    # Medicine
    (DBO + "Disease", DBO + "Disease", "hasSymptom", 0.8),
    (WD + "Q12136", WD + "Q169872", "hasSymptom", 0.8),
    (DBO + "Drug", DBO + "Disease", "treats", 0.8),
    (WD + "Q12140", WD + "Q12136", "treats", 0.8),
    (DBO + "Disease", DBO + "Organ", "affects", 0.8),
    (WD + "Q12136", WD + "Q712378", "affects", 0.8),

    # Geography
    (DBO + "Country", DBO + "Country", "sharesBorderWith", 0.9),
    (WD + "Q6256", WD + "Q6256", "sharesBorderWith", 0.9),
    (DBO + "City", DBO + "River", "locatedOnRiver", 0.8),
    (WD + "Q515", WD + "Q4022", "locatedOnRiver", 0.8),

    # Education
    (DBO + "University", DBO + "AcademicSubject", "offers", 0.8),
    (WD + "Q3918", WD + "Q11862829", "offers", 0.8),
    (DBO + "Person", DBO + "AcademicSubject", "specializedIn", 0.7),
    (WD + "Q5", WD + "Q11862829", "specializedIn", 0.7),

    # Culture and arts
    (DBO + "Artist", DBO + "Artist", "influencedBy", 0.7),
    (WD + "Q483501", WD + "Q483501", "influencedBy", 0.7),
    (DBO + "MusicalWork", DBO + "MusicGenre", "belongsToGenre", 0.8),
    (WD + "Q2188189", WD + "Q188451", "belongsToGenre", 0.8),
]

KNOWN_TYPE_RELATIONSHIPS = [
    TypeRelationship(source_type=source, target_type=target, relation_name=name, confidence=confidence)
    for source, target, name, confidence in _RELATIONSHIPS
]

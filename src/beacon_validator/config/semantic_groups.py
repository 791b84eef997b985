"""
Semantic group vocabulary of the Knowledge Beacon API.

The beacon API categorizes concepts with the UMLS semantic groups. The codes
are sent verbatim as the ``semgroups`` filter and compared case-insensitively
against the ``semanticGroup`` of returned records.
"""

from enum import Enum


class SemanticGroup(str, Enum):
    """UMLS semantic group codes accepted by the ``semgroups`` filter."""

    ACTI = "ACTI"  # Activities & Behaviors
    ANAT = "ANAT"  # Anatomy
    CHEM = "CHEM"  # Chemicals & Drugs
    CONC = "CONC"  # Concepts & Ideas
    DEVI = "DEVI"  # Devices
    DISO = "DISO"  # Disorders
    GENE = "GENE"  # Genes & Molecular Sequences
    GEOG = "GEOG"  # Geographic Areas
    LIVB = "LIVB"  # Living Beings
    OBJC = "OBJC"  # Objects
    OCCU = "OCCU"  # Occupations
    ORGA = "ORGA"  # Organizations
    PHEN = "PHEN"  # Phenomena
    PHYS = "PHYS"  # Physiology
    PROC = "PROC"  # Procedures

    @property
    def description(self) -> str:
        return SEMANTIC_GROUP_DESCRIPTIONS[self]

    def matches(self, value: str | None) -> bool:
        """Case-insensitive comparison against a record's semantic group."""
        if value is None:
            return False
        return value.strip().lower() == self.value.lower()


SEMANTIC_GROUP_DESCRIPTIONS: dict[SemanticGroup, str] = {
    SemanticGroup.ACTI: "Activities & Behaviors",
    SemanticGroup.ANAT: "Anatomy",
    SemanticGroup.CHEM: "Chemicals & Drugs",
    SemanticGroup.CONC: "Concepts & Ideas",
    SemanticGroup.DEVI: "Devices",
    SemanticGroup.DISO: "Disorders",
    SemanticGroup.GENE: "Genes & Molecular Sequences",
    SemanticGroup.GEOG: "Geographic Areas",
    SemanticGroup.LIVB: "Living Beings",
    SemanticGroup.OBJC: "Objects",
    SemanticGroup.OCCU: "Occupations",
    SemanticGroup.ORGA: "Organizations",
    SemanticGroup.PHEN: "Phenomena",
    SemanticGroup.PHYS: "Physiology",
    SemanticGroup.PROC: "Procedures",
}
